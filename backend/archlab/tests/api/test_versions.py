import json

import httpx
import openai
import pytest
from fastapi.testclient import TestClient

from archlab.tests.utils import StubLLM, as_fenced_response, make_design_payload

REQUIREMENTS = "Todo app with React frontend and Node backend using MongoDB"


@pytest.fixture
def version_url(client: TestClient) -> str:
    project_id = client.post("/projects", json={"name": "Todo"}).json()["id"]
    version = client.post(f"/projects/{project_id}/versions", json={"requirementsText": REQUIREMENTS}).json()
    return f"/projects/{project_id}/versions/{version['id']}"


def test_create_version_numbers_increase(client: TestClient):
    project_id = client.post("/projects", json={"name": "Todo"}).json()["id"]

    first = client.post(f"/projects/{project_id}/versions", json={"requirementsText": REQUIREMENTS})
    second = client.post(f"/projects/{project_id}/versions", json={"requirementsText": REQUIREMENTS})

    assert first.status_code == 201
    assert first.json()["versionNumber"] == 1
    assert second.json()["versionNumber"] == 2
    assert first.json()["designJson"] is None
    listed = client.get(f"/projects/{project_id}/versions").json()
    assert [v["versionNumber"] for v in listed] == [2, 1]


def test_create_version_requires_known_project_and_long_enough_text(client: TestClient):
    missing = client.post(
        "/projects/00000000-0000-0000-0000-000000000000/versions", json={"requirementsText": REQUIREMENTS}
    )
    assert missing.status_code == 404

    project_id = client.post("/projects", json={"name": "Todo"}).json()["id"]
    too_short = client.post(f"/projects/{project_id}/versions", json={"requirementsText": "short"})
    assert too_short.status_code == 422


def test_generate_persists_design(client: TestClient, stub_llm: StubLLM, version_url: str):
    stub_llm.responses.append(as_fenced_response(make_design_payload()))

    response = client.post(f"{version_url}/generate", json={"constraints": {"teamSize": 3, "cloud": "AWS"}})

    assert response.status_code == 200
    design = response.json()["designJson"]
    assert design["architecture"]["pattern"] == "Three-tier web application"
    assert sorted(design["diagrams"]) == ["c4Container", "c4Context", "erd", "sequence"]
    prompt = stub_llm.calls[0][1]
    assert REQUIREMENTS in prompt
    assert "- cloud: AWS" in prompt
    assert "- teamSize: 3" in prompt

    stored = client.get(f"{version_url}/design").json()
    assert stored["versionNumber"] == 1
    assert stored["design"] == design
    diagrams = client.get(f"{version_url}/diagrams").json()["diagrams"]
    assert diagrams["erd"]["nodes"][0]["type"] == "table"


def test_generate_without_body(client: TestClient, stub_llm: StubLLM, version_url: str):
    stub_llm.responses.append(json.dumps(make_design_payload()))

    response = client.post(f"{version_url}/generate")

    assert response.status_code == 200
    assert "No explicit constraints provided." in stub_llm.calls[0][1]


def test_generate_rejects_invalid_team_size(client: TestClient, version_url: str):
    response = client.post(f"{version_url}/generate", json={"constraints": {"teamSize": 0}})

    assert response.status_code == 422


def test_generate_reports_schema_violations(client: TestClient, stub_llm: StubLLM, version_url: str):
    payload = make_design_payload()
    del payload["diagrams"]
    stub_llm.responses.append(json.dumps(payload))

    response = client.post(f"{version_url}/generate", json={})

    assert response.status_code == 502
    body = response.json()
    assert body["kind"] == "schema_violation"
    assert body["errors"][0]["path"] == "diagrams"
    assert client.get(f"{version_url}").json()["designJson"] is None


def test_generate_reports_malformed_output(client: TestClient, stub_llm: StubLLM, version_url: str):
    stub_llm.responses.append("The model is overloaded, please try later.")

    response = client.post(f"{version_url}/generate", json={})

    assert response.status_code == 502
    assert response.json()["kind"] == "malformed_output"


def test_generate_maps_rate_limit_to_429(client: TestClient, stub_llm: StubLLM, version_url: str):
    response = httpx.Response(429, request=httpx.Request("POST", "https://llm.example/v1/chat/completions"))

    async def rate_limited(system_prompt: str, user_prompt: str) -> str:
        raise openai.RateLimitError("Too many requests", response=response, body=None)

    stub_llm.generate_text = rate_limited  # type: ignore[method-assign]

    result = client.post(f"{version_url}/generate", json={})

    assert result.status_code == 429
    assert result.json()["kind"] == "provider"


def test_refine_requires_existing_design(client: TestClient, version_url: str):
    response = client.post(f"{version_url}/refine", json={"refinementRequest": "Add Redis caching"})

    assert response.status_code == 409


def test_refine_updates_design(client: TestClient, stub_llm: StubLLM, version_url: str):
    refined = make_design_payload()
    refined["techStack"]["infrastructure"] = ["Docker", "Redis"]
    stub_llm.responses.extend([json.dumps(make_design_payload()), as_fenced_response(refined)])
    client.post(f"{version_url}/generate", json={})

    response = client.post(
        f"{version_url}/refine",
        json={"refinementRequest": "Add Redis caching", "constraints": {"budget": "low"}},
    )

    assert response.status_code == 200
    assert response.json()["designJson"]["techStack"]["infrastructure"] == ["Docker", "Redis"]
    prompt = stub_llm.calls[1][1]
    assert "CHANGE REQUEST:\nAdd Redis caching" in prompt
    assert '"pattern": "Three-tier web application"' in prompt


def test_refine_requires_request_text(client: TestClient, version_url: str):
    response = client.post(f"{version_url}/refine", json={})

    assert response.status_code == 422


def test_design_views_before_generation_are_404(client: TestClient, version_url: str):
    for suffix in ("design", "diagrams", "export/markdown", "code"):
        response = client.get(f"{version_url}/{suffix}")
        assert response.status_code == 404
        assert response.json()["detail"] == "Design not generated yet"


def test_exports(client: TestClient, stub_llm: StubLLM, version_url: str):
    stub_llm.responses.append(json.dumps(make_design_payload()))
    client.post(f"{version_url}/generate", json={})

    markdown = client.get(f"{version_url}/export/markdown")
    assert markdown.status_code == 200
    assert markdown.headers["content-type"].startswith("text/markdown")
    assert markdown.text.startswith("# Todo\n")

    code = client.get(f"{version_url}/code").json()
    assert "app/models.py" in code
    assert "class Todo(SQLModel, table=True):" in code["app/models.py"]
    assert '@router.patch("/todos/{id}")' in code["app/routes.py"]
