import copy
import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

EMPTY_GRAPH = {"nodes": [], "edges": []}

TODO_DESIGN: dict[str, Any] = {
    "requirements": {
        "actors": ["User"],
        "functional": ["Create todos", "Mark todos as done"],
        "nfr": ["Responsive UI"],
        "assumptions": ["Single-user MVP"],
    },
    "architecture": {
        "pattern": "Three-tier web application",
        "rationale": ["Simple to build", "Clear separation of concerns"],
        "risks": ["MongoDB schema drift"],
    },
    "techStack": {
        "frontend": "React",
        "backend": "Node.js",
        "database": "MongoDB",
        "infrastructure": ["Docker"],
    },
    "components": [
        {"name": "Web Client", "responsibilities": ["Render todo list", "Call REST API"]},
        {"name": "Todo Service", "responsibilities": ["Validate input", "Persist todos"]},
    ],
    "dataModel": [
        {
            "entity": "Todo",
            "fields": [
                {"name": "id", "type": "string"},
                {"name": "title", "type": "string"},
                {"name": "done", "type": "boolean"},
            ],
        }
    ],
    "api": [
        {"method": "GET", "path": "/todos", "purpose": "List todos"},
        {"method": "POST", "path": "/todos", "purpose": "Create a todo"},
        {"method": "PATCH", "path": "/todos/:id", "purpose": "Update a todo"},
    ],
    "diagrams": {
        "c4Context": {
            "nodes": [
                {"id": "user", "label": "User", "details": []},
                {"id": "app", "label": "Todo App", "details": []},
            ],
            "edges": [{"id": "e1", "source": "user", "target": "app", "label": "uses"}],
        },
        "c4Container": {
            "nodes": [
                {"id": "web", "label": "React SPA", "details": []},
                {"id": "api", "label": "Node API", "details": []},
                {"id": "db", "label": "MongoDB", "details": []},
            ],
            "edges": [
                {"id": "e1", "source": "web", "target": "api", "label": "REST"},
                {"id": "e2", "source": "api", "target": "db"},
            ],
        },
        "erd": {
            "nodes": [
                {
                    "id": "todo",
                    "label": "Todo",
                    "type": "table",
                    "details": ["id: string", "title: string", "done: boolean"],
                }
            ],
            "edges": [],
        },
        "sequence": {
            "nodes": [
                {"id": "user", "label": "User", "details": []},
                {"id": "api", "label": "Node API", "details": []},
            ],
            "edges": [{"id": "s1", "source": "user", "target": "api", "label": "POST /todos"}],
        },
    },
}


def make_design_payload(**overrides: Any) -> dict[str, Any]:
    payload = copy.deepcopy(TODO_DESIGN)
    payload.update(copy.deepcopy(overrides))
    return payload


def make_empty_design_payload() -> dict[str, Any]:
    return {
        "requirements": {"actors": [], "functional": [], "nfr": [], "assumptions": []},
        "architecture": {"pattern": "", "rationale": [], "risks": []},
        "techStack": {"frontend": "None", "backend": "None", "database": "None", "infrastructure": []},
        "components": [],
        "dataModel": [],
        "api": [],
        "diagrams": {
            "c4Context": copy.deepcopy(EMPTY_GRAPH),
            "c4Container": copy.deepcopy(EMPTY_GRAPH),
            "erd": copy.deepcopy(EMPTY_GRAPH),
            "sequence": copy.deepcopy(EMPTY_GRAPH),
        },
    }


def as_fenced_response(payload: dict[str, Any]) -> str:
    return f"Here is the design you asked for:\n```json\n{json.dumps(payload, indent=2)}\n```\nLet me know!"


def mock_openai_client(content: str) -> tuple[AsyncMock, MagicMock]:
    """Build a stand-in for AsyncOpenAI whose chat completion returns `content`."""
    mock_message = MagicMock()
    mock_message.content = content

    mock_choice = MagicMock()
    mock_choice.message = mock_message
    mock_response = MagicMock()
    mock_response.choices = [mock_choice]

    mock_completions = MagicMock()
    mock_completions.create = AsyncMock(return_value=mock_response)

    mock_chat = MagicMock()
    mock_chat.completions = mock_completions

    mock_client_instance = AsyncMock()
    mock_client_instance.chat = mock_chat
    return mock_client_instance, mock_completions


class StubLLM:
    """Deterministic generation collaborator: replays canned responses and records prompts."""

    def __init__(self, *responses: str):
        self.responses = list(responses)
        self.calls: list[tuple[str, str]] = []

    async def generate_text(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append((system_prompt, user_prompt))
        return self.responses.pop(0)
