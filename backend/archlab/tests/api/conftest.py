from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from archlab.agent.design_agent import DesignAgent
from archlab.api.deps import get_db, get_design_agent
from archlab.main import app
from archlab.tests.utils import StubLLM


@pytest.fixture
def session() -> Generator[Session, None, None]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def stub_llm() -> StubLLM:
    return StubLLM()


@pytest.fixture
def client(session: Session, stub_llm: StubLLM) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_db] = lambda: session
    app.dependency_overrides[get_design_agent] = lambda: DesignAgent(llm=stub_llm)
    yield TestClient(app)
    app.dependency_overrides.clear()
