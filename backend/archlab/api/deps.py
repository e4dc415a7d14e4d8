from collections.abc import Generator
from typing import Annotated

from fastapi import Depends
from sqlmodel import Session

from archlab.agent.design_agent import DesignAgent
from archlab.agent.llm_client import LLMClient
from archlab.core.db import engine


def get_db() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


def get_llm_client() -> LLMClient:
    return LLMClient()


def get_design_agent(llm: Annotated[LLMClient, Depends(get_llm_client)]) -> DesignAgent:
    return DesignAgent(llm=llm)


SessionDep = Annotated[Session, Depends(get_db)]
DesignAgentDep = Annotated[DesignAgent, Depends(get_design_agent)]
