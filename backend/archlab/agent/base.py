from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel

from archlab.agent.llm_client import LLMClient

InType = TypeVar("InType", bound=BaseModel | str)
OutType = TypeVar("OutType", bound=BaseModel)

class BaseAgent(ABC, Generic[InType, OutType]):
    """Abstract base class for agents that turn one artifact into another via an LLM."""

    def __init__(self, llm: LLMClient | None = None, *, model_name: str | None = None):
        self.llm = llm or LLMClient(model_name=model_name)

    @abstractmethod
    async def run(self, input_data: InType) -> OutType:
        """Run the agent on the given input to produce the output artifact."""
        pass

    def get_system_prompt(self, **kwargs) -> str:
        """Optional helper to format the system prompt."""
        return ""
