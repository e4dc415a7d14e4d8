import json
import logging
from collections.abc import Mapping
from typing import Any

from archlab.agent.artifacts import Candidate, Design, DesignRequest
from archlab.agent.base import BaseAgent
from archlab.agent.errors import DesignGenerationError
from archlab.agent.extraction import extract_json_text
from archlab.agent.normalizer import normalize_candidate
from archlab.agent.prompts.design import (
    DESIGN_SYSTEM_PROMPT,
    build_generate_prompt,
    build_refine_prompt,
)
from archlab.agent.validation import DesignValidationError, validate_design

logger = logging.getLogger(__name__)


class DesignAgent(BaseAgent[DesignRequest, Design]):
    """
    Agent responsible for producing a validated Design from free-text requirements,
    or a new Design from an existing one plus a change request.
    """

    def get_system_prompt(self, **kwargs) -> str:
        return DESIGN_SYSTEM_PROMPT

    async def run(self, input_data: DesignRequest) -> Design:
        if input_data.design is not None:
            if not input_data.refinement_request:
                raise ValueError("A refinement request is required to refine a design.")
            return await self.refine(
                input_data.design, input_data.refinement_request, input_data.constraints
            )
        if not input_data.requirements_text:
            raise ValueError("Requirements text is required to generate a design.")
        return await self.generate(input_data.requirements_text, input_data.constraints)

    async def generate(
        self, requirements_text: str, constraints: Mapping[str, Any] | None = None
    ) -> Design:
        prompt = build_generate_prompt(requirements_text, constraints)
        return await self._complete(prompt, mode="generate")

    async def refine(
        self,
        design: Design,
        refinement_request: str,
        constraints: Mapping[str, Any] | None = None,
    ) -> Design:
        """
        Ask the model to apply `refinement_request` to `design`. The prompt tells the model
        to keep unaffected sections; nothing here diffs or merges the two designs.
        """
        prompt = build_refine_prompt(design, refinement_request, constraints)
        return await self._complete(prompt, mode="refine")

    async def _complete(self, prompt: str, *, mode: str) -> Design:
        try:
            raw_text = await self.llm.generate_text(
                system_prompt=self.get_system_prompt(), user_prompt=prompt
            )
        except Exception as exc:
            logger.error("Design %s failed at the model provider: %s", mode, exc)
            raise DesignGenerationError("provider", f"Model provider error: {exc}", cause=exc) from exc

        extracted = extract_json_text(raw_text)
        try:
            parsed = json.loads(extracted, strict=False)
        except json.JSONDecodeError as exc:
            logger.error(
                "Design %s returned unparseable output: %s\nRAW: %s\nEXTRACTED: %s",
                mode,
                exc,
                raw_text,
                extracted,
            )
            raise DesignGenerationError(
                "malformed_output",
                f"Model returned invalid JSON: {exc}",
                raw_text=raw_text,
                extracted_text=extracted,
            ) from exc

        candidate = normalize_candidate(Candidate(data=parsed))
        try:
            design = validate_design(candidate)
        except DesignValidationError as exc:
            raise DesignGenerationError(
                "schema_violation",
                str(exc),
                raw_text=raw_text,
                extracted_text=extracted,
                errors=exc.errors,
            ) from exc

        logger.info(
            "Design %s produced pattern %r with %s components",
            mode,
            design.architecture.pattern,
            len(design.components),
        )
        return design
