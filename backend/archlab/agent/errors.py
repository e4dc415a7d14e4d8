from typing import Literal

from archlab.agent.validation import FieldError

ErrorKind = Literal["malformed_output", "schema_violation", "provider"]


class DesignGenerationError(Exception):
    """Single error type raised by the design pipeline, whatever stage failed."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        raw_text: str | None = None,
        extracted_text: str | None = None,
        errors: list[FieldError] | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.raw_text = raw_text
        self.extracted_text = extracted_text
        self.errors = errors or []
        self.cause = cause
        self.status_code: int | None = getattr(cause, "status_code", None)

    @property
    def rate_limited(self) -> bool:
        return self.kind == "provider" and self.status_code == 429
