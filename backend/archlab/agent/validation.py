import logging

from pydantic import BaseModel, ValidationError

from archlab.agent.artifacts import Candidate, Design

logger = logging.getLogger(__name__)


class FieldError(BaseModel):
    path: str
    message: str
    type: str


class DesignValidationError(ValueError):
    def __init__(self, errors: list[FieldError]):
        self.errors = errors
        summary = "; ".join(f"{e.path}: {e.message}" for e in errors[:5])
        more = f" (+{len(errors) - 5} more)" if len(errors) > 5 else ""
        super().__init__(f"Design failed schema validation: {summary}{more}")


def _format_loc(loc: tuple[int | str, ...]) -> str:
    return ".".join(str(part) for part in loc) or "<root>"


def to_field_errors(exc: ValidationError) -> list[FieldError]:
    return [
        FieldError(path=_format_loc(err["loc"]), message=err["msg"], type=err["type"])
        for err in exc.errors(include_url=False)
    ]


def validate_design(candidate: Candidate) -> Design:
    """
    Accept or reject a normalized candidate.

    Strict: no type coercion, every documented field must be present (empty
    lists are fine), nested lists are checked item by item. Unknown keys are
    ignored. Raises DesignValidationError with one FieldError per problem.
    """
    try:
        return Design.model_validate(candidate.data)
    except ValidationError as exc:
        errors = to_field_errors(exc)
        logger.warning("Design candidate rejected with %s schema error(s)", len(errors))
        raise DesignValidationError(errors) from exc


def check_design(candidate: Candidate) -> list[FieldError]:
    try:
        validate_design(candidate)
    except DesignValidationError as exc:
        return exc.errors
    return []
