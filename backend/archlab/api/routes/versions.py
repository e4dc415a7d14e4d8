import logging
import uuid
from typing import Any

from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from archlab.agent.artifacts import Design
from archlab.api.deps import DesignAgentDep, SessionDep
from archlab.crud import create_version, get_project, get_version, list_versions, save_version_design
from archlab.exports import design_to_code_stubs, design_to_markdown
from archlab.models import (
    DesignPublic,
    DiagramsPublic,
    ProjectVersion,
    ProjectVersionCreate,
    ProjectVersionPublic,
)

router = APIRouter()
logger = logging.getLogger(__name__)


class DesignConstraints(BaseModel):
    """Optional generation hints. Keys beyond the known ones are passed through to the prompt."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    budget: str | None = None
    team_size: int | None = Field(default=None, gt=0)
    cloud: str | None = None

    def as_prompt_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class GenerateRequest(BaseModel):
    constraints: DesignConstraints | None = None


class RefineRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    refinement_request: str = Field(min_length=1)
    constraints: DesignConstraints | None = None


def _get_version_or_404(session: SessionDep, project_id: uuid.UUID, version_id: uuid.UUID) -> ProjectVersion:
    version = get_version(session=session, project_id=project_id, version_id=version_id)
    if not version:
        raise HTTPException(status_code=404, detail="Version not found")
    return version


def _stored_design(version: ProjectVersion) -> Design:
    if not version.design_json:
        raise HTTPException(status_code=404, detail="Design not generated yet")
    try:
        return Design.model_validate(version.design_json)
    except ValidationError as exc:
        logger.error("Stored design for version %s no longer validates: %s", version.id, exc)
        raise HTTPException(status_code=500, detail="Stored design is invalid") from exc


def _constraints_dict(constraints: DesignConstraints | None) -> dict[str, Any]:
    return constraints.as_prompt_dict() if constraints else {}


@router.post("/{project_id}/versions", response_model=ProjectVersionPublic, status_code=201)
def create_new_version(
    project_id: uuid.UUID, version_in: ProjectVersionCreate, session: SessionDep
) -> Any:
    if not get_project(session=session, project_id=project_id):
        raise HTTPException(status_code=404, detail="Project not found")
    return create_version(session=session, project_id=project_id, version_in=version_in)


@router.get("/{project_id}/versions", response_model=list[ProjectVersionPublic])
def read_versions(project_id: uuid.UUID, session: SessionDep) -> Any:
    return list_versions(session=session, project_id=project_id)


@router.get("/{project_id}/versions/{version_id}", response_model=ProjectVersionPublic)
def read_version(project_id: uuid.UUID, version_id: uuid.UUID, session: SessionDep) -> Any:
    return _get_version_or_404(session, project_id, version_id)


@router.post("/{project_id}/versions/{version_id}/generate", response_model=ProjectVersionPublic)
async def generate_design(
    project_id: uuid.UUID,
    version_id: uuid.UUID,
    session: SessionDep,
    agent: DesignAgentDep,
    body: GenerateRequest | None = None,
) -> Any:
    version = _get_version_or_404(session, project_id, version_id)
    constraints = _constraints_dict(body.constraints if body else None)

    logger.info("Generating design for project %s version %s", project_id, version.version_number)
    design = await agent.generate(version.requirements_text, constraints)
    return save_version_design(session=session, db_version=version, design=design)


@router.post("/{project_id}/versions/{version_id}/refine", response_model=ProjectVersionPublic)
async def refine_design(
    project_id: uuid.UUID,
    version_id: uuid.UUID,
    body: RefineRequest,
    session: SessionDep,
    agent: DesignAgentDep,
) -> Any:
    version = _get_version_or_404(session, project_id, version_id)
    if not version.design_json:
        raise HTTPException(status_code=409, detail="Generate a design before refining it")
    current = _stored_design(version)

    logger.info("Refining design for project %s version %s", project_id, version.version_number)
    design = await agent.refine(current, body.refinement_request, _constraints_dict(body.constraints))
    return save_version_design(session=session, db_version=version, design=design)


@router.get("/{project_id}/versions/{version_id}/design", response_model=DesignPublic)
def read_design(project_id: uuid.UUID, version_id: uuid.UUID, session: SessionDep) -> Any:
    version = _get_version_or_404(session, project_id, version_id)
    if not version.design_json:
        raise HTTPException(status_code=404, detail="Design not generated yet")
    return DesignPublic(
        version_id=version.id,
        version_number=version.version_number,
        created_at=version.created_at,
        design=version.design_json,
    )


@router.get("/{project_id}/versions/{version_id}/diagrams", response_model=DiagramsPublic)
def read_diagrams(project_id: uuid.UUID, version_id: uuid.UUID, session: SessionDep) -> Any:
    version = _get_version_or_404(session, project_id, version_id)
    if not version.design_json:
        raise HTTPException(status_code=404, detail="Design not generated yet")
    return DiagramsPublic(
        version_id=version.id,
        version_number=version.version_number,
        diagrams=version.design_json.get("diagrams") or {},
    )


@router.get("/{project_id}/versions/{version_id}/export/markdown", response_class=PlainTextResponse)
def export_markdown(project_id: uuid.UUID, version_id: uuid.UUID, session: SessionDep) -> PlainTextResponse:
    version = _get_version_or_404(session, project_id, version_id)
    design = _stored_design(version)
    project_name = version.project.name if version.project else "System Design"
    return PlainTextResponse(design_to_markdown(design, project_name), media_type="text/markdown")


@router.get("/{project_id}/versions/{version_id}/code", response_model=dict[str, str])
def export_code(project_id: uuid.UUID, version_id: uuid.UUID, session: SessionDep) -> Any:
    version = _get_version_or_404(session, project_id, version_id)
    design = _stored_design(version)
    project_name = version.project.name if version.project else "System Design"
    return design_to_code_stubs(design, project_name)
