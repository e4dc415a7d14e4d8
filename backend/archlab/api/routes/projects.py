import uuid
from typing import Any

from fastapi import APIRouter, HTTPException

from archlab.api.deps import SessionDep
from archlab.crud import create_project, get_project, list_projects, list_versions
from archlab.models import (
    ProjectCreate,
    ProjectPublic,
    ProjectVersionPublic,
    ProjectVersionSummary,
    ProjectWithVersions,
    ProjectWithVersionSummaries,
)

router = APIRouter()


@router.post("", response_model=ProjectPublic, status_code=201)
def create_new_project(*, session: SessionDep, project_in: ProjectCreate) -> Any:
    return create_project(session=session, project_in=project_in)


@router.get("", response_model=list[ProjectWithVersionSummaries])
def read_projects(session: SessionDep) -> Any:
    projects = []
    for project in list_projects(session=session):
        versions = sorted(project.versions, key=lambda v: v.version_number, reverse=True)
        projects.append(
            ProjectWithVersionSummaries(
                **project.model_dump(),
                versions=[ProjectVersionSummary.model_validate(v) for v in versions],
            )
        )
    return projects


@router.get("/{project_id}", response_model=ProjectWithVersions)
def read_project(project_id: uuid.UUID, session: SessionDep) -> Any:
    project = get_project(session=session, project_id=project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    versions = list_versions(session=session, project_id=project.id)
    return ProjectWithVersions(
        **project.model_dump(),
        versions=[ProjectVersionPublic.model_validate(v) for v in versions],
    )
