import uuid

from sqlmodel import Session, col, func, select

from archlab.agent.artifacts import Design
from archlab.models import Project, ProjectCreate, ProjectVersion, ProjectVersionCreate


def create_project(*, session: Session, project_in: ProjectCreate) -> Project:
    db_project = Project.model_validate(project_in.model_dump())
    session.add(db_project)
    session.commit()
    session.refresh(db_project)
    return db_project


def list_projects(*, session: Session) -> list[Project]:
    statement = select(Project).order_by(col(Project.created_at).desc())
    return list(session.exec(statement).all())


def get_project(*, session: Session, project_id: uuid.UUID) -> Project | None:
    return session.get(Project, project_id)


def create_version(
    *, session: Session, project_id: uuid.UUID, version_in: ProjectVersionCreate
) -> ProjectVersion:
    last_number = session.exec(
        select(func.max(ProjectVersion.version_number)).where(ProjectVersion.project_id == project_id)
    ).one()
    db_version = ProjectVersion(
        project_id=project_id,
        version_number=(last_number or 0) + 1,
        requirements_text=version_in.requirements_text,
        design_json=None,
    )
    session.add(db_version)
    session.commit()
    session.refresh(db_version)
    return db_version


def list_versions(*, session: Session, project_id: uuid.UUID) -> list[ProjectVersion]:
    statement = (
        select(ProjectVersion)
        .where(ProjectVersion.project_id == project_id)
        .order_by(col(ProjectVersion.version_number).desc())
    )
    return list(session.exec(statement).all())


def get_version(
    *, session: Session, project_id: uuid.UUID, version_id: uuid.UUID
) -> ProjectVersion | None:
    statement = select(ProjectVersion).where(
        ProjectVersion.id == version_id, ProjectVersion.project_id == project_id
    )
    return session.exec(statement).first()


def save_version_design(*, session: Session, db_version: ProjectVersion, design: Design) -> ProjectVersion:
    db_version.design_json = design.to_json_dict()
    session.add(db_version)
    session.commit()
    session.refresh(db_version)
    return db_version
