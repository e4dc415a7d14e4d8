import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy import JSON, DateTime
from sqlmodel import Field, Relationship, SQLModel


def get_datetime_utc() -> datetime:
    return datetime.now(timezone.utc)


# API payloads use camelCase keys; Python attributes stay snake_case.
class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ProjectBase(SQLModel):
    name: str = Field(min_length=2, max_length=255)
    description: str | None = Field(default=None)


class ProjectCreate(ProjectBase):
    pass


# Database model, database table inferred from class name
class Project(ProjectBase, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    updated_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
        sa_column_kwargs={"onupdate": get_datetime_utc},
    )
    versions: list["ProjectVersion"] = Relationship(
        back_populates="project",
        cascade_delete=True,
    )


class ProjectVersionBase(SQLModel):
    version_number: int = Field(ge=1)
    requirements_text: str = Field(min_length=10)
    design_json: dict[str, Any] | None = Field(default=None, sa_type=JSON)


class ProjectVersionCreate(CamelModel):
    requirements_text: str = Field(min_length=10)


class ProjectVersion(ProjectVersionBase, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    project_id: uuid.UUID = Field(
        foreign_key="project.id", nullable=False, ondelete="CASCADE", index=True
    )
    project: Project | None = Relationship(back_populates="versions")


# Properties to return via API, id is always required
class ProjectVersionPublic(CamelModel):
    id: uuid.UUID
    project_id: uuid.UUID
    version_number: int
    requirements_text: str
    design_json: dict[str, Any] | None = None
    created_at: datetime | None = None


class ProjectVersionSummary(CamelModel):
    id: uuid.UUID
    version_number: int
    created_at: datetime | None = None


class ProjectPublic(CamelModel):
    id: uuid.UUID
    name: str
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProjectWithVersionSummaries(ProjectPublic):
    versions: list[ProjectVersionSummary] = []


class ProjectWithVersions(ProjectPublic):
    versions: list[ProjectVersionPublic] = []


class DesignPublic(CamelModel):
    version_id: uuid.UUID
    version_number: int
    created_at: datetime | None = None
    design: dict[str, Any]


class DiagramsPublic(CamelModel):
    version_id: uuid.UUID
    version_number: int
    diagrams: dict[str, Any]
