from typing import Annotated, Any, Literal, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

FrontendLabel = Literal[
    "React", "Next.js", "Vue", "Nuxt", "Angular", "Svelte", "Flutter", "React Native", "None"
]
BackendLabel = Literal[
    "Node.js",
    "Express",
    "NestJS",
    "FastAPI",
    "Django",
    "Flask",
    "Spring Boot",
    "Go",
    "Ruby on Rails",
    "ASP.NET Core",
    "None",
]
DatabaseLabel = Literal[
    "PostgreSQL", "MySQL", "MongoDB", "SQLite", "Redis", "DynamoDB", "Cassandra", "None"
]

DIAGRAM_KEYS = ("c4Context", "c4Container", "erd", "sequence")

T = TypeVar("T")


def _freeze_array(value: Any) -> Any:
    if not isinstance(value, (list, tuple)):
        raise PydanticCustomError("list_type", "Input should be a valid list")
    return tuple(value)


# JSON arrays are held as tuples so a validated design cannot be mutated in place.
FrozenList = Annotated[tuple[T, ...], BeforeValidator(_freeze_array)]


class DesignModel(BaseModel):
    """Base for every part of a design: validated by camelCase key only, strict, immutable."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        strict=True,
        frozen=True,
    )


class Requirements(DesignModel):
    actors: FrozenList[str] = Field(description="People or systems interacting with the product")
    functional: FrozenList[str] = Field(description="Functional requirements")
    nfr: FrozenList[str] = Field(description="Non-functional requirements (security, latency, cost...)")
    assumptions: FrozenList[str] = Field(description="Assumptions made while interpreting the requirements")


class Architecture(DesignModel):
    pattern: str = Field(description="Name of the architecture pattern, e.g. 'Modular Monolith'")
    rationale: FrozenList[str] = Field(description="Why the pattern fits")
    risks: FrozenList[str] = Field(description="Known risks of the chosen approach")


class TechStack(DesignModel):
    frontend: FrontendLabel
    backend: BackendLabel
    database: DatabaseLabel
    infrastructure: FrozenList[str] = Field(description="Free-text infrastructure items (Docker, Kubernetes, CDN...)")


class Component(DesignModel):
    name: str
    responsibilities: FrozenList[str]


class EntityField(DesignModel):
    name: str = Field(description="Name of the field (e.g., 'title', 'price')")
    type: str = Field(description="Type of the field (e.g., 'string', 'int', 'datetime')")


class Entity(DesignModel):
    entity: str = Field(description="Name of the entity (e.g., 'Book', 'User')")
    fields: FrozenList[EntityField]


class Endpoint(DesignModel):
    method: str = Field(description="HTTP method")
    path: str = Field(description="Endpoint path (e.g., '/books')")
    purpose: str = Field(description="What this endpoint does")


class DiagramNode(DesignModel):
    id: str
    label: str
    type: str = "default"
    details: FrozenList[str]


class DiagramEdge(DesignModel):
    id: str
    source: str
    target: str
    label: str | None = None


class DiagramGraph(DesignModel):
    nodes: FrozenList[DiagramNode]
    edges: FrozenList[DiagramEdge]


class Diagrams(DesignModel):
    c4_context: DiagramGraph
    c4_container: DiagramGraph
    erd: DiagramGraph
    sequence: DiagramGraph


class Design(DesignModel):
    """Validated design document produced by the design pipeline."""

    requirements: Requirements
    architecture: Architecture
    tech_stack: TechStack
    components: FrozenList[Component]
    data_model: FrozenList[Entity]
    api: FrozenList[Endpoint]
    diagrams: Diagrams

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Candidate(BaseModel):
    """Parsed but unvalidated model output. Only the validator turns it into a Design."""

    model_config = ConfigDict(frozen=True)

    data: Any


class DesignRequest(BaseModel):
    """Input for a single pipeline run: either fresh requirements or a design to refine."""

    requirements_text: str | None = None
    design: Design | None = None
    refinement_request: str | None = None
    constraints: dict[str, Any] = Field(default_factory=dict)
