import re
from collections.abc import Sequence

from archlab.agent.artifacts import Design, DiagramGraph

TYPE_MAP = {
    "string": "str",
    "str": "str",
    "text": "str",
    "varchar": "str",
    "int": "int",
    "integer": "int",
    "bigint": "int",
    "number": "float",
    "float": "float",
    "double": "float",
    "decimal": "float",
    "bool": "bool",
    "boolean": "bool",
    "date": "datetime",
    "datetime": "datetime",
    "timestamp": "datetime",
    "uuid": "uuid.UUID",
    "json": "dict",
    "object": "dict",
}


def _slug_name(value: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", (value or "").strip().lower()).strip("_")


def _class_name(value: str) -> str:
    parts = re.split(r"[^A-Za-z0-9]+", value or "")
    name = "".join(p[:1].upper() + p[1:] for p in parts if p)
    if not name or name[0].isdigit():
        name = f"Entity{name}"
    return name


def _python_type(field_type: str) -> str:
    return TYPE_MAP.get((field_type or "").strip().lower(), "str")


def _bullets(items: Sequence[str], empty: str) -> list[str]:
    if not items:
        return [f"- {empty}"]
    return [f"- {item}" for item in items]


def _graph_lines(title: str, graph: DiagramGraph) -> list[str]:
    lines = [f"### {title}", ""]
    if not graph.nodes:
        return lines + ["- Empty diagram", ""]
    labels = {node.id: node.label for node in graph.nodes}
    lines.extend(f"- **{node.label}** (`{node.id}`)" for node in graph.nodes)
    for edge in graph.edges:
        source = labels.get(edge.source, edge.source)
        target = labels.get(edge.target, edge.target)
        suffix = f": {edge.label}" if edge.label else ""
        lines.append(f"- {source} -> {target}{suffix}")
    lines.append("")
    return lines


def design_to_markdown(design: Design, project_name: str = "System Design") -> str:
    req = design.requirements
    arch = design.architecture
    stack = design.tech_stack

    lines: list[str] = [f"# {project_name}", "", "Architecture Design Document", ""]

    lines += ["## 1. System Overview", "", f"**Architecture pattern:** {arch.pattern}", ""]
    lines += ["### Rationale", ""] + _bullets(arch.rationale, "None recorded") + [""]
    lines += ["### Risks", ""] + _bullets(arch.risks, "None recorded") + [""]

    lines += ["## 2. Requirements", ""]
    lines += ["### Actors", ""] + _bullets(req.actors, "None identified") + [""]
    lines += ["### Functional", ""] + _bullets(req.functional, "None identified") + [""]
    lines += ["### Non-Functional", ""] + _bullets(req.nfr, "None identified") + [""]
    lines += ["### Assumptions", ""] + _bullets(req.assumptions, "None") + [""]

    lines += [
        "## 3. Tech Stack",
        "",
        f"- **Frontend:** {stack.frontend}",
        f"- **Backend:** {stack.backend}",
        f"- **Database:** {stack.database}",
        f"- **Infrastructure:** {', '.join(stack.infrastructure) or 'None'}",
        "",
    ]

    lines += ["## 4. Components", ""]
    if not design.components:
        lines += ["- No components defined", ""]
    for component in design.components:
        lines += [f"### {component.name}", ""]
        lines += _bullets(component.responsibilities, "No responsibilities listed") + [""]

    lines += ["## 5. Data Model", ""]
    if not design.data_model:
        lines += ["- No entities defined", ""]
    for entity in design.data_model:
        lines += [f"### {entity.entity}", ""]
        if not entity.fields:
            lines.append("- No fields defined")
        lines.extend(f"- `{fld.name}`: `{fld.type}`" for fld in entity.fields)
        lines.append("")

    lines += ["## 6. API", ""]
    if not design.api:
        lines.append("- No endpoints defined")
    for endpoint in design.api:
        lines.append(f"- **{endpoint.method.upper()}** `{endpoint.path}` - {endpoint.purpose}")
    lines.append("")

    lines += ["## 7. Diagrams", ""]
    diagrams = design.diagrams
    lines += _graph_lines("System Context", diagrams.c4_context)
    lines += _graph_lines("Containers", diagrams.c4_container)
    lines += _graph_lines("Entity Relationships", diagrams.erd)
    lines += _graph_lines("Sequence", diagrams.sequence)

    return "\n".join(lines).strip() + "\n"


def _model_stub(design: Design) -> str:
    lines = ["import uuid", "from datetime import datetime", "", "from sqlmodel import Field, SQLModel", ""]
    for entity in design.data_model:
        lines += ["", f"class {_class_name(entity.entity)}(SQLModel, table=True):"]
        names = {_slug_name(fld.name) for fld in entity.fields}
        if "id" not in names:
            lines.append("    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)")
        for fld in entity.fields:
            attr = _slug_name(fld.name) or "field"
            if attr == "id":
                lines.append(f"    id: {_python_type(fld.type)} | None = Field(default=None, primary_key=True)")
            else:
                lines.append(f"    {attr}: {_python_type(fld.type)} | None = None")
    return "\n".join(lines) + "\n"


def _route_function_name(method: str, path: str, used: set[str]) -> str:
    base = _slug_name(f"{method} {path.replace('{', '').replace('}', '').replace(':', '')}") or "endpoint"
    name = base
    counter = 2
    while name in used:
        name = f"{base}_{counter}"
        counter += 1
    used.add(name)
    return name


def _routes_stub(design: Design) -> str:
    lines = ["from fastapi import APIRouter", "", "router = APIRouter()", ""]
    used: set[str] = set()
    for endpoint in design.api:
        method = endpoint.method.strip().lower() or "get"
        # Express-style ":param" segments become FastAPI "{param}" segments.
        path = re.sub(r":([A-Za-z_][A-Za-z0-9_]*)", r"{\1}", endpoint.path.strip() or "/")
        params = re.findall(r"\{([A-Za-z_][A-Za-z0-9_]*)\}", path)
        signature = ", ".join(f"{param}: str" for param in params)
        purpose = endpoint.purpose.replace('"""', "'''")
        lines += [
            "",
            f'@router.{method}("{path}")',
            f"async def {_route_function_name(method, path, used)}({signature}):",
            f'    """{purpose}"""',
            "    raise NotImplementedError",
        ]
    return "\n".join(lines) + "\n"


def _component_stub(name: str, responsibilities: Sequence[str]) -> str:
    lines = [f'"""{name}', ""]
    lines.extend(f"- {item}" for item in responsibilities)
    class_name = _class_name(name)
    if not class_name.endswith("Service"):
        class_name = f"{class_name}Service"
    lines += ['"""', "", "", f"class {class_name}:"]
    if not responsibilities:
        lines.append("    pass")
    for index, item in enumerate(responsibilities, start=1):
        method = _slug_name(item)[:48].strip("_") or f"task_{index}"
        if method[0].isdigit():
            method = f"task_{method}"
        lines += [f"    def {method}(self):", f'        """{item}"""', "        raise NotImplementedError", ""]
    return "\n".join(lines).rstrip() + "\n"


def design_to_code_stubs(design: Design, project_name: str = "System Design") -> dict[str, str]:
    """Render a design to a bundle of source stubs, keyed by relative file path."""
    files: dict[str, str] = {
        "README.md": design_to_markdown(design, project_name),
        "app/__init__.py": "",
        "app/models.py": _model_stub(design),
        "app/routes.py": _routes_stub(design),
    }
    used: set[str] = set()
    for component in design.components:
        slug = _slug_name(component.name) or "component"
        module = slug
        counter = 2
        while module in used:
            module = f"{slug}_{counter}"
            counter += 1
        used.add(module)
        files[f"app/services/{module}.py"] = _component_stub(component.name, component.responsibilities)
    if design.components:
        files["app/services/__init__.py"] = ""
    return files
