import json
from collections.abc import Mapping
from typing import Any, get_args

from archlab.agent.artifacts import BackendLabel, DatabaseLabel, Design, FrontendLabel

DESIGN_SYSTEM_PROMPT = """
You are the **Design Agent** for ArchLab, a senior software architect.
Your job is to turn a user's system requirements into a concise, implementation-ready
system design: requirements breakdown, architecture pattern, tech stack, components,
data model, REST API surface and four diagrams.

Rules:
- Prefer the simplest architecture that satisfies the requirements and constraints.
- Name concrete responsibilities for every component.
- Every entity in the data model must appear as a "table" node in the ERD diagram.
- Diagram node ids must be unique within a diagram, and every edge must reference existing node ids.
- Keep lists focused: a handful of meaningful items beats an exhaustive dump.
"""

NO_CONSTRAINTS = "No explicit constraints provided."


def _labels(alias: Any) -> str:
    return ", ".join(f'"{label}"' for label in get_args(alias))


OUTPUT_CONTRACT = f"""
OUTPUT FORMAT (CRITICAL):
Respond with ONLY one valid JSON object. No markdown code fences, no prose before or after it.
The object must have exactly this shape (every key required, lists may be empty):
{{
  "requirements": {{"actors": [string], "functional": [string], "nfr": [string], "assumptions": [string]}},
  "architecture": {{"pattern": string, "rationale": [string], "risks": [string]}},
  "techStack": {{"frontend": string, "backend": string, "database": string, "infrastructure": [string]}},
  "components": [{{"name": string, "responsibilities": [string]}}],
  "dataModel": [{{"entity": string, "fields": [{{"name": string, "type": string}}]}}],
  "api": [{{"method": string, "path": string, "purpose": string}}],
  "diagrams": {{
    "c4Context": {{"nodes": [Node], "edges": [Edge]}},
    "c4Container": {{"nodes": [Node], "edges": [Edge]}},
    "erd": {{"nodes": [Node], "edges": [Edge]}},
    "sequence": {{"nodes": [Node], "edges": [Edge]}}
  }}
}}
Node = {{"id": string, "label": string, "type": "default" | "table", "details": [string]}}
Edge = {{"id": string, "source": node id, "target": node id, "label": string}}

- "architecture.rationale" and "architecture.risks" are lists of plain strings, not objects.
- "techStack" is an object, not a list.
- "techStack.frontend" must be one of: {_labels(FrontendLabel)}.
- "techStack.backend" must be one of: {_labels(BackendLabel)}.
- "techStack.database" must be one of: {_labels(DatabaseLabel)}.
- ERD nodes use "type": "table" with one "name: type" string per field in "details".
"""


def render_constraints(constraints: Mapping[str, Any] | None) -> str:
    lines = []
    for key in sorted(constraints or {}):
        value = constraints[key]
        if value is None or value == "" or value == [] or value == {}:
            continue
        if not isinstance(value, str):
            value = json.dumps(value, ensure_ascii=False)
        lines.append(f"- {key}: {value}")
    return "\n".join(lines) if lines else NO_CONSTRAINTS


def build_generate_prompt(requirements_text: str, constraints: Mapping[str, Any] | None = None) -> str:
    return (
        "Design a system for the following requirements.\n\n"
        f"REQUIREMENTS:\n{requirements_text}\n\n"
        f"CONSTRAINTS:\n{render_constraints(constraints)}\n"
        f"{OUTPUT_CONTRACT}"
    )


def build_refine_prompt(
    design: Design,
    refinement_request: str,
    constraints: Mapping[str, Any] | None = None,
) -> str:
    current = json.dumps(design.to_json_dict(), indent=2, ensure_ascii=False)
    return (
        "Refine an existing system design according to a change request.\n\n"
        f"CURRENT DESIGN:\n{current}\n\n"
        f"CHANGE REQUEST:\n{refinement_request}\n\n"
        f"CONSTRAINTS:\n{render_constraints(constraints)}\n\n"
        "Apply ONLY the requested change. Preserve every part of the current design that the "
        "change request does not affect, word for word, and return the complete updated design "
        "(not a diff).\n"
        f"{OUTPUT_CONTRACT}"
    )
