"""
Repairs for shape deviations the model is known to produce.

Each rule is a pure function ``Candidate -> Candidate``; rules run in the order
of ``REPAIR_RULES`` and only touch the fields they name. A rule that finds
nothing to repair returns the candidate it was given.
"""
import copy
import json
import logging
from collections.abc import Callable
from typing import Any

from archlab.agent.artifacts import Candidate

logger = logging.getLogger(__name__)

RepairRule = Callable[[Candidate], Candidate]

STRING_LIST_FIELDS = ("rationale", "risks")


def default_tech_stack(infrastructure: list[str] | None = None) -> dict[str, Any]:
    return {
        "frontend": "None",
        "backend": "None",
        "database": "None",
        "infrastructure": list(infrastructure or []),
    }


def stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, dict | list):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)


def stringify_architecture_lists(candidate: Candidate) -> Candidate:
    data = candidate.data
    if not isinstance(data, dict) or not isinstance(data.get("architecture"), dict):
        return candidate

    architecture = data["architecture"]
    dirty = [
        key
        for key in STRING_LIST_FIELDS
        if isinstance(architecture.get(key), list)
        and any(not isinstance(item, str) for item in architecture[key])
    ]
    if not dirty:
        return candidate

    repaired = copy.deepcopy(data)
    for key in dirty:
        repaired["architecture"][key] = [stringify(item) for item in repaired["architecture"][key]]
    logger.info("Stringified non-string items in architecture.%s", ", architecture.".join(dirty))
    return Candidate(data=repaired)


def tech_stack_from_list(candidate: Candidate) -> Candidate:
    data = candidate.data
    if not isinstance(data, dict) or not isinstance(data.get("techStack"), list):
        return candidate

    repaired = copy.deepcopy(data)
    repaired["techStack"] = default_tech_stack([stringify(item) for item in data["techStack"]])
    logger.info("Reinterpreted list techStack as infrastructure (%s items)", len(data["techStack"]))
    return Candidate(data=repaired)


def fill_missing_tech_stack(candidate: Candidate) -> Candidate:
    data = candidate.data
    if not isinstance(data, dict) or isinstance(data.get("techStack"), dict):
        return candidate
    # A snake_case key is a schema violation, not a missing stack; leave it for the validator.
    if "techStack" not in data and "tech_stack" in data:
        return candidate

    repaired = copy.deepcopy(data)
    repaired["techStack"] = default_tech_stack()
    logger.info("Replaced missing or malformed techStack with defaults")
    return Candidate(data=repaired)


REPAIR_RULES: tuple[RepairRule, ...] = (
    stringify_architecture_lists,
    tech_stack_from_list,
    fill_missing_tech_stack,
)


def normalize_candidate(candidate: Candidate, rules: tuple[RepairRule, ...] = REPAIR_RULES) -> Candidate:
    for rule in rules:
        candidate = rule(candidate)
    return candidate
