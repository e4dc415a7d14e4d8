from fastapi import APIRouter, HTTPException

from archlab.templates import ArchitectureTemplate, get_template_by_id, get_templates

router = APIRouter()


@router.get("", response_model=list[ArchitectureTemplate])
def read_templates() -> list[ArchitectureTemplate]:
    return get_templates()


@router.get("/{template_id}", response_model=ArchitectureTemplate)
def read_template(template_id: str) -> ArchitectureTemplate:
    template = get_template_by_id(template_id)
    if not template:
        raise HTTPException(status_code=404, detail="Template not found")
    return template
