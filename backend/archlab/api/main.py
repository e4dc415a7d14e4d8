from fastapi import APIRouter

from archlab.api.routes import projects, templates, utils, versions

api_router = APIRouter()
api_router.include_router(utils.router)
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(versions.router, prefix="/projects", tags=["versions"])
api_router.include_router(templates.router, prefix="/templates", tags=["templates"])
