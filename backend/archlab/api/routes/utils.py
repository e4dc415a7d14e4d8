from fastapi import APIRouter

router = APIRouter(tags=["utils"])


@router.get("/health")
async def health_check() -> dict[str, str]:
    return {"status": "ok"}
