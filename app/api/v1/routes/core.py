from fastapi import APIRouter

from app.services.sizing import __version__ as sizing_version

router = APIRouter(tags=["core"])

@router.get("/health")
def health_check():
    return {"status": "ok", "engine_version": sizing_version}
