from fastapi import APIRouter
from ...core.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "app": settings.app_name,
        "env": settings.app_env,
        "ocr_configured": bool(settings.az_di_endpoint and settings.az_di_api_key),
        "account_number_configured": bool(settings.account_number),
    }
