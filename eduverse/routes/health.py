"""
Health Check Routes
Service liveness and Supabase connectivity
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
import logging

from eduverse.utils.dependencies import PlatformDep, SettingsDep

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check():
    """Basic health check"""
    return {
        "success": True,
        "message": "Backend is running successfully!"
    }


@router.get("/test-supabase")
async def test_supabase(platform: PlatformDep, settings: SettingsDep):
    """Read one row through the platform to prove connectivity"""
    try:
        data = await platform.fetch_sample(settings.health_table, 1)
    except Exception as e:
        message = getattr(e, 'message', None) or str(e)
        logger.error(f"Supabase connection failed: {message}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "message": "Supabase connection failed",
                "error": message
            }
        )

    return {
        "success": True,
        "message": "Supabase connection successful!",
        "sampleData": data
    }
