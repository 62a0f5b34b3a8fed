from fastapi import APIRouter, HTTPException
from datetime import datetime
from shift_tracker.db import get_db
from shift_tracker.utils.ws_manager import manager

router = APIRouter()

@router.get("/health")
async def health_check():
    """
    Basic health check endpoint for production monitoring
    """
    health_status = {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "version": "1.0.0",
        "checks": {}
    }

    # Database connectivity check
    try:
        db = get_db()
        await db.command("ping")
        health_status["checks"]["database"] = {"status": "healthy"}
    except Exception as e:
        health_status["checks"]["database"] = {"status": "unhealthy", "error": str(e)}
        health_status["status"] = "degraded"

    health_status["checks"]["live_feeds"] = {
        "status": "healthy",
        **manager.get_connection_stats()
    }

    return health_status

@router.get("/health/ready")
async def readiness_check():
    """
    Readiness probe: the store must answer a ping
    """
    try:
        db = get_db()
        await db.command("ping")

        return {
            "status": "ready",
            "timestamp": datetime.utcnow().isoformat()
        }
    except Exception as e:
        raise HTTPException(
            status_code=503,
            detail={
                "status": "not_ready",
                "timestamp": datetime.utcnow().isoformat(),
                "error": str(e)
            }
        )

@router.get("/health/live")
async def liveness_check():
    return {
        "status": "alive",
        "timestamp": datetime.utcnow().isoformat()
    }
