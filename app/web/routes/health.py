import logging

from fastapi import APIRouter, Depends, Request

from app.core.clock import utcnow
from app.core.database import Database, get_database

router = APIRouter()
logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return utcnow().isoformat() + "Z"


@router.get("/", summary="Service banner")
async def root(request: Request) -> dict[str, str]:
    return {
        "message": f"{request.app.title} is running!",
        "timestamp": _timestamp(),
    }


@router.get("/api/health", summary="Health check")
async def health(request: Request, database: Database = Depends(get_database)) -> dict[str, str]:
    """Simple health check that also touches the database."""
    try:
        await database.ping()
        db_status = "ok"
    except Exception as exc:  # noqa: BLE001
        db_status = "error"
        logger.exception("Database healthcheck failed", exc_info=exc)

    return {
        "status": "OK",
        "service": request.app.title,
        "database": db_status,
        "timestamp": _timestamp(),
    }
