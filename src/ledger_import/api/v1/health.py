from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text

from ledger_import.api.deps import DbSession

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    """Basic health check."""
    return {"status": "ok"}


@router.get("/health/ready")
async def health_ready(db: DbSession):
    """Readiness check with database connection."""
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        # Connection errors can carry the DSN; report only the type.
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not ready", "database": "disconnected", "error": type(e).__name__},
        )
    return {"status": "ready", "database": "connected"}
