"""
Health checks - for load balancers, Kubernetes, and monitoring.
Challenge: Fast liveness; readiness runs a trivial query on the default connection.
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from dbinteraction.config import DEFAULT_CONNECTION, get_settings
from dbinteraction.core.dependencies import SqlAccess
from dbinteraction.db.enums import QueryType
from dbinteraction.db.statements import RawSql

router = APIRouter()
settings = get_settings()


@router.get("")
async def health():
    """Liveness: is the process up?"""
    return {"status": "ok", "app": settings.app_name}


@router.get("/ready")
async def ready(sql: SqlAccess):
    """Readiness: can the default connection answer SELECT 1?"""
    result = await sql.generic_query(DEFAULT_CONNECTION, QueryType.TRANSACTION, RawSql("SELECT 1"))
    if not result.ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable", "error_code": result.error_code.value},
        )
    return {"status": "ready"}
