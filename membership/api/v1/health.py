"""Health check endpoint with member storage connectivity check."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from membership.core.config import settings
from membership.core.database import check_db_connected, get_db
from membership.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(db: Session = Depends(get_db)) -> HealthResponse:
    """
    Return service health status and storage connectivity.
    Used by load balancers and monitoring.
    """
    storage_status = "connected" if check_db_connected(db) else "disconnected"

    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        storage=storage_status,
    )
