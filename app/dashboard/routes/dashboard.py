from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.auth.dependencies import CurrentSession
from app.core.config import settings
from app.core.constants import DASHBOARD_MAX_WINDOW_DAYS
from app.dashboard.schemas.dashboard import DashboardResponse
from app.dashboard.services.dashboard_service import DashboardService
from app.db.session import get_db

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    ctx: CurrentSession,
    days: int = Query(settings.DASHBOARD_DEFAULT_WINDOW_DAYS, ge=1, le=DASHBOARD_MAX_WINDOW_DAYS),
    db: Session = Depends(get_db),
) -> DashboardResponse:
    """
    Ticket statistics for the last ``days`` days.

    Agents and managers see every ticket; clients see figures over their own.
    """
    return DashboardService(db).get_stats(ctx, days)
