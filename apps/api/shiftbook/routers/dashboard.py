from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shiftbook.core.database import get_db
from shiftbook.routers.auth import get_current_principal
from shiftbook.schemas.bookings import DashboardCountsOut
from shiftbook.services.authorization import Principal
from shiftbook.services.reporting import get_dashboard_counts

router = APIRouter()


@router.get("/counts", response_model=DashboardCountsOut)
def dashboard_counts(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Template and booking totals plus bookings in the last 7 days (admin)."""
    return get_dashboard_counts(db, principal).to_dict()
