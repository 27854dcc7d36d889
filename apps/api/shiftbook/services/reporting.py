from dataclasses import dataclass, asdict
from datetime import date, timedelta
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from shiftbook.core.config import settings
from shiftbook.core.database import store_guard
from shiftbook.models.booking import Booking, BookingStatus
from shiftbook.models.shift_template import ShiftTemplate
from shiftbook.services.authorization import Capability, Principal, require


@dataclass(frozen=True)
class DashboardCounts:
    total_templates: int
    active_templates: int
    total_bookings: int
    recent_bookings: int
    window_start: date
    window_end: date

    def to_dict(self) -> dict:
        return asdict(self)


def _count(model, *criteria):
    stmt = select(func.count()).select_from(model)
    if criteria:
        stmt = stmt.where(*criteria)
    return stmt.scalar_subquery()


def get_dashboard_counts(
    db: Session,
    principal: Principal,
    today: Optional[date] = None,
    window_days: Optional[int] = None,
) -> DashboardCounts:
    """
    Admin dashboard numbers. Cancelled bookings don't count. "Recent" means a
    shift_date in the `window_days` calendar days ending today, both ends
    included (7 days: today - 6 .. today).

    Everything is read in a single SELECT so the four numbers come from one
    snapshot.
    """
    require(principal, Capability.admin_bookings)

    today = today or date.today()
    days = settings.recent_window_days if window_days is None else window_days
    window_start = today - timedelta(days=days - 1)
    live = Booking.status != BookingStatus.cancelled.value

    stmt = select(
        _count(ShiftTemplate).label("total_templates"),
        _count(ShiftTemplate, ShiftTemplate.is_active.is_(True)).label("active_templates"),
        _count(Booking, live).label("total_bookings"),
        _count(Booking, live, Booking.shift_date.between(window_start, today)).label("recent_bookings"),
    )

    with store_guard(db, "load dashboard counts"):
        row = db.execute(stmt).one()

    return DashboardCounts(
        total_templates=row.total_templates,
        active_templates=row.active_templates,
        total_bookings=row.total_bookings,
        recent_bookings=row.recent_bookings,
        window_start=window_start,
        window_end=today,
    )
