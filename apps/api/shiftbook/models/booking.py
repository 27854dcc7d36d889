import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Date, DateTime, ForeignKey, Index, CheckConstraint, Uuid, text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from shiftbook.core.database import Base

from shiftbook.models.shift_template import ShiftTemplate  # noqa: F401


class BookingStatus(str, enum.Enum):
    booked = "booked"
    confirmed = "confirmed"
    cancelled = "cancelled"
    completed = "completed"


# cancelled and completed are terminal
ALLOWED_TRANSITIONS = {
    BookingStatus.booked: {BookingStatus.cancelled, BookingStatus.completed},
    BookingStatus.confirmed: {BookingStatus.cancelled, BookingStatus.completed},
    BookingStatus.cancelled: set(),
    BookingStatus.completed: set(),
}


class Booking(Base):
    __tablename__ = "shift_bookings"

    booking_id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    user_id = Column(Uuid, nullable=False, index=True)
    shift_template_id = Column(
        Uuid,
        ForeignKey("shift_templates.shift_template_id", ondelete="CASCADE"),
        nullable=False,
    )

    shift_date = Column(Date, nullable=False)
    status = Column(String, nullable=False, default=BookingStatus.booked.value)

    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        nullable=False,
    )
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    shift_template = relationship("ShiftTemplate", lazy="joined")

    __table_args__ = (
        CheckConstraint(
            "status IN ('booked', 'confirmed', 'cancelled', 'completed')",
            name="ck_shift_bookings_status",
        ),
        # One worker per slot: only a single non-cancelled row per (template, date)
        Index(
            "uq_shift_bookings_active_slot",
            "shift_template_id",
            "shift_date",
            unique=True,
            postgresql_where=text("status <> 'cancelled'"),
            sqlite_where=text("status <> 'cancelled'"),
        ),
    )
