import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Time, Boolean, DateTime, CheckConstraint, Uuid
from sqlalchemy.sql import func

from shiftbook.core.database import Base


class ShiftType(str, enum.Enum):
    morning = "morning"
    afternoon = "afternoon"
    evening = "evening"
    night = "night"
    custom = "custom"


class ShiftTemplate(Base):
    __tablename__ = "shift_templates"

    shift_template_id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    name = Column(String, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    duration_hours = Column(Integer, nullable=False)  # always derived from start/end
    shift_type = Column(String, nullable=False, default=ShiftType.custom.value)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint(
            "shift_type IN ('morning', 'afternoon', 'evening', 'night', 'custom')",
            name="ck_shift_templates_type",
        ),
    )
