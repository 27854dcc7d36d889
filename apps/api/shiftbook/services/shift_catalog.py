from __future__ import annotations

import logging
from datetime import time
from typing import Any, Dict, List, Union
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from shiftbook.core.database import store_guard
from shiftbook.core.errors import NotFoundError, ValidationError
from shiftbook.models.booking import Booking
from shiftbook.models.shift_template import ShiftTemplate, ShiftType
from shiftbook.services.authorization import Capability, Principal, is_allowed, require
from shiftbook.services.validators import compute_duration_hours, validate_name, validate_time_range

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {"name", "start_time", "end_time", "shift_type", "is_active"}


# ---------- helpers ----------
def _shift_type(value: Union[ShiftType, str, None]) -> str:
    if value is None:
        return ShiftType.custom.value
    try:
        return ShiftType(value).value
    except ValueError:
        allowed = ", ".join(t.value for t in ShiftType)
        raise ValidationError(f"shift_type must be one of: {allowed}")


def _get_template(db: Session, shift_template_id: UUID, lock: bool = False) -> ShiftTemplate:
    stmt = select(ShiftTemplate).where(ShiftTemplate.shift_template_id == shift_template_id)
    if lock:
        stmt = stmt.with_for_update()
    template = db.execute(stmt).scalar_one_or_none()
    if template is None:
        raise NotFoundError("Shift template not found")
    return template


# ---------- operations ----------
def create_template(
    db: Session,
    principal: Principal,
    name: str,
    start_time: time,
    end_time: time,
    shift_type: Union[ShiftType, str, None] = ShiftType.custom,
) -> ShiftTemplate:
    require(principal, Capability.admin_shifts)

    name = validate_name(name)
    validate_time_range(start_time, end_time)

    template = ShiftTemplate(
        name=name,
        start_time=start_time,
        end_time=end_time,
        duration_hours=compute_duration_hours(start_time, end_time),
        shift_type=_shift_type(shift_type),
        is_active=True,
    )
    with store_guard(db, "create shift template"):
        db.add(template)
        db.commit()
        db.refresh(template)

    logger.info(
        "[catalog] created template %s (%s %s-%s, %sh) by user_id=%s",
        template.shift_template_id,
        template.name,
        template.start_time,
        template.end_time,
        template.duration_hours,
        principal.user_id,
    )
    return template


def update_template(
    db: Session,
    principal: Principal,
    shift_template_id: UUID,
    fields: Dict[str, Any],
) -> ShiftTemplate:
    require(principal, Capability.admin_shifts)

    unknown = set(fields) - UPDATABLE_FIELDS
    if unknown:
        raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

    with store_guard(db, "update shift template"):
        template = _get_template(db, shift_template_id, lock=True)

        if "name" in fields:
            template.name = validate_name(fields["name"])
        if "shift_type" in fields:
            template.shift_type = _shift_type(fields["shift_type"])
        if "is_active" in fields and fields["is_active"] is not None:
            template.is_active = bool(fields["is_active"])

        start = fields.get("start_time") or template.start_time
        end = fields.get("end_time") or template.end_time
        if start != template.start_time or end != template.end_time:
            validate_time_range(start, end)
            template.start_time = start
            template.end_time = end
            template.duration_hours = compute_duration_hours(start, end)

        db.commit()
        db.refresh(template)

    logger.info("[catalog] updated template %s fields=%s", shift_template_id, sorted(fields))
    return template


def set_active(db: Session, principal: Principal, shift_template_id: UUID, active: bool) -> ShiftTemplate:
    require(principal, Capability.admin_shifts)

    with store_guard(db, "toggle shift template"):
        template = _get_template(db, shift_template_id, lock=True)
        template.is_active = active
        db.commit()
        db.refresh(template)

    logger.info("[catalog] template %s %s", shift_template_id, "activated" if active else "deactivated")
    return template


def delete_template(db: Session, principal: Principal, shift_template_id: UUID) -> int:
    """
    Delete a template and every booking on it in one transaction.
    Returns the number of bookings removed.

    The template row is locked first, so a booking being created against it
    either commits before the cascade (and is removed by it) or waits and then
    finds the template gone.
    """
    require(principal, Capability.admin_shifts)

    with store_guard(db, "delete shift template"):
        _get_template(db, shift_template_id, lock=True)
        removed = db.execute(
            delete(Booking).where(Booking.shift_template_id == shift_template_id)
        ).rowcount
        db.execute(delete(ShiftTemplate).where(ShiftTemplate.shift_template_id == shift_template_id))
        db.commit()

    logger.info(
        "[catalog] deleted template %s and %s booking(s) by user_id=%s",
        shift_template_id,
        removed,
        principal.user_id,
    )
    return removed


def list_templates(db: Session, principal: Principal, active_only: bool = False) -> List[ShiftTemplate]:
    """
    active_only=True is the booking view, ordered by start time.
    Otherwise it is the management view, newest first. Only admins get it.
    """
    if not is_allowed(principal.role, Capability.admin_shifts):
        active_only = True

    stmt = select(ShiftTemplate)
    if active_only:
        stmt = stmt.where(ShiftTemplate.is_active.is_(True)).order_by(
            ShiftTemplate.start_time, ShiftTemplate.name
        )
    else:
        stmt = stmt.order_by(ShiftTemplate.created_at.desc())

    with store_guard(db, "list shift templates"):
        return list(db.execute(stmt).scalars().all())


def get_template(db: Session, principal: Principal, shift_template_id: UUID) -> ShiftTemplate:
    with store_guard(db, "load shift template"):
        template = _get_template(db, shift_template_id)
    if not template.is_active and not is_allowed(principal.role, Capability.admin_shifts):
        raise NotFoundError("Shift template not found")
    return template
