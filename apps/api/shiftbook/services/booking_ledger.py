from __future__ import annotations

import enum
import logging
from datetime import date, datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shiftbook.core.database import store_guard
from shiftbook.core.errors import ConflictError, NotFoundError, ValidationError
from shiftbook.models.booking import ALLOWED_TRANSITIONS, Booking, BookingStatus
from shiftbook.models.shift_template import ShiftTemplate
from shiftbook.services.authorization import Capability, Principal, require
from shiftbook.services.validators import validate_shift_date

logger = logging.getLogger(__name__)


class BookingWindow(str, enum.Enum):
    upcoming = "upcoming"
    past = "past"
    all = "all"


def create_booking(
    db: Session,
    principal: Principal,
    shift_template_id: UUID,
    shift_date: date,
    user_id: Optional[UUID] = None,
    today: Optional[date] = None,
) -> Booking:
    """
    Book one slot (template + date).

    There is no read-then-write conflict check: the insert itself is guarded by
    the partial unique index on non-cancelled (shift_template_id, shift_date),
    so concurrent requests for the same slot cannot both commit.
    """
    require(principal, Capability.write_own)
    owner_id = user_id or principal.user_id
    if owner_id != principal.user_id:
        require(principal, Capability.admin_bookings)

    validate_shift_date(shift_date, today or date.today())

    with store_guard(db, "create booking"):
        # shared lock: a concurrent template delete waits for us, or we wait for it
        template = db.execute(
            select(ShiftTemplate)
            .where(ShiftTemplate.shift_template_id == shift_template_id)
            .with_for_update(read=True)
        ).scalar_one_or_none()
        if template is None:
            raise NotFoundError("Shift template not found")
        if not template.is_active:
            raise ValidationError("Shift template is not active")

        booking = Booking(
            user_id=owner_id,
            shift_template_id=shift_template_id,
            shift_date=shift_date,
            status=BookingStatus.booked.value,
        )
        db.add(booking)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.info(
                "[booking] slot taken template=%s date=%s user_id=%s",
                shift_template_id,
                shift_date,
                owner_id,
            )
            raise ConflictError(f"This shift is already booked for {shift_date.isoformat()}")
        db.refresh(booking)

    logger.info(
        "[booking] created %s template=%s date=%s user_id=%s",
        booking.booking_id,
        shift_template_id,
        shift_date,
        owner_id,
    )
    return booking


def cancel_booking(db: Session, principal: Principal, booking_id: UUID) -> Booking:
    """
    Owner or admin only. The row is kept with status=cancelled, which frees the
    slot. Cancelling an already cancelled booking returns it unchanged.
    """
    with store_guard(db, "cancel booking"):
        booking = db.execute(
            select(Booking).where(Booking.booking_id == booking_id).with_for_update(of=Booking)
        ).scalar_one_or_none()
        if booking is None:
            raise NotFoundError("Booking not found")

        if booking.user_id == principal.user_id:
            require(principal, Capability.write_own)
        else:
            require(principal, Capability.admin_bookings)

        current = BookingStatus(booking.status)
        if current is BookingStatus.cancelled:
            db.rollback()
            return booking
        if BookingStatus.cancelled not in ALLOWED_TRANSITIONS[current]:
            raise ValidationError(f"A {current.value} booking cannot be cancelled")

        booking.status = BookingStatus.cancelled.value
        booking.cancelled_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(booking)

    logger.info("[booking] cancelled %s by user_id=%s", booking_id, principal.user_id)
    return booking


def list_bookings(
    db: Session,
    principal: Principal,
    user_id: Optional[UUID] = None,
    when: BookingWindow | str = BookingWindow.all,
    include_cancelled: bool = False,
    today: Optional[date] = None,
) -> List[Booking]:
    """
    Workers only ever see their own bookings. Admins see everyone's unless a
    user_id is given.

    A booking is past when its shift_date is before today; anything else,
    including today, is upcoming.
    """
    require(principal, Capability.read_own)
    if user_id is None and not principal.is_admin:
        user_id = principal.user_id
    if user_id is not None and user_id != principal.user_id:
        require(principal, Capability.admin_bookings)

    try:
        when = BookingWindow(when)
    except ValueError:
        raise ValidationError("when must be one of: upcoming, past, all")

    today = today or date.today()
    stmt = select(Booking).join(ShiftTemplate, ShiftTemplate.shift_template_id == Booking.shift_template_id)
    if user_id is not None:
        stmt = stmt.where(Booking.user_id == user_id)
    if not include_cancelled:
        stmt = stmt.where(Booking.status != BookingStatus.cancelled.value)

    if when is BookingWindow.past:
        stmt = stmt.where(Booking.shift_date < today).order_by(
            Booking.shift_date.desc(), ShiftTemplate.start_time.desc()
        )
    else:
        if when is BookingWindow.upcoming:
            stmt = stmt.where(Booking.shift_date >= today)
        stmt = stmt.order_by(Booking.shift_date, ShiftTemplate.start_time)

    with store_guard(db, "list bookings"):
        return list(db.execute(stmt).scalars().all())


def complete_past_bookings(db: Session, today: Optional[date] = None) -> int:
    """
    Move booked/confirmed bookings whose date has passed to completed.
    Run by a scheduler, not by users.
    """
    today = today or date.today()
    open_states = [
        s.value for s, targets in ALLOWED_TRANSITIONS.items() if BookingStatus.completed in targets
    ]

    with store_guard(db, "complete past bookings"):
        result = db.execute(
            update(Booking)
            .where(Booking.shift_date < today, Booking.status.in_(open_states))
            .values(status=BookingStatus.completed.value)
        )
        db.commit()

    logger.info("[booking] marked %s booking(s) completed before %s", result.rowcount, today)
    return result.rowcount
