from uuid import UUID
from typing import List, Optional, Literal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from shiftbook.core.database import get_db
from shiftbook.models.booking import Booking
from shiftbook.routers.auth import get_current_principal
from shiftbook.schemas.bookings import BookingCreate, BookingOut, BookingShiftOut
from shiftbook.services import booking_ledger
from shiftbook.services.authorization import Principal
from shiftbook.services.profiles import profiles_by_id

router = APIRouter()


def _to_out(booking: Booking, profiles: dict) -> BookingOut:
    profile = profiles.get(booking.user_id)
    return BookingOut(
        booking_id=booking.booking_id,
        user_id=booking.user_id,
        shift_template_id=booking.shift_template_id,
        shift_date=booking.shift_date,
        status=booking.status,
        created_at=booking.created_at,
        cancelled_at=booking.cancelled_at,
        shift=BookingShiftOut.model_validate(booking.shift_template) if booking.shift_template else None,
        user_name=profile.full_name if profile else None,
        user_email=profile.email if profile else None,
    )


@router.post("", response_model=BookingOut, status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: BookingCreate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Book a shift for a date. Fails with 409 if the slot is already taken."""
    booking = booking_ledger.create_booking(
        db,
        principal,
        shift_template_id=payload.shift_template_id,
        shift_date=payload.shift_date,
        user_id=payload.user_id,
    )
    return _to_out(booking, profiles_by_id(db, [booking.user_id]))


@router.delete("/{booking_id}", response_model=BookingOut)
def cancel_booking(
    booking_id: UUID,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Cancel a booking (owner or admin). The slot becomes free again."""
    booking = booking_ledger.cancel_booking(db, principal, booking_id)
    return _to_out(booking, profiles_by_id(db, [booking.user_id]))


@router.get("", response_model=List[BookingOut])
def list_bookings(
    when: Literal["upcoming", "past", "all"] = Query("all"),
    user_id: Optional[UUID] = Query(None, description="Admins only, defaults to everyone"),
    include_cancelled: bool = Query(False),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """
    Workers get their own bookings. Admins get everyone's, with the booker's
    name and email attached.
    """
    bookings = booking_ledger.list_bookings(
        db,
        principal,
        user_id=user_id,
        when=when,
        include_cancelled=include_cancelled,
    )
    profiles = profiles_by_id(db, [b.user_id for b in bookings])
    return [_to_out(b, profiles) for b in bookings]
