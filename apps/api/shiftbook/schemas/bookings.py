from pydantic import BaseModel, ConfigDict
from datetime import date, datetime, time
from typing import Literal, Optional
from uuid import UUID

BookingStatusName = Literal["booked", "confirmed", "cancelled", "completed"]

class BookingCreate(BaseModel):
    shift_template_id: UUID
    shift_date: date
    user_id: Optional[UUID] = None  # admins may book on someone's behalf

class BookingShiftOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    shift_template_id: UUID
    name: str
    start_time: time
    end_time: time
    duration_hours: int
    shift_type: str

class BookingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    booking_id: UUID
    user_id: UUID
    shift_template_id: UUID
    shift_date: date
    status: BookingStatusName
    created_at: datetime
    cancelled_at: Optional[datetime] = None
    shift: Optional[BookingShiftOut] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None

class DashboardCountsOut(BaseModel):
    total_templates: int
    active_templates: int
    total_bookings: int
    recent_bookings: int
    window_start: date
    window_end: date
