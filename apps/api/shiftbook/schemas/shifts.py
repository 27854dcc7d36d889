from pydantic import BaseModel, ConfigDict
from datetime import time, datetime
from typing import Literal, Optional
from uuid import UUID

ShiftTypeName = Literal["morning", "afternoon", "evening", "night", "custom"]

class ShiftTemplateCreate(BaseModel):
    name: str
    start_time: time
    end_time: time
    shift_type: ShiftTypeName = "custom"

class ShiftTemplateUpdate(BaseModel):
    # duration_hours is never accepted, it is derived from the times
    name: Optional[str] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    shift_type: Optional[ShiftTypeName] = None
    is_active: Optional[bool] = None

class ShiftTemplateActive(BaseModel):
    is_active: bool

class ShiftTemplateOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    shift_template_id: UUID
    name: str
    start_time: time
    end_time: time
    duration_hours: int
    shift_type: ShiftTypeName
    is_active: bool
    created_at: datetime
