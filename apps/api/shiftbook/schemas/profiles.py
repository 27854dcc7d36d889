from pydantic import BaseModel, ConfigDict
from typing import Literal, Optional
from uuid import UUID

RoleName = Literal["worker", "admin", "super_admin"]

class ProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    profile_id: UUID
    email: str
    full_name: Optional[str] = None
    role: RoleName

class RoleAssign(BaseModel):
    role: RoleName
