from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


# ================= DASHBOARD =================
class DashboardCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=500)


class DashboardUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=500)


class DashboardOut(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    created_at: datetime
    owner_id: int

    class Config:
        from_attributes = True


# ================= MEMBERS =================
class RoleAssignSchema(BaseModel):
    # validated by catalog.parse_role
    role: str


class MemberRequestSchema(BaseModel):
    username_or_email: str = Field(..., alias="usernameOrEmail")

    class Config:
        populate_by_name = True


class DashboardMemberOut(BaseModel):
    user_id: int
    username: str
    email: str
    access_level: str
    role: str
