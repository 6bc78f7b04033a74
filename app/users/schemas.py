from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


# -------- USERS --------
class UserSchema(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserUpdateSchema(BaseModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = None


class UserDisplaySchema(BaseModel):
    id: int
    username: str
    email: str
    registered_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TokenSchema(BaseModel):
    id: int
    username: str
    access_token: str
    token_type: str = "bearer"
