from pydantic import BaseModel, Field
from typing import Optional


# ================= CREATE =================
class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)


# ================= UPDATE =================
class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)


# ================= RESPONSE =================
class CategoryOut(BaseModel):
    id: int
    dashboard_id: int
    name: str
    description: Optional[str] = None

    class Config:
        from_attributes = True
