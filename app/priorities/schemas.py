from decimal import Decimal

from pydantic import BaseModel, Field


class CategoryPriorityOut(BaseModel):
    id: int
    user_id: int
    category_id: int
    dashboard_id: int
    priority: int = Field(..., ge=1)

    class Config:
        from_attributes = True


class CalculatedPriorityOut(BaseModel):
    category_id: int
    dashboard_id: int
    calculated_priority: Decimal
