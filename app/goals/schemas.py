from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class GoalCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    target_amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    current_amount: Decimal = Field(Decimal(0), ge=0, max_digits=12, decimal_places=2)
    deadline: Optional[date] = None
    budget_id: Optional[int] = None


class GoalUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    target_amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    current_amount: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    deadline: Optional[date] = None
    budget_id: Optional[int] = None


class GoalOut(BaseModel):
    id: int
    dashboard_id: int
    budget_id: Optional[int] = None
    title: str
    target_amount: Decimal
    current_amount: Decimal
    deadline: Optional[date] = None

    class Config:
        from_attributes = True
