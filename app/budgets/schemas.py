from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class BudgetBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    total_amount: Decimal = Field(Decimal(0), ge=0, max_digits=12, decimal_places=2)
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @model_validator(mode="after")
    def check_period(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class BudgetCreate(BudgetBase):
    pass


class BudgetUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    total_amount: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class BudgetOut(BudgetBase):
    id: int
    dashboard_id: int

    class Config:
        from_attributes = True
