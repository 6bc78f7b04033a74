from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from app.records.models import RecordType


# =========================
# Create
# =========================
class RecordCreate(BaseModel):
    amount: Decimal = Field(..., max_digits=12, decimal_places=2)
    type: RecordType = RecordType.INCOME
    category_id: Optional[int] = None
    date: Optional[datetime] = None
    description: Optional[str] = Field(None, max_length=500)
    tag_ids: List[int] = []

    @model_validator(mode="after")
    def check_income_amount(self):
        if self.type == RecordType.INCOME and self.amount <= 0:
            raise ValueError("income amount must be positive")
        return self


# =========================
# Update
# =========================
class RecordUpdate(BaseModel):
    amount: Optional[Decimal] = Field(None, max_digits=12, decimal_places=2)
    type: Optional[RecordType] = None
    category_id: Optional[int] = None
    date: Optional[datetime] = None
    description: Optional[str] = Field(None, max_length=500)
    tag_ids: Optional[List[int]] = None

    @model_validator(mode="after")
    def check_income_amount(self):
        if self.type == RecordType.INCOME and self.amount is not None and self.amount <= 0:
            raise ValueError("income amount must be positive")
        return self


# =========================
# Output
# =========================
class RecordOut(BaseModel):
    id: int
    dashboard_id: int
    user_id: int
    category_id: Optional[int] = None
    amount: Decimal
    type: RecordType
    date: datetime
    description: Optional[str] = None
    tag_ids: List[int] = []

    class Config:
        from_attributes = True
