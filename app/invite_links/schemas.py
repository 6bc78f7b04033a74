from datetime import datetime

from pydantic import BaseModel, Field


class InviteLinkOut(BaseModel):
    token: str
    expiry_date: datetime = Field(..., alias="expiryDate")
    active: bool
    dashboard_id: int = Field(..., alias="dashboardId")

    class Config:
        from_attributes = True
        populate_by_name = True
