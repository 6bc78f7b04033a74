from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.users.auth import get_current_user
from app.users.schemas import UserDisplaySchema
from app.invite_links import schemas, service

# mounted under /dashboards/{dashboard_id}/invite-links
dashboard_router = APIRouter()

# mounted under /invite-links
router = APIRouter()


@dashboard_router.post("", response_model=schemas.InviteLinkOut, status_code=status.HTTP_201_CREATED)
def create_invite_link(
    dashboard_id: int,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.create_invite_link(db, dashboard_id, current_user.id)


@dashboard_router.get("", response_model=schemas.InviteLinkOut)
def get_active_link(
    dashboard_id: int,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.get_active_link(db, dashboard_id, current_user.id)


@router.put("/activate/{token}", response_model=schemas.InviteLinkOut)
def activate_link(
    token: str,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.activate_link(db, token, current_user.id)


@router.put("/deactivate/{token}", response_model=schemas.InviteLinkOut)
def deactivate_link(
    token: str,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.deactivate_link(db, token, current_user.id)


@router.get("/use/{token}")
def use_invite_link(
    token: str,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    service.use_invite_link(db, token, current_user.id)
    return "Access granted"
