from typing import List

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.users.auth import get_current_user
from app.users.schemas import UserDisplaySchema
from app.dashboards import schemas, service
from app.dashboards.catalog import parse_access_level

router = APIRouter()


# ----------------------------------------
# CREATE DASHBOARD
# ----------------------------------------
@router.post("/", response_model=schemas.DashboardOut, status_code=status.HTTP_201_CREATED)
def create_dashboard(
    dashboard: schemas.DashboardCreate,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.create_dashboard(db, current_user.id, dashboard)


# ----------------------------------------
# LIST DASHBOARDS
# ----------------------------------------
@router.get("/", response_model=List[schemas.DashboardOut])
def list_owned_dashboards(
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.list_owned_dashboards(db, current_user.id)


@router.get("/accessible", response_model=List[schemas.DashboardOut])
def list_accessible_dashboards(
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.list_accessible_dashboards(db, current_user.id)


# ----------------------------------------
# SINGLE DASHBOARD
# ----------------------------------------
@router.get("/{dashboard_id}", response_model=schemas.DashboardOut)
def get_dashboard(
    dashboard_id: int,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.get_dashboard(db, dashboard_id, current_user.id)


@router.put("/{dashboard_id}", response_model=schemas.DashboardOut)
def update_dashboard(
    dashboard_id: int,
    dashboard: schemas.DashboardUpdate,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.update_dashboard(db, dashboard_id, current_user.id, dashboard)


@router.delete("/{dashboard_id}")
def delete_dashboard(
    dashboard_id: int,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.delete_dashboard(db, dashboard_id, current_user.id)


# ----------------------------------------
# ROLES
# ----------------------------------------
@router.post("/{dashboard_id}/assign-role")
def assign_role(
    dashboard_id: int,
    payload: schemas.RoleAssignSchema,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.assign_role(db, dashboard_id, current_user.id, payload.role)


# ----------------------------------------
# MEMBERS
# ----------------------------------------
@router.post("/{dashboard_id}/members/add")
def add_member(
    dashboard_id: int,
    payload: schemas.MemberRequestSchema,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.add_member(db, dashboard_id, payload.username_or_email, current_user.id)


@router.get("/{dashboard_id}/members", response_model=List[schemas.DashboardMemberOut])
def list_members(
    dashboard_id: int,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.list_members(db, dashboard_id, current_user.id)


@router.put("/{dashboard_id}/members/{username_or_email}/changeAccess")
def change_access_level(
    dashboard_id: int,
    username_or_email: str,
    access_level: str = Body(..., embed=False),
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    new_level = parse_access_level(access_level)
    return service.change_access_level(db, dashboard_id, username_or_email, current_user.id, new_level)


@router.delete("/{dashboard_id}/members/remove")
def remove_member(
    dashboard_id: int,
    payload: schemas.MemberRequestSchema,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.remove_member(db, dashboard_id, payload.username_or_email, current_user.id)
