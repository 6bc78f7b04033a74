from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.users.auth import get_current_user
from app.users.schemas import UserDisplaySchema
from . import schemas, service

router = APIRouter()


# ================= CREATE =================
@router.post("/", response_model=schemas.TagOut, status_code=status.HTTP_201_CREATED)
def create_tag(
    dashboard_id: int,
    tag: schemas.TagCreate,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.create_tag(db, dashboard_id, current_user.id, tag)


# ================= LIST =================
@router.get("/", response_model=List[schemas.TagOut])
def list_tags(
    dashboard_id: int,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.list_tags(db, dashboard_id, current_user.id)


@router.get("/{tag_id}", response_model=schemas.TagOut)
def get_tag(
    dashboard_id: int,
    tag_id: int,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.get_tag(db, dashboard_id, tag_id, current_user.id)


# ================= UPDATE =================
@router.put("/{tag_id}", response_model=schemas.TagOut)
def update_tag(
    dashboard_id: int,
    tag_id: int,
    tag: schemas.TagUpdate,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.update_tag(db, dashboard_id, tag_id, current_user.id, tag)


# ================= DELETE =================
@router.delete("/{tag_id}")
def delete_tag(
    dashboard_id: int,
    tag_id: int,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.delete_tag(db, dashboard_id, tag_id, current_user.id)
