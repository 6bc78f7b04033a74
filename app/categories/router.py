from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.database import get_db
from app.users.auth import get_current_user
from app.users.schemas import UserDisplaySchema
from . import schemas, service


router = APIRouter()

# ================= CREATE =================
@router.post(
    "/",
    response_model=schemas.CategoryOut,
    status_code=status.HTTP_201_CREATED
)
def create_category(
    dashboard_id: int,
    category: schemas.CategoryCreate,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.create_category(db, dashboard_id, current_user.id, category)


# ================= LIST =================
@router.get(
    "/",
    response_model=List[schemas.CategoryOut]
)
def list_categories(
    dashboard_id: int,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.list_categories(db, dashboard_id, current_user.id)


@router.get(
    "/{category_id}",
    response_model=schemas.CategoryOut
)
def get_category(
    dashboard_id: int,
    category_id: int,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.get_category(db, dashboard_id, category_id, current_user.id)


# ================= UPDATE =================
@router.put(
    "/{category_id}",
    response_model=schemas.CategoryOut
)
def update_category(
    dashboard_id: int,
    category_id: int,
    category: schemas.CategoryUpdate,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.update_category(db, dashboard_id, category_id, current_user.id, category)


# ================= DELETE =================
@router.delete(
    "/{category_id}"
)
def delete_category(
    dashboard_id: int,
    category_id: int,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.delete_category(db, dashboard_id, category_id, current_user.id)
