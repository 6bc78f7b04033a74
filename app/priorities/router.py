from typing import List

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.users.auth import get_current_user
from app.users.schemas import UserDisplaySchema
from app.priorities import schemas, service, weights

# mounted under /dashboards/{dashboard_id}/categories, ahead of the category routes
router = APIRouter()


@router.get("/priorities", response_model=List[schemas.CategoryPriorityOut])
def get_category_priorities(
    dashboard_id: int,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.get_category_priorities(db, dashboard_id, current_user.id)


@router.post(
    "/{category_id}/priorities",
    response_model=schemas.CategoryPriorityOut,
    status_code=status.HTTP_201_CREATED
)
def set_category_priority(
    dashboard_id: int,
    category_id: int,
    priority: int = Query(..., ge=1),
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.set_category_priority(db, category_id, dashboard_id, current_user.id, priority)


@router.put("/{category_id}/priorities", response_model=schemas.CategoryPriorityOut)
def update_category_priority(
    dashboard_id: int,
    category_id: int,
    priority: int = Query(..., ge=1),
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.update_category_priority(db, category_id, dashboard_id, current_user.id, priority)


@router.delete("/{category_id}/priorities", status_code=status.HTTP_204_NO_CONTENT)
def delete_category_priority(
    dashboard_id: int,
    category_id: int,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    service.delete_category_priority(db, category_id, dashboard_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{category_id}/priorities", response_model=List[schemas.CategoryPriorityOut])
def get_category_priorities_by_category(
    dashboard_id: int,
    category_id: int,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.get_category_priorities_by_category(db, category_id, dashboard_id, current_user.id)


@router.get("/{category_id}/priorities/user", response_model=schemas.CategoryPriorityOut)
def get_category_priority(
    dashboard_id: int,
    category_id: int,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.get_category_priority(db, category_id, dashboard_id, current_user.id)


@router.get("/{category_id}/priorities/calculate", response_model=schemas.CalculatedPriorityOut)
def calculate_category_priority(
    dashboard_id: int,
    category_id: int,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    result = weights.calculate_category_priority(db, category_id, dashboard_id, current_user.id)
    return {
        "category_id": category_id,
        "dashboard_id": dashboard_id,
        "calculated_priority": result,
    }
