from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.users.auth import get_current_user
from app.users.schemas import UserDisplaySchema
from . import schemas, service

router = APIRouter()


# ================= CREATE =================
@router.post("/", response_model=schemas.GoalOut, status_code=status.HTTP_201_CREATED)
def create_goal(
    dashboard_id: int,
    goal: schemas.GoalCreate,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.create_goal(db, dashboard_id, current_user.id, goal)


# ================= LIST =================
@router.get("/", response_model=List[schemas.GoalOut])
def list_goals(
    dashboard_id: int,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.list_goals(db, dashboard_id, current_user.id)


@router.get("/{goal_id}", response_model=schemas.GoalOut)
def get_goal(
    dashboard_id: int,
    goal_id: int,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.get_goal(db, dashboard_id, goal_id, current_user.id)


# ================= UPDATE =================
@router.put("/{goal_id}", response_model=schemas.GoalOut)
def update_goal(
    dashboard_id: int,
    goal_id: int,
    goal: schemas.GoalUpdate,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.update_goal(db, dashboard_id, goal_id, current_user.id, goal)


# ================= DELETE =================
@router.delete("/{goal_id}")
def delete_goal(
    dashboard_id: int,
    goal_id: int,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.delete_goal(db, dashboard_id, goal_id, current_user.id)
