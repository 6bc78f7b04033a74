from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.users.auth import get_current_user
from app.users.schemas import UserDisplaySchema
from . import schemas, service

router = APIRouter()


# ================= CREATE =================
@router.post("/", response_model=schemas.BudgetOut, status_code=status.HTTP_201_CREATED)
def create_budget(
    dashboard_id: int,
    budget: schemas.BudgetCreate,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.create_budget(db, dashboard_id, current_user.id, budget)


# ================= LIST =================
@router.get("/", response_model=List[schemas.BudgetOut])
def list_budgets(
    dashboard_id: int,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.list_budgets(db, dashboard_id, current_user.id)


@router.get("/{budget_id}", response_model=schemas.BudgetOut)
def get_budget(
    dashboard_id: int,
    budget_id: int,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.get_budget(db, dashboard_id, budget_id, current_user.id)


# ================= UPDATE =================
@router.put("/{budget_id}", response_model=schemas.BudgetOut)
def update_budget(
    dashboard_id: int,
    budget_id: int,
    budget: schemas.BudgetUpdate,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.update_budget(db, dashboard_id, budget_id, current_user.id, budget)


# ================= DELETE =================
@router.delete("/{budget_id}")
def delete_budget(
    dashboard_id: int,
    budget_id: int,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.delete_budget(db, dashboard_id, budget_id, current_user.id)
