from loguru import logger
from sqlalchemy.orm import Session

from app.exceptions import InvalidArgument, NotFound
from app.dashboards import access
from app.dashboards.catalog import AccessLevel
from app.goals.models import FinancialGoal
from . import models, schemas


def find_budget(db: Session, dashboard_id: int, budget_id: int) -> models.Budget:
    budget = (
        db.query(models.Budget)
        .filter(models.Budget.id == budget_id, models.Budget.dashboard_id == dashboard_id)
        .first()
    )
    if not budget:
        raise NotFound("Budget", budget_id)
    return budget


def create_budget(db: Session, dashboard_id: int, user_id: int, budget: schemas.BudgetCreate):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.EDITOR)

    db_budget = models.Budget(dashboard_id=dashboard_id, **budget.model_dump())
    db_budget.title = db_budget.title.strip()
    db.add(db_budget)
    db.commit()
    db.refresh(db_budget)
    logger.info(f"Budget '{db_budget.title}' created on dashboard {dashboard_id} by user {user_id}")
    return db_budget


def list_budgets(db: Session, dashboard_id: int, user_id: int):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.VIEWER)
    return (
        db.query(models.Budget)
        .filter(models.Budget.dashboard_id == dashboard_id)
        .order_by(models.Budget.start_date, models.Budget.id)
        .all()
    )


def get_budget(db: Session, dashboard_id: int, budget_id: int, user_id: int):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.VIEWER)
    return find_budget(db, dashboard_id, budget_id)


def update_budget(db: Session, dashboard_id: int, budget_id: int, user_id: int, budget: schemas.BudgetUpdate):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.EDITOR)
    db_budget = find_budget(db, dashboard_id, budget_id)

    for field, value in budget.model_dump(exclude_unset=True).items():
        setattr(db_budget, field, value)

    if db_budget.start_date and db_budget.end_date and db_budget.end_date < db_budget.start_date:
        db.rollback()
        raise InvalidArgument("end_date must not be before start_date")

    db.commit()
    db.refresh(db_budget)
    return db_budget


def delete_budget(db: Session, dashboard_id: int, budget_id: int, user_id: int):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.EDITOR)
    db_budget = find_budget(db, dashboard_id, budget_id)

    try:
        db.query(FinancialGoal).filter(FinancialGoal.budget_id == budget_id).update(
            {FinancialGoal.budget_id: None}, synchronize_session="fetch"
        )
        db.delete(db_budget)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Budget {budget_id} deleted from dashboard {dashboard_id} by user {user_id}")
    return {"message": "Budget deleted successfully"}
