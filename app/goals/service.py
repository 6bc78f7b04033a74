from loguru import logger
from sqlalchemy.orm import Session

from app.exceptions import NotFound
from app.dashboards import access
from app.dashboards.catalog import AccessLevel
from app.budgets.service import find_budget
from . import models, schemas


def find_goal(db: Session, dashboard_id: int, goal_id: int) -> models.FinancialGoal:
    goal = (
        db.query(models.FinancialGoal)
        .filter(
            models.FinancialGoal.id == goal_id,
            models.FinancialGoal.dashboard_id == dashboard_id,
        )
        .first()
    )
    if not goal:
        raise NotFound("FinancialGoal", goal_id)
    return goal


def create_goal(db: Session, dashboard_id: int, user_id: int, goal: schemas.GoalCreate):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.EDITOR)
    if goal.budget_id is not None:
        find_budget(db, dashboard_id, goal.budget_id)

    db_goal = models.FinancialGoal(dashboard_id=dashboard_id, **goal.model_dump())
    db.add(db_goal)
    db.commit()
    db.refresh(db_goal)
    logger.info(f"Goal '{db_goal.title}' created on dashboard {dashboard_id} by user {user_id}")
    return db_goal


def list_goals(db: Session, dashboard_id: int, user_id: int):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.VIEWER)
    return (
        db.query(models.FinancialGoal)
        .filter(models.FinancialGoal.dashboard_id == dashboard_id)
        .order_by(models.FinancialGoal.deadline, models.FinancialGoal.id)
        .all()
    )


def get_goal(db: Session, dashboard_id: int, goal_id: int, user_id: int):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.VIEWER)
    return find_goal(db, dashboard_id, goal_id)


def update_goal(db: Session, dashboard_id: int, goal_id: int, user_id: int, goal: schemas.GoalUpdate):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.EDITOR)
    db_goal = find_goal(db, dashboard_id, goal_id)

    data = goal.model_dump(exclude_unset=True)
    if data.get("budget_id") is not None:
        find_budget(db, dashboard_id, data["budget_id"])

    for field, value in data.items():
        setattr(db_goal, field, value)

    db.commit()
    db.refresh(db_goal)
    return db_goal


def delete_goal(db: Session, dashboard_id: int, goal_id: int, user_id: int):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.EDITOR)
    db_goal = find_goal(db, dashboard_id, goal_id)

    db.delete(db_goal)
    db.commit()
    logger.info(f"Goal {goal_id} deleted from dashboard {dashboard_id} by user {user_id}")
    return {"message": "Goal deleted successfully"}
