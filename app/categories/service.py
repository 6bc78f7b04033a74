from loguru import logger
from sqlalchemy.orm import Session

from app.exceptions import AlreadyExists, NotFound
from app.dashboards import access
from app.dashboards.catalog import AccessLevel
from app.priorities.models import CategoryPriority
from app.records.models import FinancialRecord
from . import models, schemas


def find_category(db: Session, dashboard_id: int, category_id: int) -> models.Category:
    category = (
        db.query(models.Category)
        .filter(
            models.Category.id == category_id,
            models.Category.dashboard_id == dashboard_id,
        )
        .first()
    )
    if not category:
        raise NotFound("Category", category_id)
    return category


def _name_taken(db: Session, dashboard_id: int, name: str, exclude_id: int = None) -> bool:
    query = db.query(models.Category).filter(
        models.Category.dashboard_id == dashboard_id,
        models.Category.name == name,
    )
    if exclude_id is not None:
        query = query.filter(models.Category.id != exclude_id)
    return query.first() is not None


# ================= CREATE =================
def create_category(db: Session, dashboard_id: int, user_id: int, category: schemas.CategoryCreate):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.EDITOR)

    name = category.name.strip()
    if _name_taken(db, dashboard_id, name):
        raise AlreadyExists("Category", name)

    db_category = models.Category(
        dashboard_id=dashboard_id,
        name=name,
        description=category.description,
    )
    db.add(db_category)
    db.commit()
    db.refresh(db_category)
    logger.info(f"Category '{name}' created on dashboard {dashboard_id} by user {user_id}")
    return db_category


# ================= LIST =================
def list_categories(db: Session, dashboard_id: int, user_id: int):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.VIEWER)
    return (
        db.query(models.Category)
        .filter(models.Category.dashboard_id == dashboard_id)
        .order_by(models.Category.name)
        .all()
    )


def get_category(db: Session, dashboard_id: int, category_id: int, user_id: int):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.VIEWER)
    return find_category(db, dashboard_id, category_id)


# ================= UPDATE =================
def update_category(
    db: Session,
    dashboard_id: int,
    category_id: int,
    user_id: int,
    category: schemas.CategoryUpdate
):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.EDITOR)
    db_category = find_category(db, dashboard_id, category_id)

    if category.name:
        name = category.name.strip()
        if _name_taken(db, dashboard_id, name, exclude_id=category_id):
            raise AlreadyExists("Category", name)
        db_category.name = name

    if category.description is not None:
        db_category.description = category.description

    db.commit()
    db.refresh(db_category)
    return db_category


# ================= DELETE =================
def delete_category(db: Session, dashboard_id: int, category_id: int, user_id: int):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.EDITOR)
    db_category = find_category(db, dashboard_id, category_id)

    try:
        db.query(FinancialRecord).filter(FinancialRecord.category_id == category_id).update(
            {FinancialRecord.category_id: None}, synchronize_session="fetch"
        )
        db.query(CategoryPriority).filter(CategoryPriority.category_id == category_id).delete(
            synchronize_session="fetch"
        )
        db.delete(db_category)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Category {category_id} deleted from dashboard {dashboard_id} by user {user_id}")
    return {"message": "Category deleted successfully"}
