from loguru import logger
from sqlalchemy.orm import Session

from app.exceptions import AlreadyExists, NotFound
from app.dashboards import access
from app.dashboards.catalog import AccessLevel
from app.categories.service import find_category
from app.priorities.models import CategoryPriority


def _find_priority(db: Session, user_id: int, category_id: int, dashboard_id: int) -> CategoryPriority:
    entry = (
        db.query(CategoryPriority)
        .filter(
            CategoryPriority.user_id == user_id,
            CategoryPriority.category_id == category_id,
            CategoryPriority.dashboard_id == dashboard_id,
        )
        .first()
    )
    if not entry:
        raise NotFound(
            "CategoryPriority",
            f"user {user_id}, category {category_id}, dashboard {dashboard_id}",
        )
    return entry


# ================= SET =================
def set_category_priority(db: Session, category_id: int, dashboard_id: int, user_id: int, priority: int):
    """Record the acting user's own priority for a category."""
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.VIEWER)
    find_category(db, dashboard_id, category_id)

    exists = (
        db.query(CategoryPriority.id)
        .filter(
            CategoryPriority.user_id == user_id,
            CategoryPriority.category_id == category_id,
            CategoryPriority.dashboard_id == dashboard_id,
        )
        .first()
    )
    if exists:
        raise AlreadyExists(
            "CategoryPriority",
            f"user {user_id}, category {category_id}, dashboard {dashboard_id}",
        )

    entry = CategoryPriority(
        user_id=user_id,
        category_id=category_id,
        dashboard_id=dashboard_id,
        priority=priority,
    )
    try:
        db.add(entry)
        db.commit()
        db.refresh(entry)
    except Exception:
        db.rollback()
        raise

    logger.info(f"User {user_id} set priority {priority} on category {category_id} of dashboard {dashboard_id}")
    return entry


# ================= UPDATE =================
def update_category_priority(db: Session, category_id: int, dashboard_id: int, user_id: int, priority: int):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.VIEWER)
    entry = _find_priority(db, user_id, category_id, dashboard_id)

    entry.priority = priority
    db.commit()
    db.refresh(entry)
    logger.info(f"User {user_id} changed priority on category {category_id} to {priority}")
    return entry


# ================= DELETE =================
def delete_category_priority(db: Session, category_id: int, dashboard_id: int, user_id: int):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.VIEWER)
    entry = _find_priority(db, user_id, category_id, dashboard_id)

    db.delete(entry)
    db.commit()
    logger.info(f"User {user_id} removed their priority on category {category_id}")


# ================= GET =================
def get_category_priority(db: Session, category_id: int, dashboard_id: int, user_id: int):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.VIEWER)
    return _find_priority(db, user_id, category_id, dashboard_id)


def get_category_priorities_by_category(db: Session, category_id: int, dashboard_id: int, user_id: int):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.VIEWER)
    return (
        db.query(CategoryPriority)
        .filter(
            CategoryPriority.category_id == category_id,
            CategoryPriority.dashboard_id == dashboard_id,
        )
        .order_by(CategoryPriority.id)
        .all()
    )


def get_category_priorities(db: Session, dashboard_id: int, user_id: int):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.VIEWER)
    return (
        db.query(CategoryPriority)
        .filter(CategoryPriority.dashboard_id == dashboard_id)
        .order_by(CategoryPriority.category_id, CategoryPriority.id)
        .all()
    )
