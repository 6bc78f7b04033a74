from loguru import logger
from sqlalchemy.orm import Session

from app.exceptions import AlreadyExists, NotFound
from app.dashboards import access
from app.dashboards.catalog import AccessLevel
from app.records.models import record_tags
from . import models, schemas


def find_tag(db: Session, dashboard_id: int, tag_id: int) -> models.Tag:
    tag = (
        db.query(models.Tag)
        .filter(models.Tag.id == tag_id, models.Tag.dashboard_id == dashboard_id)
        .first()
    )
    if not tag:
        raise NotFound("Tag", tag_id)
    return tag


def _ensure_unique_name(db: Session, dashboard_id: int, name: str, exclude_id: int = None):
    query = db.query(models.Tag).filter(
        models.Tag.dashboard_id == dashboard_id,
        models.Tag.name == name,
    )
    if exclude_id is not None:
        query = query.filter(models.Tag.id != exclude_id)
    if query.first():
        raise AlreadyExists("Tag", name)


def create_tag(db: Session, dashboard_id: int, user_id: int, tag: schemas.TagCreate):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.EDITOR)

    name = tag.name.strip()
    _ensure_unique_name(db, dashboard_id, name)

    db_tag = models.Tag(dashboard_id=dashboard_id, name=name, description=tag.description)
    db.add(db_tag)
    db.commit()
    db.refresh(db_tag)
    logger.info(f"Tag '{name}' created on dashboard {dashboard_id} by user {user_id}")
    return db_tag


def list_tags(db: Session, dashboard_id: int, user_id: int):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.VIEWER)
    return (
        db.query(models.Tag)
        .filter(models.Tag.dashboard_id == dashboard_id)
        .order_by(models.Tag.name)
        .all()
    )


def get_tag(db: Session, dashboard_id: int, tag_id: int, user_id: int):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.VIEWER)
    return find_tag(db, dashboard_id, tag_id)


def update_tag(db: Session, dashboard_id: int, tag_id: int, user_id: int, tag: schemas.TagUpdate):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.EDITOR)
    db_tag = find_tag(db, dashboard_id, tag_id)

    if tag.name:
        name = tag.name.strip()
        _ensure_unique_name(db, dashboard_id, name, exclude_id=tag_id)
        db_tag.name = name
    if tag.description is not None:
        db_tag.description = tag.description

    db.commit()
    db.refresh(db_tag)
    return db_tag


def delete_tag(db: Session, dashboard_id: int, tag_id: int, user_id: int):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.EDITOR)
    db_tag = find_tag(db, dashboard_id, tag_id)

    try:
        db.execute(record_tags.delete().where(record_tags.c.tag_id == tag_id))
        db.delete(db_tag)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Tag {tag_id} deleted from dashboard {dashboard_id} by user {user_id}")
    return {"message": "Tag deleted successfully"}
