from decimal import Decimal
from typing import List

from loguru import logger
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.exceptions import InvalidArgument, NotFound
from app.dashboards import access
from app.dashboards.catalog import AccessLevel
from app.categories.service import find_category
from app.tags.models import Tag
from . import models, schemas


# =========================
# Helper: serialize record
# =========================
def serialize_record(record: models.FinancialRecord):
    return {
        "id": record.id,
        "dashboard_id": record.dashboard_id,
        "user_id": record.user_id,
        "category_id": record.category_id,
        "amount": record.amount,
        "type": record.type,
        "date": record.date,
        "description": record.description,
        "tag_ids": sorted(tag.id for tag in record.tags),
    }


# =========================
# Helper: resolve tags
# =========================
def resolve_tags(db: Session, dashboard_id: int, tag_ids: List[int]) -> List[Tag]:
    """Tags attached to a record must live on the record's dashboard."""
    wanted = set(tag_ids)
    if not wanted:
        return []

    tags = (
        db.query(Tag)
        .filter(Tag.id.in_(wanted), Tag.dashboard_id == dashboard_id)
        .all()
    )
    missing = wanted - {tag.id for tag in tags}
    if missing:
        raise NotFound("Tag", ", ".join(str(tag_id) for tag_id in sorted(missing)))
    return tags


def check_income_amount(record_type: models.RecordType, amount) -> None:
    """Income records must carry a positive amount."""
    if record_type == models.RecordType.INCOME and Decimal(amount) <= 0:
        raise InvalidArgument(f"Income amount must be positive, got {amount}")


def find_record(db: Session, dashboard_id: int, record_id: int) -> models.FinancialRecord:
    record = (
        db.query(models.FinancialRecord)
        .filter(
            models.FinancialRecord.id == record_id,
            models.FinancialRecord.dashboard_id == dashboard_id,
        )
        .first()
    )
    if not record:
        raise NotFound("FinancialRecord", record_id)
    return record


# =========================
# Create Record
# =========================
def create_record(db: Session, dashboard_id: int, user_id: int, record: schemas.RecordCreate):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.EDITOR)
    check_income_amount(record.type, record.amount)

    if record.category_id is not None:
        find_category(db, dashboard_id, record.category_id)
    tags = resolve_tags(db, dashboard_id, record.tag_ids)

    new_record = models.FinancialRecord(
        dashboard_id=dashboard_id,
        user_id=user_id,
        category_id=record.category_id,
        amount=record.amount,
        type=record.type,
        description=record.description,
        tags=tags,
    )
    if record.date is not None:
        new_record.date = record.date

    try:
        db.add(new_record)
        db.commit()
        db.refresh(new_record)
    except Exception:
        db.rollback()
        raise

    logger.info(
        f"{new_record.type.value} record of {new_record.amount} added to dashboard "
        f"{dashboard_id} by user {user_id}"
    )
    return serialize_record(new_record)


# =========================
# List / Get Records
# =========================
def list_records(db: Session, dashboard_id: int, user_id: int):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.VIEWER)
    records = (
        db.query(models.FinancialRecord)
        .filter(models.FinancialRecord.dashboard_id == dashboard_id)
        .order_by(models.FinancialRecord.date.desc())
        .all()
    )
    return [serialize_record(r) for r in records]


def get_record(db: Session, dashboard_id: int, record_id: int, user_id: int):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.VIEWER)
    return serialize_record(find_record(db, dashboard_id, record_id))


# =========================
# Update Record
# =========================
def update_record(
    db: Session,
    dashboard_id: int,
    record_id: int,
    user_id: int,
    record: schemas.RecordUpdate
):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.EDITOR)
    db_record = find_record(db, dashboard_id, record_id)

    data = record.model_dump(exclude_unset=True)
    for field in ("amount", "type"):
        if data.get(field) is None:
            data.pop(field, None)
    check_income_amount(
        data.get("type", db_record.type),
        data.get("amount", db_record.amount),
    )

    if data.get("category_id") is not None:
        find_category(db, dashboard_id, data["category_id"])
    if "tag_ids" in data:
        db_record.tags = resolve_tags(db, dashboard_id, data.pop("tag_ids") or [])

    for field, value in data.items():
        setattr(db_record, field, value)

    db.commit()
    db.refresh(db_record)
    return serialize_record(db_record)


# =========================
# Delete Record
# =========================
def delete_record(db: Session, dashboard_id: int, record_id: int, user_id: int):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.EDITOR)
    db_record = find_record(db, dashboard_id, record_id)

    db_record.tags = []
    db.delete(db_record)
    db.commit()
    logger.info(f"Record {record_id} deleted from dashboard {dashboard_id} by user {user_id}")
    return {"message": "Record deleted successfully"}


# =========================
# Income aggregation
# =========================
def sum_income_by_dashboard(db: Session, dashboard_id: int) -> Decimal:
    total = (
        db.query(func.sum(models.FinancialRecord.amount))
        .filter(
            models.FinancialRecord.dashboard_id == dashboard_id,
            models.FinancialRecord.type == models.RecordType.INCOME,
        )
        .scalar()
    )
    return Decimal(total) if total is not None else Decimal(0)


def sum_income_by_user_and_dashboard(db: Session, user_id: int, dashboard_id: int) -> Decimal:
    total = (
        db.query(func.sum(models.FinancialRecord.amount))
        .filter(
            models.FinancialRecord.user_id == user_id,
            models.FinancialRecord.dashboard_id == dashboard_id,
            models.FinancialRecord.type == models.RecordType.INCOME,
        )
        .scalar()
    )
    return Decimal(total) if total is not None else Decimal(0)
