from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.users.auth import get_current_user
from app.users.schemas import UserDisplaySchema
from . import schemas, service

router = APIRouter()


@router.post("/", response_model=schemas.RecordOut, status_code=status.HTTP_201_CREATED)
def create_record(
    dashboard_id: int,
    record: schemas.RecordCreate,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.create_record(db, dashboard_id, current_user.id, record)


@router.get("/", response_model=List[schemas.RecordOut])
def list_records(
    dashboard_id: int,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.list_records(db, dashboard_id, current_user.id)


@router.get("/{record_id}", response_model=schemas.RecordOut)
def get_record(
    dashboard_id: int,
    record_id: int,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.get_record(db, dashboard_id, record_id, current_user.id)


@router.put("/{record_id}", response_model=schemas.RecordOut)
def update_record(
    dashboard_id: int,
    record_id: int,
    record: schemas.RecordUpdate,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.update_record(db, dashboard_id, record_id, current_user.id, record)


@router.delete("/{record_id}")
def delete_record(
    dashboard_id: int,
    record_id: int,
    db: Session = Depends(get_db),
    current_user: UserDisplaySchema = Depends(get_current_user)
):
    return service.delete_record(db, dashboard_id, record_id, current_user.id)
