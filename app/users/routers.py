from fastapi import APIRouter, HTTPException, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
from loguru import logger

from app.database import get_db
from app.dashboards.access import check_authenticated_user
from app.users.auth import authenticate_user, create_access_token, get_current_user
from app.users import crud as user_crud, schemas

router = APIRouter()


@router.post("/register", response_model=schemas.UserDisplaySchema, status_code=status.HTTP_201_CREATED)
def sign_up(user: schemas.UserSchema, db: Session = Depends(get_db)):
    return user_crud.create_user(db, user)


@router.post("/token", response_model=schemas.TokenSchema)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    username_or_email = form_data.username.strip().lower()

    user = authenticate_user(db, username_or_email, form_data.password)
    if not user:
        logger.warning(f"Authentication denied for: {username_or_email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(data={"sub": user.username})
    logger.info(f"User authenticated: {user.username}")

    return {
        "id": user.id,
        "username": user.username,
        "access_token": access_token,
        "token_type": "bearer",
    }


@router.get("/me", response_model=schemas.UserDisplaySchema)
def read_current_user(current_user: schemas.UserDisplaySchema = Depends(get_current_user)):
    return current_user


@router.get("/{user_id}", response_model=schemas.UserDisplaySchema)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: schemas.UserDisplaySchema = Depends(get_current_user),
):
    check_authenticated_user(current_user.id, user_id)
    return user_crud.get_user(db, user_id)


@router.put("/{user_id}", response_model=schemas.UserDisplaySchema)
def update_user(
    user_id: int,
    updated_user: schemas.UserUpdateSchema,
    db: Session = Depends(get_db),
    current_user: schemas.UserDisplaySchema = Depends(get_current_user),
):
    check_authenticated_user(current_user.id, user_id)
    return user_crud.update_user(db, user_id, updated_user)


@router.delete("/{user_id}")
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: schemas.UserDisplaySchema = Depends(get_current_user),
):
    check_authenticated_user(current_user.id, user_id)
    return user_crud.delete_user(db, user_id)
