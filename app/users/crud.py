from sqlalchemy import or_
from sqlalchemy.orm import Session
from loguru import logger

from app.exceptions import AlreadyExists, NotFound
from app.security.passwords import hash_password
from app.users.models import User
from app.users import schemas as user_schema


def create_user(db: Session, user: user_schema.UserSchema):
    username = user.username.strip().lower()
    email = user.email.strip().lower()

    if get_user_by_username(db, username):
        raise AlreadyExists("User", username)
    if db.query(User).filter(User.email == email).first():
        raise AlreadyExists("User", email)

    new_user = User(
        username=username,
        email=email,
        hashed_password=hash_password(user.password),
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    logger.info(f"Registered user {new_user.username} (id={new_user.id})")
    return new_user


def get_user(db: Session, user_id: int):
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound("User", user_id)
    return user


def get_user_by_username(db: Session, username: str):
    return db.query(User).filter(User.username == username).first()


def get_user_by_username_or_email(db: Session, username_or_email: str):
    value = username_or_email.strip().lower()
    return (
        db.query(User)
        .filter(or_(User.username == value, User.email == value))
        .first()
    )


def find_user_by_username_or_email(db: Session, username_or_email: str):
    user = get_user_by_username_or_email(db, username_or_email)
    if not user:
        raise NotFound("User", username_or_email)
    return user


def update_user(db: Session, user_id: int, updated_user: user_schema.UserUpdateSchema):
    user = get_user(db, user_id)

    if updated_user.email:
        email = updated_user.email.strip().lower()
        taken = db.query(User).filter(User.email == email, User.id != user_id).first()
        if taken:
            raise AlreadyExists("User", email)
        user.email = email

    if updated_user.password:
        user.hashed_password = hash_password(updated_user.password)

    db.commit()
    db.refresh(user)
    logger.info(f"User {user.username} updated")
    return user


def delete_user(db: Session, user_id: int):
    """
    Delete a user together with every dashboard they created and all of
    their memberships and priorities on other dashboards.
    """
    from app.dashboards import service as dashboard_service
    from app.dashboards.models import Dashboard

    get_user(db, user_id)
    try:
        owned_ids = [
            row[0] for row in db.query(Dashboard.id).filter(Dashboard.owner_id == user_id).all()
        ]
        for dashboard_id in owned_ids:
            dashboard_service.purge_dashboard(db, dashboard_id)
        dashboard_service.purge_memberships_of_user(db, user_id)
        db.query(User).filter(User.id == user_id).delete(synchronize_session="fetch")
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"User {user_id} deleted along with owned dashboards and memberships")
    return {"message": f"User {user_id} deleted successfully"}
