"""
Access control for dashboards.

Every dashboard-scoped operation calls `check_dashboard_access` with the
acting user's id before touching any data. Grants and role assignments are
single-row upserts keyed by (user, dashboard).
"""
from typing import Optional, Set

from loguru import logger
from sqlalchemy.orm import Session

from app.database import upsert
from app.exceptions import AccessDenied, NotFound
from app.users import crud as user_crud
from app.dashboards.catalog import AccessLevel, Role
from app.dashboards.models import (
    AccessLevelEntry,
    Dashboard,
    DashboardAccess,
    DashboardRole,
    RoleEntry,
)


def find_dashboard(db: Session, dashboard_id: int) -> Dashboard:
    dashboard = db.query(Dashboard).filter(Dashboard.id == dashboard_id).first()
    if not dashboard:
        raise NotFound("Dashboard", dashboard_id)
    return dashboard


def _access_level_entry(db: Session, level: AccessLevel) -> AccessLevelEntry:
    entry = db.query(AccessLevelEntry).filter(AccessLevelEntry.level == level).first()
    if not entry:
        raise NotFound("AccessLevel", level.value)
    return entry


def _role_entry(db: Session, role: Role) -> RoleEntry:
    entry = db.query(RoleEntry).filter(RoleEntry.name == role).first()
    if not entry:
        raise NotFound("Role", role.value)
    return entry


# =========================
# Access levels
# =========================
def grant_access(db: Session, user_id: int, dashboard_id: int, level: AccessLevel, commit: bool = True):
    """
    Give `user_id` the `level` on `dashboard_id`, overwriting any level the
    user already had there.
    """
    logger.info(f"Granting access level {level.value} to user {user_id} on dashboard {dashboard_id}")

    try:
        user_crud.get_user(db, user_id)
        find_dashboard(db, dashboard_id)
        entry = _access_level_entry(db, level)

        upsert(
            db,
            DashboardAccess,
            {"user_id": user_id, "dashboard_id": dashboard_id, "access_level_id": entry.id},
            index_elements=["user_id", "dashboard_id"],
            update_fields=["access_level_id"],
        )
        if commit:
            db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"User {user_id} now holds {level.value} on dashboard {dashboard_id}")


def get_access_level(db: Session, user_id: int, dashboard_id: int) -> Optional[AccessLevel]:
    row = (
        db.query(AccessLevelEntry.level)
        .join(DashboardAccess, DashboardAccess.access_level_id == AccessLevelEntry.id)
        .filter(
            DashboardAccess.user_id == user_id,
            DashboardAccess.dashboard_id == dashboard_id,
        )
        .first()
    )
    return row[0] if row else None


def check_dashboard_access(
    db: Session,
    user_id: int,
    dashboard_id: int,
    required_level: AccessLevel,
) -> AccessLevel:
    level = get_access_level(db, user_id, dashboard_id)

    if level is None:
        logger.warning(f"User {user_id} has no access to dashboard {dashboard_id}")
        raise AccessDenied(user_id, dashboard_id, required_level.value)

    if not level.covers(required_level):
        logger.warning(
            f"User {user_id} with {level.value} tried an operation requiring "
            f"{required_level.value} on dashboard {dashboard_id}"
        )
        raise AccessDenied(user_id, dashboard_id, required_level.value)

    logger.debug(f"Access granted for user {user_id} with {level.value} on dashboard {dashboard_id}")
    return level


def get_accessible_dashboard_ids(db: Session, user_id: int) -> Set[int]:
    rows = (
        db.query(DashboardAccess.dashboard_id)
        .filter(DashboardAccess.user_id == user_id)
        .all()
    )
    dashboard_ids = {row[0] for row in rows}
    logger.info(f"Found {len(dashboard_ids)} accessible dashboards for user {user_id}")
    return dashboard_ids


def check_authenticated_user(acting_user_id: int, user_id: int):
    """Users may only act on their own personal resources."""
    if acting_user_id != user_id:
        logger.error(f"User {acting_user_id} tried to act on resources of user {user_id}")
        raise AccessDenied(
            acting_user_id,
            None,
            detail=f"User {acting_user_id} is not authorized to perform this operation for user {user_id}",
        )


# =========================
# Roles
# =========================
def assign_role_to_user_in_dashboard(
    db: Session,
    user_id: int,
    dashboard_id: int,
    role: Role,
    commit: bool = True,
):
    logger.info(f"Assigning role {role.value} to user {user_id} on dashboard {dashboard_id}")

    try:
        user_crud.get_user(db, user_id)
        find_dashboard(db, dashboard_id)
        entry = _role_entry(db, role)

        upsert(
            db,
            DashboardRole,
            {"user_id": user_id, "dashboard_id": dashboard_id, "role_id": entry.id},
            index_elements=["user_id", "dashboard_id"],
            update_fields=["role_id"],
        )
        if commit:
            db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"User {user_id} now has role {role.value} on dashboard {dashboard_id}")


def find_role(db: Session, user_id: int, dashboard_id: int) -> Optional[Role]:
    row = (
        db.query(RoleEntry.name)
        .join(DashboardRole, DashboardRole.role_id == RoleEntry.id)
        .filter(
            DashboardRole.user_id == user_id,
            DashboardRole.dashboard_id == dashboard_id,
        )
        .first()
    )
    return row[0] if row else None


def get_role(db: Session, user_id: int, dashboard_id: int) -> Role:
    role = find_role(db, user_id, dashboard_id)
    if role is None:
        raise NotFound("DashboardRole", f"user {user_id} on dashboard {dashboard_id}")
    return role
