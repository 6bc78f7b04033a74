from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.exceptions import AlreadyExists, InvalidArgument, NotFound
from app.users import crud as user_crud
from app.users.models import User
from app.dashboards import access, models, schemas
from app.dashboards.catalog import AccessLevel, Role, parse_role
from app.budgets.models import Budget
from app.categories.models import Category
from app.goals.models import FinancialGoal
from app.invite_links.models import InviteLink
from app.priorities.models import CategoryPriority
from app.records.models import FinancialRecord, record_tags
from app.tags.models import Tag


# ================= CREATE =================
def create_dashboard(db: Session, user_id: int, dashboard: schemas.DashboardCreate):
    """
    Create a dashboard; its creator becomes OWNER with role NONE in the
    same transaction.
    """
    user_crud.get_user(db, user_id)
    logger.info(f"Creating a new dashboard for user {user_id}")

    try:
        new_dashboard = models.Dashboard(
            title=dashboard.title.strip(),
            description=dashboard.description,
            owner_id=user_id,
        )
        db.add(new_dashboard)
        db.flush()

        access.assign_role_to_user_in_dashboard(db, user_id, new_dashboard.id, Role.NONE, commit=False)
        access.grant_access(db, user_id, new_dashboard.id, AccessLevel.OWNER, commit=False)

        db.commit()
        db.refresh(new_dashboard)
    except Exception:
        db.rollback()
        raise

    logger.info(f"Created dashboard {new_dashboard.id} for user {user_id}")
    return new_dashboard


# ================= LIST =================
def list_owned_dashboards(db: Session, user_id: int):
    return (
        db.query(models.Dashboard)
        .filter(models.Dashboard.owner_id == user_id)
        .order_by(models.Dashboard.created_at)
        .all()
    )


def list_accessible_dashboards(db: Session, user_id: int):
    """Dashboards shared with the user, excluding the ones they created."""
    accessible_ids = access.get_accessible_dashboard_ids(db, user_id)
    owned_ids = {d.id for d in list_owned_dashboards(db, user_id)}
    shared_ids = accessible_ids - owned_ids

    if not shared_ids:
        logger.info(f"No shared dashboards found for user {user_id}")
        return []

    return (
        db.query(models.Dashboard)
        .filter(models.Dashboard.id.in_(shared_ids))
        .order_by(models.Dashboard.created_at)
        .all()
    )


# ================= GET =================
def get_dashboard(db: Session, dashboard_id: int, user_id: int):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.VIEWER)
    return access.find_dashboard(db, dashboard_id)


# ================= UPDATE =================
def update_dashboard(db: Session, dashboard_id: int, user_id: int, dashboard: schemas.DashboardUpdate):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.EDITOR)
    db_dashboard = access.find_dashboard(db, dashboard_id)

    if dashboard.title is not None:
        db_dashboard.title = dashboard.title.strip()
    if dashboard.description is not None:
        db_dashboard.description = dashboard.description

    db.commit()
    db.refresh(db_dashboard)
    logger.info(f"Updated dashboard {dashboard_id} by user {user_id}")
    return db_dashboard


# ================= DELETE =================
def purge_dashboard(db: Session, dashboard_id: int):
    """Delete a dashboard and everything scoped to it. Does not commit."""
    record_ids = select(FinancialRecord.id).where(FinancialRecord.dashboard_id == dashboard_id)
    db.execute(record_tags.delete().where(record_tags.c.record_id.in_(record_ids)))

    for model in (
        CategoryPriority,
        FinancialRecord,
        FinancialGoal,
        Budget,
        Category,
        Tag,
        InviteLink,
        models.DashboardAccess,
        models.DashboardRole,
    ):
        deleted = (
            db.query(model)
            .filter(model.dashboard_id == dashboard_id)
            .delete(synchronize_session="fetch")
        )
        logger.debug(f"Deleted {deleted} {model.__tablename__} rows of dashboard {dashboard_id}")

    db.query(models.Dashboard).filter(models.Dashboard.id == dashboard_id).delete(synchronize_session="fetch")


def purge_memberships_of_user(db: Session, user_id: int):
    """Drop a user's grants, roles, priorities and records everywhere. Does not commit."""
    record_ids = select(FinancialRecord.id).where(FinancialRecord.user_id == user_id)
    db.execute(record_tags.delete().where(record_tags.c.record_id.in_(record_ids)))

    for model in (CategoryPriority, FinancialRecord, models.DashboardAccess, models.DashboardRole):
        db.query(model).filter(model.user_id == user_id).delete(synchronize_session="fetch")


def delete_dashboard(db: Session, dashboard_id: int, user_id: int):
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.OWNER)
    access.find_dashboard(db, dashboard_id)
    logger.info(f"Initiating deletion of dashboard {dashboard_id} by user {user_id}")

    try:
        purge_dashboard(db, dashboard_id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Dashboard {dashboard_id} deleted along with all its data")
    return {"message": "Dashboard deleted successfully"}


# ================= ROLES =================
def assign_role(db: Session, dashboard_id: int, user_id: int, role: str):
    """A member sets their own demographic role on the dashboard."""
    parsed_role = parse_role(role)
    access.check_dashboard_access(db, user_id, dashboard_id, AccessLevel.VIEWER)
    access.assign_role_to_user_in_dashboard(db, user_id, dashboard_id, parsed_role)
    return {"message": "Role assigned or updated successfully"}


# ================= MEMBERS =================
def add_member(db: Session, dashboard_id: int, username_or_email: str, requester_id: int):
    access.check_dashboard_access(db, requester_id, dashboard_id, AccessLevel.EDITOR)
    logger.info(f"User {requester_id} adding {username_or_email} to dashboard {dashboard_id}")

    access.find_dashboard(db, dashboard_id)
    target = user_crud.find_user_by_username_or_email(db, username_or_email)

    if access.get_access_level(db, target.id, dashboard_id) is not None:
        raise AlreadyExists("DashboardAccess", f"{target.username} on dashboard {dashboard_id}")

    try:
        access.grant_access(db, target.id, dashboard_id, AccessLevel.VIEWER, commit=False)
        access.assign_role_to_user_in_dashboard(db, target.id, dashboard_id, Role.NONE, commit=False)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"User {target.username} added to dashboard {dashboard_id} by user {requester_id}")
    return {"message": "Member successfully added"}


def list_members(db: Session, dashboard_id: int, requester_id: int):
    access.check_dashboard_access(db, requester_id, dashboard_id, AccessLevel.VIEWER)

    rows = (
        db.query(User, models.AccessLevelEntry.level)
        .join(models.DashboardAccess, models.DashboardAccess.user_id == User.id)
        .join(
            models.AccessLevelEntry,
            models.AccessLevelEntry.id == models.DashboardAccess.access_level_id,
        )
        .filter(models.DashboardAccess.dashboard_id == dashboard_id)
        .order_by(User.username)
        .all()
    )

    role_rows = (
        db.query(models.DashboardRole.user_id, models.RoleEntry.name)
        .join(models.RoleEntry, models.RoleEntry.id == models.DashboardRole.role_id)
        .filter(models.DashboardRole.dashboard_id == dashboard_id)
        .all()
    )
    roles = {user_id: role for user_id, role in role_rows}

    members = [
        schemas.DashboardMemberOut(
            user_id=user.id,
            username=user.username,
            email=user.email,
            access_level=level.value,
            role=roles.get(user.id, Role.NONE).value,
        )
        for user, level in rows
    ]
    logger.info(f"Found {len(members)} members for dashboard {dashboard_id}")
    return members


def change_access_level(
    db: Session,
    dashboard_id: int,
    username_or_email: str,
    requester_id: int,
    new_level: AccessLevel,
):
    access.check_dashboard_access(db, requester_id, dashboard_id, AccessLevel.OWNER)

    dashboard = access.find_dashboard(db, dashboard_id)
    target = user_crud.find_user_by_username_or_email(db, username_or_email)

    if target.id == dashboard.owner_id:
        logger.error(f"User {requester_id} tried to change the creator's access on dashboard {dashboard_id}")
        raise InvalidArgument("Cannot change access level of the dashboard owner.")

    if new_level == AccessLevel.OWNER:
        logger.error(f"User {requester_id} tried to grant OWNER to {target.username} on dashboard {dashboard_id}")
        raise InvalidArgument("Cannot change access level to OWNER.")

    if access.get_access_level(db, target.id, dashboard_id) is None:
        raise NotFound("DashboardAccess", f"{target.username} on dashboard {dashboard_id}")

    access.grant_access(db, target.id, dashboard_id, new_level)
    logger.info(
        f"Access level of {target.username} changed to {new_level.value} "
        f"on dashboard {dashboard_id} by user {requester_id}"
    )
    return {"message": "Access level changed successfully"}


def remove_member(db: Session, dashboard_id: int, username_or_email: str, requester_id: int):
    """
    Remove a member from a dashboard. Their grant, role and category
    priorities on that dashboard are deleted; the creator cannot be removed.
    """
    access.check_dashboard_access(db, requester_id, dashboard_id, AccessLevel.EDITOR)

    dashboard = access.find_dashboard(db, dashboard_id)
    target = user_crud.find_user_by_username_or_email(db, username_or_email)

    if target.id == dashboard.owner_id:
        logger.error(f"User {requester_id} tried to remove the owner of dashboard {dashboard_id}")
        raise InvalidArgument("The owner of the dashboard cannot be removed.")

    if access.get_access_level(db, target.id, dashboard_id) is None:
        raise NotFound("DashboardAccess", f"{target.username} on dashboard {dashboard_id}")

    try:
        for model in (models.DashboardAccess, models.DashboardRole, CategoryPriority):
            db.query(model).filter(
                model.user_id == target.id,
                model.dashboard_id == dashboard_id,
            ).delete(synchronize_session="fetch")
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"User {target.username} removed from dashboard {dashboard_id} by user {requester_id}")
    return {"message": "Member successfully removed"}
