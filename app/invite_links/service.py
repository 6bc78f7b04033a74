"""
Invite links let an editor share a dashboard without naming the invitee.

A dashboard has at most one active link. Anyone holding an active,
unexpired token joins the dashboard as a VIEWER with role NONE.
"""
import secrets
from datetime import datetime, timedelta

from loguru import logger
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import Expired, NotFound
from app.dashboards import access
from app.dashboards.catalog import AccessLevel, Role
from app.invite_links.models import InviteLink


def _new_token() -> str:
    return secrets.token_urlsafe(32)


def _new_expiry_date() -> datetime:
    return datetime.utcnow() + timedelta(days=settings.INVITE_LINK_LIFETIME_DAYS)


def _find_link(db: Session, token: str) -> InviteLink:
    link = db.query(InviteLink).filter(InviteLink.token == token).first()
    if not link:
        raise NotFound("InviteLink", token)
    return link


# ================= CREATE =================
def create_invite_link(db: Session, dashboard_id: int, requester_id: int) -> InviteLink:
    access.check_dashboard_access(db, requester_id, dashboard_id, AccessLevel.EDITOR)
    access.find_dashboard(db, dashboard_id)

    try:
        replaced = (
            db.query(InviteLink)
            .filter(InviteLink.dashboard_id == dashboard_id, InviteLink.active.is_(True))
            .delete(synchronize_session="fetch")
        )
        if replaced:
            logger.info(f"Removed {replaced} active invite link(s) of dashboard {dashboard_id}")

        link = InviteLink(
            token=_new_token(),
            dashboard_id=dashboard_id,
            expiry_date=_new_expiry_date(),
            active=True,
        )
        db.add(link)
        db.commit()
        db.refresh(link)
    except Exception:
        db.rollback()
        raise

    logger.info(f"Created invite link for dashboard {dashboard_id}, expires {link.expiry_date}")
    return link


def get_active_link(db: Session, dashboard_id: int, requester_id: int) -> InviteLink:
    access.check_dashboard_access(db, requester_id, dashboard_id, AccessLevel.EDITOR)
    link = (
        db.query(InviteLink)
        .filter(InviteLink.dashboard_id == dashboard_id, InviteLink.active.is_(True))
        .first()
    )
    if not link:
        raise NotFound("InviteLink", f"active link of dashboard {dashboard_id}")
    return link


# ================= REFRESH =================
def check_and_refresh_links(db: Session) -> int:
    """
    Rotate every active link whose expiry date has passed: it gets a fresh
    token and a new expiry date and stays active. Returns the number of
    links rotated.
    """
    now = datetime.utcnow()

    try:
        expired_links = (
            db.query(InviteLink)
            .filter(InviteLink.active.is_(True), InviteLink.expiry_date < now)
            .with_for_update(skip_locked=True)
            .all()
        )
        for link in expired_links:
            link.token = _new_token()
            link.expiry_date = _new_expiry_date()
            logger.info(f"Rotated invite link {link.id} of dashboard {link.dashboard_id}")
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.debug(f"Invite link sweep rotated {len(expired_links)} link(s)")
    return len(expired_links)


# ================= ACTIVATE / DEACTIVATE =================
def activate_link(db: Session, token: str, requester_id: int) -> InviteLink:
    link = _find_link(db, token)
    access.check_dashboard_access(db, requester_id, link.dashboard_id, AccessLevel.EDITOR)

    try:
        db.query(InviteLink).filter(
            InviteLink.dashboard_id == link.dashboard_id,
            InviteLink.id != link.id,
            InviteLink.active.is_(True),
        ).update({InviteLink.active: False}, synchronize_session="fetch")
        link.active = True
        db.commit()
        db.refresh(link)
    except Exception:
        db.rollback()
        raise

    logger.info(f"Invite link {link.id} activated by user {requester_id}")
    return link


def deactivate_link(db: Session, token: str, requester_id: int) -> InviteLink:
    link = _find_link(db, token)
    access.check_dashboard_access(db, requester_id, link.dashboard_id, AccessLevel.EDITOR)

    link.active = False
    db.commit()
    db.refresh(link)
    logger.info(f"Invite link {link.id} deactivated by user {requester_id}")
    return link


# ================= USE =================
def use_invite_link(db: Session, token: str, user_id: int) -> bool:
    link = (
        db.query(InviteLink)
        .filter(InviteLink.token == token, InviteLink.active.is_(True))
        .first()
    )
    if not link:
        raise NotFound("InviteLink", token)

    if link.expiry_date <= datetime.utcnow():
        logger.warning(f"User {user_id} tried an expired invite link of dashboard {link.dashboard_id}")
        raise Expired("InviteLink", token)

    if access.get_access_level(db, user_id, link.dashboard_id) is not None:
        logger.info(f"User {user_id} already belongs to dashboard {link.dashboard_id}")
        return True

    try:
        access.grant_access(db, user_id, link.dashboard_id, AccessLevel.VIEWER, commit=False)
        access.assign_role_to_user_in_dashboard(db, user_id, link.dashboard_id, Role.NONE, commit=False)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"User {user_id} joined dashboard {link.dashboard_id} through an invite link")
    return True
