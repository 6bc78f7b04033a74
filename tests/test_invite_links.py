from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from app.exceptions import AccessDenied, Expired, NotFound
from app.dashboards import access, service as dashboard_service
from app.dashboards.catalog import AccessLevel, Role
from app.invite_links import service
from app.invite_links.models import InviteLink


def _expire(db, link):
    link.expiry_date = datetime.utcnow() - timedelta(minutes=1)
    db.commit()


def test_create_link_expires_in_thirty_days(db, make_user, make_dashboard):
    owner = make_user("alice")
    dashboard = make_dashboard(owner)

    link = service.create_invite_link(db, dashboard.id, owner.id)

    assert link.active
    assert link.dashboard_id == dashboard.id
    remaining = link.expiry_date - datetime.utcnow()
    assert timedelta(days=29, hours=23) < remaining <= timedelta(days=30)


def test_new_link_replaces_the_active_one(db, make_user, make_dashboard):
    owner = make_user("alice")
    dashboard = make_dashboard(owner)

    first_token = service.create_invite_link(db, dashboard.id, owner.id).token
    second = service.create_invite_link(db, dashboard.id, owner.id)

    links = db.query(InviteLink).filter(InviteLink.dashboard_id == dashboard.id).all()
    assert [link.token for link in links] == [second.token]
    assert second.token != first_token
    assert service.get_active_link(db, dashboard.id, owner.id).token == second.token


def test_viewers_cannot_manage_links(db, make_user, make_dashboard):
    owner = make_user("alice")
    viewer = make_user("bob")
    dashboard = make_dashboard(owner)
    dashboard_service.add_member(db, dashboard.id, "bob", owner.id)
    link = service.create_invite_link(db, dashboard.id, owner.id)

    with pytest.raises(AccessDenied):
        service.create_invite_link(db, dashboard.id, viewer.id)
    with pytest.raises(AccessDenied):
        service.deactivate_link(db, link.token, viewer.id)


def test_use_link_grants_viewer_with_role_none(db, make_user, make_dashboard):
    owner = make_user("alice")
    guest = make_user("bob")
    dashboard = make_dashboard(owner)
    link = service.create_invite_link(db, dashboard.id, owner.id)

    assert service.use_invite_link(db, link.token, guest.id) is True
    assert access.get_access_level(db, guest.id, dashboard.id) == AccessLevel.VIEWER
    assert access.get_role(db, guest.id, dashboard.id) == Role.NONE


def test_use_link_keeps_existing_grant(db, make_user, make_dashboard):
    owner = make_user("alice")
    dashboard = make_dashboard(owner)
    link = service.create_invite_link(db, dashboard.id, owner.id)

    assert service.use_invite_link(db, link.token, owner.id) is True
    assert access.get_access_level(db, owner.id, dashboard.id) == AccessLevel.OWNER


def test_expired_link_grants_nothing(db, make_user, make_dashboard):
    owner = make_user("alice")
    guest = make_user("bob")
    dashboard = make_dashboard(owner)
    link = service.create_invite_link(db, dashboard.id, owner.id)
    _expire(db, link)

    with pytest.raises(Expired) as exc_info:
        service.use_invite_link(db, link.token, guest.id)

    assert exc_info.value.status_code == 410
    assert access.get_access_level(db, guest.id, dashboard.id) is None
    db.refresh(link)
    assert link.active


def test_unknown_or_inactive_token_is_not_found(db, make_user, make_dashboard):
    owner = make_user("alice")
    guest = make_user("bob")
    dashboard = make_dashboard(owner)
    link = service.create_invite_link(db, dashboard.id, owner.id)
    service.deactivate_link(db, link.token, owner.id)

    with pytest.raises(NotFound):
        service.use_invite_link(db, link.token, guest.id)
    with pytest.raises(NotFound):
        service.use_invite_link(db, "no-such-token", guest.id)
    with pytest.raises(NotFound):
        service.activate_link(db, "no-such-token", owner.id)
    with pytest.raises(NotFound):
        service.deactivate_link(db, "no-such-token", owner.id)


def test_activating_a_link_deactivates_the_others(db, make_user, make_dashboard):
    owner = make_user("alice")
    dashboard = make_dashboard(owner)
    old = service.create_invite_link(db, dashboard.id, owner.id)
    service.deactivate_link(db, old.token, owner.id)
    new = service.create_invite_link(db, dashboard.id, owner.id)

    service.activate_link(db, old.token, owner.id)

    db.refresh(new)
    assert not new.active
    assert service.get_active_link(db, dashboard.id, owner.id).token == old.token


def test_refresh_rotates_only_expired_active_links(db, make_user, make_dashboard):
    owner = make_user("alice")
    expired_dashboard = make_dashboard(owner, "Expired")
    fresh_dashboard = make_dashboard(owner, "Fresh")
    expired = service.create_invite_link(db, expired_dashboard.id, owner.id)
    fresh = service.create_invite_link(db, fresh_dashboard.id, owner.id)
    _expire(db, expired)
    old_token = expired.token
    fresh_token = fresh.token

    assert service.check_and_refresh_links(db) == 1

    db.refresh(expired)
    db.refresh(fresh)
    assert expired.token != old_token
    assert expired.active
    assert expired.expiry_date > datetime.utcnow() + timedelta(days=29)
    assert fresh.token == fresh_token

    assert service.check_and_refresh_links(db) == 0


def test_database_rejects_a_second_active_link(db, make_user, make_dashboard):
    owner = make_user("alice")
    dashboard = make_dashboard(owner)
    service.create_invite_link(db, dashboard.id, owner.id)

    db.add(InviteLink(
        token="second-active-token",
        dashboard_id=dashboard.id,
        expiry_date=datetime.utcnow() + timedelta(days=1),
        active=True,
    ))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()

    db.add(InviteLink(
        token="inactive-token",
        dashboard_id=dashboard.id,
        expiry_date=datetime.utcnow() + timedelta(days=1),
        active=False,
    ))
    db.commit()
    assert db.query(InviteLink).filter(InviteLink.dashboard_id == dashboard.id).count() == 2
