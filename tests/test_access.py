from decimal import Decimal

import pytest

from app.exceptions import AccessDenied, InvalidArgument, NotFound
from app.dashboards import access
from app.dashboards.catalog import AccessLevel, Role, parse_access_level, parse_role
from app.dashboards.models import DashboardAccess, DashboardRole


def test_access_levels_are_ordered_viewer_editor_owner():
    assert AccessLevel.VIEWER.covers(AccessLevel.VIEWER)
    assert AccessLevel.EDITOR.covers(AccessLevel.VIEWER)
    assert AccessLevel.OWNER.covers(AccessLevel.EDITOR)
    assert not AccessLevel.VIEWER.covers(AccessLevel.EDITOR)
    assert not AccessLevel.EDITOR.covers(AccessLevel.OWNER)


def test_role_weights():
    assert Role.ENTREPRENEUR.weight == Decimal("0.8")
    assert Role.EMPLOYEE.weight == Decimal("0.7")
    assert Role.RETIREE.weight == Decimal("0.5")
    assert Role.HOUSEMAKER.weight == Decimal("0.4")
    assert Role.STUDENT.weight == Decimal("0.3")
    assert Role.CHILD.weight == Decimal("0.2")
    assert Role.NONE.weight == Decimal("0.1")


def test_parse_rejects_unknown_values():
    assert parse_access_level("editor") == AccessLevel.EDITOR
    assert parse_role(" student ") == Role.STUDENT
    with pytest.raises(InvalidArgument):
        parse_access_level("ADMIN")
    with pytest.raises(InvalidArgument):
        parse_role("PILOT")


def test_creator_gets_owner_and_role_none(db, make_user, make_dashboard):
    owner = make_user("alice")
    dashboard = make_dashboard(owner)

    assert access.get_access_level(db, owner.id, dashboard.id) == AccessLevel.OWNER
    assert access.get_role(db, owner.id, dashboard.id) == Role.NONE


def test_grant_access_keeps_a_single_row_with_latest_level(db, make_user, make_dashboard):
    owner = make_user("alice")
    member = make_user("bob")
    dashboard = make_dashboard(owner)

    access.grant_access(db, member.id, dashboard.id, AccessLevel.EDITOR)
    access.grant_access(db, member.id, dashboard.id, AccessLevel.VIEWER)
    access.grant_access(db, member.id, dashboard.id, AccessLevel.EDITOR)

    rows = (
        db.query(DashboardAccess)
        .filter(DashboardAccess.user_id == member.id, DashboardAccess.dashboard_id == dashboard.id)
        .all()
    )
    assert len(rows) == 1
    assert access.get_access_level(db, member.id, dashboard.id) == AccessLevel.EDITOR


def test_grant_access_requires_existing_user_and_dashboard(db, make_user, make_dashboard):
    owner = make_user("alice")
    dashboard = make_dashboard(owner)

    with pytest.raises(NotFound):
        access.grant_access(db, 999, dashboard.id, AccessLevel.VIEWER)
    with pytest.raises(NotFound):
        access.grant_access(db, owner.id, 999, AccessLevel.VIEWER)


def test_check_dashboard_access_enforces_required_level(db, make_user, make_dashboard):
    owner = make_user("alice")
    editor = make_user("bob")
    dashboard = make_dashboard(owner)
    access.grant_access(db, editor.id, dashboard.id, AccessLevel.EDITOR)

    assert access.check_dashboard_access(db, editor.id, dashboard.id, AccessLevel.VIEWER) == AccessLevel.EDITOR
    assert access.check_dashboard_access(db, editor.id, dashboard.id, AccessLevel.EDITOR) == AccessLevel.EDITOR

    with pytest.raises(AccessDenied) as exc_info:
        access.check_dashboard_access(db, editor.id, dashboard.id, AccessLevel.OWNER)
    assert exc_info.value.status_code == 403
    assert exc_info.value.required_level == "OWNER"


def test_check_dashboard_access_denies_strangers_and_unknown_dashboards(db, make_user, make_dashboard):
    owner = make_user("alice")
    stranger = make_user("carol")
    dashboard = make_dashboard(owner)

    with pytest.raises(AccessDenied):
        access.check_dashboard_access(db, stranger.id, dashboard.id, AccessLevel.VIEWER)
    with pytest.raises(AccessDenied):
        access.check_dashboard_access(db, owner.id, 999, AccessLevel.VIEWER)


def test_check_reads_latest_grant(db, make_user, make_dashboard):
    owner = make_user("alice")
    member = make_user("bob")
    dashboard = make_dashboard(owner)

    access.grant_access(db, member.id, dashboard.id, AccessLevel.EDITOR)
    access.check_dashboard_access(db, member.id, dashboard.id, AccessLevel.EDITOR)

    access.grant_access(db, member.id, dashboard.id, AccessLevel.VIEWER)
    with pytest.raises(AccessDenied):
        access.check_dashboard_access(db, member.id, dashboard.id, AccessLevel.EDITOR)


def test_role_assignment_is_an_upsert(db, make_user, make_dashboard):
    owner = make_user("alice")
    dashboard = make_dashboard(owner)

    access.assign_role_to_user_in_dashboard(db, owner.id, dashboard.id, Role.STUDENT)
    access.assign_role_to_user_in_dashboard(db, owner.id, dashboard.id, Role.CHILD)

    rows = (
        db.query(DashboardRole)
        .filter(DashboardRole.user_id == owner.id, DashboardRole.dashboard_id == dashboard.id)
        .all()
    )
    assert len(rows) == 1
    assert access.get_role(db, owner.id, dashboard.id) == Role.CHILD


def test_get_role_without_assignment_is_not_found(db, make_user, make_dashboard):
    owner = make_user("alice")
    other = make_user("bob")
    dashboard = make_dashboard(owner)

    assert access.find_role(db, other.id, dashboard.id) is None
    with pytest.raises(NotFound):
        access.get_role(db, other.id, dashboard.id)


def test_accessible_dashboard_ids(db, make_user, make_dashboard):
    alice = make_user("alice")
    bob = make_user("bob")
    first = make_dashboard(alice, "First")
    second = make_dashboard(alice, "Second")
    own = make_dashboard(bob, "Bob's")

    access.grant_access(db, bob.id, first.id, AccessLevel.VIEWER)

    assert access.get_accessible_dashboard_ids(db, bob.id) == {first.id, own.id}
    assert access.get_accessible_dashboard_ids(db, alice.id) == {first.id, second.id}


def test_check_authenticated_user():
    access.check_authenticated_user(1, 1)
    with pytest.raises(AccessDenied):
        access.check_authenticated_user(1, 2)
