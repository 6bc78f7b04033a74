from decimal import Decimal


def _register(client, username, password="secret"):
    response = client.post(
        "/users/register",
        json={"username": username, "email": f"{username}@budget.io", "password": password},
    )
    assert response.status_code == 201
    return response.json()


def _login(client, username, password="secret"):
    response = client.post("/users/token", data={"username": username, "password": password})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_register_login_and_me(client):
    user = _register(client, "alice")
    assert user["username"] == "alice"

    duplicate = client.post(
        "/users/register",
        json={"username": "alice", "email": "other@budget.io", "password": "x"},
    )
    assert duplicate.status_code == 400

    headers = _login(client, "alice@budget.io")
    me = client.get("/users/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["id"] == user["id"]

    bad = client.post("/users/token", data={"username": "alice", "password": "wrong"})
    assert bad.status_code == 401


def test_users_act_only_on_themselves(client):
    alice = _register(client, "alice")
    bob = _register(client, "bob")
    headers = _login(client, "alice")

    assert client.get(f"/users/{alice['id']}", headers=headers).status_code == 200
    assert client.get(f"/users/{bob['id']}", headers=headers).status_code == 403
    assert client.delete(f"/users/{bob['id']}", headers=headers).status_code == 403


def test_unauthenticated_requests_are_rejected(client):
    assert client.get("/dashboards/").status_code == 403
    assert client.get("/invite-links/use/anything").status_code == 403


def test_dashboard_lifecycle(client, make_user, auth_headers):
    alice = make_user("alice")
    bob = make_user("bob")
    owner_headers = auth_headers(alice)

    created = client.post("/dashboards/", json={"title": "Home"}, headers=owner_headers)
    assert created.status_code == 201
    dashboard_id = created.json()["id"]

    assert client.get(f"/dashboards/{dashboard_id}", headers=auth_headers(bob)).status_code == 403
    assert client.get("/dashboards/999", headers=owner_headers).status_code == 403

    updated = client.put(f"/dashboards/{dashboard_id}", json={"title": "Family"}, headers=owner_headers)
    assert updated.json()["title"] == "Family"

    assert client.delete(f"/dashboards/{dashboard_id}", headers=owner_headers).status_code == 200
    assert client.get("/dashboards/", headers=owner_headers).json() == []


def test_member_management_over_http(client, make_user, make_dashboard, auth_headers):
    alice = make_user("alice")
    make_user("bob")
    dashboard = make_dashboard(alice)
    headers = auth_headers(alice)
    base = f"/dashboards/{dashboard.id}/members"

    added = client.post(f"{base}/add", json={"usernameOrEmail": "bob"}, headers=headers)
    assert added.status_code == 200

    changed = client.put(f"{base}/bob/changeAccess", json="EDITOR", headers=headers)
    assert changed.status_code == 200

    invalid = client.put(f"{base}/bob/changeAccess", json="ADMIN", headers=headers)
    assert invalid.status_code == 400

    owner_change = client.put(f"{base}/alice/changeAccess", json="VIEWER", headers=headers)
    assert owner_change.status_code == 400

    members = {m["username"]: m for m in client.get(base, headers=headers).json()}
    assert members["bob"]["access_level"] == "EDITOR"
    assert members["bob"]["role"] == "NONE"

    removed = client.request("DELETE", f"{base}/remove", json={"usernameOrEmail": "bob"}, headers=headers)
    assert removed.status_code == 200
    assert [m["username"] for m in client.get(base, headers=headers).json()] == ["alice"]


def test_assign_role(client, make_user, make_dashboard, auth_headers):
    alice = make_user("alice")
    dashboard = make_dashboard(alice)
    headers = auth_headers(alice)

    ok = client.post(f"/dashboards/{dashboard.id}/assign-role", json={"role": "STUDENT"}, headers=headers)
    assert ok.status_code == 200

    bad = client.post(f"/dashboards/{dashboard.id}/assign-role", json={"role": "PILOT"}, headers=headers)
    assert bad.status_code == 400


def test_invite_link_flow(client, make_user, make_dashboard, auth_headers):
    alice = make_user("alice")
    bob = make_user("bob")
    dashboard = make_dashboard(alice)

    created = client.post(f"/dashboards/{dashboard.id}/invite-links", headers=auth_headers(alice))
    assert created.status_code == 201
    body = created.json()
    assert set(body) == {"token", "expiryDate", "active", "dashboardId"}
    assert body["dashboardId"] == dashboard.id

    used = client.get(f"/invite-links/use/{body['token']}", headers=auth_headers(bob))
    assert used.status_code == 200
    assert used.json() == "Access granted"

    accessible = client.get("/dashboards/accessible", headers=auth_headers(bob)).json()
    assert [d["id"] for d in accessible] == [dashboard.id]

    deactivated = client.put(f"/invite-links/deactivate/{body['token']}", headers=auth_headers(alice))
    assert deactivated.json()["active"] is False
    assert client.put("/invite-links/activate/unknown", headers=auth_headers(alice)).status_code == 404


def test_categories_records_and_priorities(client, make_user, make_dashboard, auth_headers):
    alice = make_user("alice")
    dashboard = make_dashboard(alice)
    headers = auth_headers(alice)
    base = f"/dashboards/{dashboard.id}"

    tag = client.post(f"{base}/tags/", json={"name": "monthly"}, headers=headers).json()
    category = client.post(f"{base}/categories/", json={"name": "Rent"}, headers=headers)
    assert category.status_code == 201
    category_id = category.json()["id"]

    record = client.post(
        f"{base}/records/",
        json={"amount": "1200.00", "type": "INCOME", "category_id": category_id, "tag_ids": [tag["id"]]},
        headers=headers,
    )
    assert record.status_code == 201
    assert record.json()["tag_ids"] == [tag["id"]]

    foreign_tag = client.post(f"{base}/records/", json={"amount": "5", "tag_ids": [999]}, headers=headers)
    assert foreign_tag.status_code == 404

    set_priority = client.post(f"{base}/categories/{category_id}/priorities?priority=5", headers=headers)
    assert set_priority.status_code == 201
    again = client.post(f"{base}/categories/{category_id}/priorities?priority=2", headers=headers)
    assert again.status_code == 400

    own = client.get(f"{base}/categories/{category_id}/priorities/user", headers=headers)
    assert own.json()["priority"] == 5

    everything = client.get(f"{base}/categories/priorities", headers=headers)
    assert everything.status_code == 200
    assert len(everything.json()) == 1

    calculated = client.get(f"{base}/categories/{category_id}/priorities/calculate", headers=headers)
    assert calculated.status_code == 200
    assert Decimal(str(calculated.json()["calculated_priority"])) == Decimal("5.00")

    deleted = client.delete(f"{base}/categories/{category_id}/priorities", headers=headers)
    assert deleted.status_code == 204


def test_budgets_and_goals(client, make_user, make_dashboard, auth_headers):
    alice = make_user("alice")
    dashboard = make_dashboard(alice)
    headers = auth_headers(alice)
    base = f"/dashboards/{dashboard.id}"

    budget = client.post(
        f"{base}/budgets/",
        json={"title": "2026", "total_amount": "5000", "start_date": "2026-01-01", "end_date": "2026-12-31"},
        headers=headers,
    )
    assert budget.status_code == 201
    budget_id = budget.json()["id"]

    goal = client.post(
        f"{base}/goals/",
        json={"title": "Holiday", "target_amount": "800", "budget_id": budget_id},
        headers=headers,
    )
    assert goal.status_code == 201

    assert client.delete(f"{base}/budgets/{budget_id}", headers=headers).status_code == 200
    goals = client.get(f"{base}/goals/", headers=headers).json()
    assert goals[0]["budget_id"] is None
