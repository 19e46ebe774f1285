from config import settings
from models.log import AuditLog
from models.users import AdminUser


def test_admin_routes_reject_missing_and_bad_tokens(client, db_session):
    assert client.get("/api/admin/kpis").status_code == 401
    res = client.get("/api/admin/kpis", headers={"X-Admin-Token": "not-a-token"})
    assert res.status_code == 401
    assert res.json() == {"error": "Unauthorized"}


def test_expired_token_is_rejected(client, db_session, expired_headers):
    assert client.get("/api/admin/kpis", headers=expired_headers).status_code == 401


def test_shared_password_login_issues_working_token(client, db_session, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", "let-me-in")

    res = client.post("/api/admin/login", json={"password": "let-me-in"})

    assert res.status_code == 200
    body = res.json()
    assert body["ok"] is True
    assert body["role"] == "OWNER"
    assert client.get("/api/admin/kpis", headers={"X-Admin-Token": body["token"]}).status_code == 200

    db_session.expire_all()
    assert db_session.query(AuditLog).filter(AuditLog.action == "login").count() == 1


def test_wrong_shared_password_is_logged(client, db_session, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", "let-me-in")

    res = client.post("/api/admin/login", json={"password": "guess"})

    assert res.status_code == 401
    assert res.json() == {"error": "Invalid credentials"}
    db_session.expire_all()
    assert db_session.query(AuditLog).filter(AuditLog.action == "login_failed").count() == 1


def test_per_user_login(client, db_session, make_admin_user):
    make_admin_user(email="staff@example.com", password="Password123!")

    res = client.post("/api/admin/login", json={"email": "Staff@Example.com", "password": "Password123!"})
    assert res.status_code == 200
    token = res.json()["token"]
    assert res.json()["role"] == "STAFF"
    assert client.get("/api/admin/orders", headers={"Authorization": f"Bearer {token}"}).status_code == 200

    bad = client.post("/api/admin/login", json={"email": "staff@example.com", "password": "wrong-password"})
    assert bad.status_code == 401


def test_deactivated_user_token_stops_working(client, db_session, make_admin_user):
    user, headers = make_admin_user()
    assert client.get("/api/admin/orders", headers=headers).status_code == 200

    user.active = False
    db_session.commit()

    assert client.get("/api/admin/orders", headers=headers).status_code == 401


def test_staff_cannot_manage_admin_users(client, db_session, make_admin_user):
    _, headers = make_admin_user()
    assert client.get("/api/admin/users", headers=headers).status_code == 403


def test_create_update_and_delete_admin_user(client, db_session, admin_headers):
    res = client.post(
        "/api/admin/users",
        json={"email": "New@Example.com", "password": "longenough", "name": "New Person"},
        headers=admin_headers,
    )
    assert res.status_code == 201
    created = res.json()
    assert created["email"] == "new@example.com"
    assert created["role"] == "STAFF"
    assert "passwordHash" not in created

    duplicate = client.post(
        "/api/admin/users",
        json={"email": "new@example.com", "password": "longenough", "name": "Again"},
        headers=admin_headers,
    )
    assert duplicate.status_code == 409

    patched = client.patch(f"/api/admin/users/{created['id']}", json={"role": "ADMIN"}, headers=admin_headers)
    assert patched.status_code == 200
    assert patched.json()["role"] == "ADMIN"

    assert client.delete(f"/api/admin/users/{created['id']}", headers=admin_headers).status_code == 200
    db_session.expire_all()
    assert db_session.query(AdminUser).count() == 0

    actions = {a for (a,) in db_session.query(AuditLog.action).filter(AuditLog.entity_type == "admin_user")}
    assert actions == {"create", "update", "delete"}


def test_admin_cannot_create_owner(client, db_session, make_admin_user):
    _, headers = make_admin_user(role="ADMIN", email="admin@example.com")

    res = client.post(
        "/api/admin/users",
        json={"email": "boss@example.com", "password": "longenough", "name": "Boss", "role": "OWNER"},
        headers=headers,
    )
    assert res.status_code == 403


def test_cannot_delete_own_account(client, db_session, make_admin_user):
    user, headers = make_admin_user(role="ADMIN", email="admin@example.com")

    res = client.delete(f"/api/admin/users/{user.id}", headers=headers)
    assert res.status_code == 400
    assert res.json() == {"error": "You cannot delete your own account"}


def test_reset_token_flow(client, db_session, admin_headers, make_admin_user):
    user, _ = make_admin_user(email="forgetful@example.com", password="old-password")

    issued = client.post(f"/api/admin/users/{user.id}/reset-password", headers=admin_headers)
    assert issued.status_code == 200
    token = issued.json()["resetToken"]

    db_session.expire_all()
    stored = db_session.query(AdminUser).filter(AdminUser.id == user.id).one()
    assert stored.reset_token and stored.reset_token != token

    reset = client.post("/api/admin/reset-password", json={"token": token, "newPassword": "new-password"})
    assert reset.status_code == 200

    again = client.post("/api/admin/reset-password", json={"token": token, "newPassword": "other-password"})
    assert again.status_code == 400
    assert again.json() == {"error": "Invalid or expired reset token"}

    login = client.post("/api/admin/login", json={"email": "forgetful@example.com", "password": "new-password"})
    assert login.status_code == 200
