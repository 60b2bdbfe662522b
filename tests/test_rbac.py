import logging
from urllib.parse import parse_qs, urlsplit

import pytest

from app.alliance import create_app
from app.alliance.auth import SessionUser
from app.alliance.db import session_scope
from app.alliance.models import Base, Permission, Role, User
from app.alliance.passwords import hash_password
from app.alliance.rbac import user_has_permission


@pytest.fixture()
def client(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    monkeypatch.setenv("ENV", "test")

    app = create_app()
    Base.metadata.create_all(bind=app.extensions["sqlalchemy_engine"])

    with session_scope(app) as s:
        perms = {
            key: Permission(key=key, name=key)
            for key in (
                "dashboard:access",
                "hero:manage",
                "services:manage",
                "users:manage",
                "settings:access",
                "system:super",
            )
        }
        staff = Role(key="staff", name="Operations Staff")
        staff.permissions.extend([perms["dashboard:access"], perms["hero:manage"]])
        root = Role(key="root", name="Superuser")
        root.permissions.append(perms["system:super"])

        u_staff = User(email="staff@example.com", password_hash=hash_password("pw"), is_active=True)
        u_staff.roles.append(staff)
        u_root = User(email="root@example.com", password_hash=hash_password("pw"), is_active=True)
        u_root.roles.append(root)
        u_none = User(email="norole@example.com", password_hash=hash_password("pw"), is_active=True)
        s.add_all([*perms.values(), staff, root, u_staff, u_root, u_none])

    return app.test_client()


def _login(client, email: str):
    r = client.post("/admin/signin", data={"email": email, "password": "pw"})
    assert r.status_code == 302
    return r


def test_user_has_permission():
    staff = SessionUser(id="1", email="s@example.com", full_name="", permissions=["hero:manage"])
    root = SessionUser(id="2", email="r@example.com", full_name="", permissions=["system:super"])
    assert user_has_permission(staff, "hero:manage")
    assert not user_has_permission(staff, "users:manage")
    assert user_has_permission(root, "users:manage")
    assert user_has_permission(root, "anything:at-all")
    assert not user_has_permission(None, "hero:manage")


def test_session_user_roundtrip():
    u = SessionUser(id="1", email="a@example.com", full_name="A", permissions=["hero:manage"], roles=["staff"])
    assert SessionUser.from_dict(u.to_dict()) == u


def test_anonymous_redirects_with_next(client):
    r = client.get("/admin/hero")
    assert r.status_code == 302
    location = urlsplit(r.headers["Location"])
    assert location.path == "/admin/signin"
    assert parse_qs(location.query)["next"] == ["/admin/hero"]


def test_staff_allowed_hero(client):
    _login(client, "staff@example.com")
    assert client.get("/admin/hero").status_code == 200


@pytest.mark.parametrize(
    "path,permission",
    [
        ("/admin/services", b"services:manage"),
        ("/admin/sectors", b"services:manage"),
        ("/admin/accounts", b"users:manage"),
        ("/admin/settings", b"settings:access"),
        ("/admin/audit", b"settings:access"),
    ],
)
def test_staff_forbidden_elsewhere(client, caplog, path, permission):
    _login(client, "staff@example.com")
    with caplog.at_level(logging.WARNING):
        r = client.get(path)
    assert r.status_code == 403
    assert b"Forbidden: You do not have permission to access this resource." in r.data
    assert permission in r.data
    forbidden = [rec for rec in caplog.records if rec.getMessage().startswith("Forbidden:")]
    assert forbidden and forbidden[0].levelno == logging.WARNING
    assert f"missing_permission={permission.decode()}" in forbidden[0].getMessage()


def test_super_permission_bypasses_every_check(client):
    _login(client, "root@example.com")
    for path in ("/admin/hero", "/admin/services", "/admin/sectors", "/admin/accounts", "/admin/settings", "/admin/audit"):
        assert client.get(path).status_code == 200, path


def test_user_without_roles_sees_dashboard_only(client):
    _login(client, "norole@example.com")
    r = client.get("/admin/")
    assert r.status_code == 200
    assert client.get("/admin/hero").status_code == 403


def test_nav_filtered_by_permission(client):
    _login(client, "staff@example.com")
    r = client.get("/admin/")
    assert b"Hero Slider" in r.data
    assert b"Accounts" not in r.data
    assert b"Audit Trail" not in r.data


def test_me_page_lists_permissions(client):
    _login(client, "staff@example.com")
    r = client.get("/admin/me")
    assert r.status_code == 200
    assert b"hero:manage" in r.data
    assert b"staff" in r.data
