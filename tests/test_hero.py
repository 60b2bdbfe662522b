import json
from datetime import datetime, timedelta

import pytest

from app.alliance import create_app
from app.alliance.auth import SessionUser
from app.alliance.db import session_scope
from app.alliance.models import AuditEvent, Base, User
from app.alliance.modules.hero.models import HeroSection
from app.alliance.modules.hero.service import HeroNotFound, get_hero, get_hero_data, save_hero
from app.alliance.modules.statuses.models import Status
from app.alliance.seed import seed_defaults


@pytest.fixture()
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("ADMIN_EMAIL", "admin@example.com")
    monkeypatch.setenv("ADMIN_PASSWORD", "pw-admin")
    monkeypatch.setenv("STAFF_EMAIL", "staff@example.com")
    monkeypatch.setenv("STAFF_PASSWORD", "pw-staff")

    app = create_app()
    Base.metadata.create_all(bind=app.extensions["sqlalchemy_engine"])
    with session_scope(app) as s:
        seed_defaults(s)
    return app


@pytest.fixture()
def client(app):
    c = app.test_client()
    r = c.post("/admin/signin", data={"email": "staff@example.com", "password": "pw-staff"})
    assert r.status_code == 302
    return c


def _csrf(client) -> str:
    with client.session_transaction() as sess:
        return sess["csrf_token"]


def _status_ids(app) -> dict[str, str]:
    with session_scope(app) as s:
        return {st.name: st.id for st in s.query(Status).all()}


def _form(client, app, **overrides):
    data = {
        "csrf_token": _csrf(client),
        "title": "Borehole Logging",
        "emphasis": "Made Simple",
        "description": "Slim-hole probes for water wells.",
        "imageUrl": "https://example.com/probe.jpg",
        "category": "Geo-Physical Equipments",
        "link": "/services/geophysical",
        "status_id": _status_ids(app)["published"],
    }
    data.update(overrides)
    return data


def test_create_slide_maps_form_fields(app, client):
    r = client.post("/admin/hero/new", data=_form(client, app))
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/admin/hero")

    with session_scope(app) as s:
        hero = s.query(HeroSection).one()
        assert hero.title == "Borehole Logging"
        assert hero.subtitle == "Slim-hole probes for water wells."
        assert hero.image_url == "https://example.com/probe.jpg"
        assert hero.button_text == "Geo-Physical Equipments"
        assert hero.button_link == "/services/geophysical"
        assert hero.status_name == "published"
        assert hero.created_by_user_id == hero.updated_by_user_id

        ev = s.query(AuditEvent).filter(AuditEvent.action == "hero.create").one()
        assert ev.entity_id == hero.id
        assert ev.actor_user_email == "staff@example.com"

    r = client.get("/admin/hero")
    assert b"Slide saved successfully." in r.data
    assert b"Borehole Logging" in r.data


def test_create_slide_requires_title_and_status(app, client):
    r = client.post("/admin/hero/new", data=_form(client, app, title="  ", status_id=""))
    assert r.status_code == 400
    assert b"Title and Visibility Status are required." in r.data
    with session_scope(app) as s:
        assert s.query(HeroSection).count() == 0


def test_create_slide_rejects_unknown_status(app, client):
    r = client.post("/admin/hero/new", data=_form(client, app, status_id="not-a-status"))
    assert r.status_code == 400
    assert b"Unknown visibility status." in r.data


@pytest.mark.parametrize(
    "field,value",
    [
        ("link", "javascript:fetch('/admin/accounts')"),
        ("link", " JavaScript:alert(1)"),
        ("link", "//evil.example.com/x"),
        ("link", "data:text/html,<script>alert(1)</script>"),
        ("imageUrl", "javascript:alert(1)"),
    ],
)
def test_create_slide_rejects_script_links(app, client, field, value):
    r = client.post("/admin/hero/new", data=_form(client, app, **{field: value}))
    assert r.status_code == 400
    assert b"must be a site path or an http(s) URL." in r.data
    with session_scope(app) as s:
        assert s.query(HeroSection).count() == 0
        assert s.query(AuditEvent).filter(AuditEvent.action == "hero.create").count() == 0

    assert b"javascript:" not in client.get("/").data.lower()


def test_create_slide_accepts_external_and_blank_links(app, client):
    r = client.post("/admin/hero/new", data=_form(client, app, link="https://example.com/catalog", imageUrl=""))
    assert r.status_code == 302
    with session_scope(app) as s:
        hero = s.query(HeroSection).one()
        assert hero.button_link == "https://example.com/catalog"
        assert hero.image_url is None


def test_edit_slide_rejects_script_link(app, client):
    client.post("/admin/hero/new", data=_form(client, app))
    with session_scope(app) as s:
        hero_id = s.query(HeroSection).one().id

    r = client.post(f"/admin/hero/{hero_id}/edit", data=_form(client, app, link="javascript:alert(1)"))
    assert r.status_code == 400
    with session_scope(app) as s:
        assert s.get(HeroSection, hero_id).button_link == "/services/geophysical"


def test_post_without_csrf_token_is_rejected(app, client):
    data = _form(client, app)
    del data["csrf_token"]
    r = client.post("/admin/hero/new", data=data)
    assert r.status_code == 400
    assert b"CSRF token missing or invalid." in r.data


def test_csrf_token_accepted_from_header(app, client):
    data = _form(client, app)
    token = data.pop("csrf_token")
    r = client.post("/admin/hero/new", data=data, headers={"X-CSRF-Token": token})
    assert r.status_code == 302


def test_edit_slide(app, client):
    client.post("/admin/hero/new", data=_form(client, app))
    with session_scope(app) as s:
        hero_id = s.query(HeroSection).one().id

    r = client.get(f"/admin/hero/{hero_id}/edit")
    assert r.status_code == 200
    assert b"Slim-hole probes for water wells." in r.data

    draft = _status_ids(app)["draft"]
    r = client.post(f"/admin/hero/{hero_id}/edit", data=_form(client, app, title="Updated", status_id=draft))
    assert r.status_code == 302

    with session_scope(app) as s:
        hero = s.get(HeroSection, hero_id)
        assert hero.title == "Updated"
        assert hero.status_name == "draft"
        ev = s.query(AuditEvent).filter(AuditEvent.action == "hero.edit").one()
        changes = json.loads(ev.metadata_json)["changes"]
        assert changes["title"] == {"old": "Borehole Logging", "new": "Updated"}
        assert "status_id" in changes


def test_edit_unknown_slide_is_404(client):
    assert client.get("/admin/hero/missing/edit").status_code == 404


def test_delete_slide(app, client):
    client.post("/admin/hero/new", data=_form(client, app))
    with session_scope(app) as s:
        hero_id = s.query(HeroSection).one().id

    r = client.post(f"/admin/hero/{hero_id}/delete", data={"csrf_token": _csrf(client)})
    assert r.status_code == 302
    with session_scope(app) as s:
        assert s.get(HeroSection, hero_id) is None
        assert s.query(AuditEvent).filter(AuditEvent.action == "hero.delete").count() == 1


def test_preview(app, client):
    assert client.get("/admin/hero/preview").status_code == 400
    assert client.get("/admin/hero/preview?id=missing").status_code == 404

    client.post("/admin/hero/new", data=_form(client, app, status_id=_status_ids(app)["draft"]))
    with session_scope(app) as s:
        hero_id = s.query(HeroSection).one().id
    r = client.get(f"/admin/hero/preview?id={hero_id}")
    assert r.status_code == 200
    assert b"Borehole Logging" in r.data


def test_homepage_falls_back_without_published_slides(app, client):
    client.post("/admin/hero/new", data=_form(client, app, status_id=_status_ids(app)["draft"]))
    r = client.get("/")
    assert r.status_code == 200
    assert b"Precision Instruments for" in r.data
    assert b"Borehole Logging" not in r.data


def test_homepage_shows_published_slides(app, client):
    client.post("/admin/hero/new", data=_form(client, app))
    r = client.get("/")
    assert b"Borehole Logging" in r.data
    assert b"Made Simple" in r.data
    assert b"Precision Instruments for" not in r.data


def _admin(app) -> SessionUser:
    with session_scope(app) as s:
        u = s.query(User).filter(User.email == "admin@example.com").one()
        return SessionUser(id=u.id, email=u.email, full_name=u.full_name)


def test_hero_service_ordering_and_first_published(app):
    ids = _status_ids(app)
    user = _admin(app)
    base = datetime(2025, 1, 1)
    with session_scope(app) as s:
        created = []
        for i, (title, status) in enumerate((("First", "draft"), ("Second", "published"), ("Third", "published"))):
            hero = save_hero(s, None if i == 0 else "null", {"title": title, "status_id": ids[status]}, user)
            hero.created_at = base + timedelta(minutes=i)
            created.append(hero.id)

    with session_scope(app) as s:
        assert [h.id for h in get_hero_data(s)] == created
        assert [h.id for h in get_hero_data(s, only_published=True)] == created[1:]
        assert get_hero(s).id == created[1]


def test_save_hero_unknown_id_raises(app):
    user = _admin(app)
    with pytest.raises(HeroNotFound):
        with session_scope(app) as s:
            save_hero(s, "does-not-exist", {"title": "X", "status_id": "y"}, user)
