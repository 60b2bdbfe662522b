import json

import pytest

from app.alliance import create_app
from app.alliance.db import session_scope
from app.alliance.models import AuditEvent, Base
from app.alliance.modules.services.models import Service, ServiceSection
from app.alliance.modules.statuses.models import Status
from app.alliance.seed import seed_defaults
from app.alliance.utils import SECTIONS_FORMAT_ERROR, parse_features, parse_sections, sections_to_json

SECTIONS = [
    {"title": "Resistivity", "description": "Imaging", "image_url": "https://example.com/a.jpg", "features": ["LS2", "Multi-electrode"]},
    {"title": "Magnetics", "description": "Gradiometers", "features": "GSM-19\n\n  Base stations  \n"},
    {"title": "Borehole", "features": []},
]


@pytest.fixture()
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("ADMIN_EMAIL", "admin@example.com")
    monkeypatch.setenv("ADMIN_PASSWORD", "pw-admin")

    app = create_app()
    Base.metadata.create_all(bind=app.extensions["sqlalchemy_engine"])
    with session_scope(app) as s:
        seed_defaults(s)
    return app


@pytest.fixture()
def client(app):
    c = app.test_client()
    r = c.post("/admin/signin", data={"email": "admin@example.com", "password": "pw-admin"})
    assert r.status_code == 302
    return c


def _csrf(client) -> str:
    with client.session_transaction() as sess:
        return sess["csrf_token"]


def _status_id(app, name: str) -> str:
    with session_scope(app) as s:
        return s.query(Status).filter(Status.name == name).one().id


def _form(client, app, sections=SECTIONS, **overrides):
    data = {
        "csrf_token": _csrf(client),
        "name": "Geophysical",
        "eyebrow": "Geophysical Supply",
        "emphasis": "Instrumentation",
        "description": "Subsurface clarity.",
        "hero_image": "https://example.com/hero.jpg",
        "status_id": _status_id(app, "published"),
        "sections_json": json.dumps(sections),
    }
    data.update(overrides)
    return data


# ---------- section parsing ----------
def test_parse_sections_empty_input():
    assert parse_sections("") == ([], None)
    assert parse_sections("   ") == ([], None)
    assert parse_sections(None) == ([], None)


@pytest.mark.parametrize("raw", ["{not json", '{"title": "x"}', '["just a string"]', '[{"features": 5}]'])
def test_parse_sections_rejects_bad_shapes(raw):
    assert parse_sections(raw) == (None, SECTIONS_FORMAT_ERROR)


def test_parse_sections_normalizes():
    sections, error = parse_sections(json.dumps(SECTIONS))
    assert error is None
    assert sections[1]["features"] == ["GSM-19", "Base stations"]
    assert sections[1]["image_url"] is None
    assert sections[2]["description"] is None


def test_parse_features():
    assert parse_features(None) == []
    assert parse_features(["a", " ", "b "]) == ["a", "b"]
    assert parse_features("a\r\nb") == ["a", "b"]
    with pytest.raises(ValueError):
        parse_features(3)


def test_sections_to_json_accepts_dicts():
    out = json.loads(sections_to_json([{"title": "T", "features": ("x",)}]))
    assert out == [{"title": "T", "description": "", "image_url": "", "features": ["x"]}]


# ---------- admin CRUD ----------
def test_create_service_with_sections(app, client):
    r = client.post("/admin/services/new", data=_form(client, app))
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/admin/services")

    with session_scope(app) as s:
        svc = s.query(Service).one()
        assert svc.name == "Geophysical"
        assert svc.status_label == "published"
        rows = [(sec.order_index, sec.icon_name, sec.is_reversed, sec.title) for sec in svc.sections]
        assert rows == [
            (0, "Drill", False, "Resistivity"),
            (1, "Server", True, "Magnetics"),
            (2, "Server", False, "Borehole"),
        ]
        assert svc.sections[0].features == ["LS2", "Multi-electrode"]
        assert svc.sections[1].features == ["GSM-19", "Base stations"]
        assert s.query(AuditEvent).filter(AuditEvent.action == "service.create").count() == 1

    r = client.get("/admin/services")
    assert b"Service updated successfully." in r.data
    assert b"Geophysical Supply" in r.data


def test_create_service_requires_fields(app, client):
    r = client.post("/admin/services/new", data=_form(client, app, eyebrow=""))
    assert r.status_code == 400
    assert b"Title, Eyebrow text, and Visibility status are required." in r.data


def test_invalid_sections_json_is_rejected(app, client):
    r = client.post("/admin/services/new", data=_form(client, app, sections_json="[{broken"))
    assert r.status_code == 400
    assert b"Invalid format for category sections." in r.data
    # submitted text is kept for correction
    assert b"[{broken" in r.data
    with session_scope(app) as s:
        assert s.query(Service).count() == 0


def test_edit_replaces_sections(app, client):
    client.post("/admin/services/new", data=_form(client, app))
    with session_scope(app) as s:
        service_id = s.query(Service).one().id

    r = client.get(f"/admin/services/{service_id}/edit")
    assert r.status_code == 200
    assert b"Multi-electrode" in r.data

    r = client.post(
        f"/admin/services/{service_id}/edit",
        data=_form(client, app, name="Renamed", sections=[{"title": "Only", "features": ["one"]}]),
    )
    assert r.status_code == 302

    with session_scope(app) as s:
        svc = s.get(Service, service_id)
        assert svc.name == "Renamed"
        assert [(sec.title, sec.icon_name, sec.is_reversed) for sec in svc.sections] == [("Only", "Drill", False)]
        assert s.query(ServiceSection).count() == 1
        assert s.query(AuditEvent).filter(AuditEvent.action == "service.edit").count() == 1


def test_invalid_sections_on_edit_keep_existing_rows(app, client):
    client.post("/admin/services/new", data=_form(client, app))
    with session_scope(app) as s:
        service_id = s.query(Service).one().id

    r = client.post(f"/admin/services/{service_id}/edit", data=_form(client, app, sections_json="nope"))
    assert r.status_code == 400
    with session_scope(app) as s:
        assert s.query(ServiceSection).count() == 3


def test_delete_service_removes_sections(app, client):
    client.post("/admin/services/new", data=_form(client, app))
    with session_scope(app) as s:
        service_id = s.query(Service).one().id

    r = client.post(f"/admin/services/{service_id}/delete", data={"csrf_token": _csrf(client)})
    assert r.status_code == 302
    with session_scope(app) as s:
        assert s.query(Service).count() == 0
        assert s.query(ServiceSection).count() == 0


def test_preview(app, client):
    assert client.get("/admin/services/preview").status_code == 400
    assert client.get("/admin/services/preview?id=missing").status_code == 404

    client.post("/admin/services/new", data=_form(client, app))
    with session_scope(app) as s:
        service_id = s.query(Service).one().id
    r = client.get(f"/admin/services/preview?id={service_id}")
    assert r.status_code == 200
    assert b"Magnetics" in r.data


# ---------- public directory ----------
def test_public_directory_falls_back_to_cards(app, client):
    client.post("/admin/services/new", data=_form(client, app, status_id=_status_id(app, "draft")))
    r = client.get("/services")
    assert r.status_code == 200
    assert b"Enterprise IT Infrastructure" in r.data
    assert b"Subsurface clarity." not in r.data


def test_public_directory_lists_published_services(app, client):
    client.post("/admin/services/new", data=_form(client, app))
    r = client.get("/services")
    assert b"Subsurface clarity." in r.data
    assert b"Multi-electrode" in r.data
    assert b"Enterprise IT Infrastructure" not in r.data
