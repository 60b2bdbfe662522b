from __future__ import annotations

from flask import Blueprint, abort, flash, g, redirect, render_template, request, url_for

from app.alliance.auth import SessionUser
from app.alliance.db import db_session
from app.alliance.modules.services.models import Service
from app.alliance.modules.services.service import (
    delete_service,
    get_all_services,
    get_service_by_id,
    payload_from_form,
    save_service,
    validate_service_payload,
)
from app.alliance.modules.statuses.service import get_all_statuses
from app.alliance.rbac import SERVICES_MANAGE, require_permission
from app.alliance.utils import parse_sections, sections_to_json

bp = Blueprint("services", __name__)


def _current_user() -> SessionUser:
    u = getattr(g, "current_user", None)
    if not u:
        raise RuntimeError("No current user")
    return u


def _form_values(service: Service) -> dict:
    values = {f: getattr(service, f) for f in ("name", "eyebrow", "emphasis", "description", "hero_image")}
    values["status_id"] = service.status_id
    values["sections_json"] = sections_to_json(service.sections)
    return values


def _render_form(service: Service | None, values: dict, errors: list[str] | None = None, status: int = 200):
    s = db_session()
    values.setdefault("sections_json", "[]")
    return (
        render_template(
            "admin/services/form.html",
            service=service,
            values=values,
            errors=errors or [],
            statuses=get_all_statuses(s),
        ),
        status,
    )


def _submitted() -> tuple[dict, list[dict] | None, list[str]]:
    s = db_session()
    payload = payload_from_form(request.form)
    payload["sections_json"] = request.form.get("sections_json") or ""
    errors = validate_service_payload(s, payload)
    sections, section_error = parse_sections(payload["sections_json"])
    if section_error:
        errors.append(section_error)
    return payload, sections, errors


# ---------- List ----------
@bp.get("/services")
@require_permission(SERVICES_MANAGE)
def services_list():
    s = db_session()
    return render_template("admin/services/list.html", services=get_all_services(s))


# ---------- New ----------
@bp.get("/services/new")
@require_permission(SERVICES_MANAGE)
def services_new_get():
    return _render_form(None, {})


@bp.post("/services/new")
@require_permission(SERVICES_MANAGE)
def services_new_post():
    s = db_session()
    payload, sections, errors = _submitted()
    if errors:
        return _render_form(None, payload, errors, 400)

    save_service(s, None, payload, sections or [], _current_user())
    s.commit()
    flash("Service updated successfully.", "success")
    return redirect(url_for("services.services_list"))


# ---------- Edit ----------
@bp.get("/services/<service_id>/edit")
@require_permission(SERVICES_MANAGE)
def services_edit_get(service_id: str):
    s = db_session()
    service = get_service_by_id(s, service_id)
    if not service:
        abort(404)
    return _render_form(service, _form_values(service))


@bp.post("/services/<service_id>/edit")
@require_permission(SERVICES_MANAGE)
def services_edit_post(service_id: str):
    s = db_session()
    service = get_service_by_id(s, service_id)
    if not service:
        abort(404)

    payload, sections, errors = _submitted()
    if errors:
        return _render_form(service, payload, errors, 400)

    save_service(s, service.id, payload, sections or [], _current_user())
    s.commit()
    flash("Service updated successfully.", "success")
    return redirect(url_for("services.services_list"))


# ---------- Delete ----------
@bp.post("/services/<service_id>/delete")
@require_permission(SERVICES_MANAGE)
def services_delete(service_id: str):
    s = db_session()
    service = get_service_by_id(s, service_id)
    if not service:
        abort(404)
    delete_service(s, service, _current_user())
    s.commit()
    flash("Service removed.", "warning")
    return redirect(url_for("services.services_list"))


# ---------- Preview ----------
@bp.get("/services/preview")
@require_permission(SERVICES_MANAGE)
def services_preview():
    service_id = (request.args.get("id") or "").strip()
    if not service_id:
        abort(400, description="Service ID Required")
    s = db_session()
    service = get_service_by_id(s, service_id)
    if not service:
        abort(404, description="Service Not Found")
    return render_template("admin/services/preview.html", service=service)
