from __future__ import annotations

from flask import Blueprint, abort, flash, g, redirect, render_template, request, url_for

from app.alliance.auth import SessionUser
from app.alliance.content import SECTORS, sector_config
from app.alliance.db import db_session
from app.alliance.modules.sectors.models import SectorDetail
from app.alliance.modules.sectors.service import (
    FIELDS,
    get_sector_by_slug,
    payload_from_form,
    save_sector,
    validate_sector_payload,
)
from app.alliance.modules.statuses.service import get_all_statuses
from app.alliance.rbac import SERVICES_MANAGE, require_permission
from app.alliance.utils import parse_sections, sections_to_json

bp = Blueprint("sectors", __name__)


def _current_user() -> SessionUser:
    u = getattr(g, "current_user", None)
    if not u:
        raise RuntimeError("No current user")
    return u


def _form_values(sector: SectorDetail | None) -> dict:
    if sector is None:
        return {"sections_json": "[]"}
    values = {f: getattr(sector, f) for f in FIELDS}
    values["status_id"] = sector.status_id
    values["sections_json"] = sections_to_json(sector.sections)
    return values


@bp.get("/sectors")
@require_permission(SERVICES_MANAGE)
def sectors_index():
    s = db_session()
    cards = []
    for slug, cfg in SECTORS.items():
        sector = get_sector_by_slug(s, slug)
        cards.append({"slug": slug, "config": cfg, "sector": sector})
    return render_template("admin/sectors/index.html", cards=cards)


@bp.get("/sectors/<slug>")
@require_permission(SERVICES_MANAGE)
def sector_edit_get(slug: str):
    cfg = sector_config(slug)
    if cfg is None:
        abort(404)
    s = db_session()
    sector = get_sector_by_slug(s, slug)
    return render_template(
        "admin/sectors/form.html",
        slug=slug,
        config=cfg,
        sector=sector,
        values=_form_values(sector),
        errors=[],
        statuses=get_all_statuses(s),
    )


@bp.post("/sectors/<slug>")
@require_permission(SERVICES_MANAGE)
def sector_edit_post(slug: str):
    cfg = sector_config(slug)
    if cfg is None:
        abort(404)
    s = db_session()

    payload = payload_from_form(request.form)
    payload["sections_json"] = request.form.get("sections_json") or ""
    errors = validate_sector_payload(s, payload)
    sections, section_error = parse_sections(payload["sections_json"])
    if section_error:
        errors.append(section_error)
    if errors:
        return (
            render_template(
                "admin/sectors/form.html",
                slug=slug,
                config=cfg,
                sector=get_sector_by_slug(s, slug),
                values=payload,
                errors=errors,
                statuses=get_all_statuses(s),
            ),
            400,
        )

    save_sector(s, slug, payload, sections or [], _current_user())
    s.commit()
    flash("Sector updated successfully!", "success")
    return redirect(url_for("sectors.sector_edit_get", slug=slug))
