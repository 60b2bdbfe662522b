from __future__ import annotations

from flask import Blueprint, abort, flash, g, redirect, render_template, request, url_for

from app.alliance.auth import SessionUser
from app.alliance.db import db_session
from app.alliance.modules.hero.models import HeroSection
from app.alliance.modules.hero.service import (
    delete_hero,
    get_hero_data,
    payload_from_form,
    save_hero,
    validate_hero_payload,
)
from app.alliance.modules.statuses.service import get_all_statuses
from app.alliance.rbac import HERO_MANAGE, require_permission

bp = Blueprint("hero", __name__)


def _current_user() -> SessionUser:
    u = getattr(g, "current_user", None)
    if not u:
        raise RuntimeError("No current user")
    return u


def _form_values(hero: HeroSection) -> dict:
    return {
        "title": hero.title,
        "emphasis": hero.emphasis,
        "description": hero.subtitle,
        "imageUrl": hero.image_url,
        "category": hero.button_text,
        "link": hero.button_link,
        "status_id": hero.status_id,
    }


def _render_form(hero: HeroSection | None, values: dict, errors: list[str] | None = None, status: int = 200):
    s = db_session()
    return (
        render_template(
            "admin/hero/form.html",
            hero=hero,
            values=values,
            errors=errors or [],
            statuses=get_all_statuses(s),
        ),
        status,
    )


# ---------- List ----------
@bp.get("/hero")
@require_permission(HERO_MANAGE)
def hero_list():
    s = db_session()
    heroes = get_hero_data(s, only_published=False)
    return render_template("admin/hero/list.html", heroes=heroes)


# ---------- New ----------
@bp.get("/hero/new")
@require_permission(HERO_MANAGE)
def hero_new_get():
    return _render_form(None, {})


@bp.post("/hero/new")
@require_permission(HERO_MANAGE)
def hero_new_post():
    s = db_session()
    payload = payload_from_form(request.form)
    errors = validate_hero_payload(s, payload)
    if errors:
        return _render_form(None, payload, errors, 400)

    save_hero(s, None, payload, _current_user())
    s.commit()
    flash("Slide saved successfully.", "success")
    return redirect(url_for("hero.hero_list"))


# ---------- Edit ----------
@bp.get("/hero/<hero_id>/edit")
@require_permission(HERO_MANAGE)
def hero_edit_get(hero_id: str):
    s = db_session()
    hero = s.get(HeroSection, hero_id)
    if not hero:
        abort(404)
    return _render_form(hero, _form_values(hero))


@bp.post("/hero/<hero_id>/edit")
@require_permission(HERO_MANAGE)
def hero_edit_post(hero_id: str):
    s = db_session()
    hero = s.get(HeroSection, hero_id)
    if not hero:
        abort(404)

    payload = payload_from_form(request.form)
    errors = validate_hero_payload(s, payload)
    if errors:
        return _render_form(hero, payload, errors, 400)

    save_hero(s, hero.id, payload, _current_user())
    s.commit()
    flash("Slide saved successfully.", "success")
    return redirect(url_for("hero.hero_list"))


# ---------- Delete ----------
@bp.post("/hero/<hero_id>/delete")
@require_permission(HERO_MANAGE)
def hero_delete(hero_id: str):
    s = db_session()
    hero = s.get(HeroSection, hero_id)
    if not hero:
        abort(404)
    delete_hero(s, hero, _current_user())
    s.commit()
    flash("Slide deleted permanently.", "warning")
    return redirect(url_for("hero.hero_list"))


# ---------- Preview ----------
@bp.get("/hero/preview")
@require_permission(HERO_MANAGE)
def hero_preview():
    hero_id = (request.args.get("id") or "").strip()
    if not hero_id:
        abort(400, description="Hero ID Required")
    s = db_session()
    hero = s.get(HeroSection, hero_id)
    if not hero:
        abort(404, description="Hero Not Found")
    return render_template("admin/hero/preview.html", hero=hero)
