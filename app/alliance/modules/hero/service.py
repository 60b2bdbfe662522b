from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from app.alliance.audit import record_event
from app.alliance.utils import is_real_id, is_safe_link
from app.alliance.modules.hero.models import HeroSection
from app.alliance.modules.statuses.models import PUBLISHED, Status
from app.alliance.modules.statuses.service import get_status

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.alliance.auth import SessionUser

# Form field -> column.
FORM_FIELDS = {
    "title": "title",
    "emphasis": "emphasis",
    "description": "subtitle",
    "imageUrl": "image_url",
    "category": "button_text",
    "link": "button_link",
}


class HeroNotFound(LookupError):
    pass


def payload_from_form(form) -> dict:
    payload = {name: form.get(name) for name in FORM_FIELDS}
    payload["status_id"] = form.get("status_id")
    return payload


def get_hero_data(s: "Session", only_published: bool = False) -> list[HeroSection]:
    """
    Hero slides, oldest first.
    only_published=True for the public site; the admin panel sees every slide.
    """
    q = s.query(HeroSection).join(Status, HeroSection.status_id == Status.id)
    if only_published:
        q = q.filter(Status.name == PUBLISHED)
    return q.order_by(HeroSection.created_at.asc(), HeroSection.id.asc()).all()


def get_hero(s: "Session") -> HeroSection | None:
    """The first published slide, if any."""
    heroes = get_hero_data(s, only_published=True)
    return heroes[0] if heroes else None


def validate_hero_payload(s: "Session", payload: dict) -> list[str]:
    errors = []
    title = (payload.get("title") or "").strip()
    status_id = (payload.get("status_id") or "").strip()
    if not title or not status_id:
        errors.append("Title and Visibility Status are required.")
    elif get_status(s, status_id) is None:
        errors.append("Unknown visibility status.")
    if not is_safe_link((payload.get("link") or "").strip()):
        errors.append("Link must be a site path or an http(s) URL.")
    if not is_safe_link((payload.get("imageUrl") or "").strip()):
        errors.append("Image URL must be a site path or an http(s) URL.")
    return errors


def _apply(hero: HeroSection, payload: dict) -> dict:
    changes = {}
    for form_name, column in FORM_FIELDS.items():
        value = (payload.get(form_name) or "").strip()
        if column != "title":
            value = value or None
        if getattr(hero, column) != value:
            changes[column] = {"old": getattr(hero, column), "new": value}
            setattr(hero, column, value)
    status_id = (payload.get("status_id") or "").strip()
    if hero.status_id != status_id:
        changes["status_id"] = {"old": hero.status_id, "new": status_id}
        hero.status_id = status_id
    return changes


def save_hero(s: "Session", hero_id: str | None, payload: dict, user: "SessionUser") -> HeroSection:
    """
    Create a slide, or update the existing one when hero_id names a record.
    Callers validate first (validate_hero_payload).
    """
    now = datetime.utcnow()
    if is_real_id(hero_id):
        hero = s.get(HeroSection, hero_id)
        if hero is None:
            raise HeroNotFound(hero_id)
        changes = _apply(hero, payload)
        hero.updated_at = now
        hero.updated_by_user_id = user.id
        s.flush()
        record_event(
            s,
            actor=user,
            action="hero.edit",
            entity_type="HeroSection",
            entity_id=hero.id,
            metadata={"title": hero.title, "changes": changes},
        )
        return hero

    hero = HeroSection(created_at=now, updated_at=now, created_by_user_id=user.id, updated_by_user_id=user.id)
    _apply(hero, payload)
    s.add(hero)
    s.flush()
    record_event(
        s,
        actor=user,
        action="hero.create",
        entity_type="HeroSection",
        entity_id=hero.id,
        metadata={"title": hero.title, "status_id": hero.status_id},
    )
    return hero


def delete_hero(s: "Session", hero: HeroSection, user: "SessionUser") -> None:
    record_event(
        s,
        actor=user,
        action="hero.delete",
        entity_type="HeroSection",
        entity_id=hero.id,
        metadata={"title": hero.title},
    )
    s.delete(hero)
