from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from app.alliance.audit import record_event
from app.alliance.modules.sectors.models import SectorDetail, SectorSection
from app.alliance.modules.statuses.service import get_status, is_published

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.alliance.auth import SessionUser

FIELDS = (
    "hero_eyebrow",
    "hero_title_main",
    "hero_title_italic",
    "hero_description",
    "hero_image",
    "portfolio_title",
    "portfolio_description",
)
REQUIRED_MESSAGE = "Hero Title and Visibility status are required."


def payload_from_form(form) -> dict:
    payload = {name: form.get(name) for name in FIELDS}
    # The hidden input wins over the visible select.
    payload["status_id"] = form.get("status_id") or form.get("status_id_select")
    return payload


def get_sector_by_slug(s: "Session", slug: str) -> SectorDetail | None:
    return s.query(SectorDetail).filter(SectorDetail.slug == slug).one_or_none()


def get_published_sector(s: "Session", slug: str) -> SectorDetail | None:
    sector = get_sector_by_slug(s, slug)
    if sector and is_published(sector.status):
        return sector
    return None


def validate_sector_payload(s: "Session", payload: dict) -> list[str]:
    errors = []
    title = (payload.get("hero_title_main") or "").strip()
    status_id = (payload.get("status_id") or "").strip()
    if not title or not status_id:
        errors.append(REQUIRED_MESSAGE)
    elif get_status(s, status_id) is None:
        errors.append("Unknown visibility status.")
    return errors


def save_sector(
    s: "Session",
    slug: str,
    payload: dict,
    sections: list[dict],
    user: "SessionUser",
) -> SectorDetail:
    """Upsert the sector page for `slug` and replace its sections."""
    now = datetime.utcnow()
    sector = get_sector_by_slug(s, slug)
    created = sector is None
    if created:
        sector = SectorDetail(slug=slug, created_at=now)
        s.add(sector)

    for field in FIELDS:
        value = (payload.get(field) or "").strip()
        setattr(sector, field, value if field == "hero_title_main" else (value or None))
    sector.status_id = (payload.get("status_id") or "").strip()
    sector.updated_at = now
    sector.updated_by_user_id = user.id

    if not created:
        sector.sections.clear()
        s.flush()
    sector.sections.extend(
        SectorSection(
            title=sec.get("title") or "",
            description=sec.get("description"),
            image_url=sec.get("image_url"),
            features=list(sec.get("features") or []),
            order_index=position,
        )
        for position, sec in enumerate(sections)
    )
    s.flush()

    record_event(
        s,
        actor=user,
        action="sector.save",
        entity_type="SectorDetail",
        entity_id=sector.id,
        metadata={"slug": slug, "created": created, "sections": len(sections)},
    )
    return sector
