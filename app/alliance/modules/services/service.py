from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from app.alliance.audit import record_event
from app.alliance.utils import is_real_id
from app.alliance.modules.services.models import Service, ServiceSection
from app.alliance.modules.statuses.models import PUBLISHED, Status
from app.alliance.modules.statuses.service import get_status

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.alliance.auth import SessionUser

FIELDS = ("name", "eyebrow", "emphasis", "description", "hero_image")
REQUIRED_MESSAGE = "Title, Eyebrow text, and Visibility status are required."


class ServiceNotFound(LookupError):
    pass


def payload_from_form(form) -> dict:
    payload = {name: form.get(name) for name in FIELDS}
    payload["status_id"] = form.get("status_id")
    return payload


def get_all_services(s: "Session") -> list[Service]:
    """Every service page with its status, newest first."""
    return s.query(Service).order_by(Service.created_at.desc(), Service.id.asc()).all()


def get_published_services(s: "Session") -> list[Service]:
    return (
        s.query(Service)
        .join(Status, Service.status_id == Status.id)
        .filter(Status.name == PUBLISHED)
        .order_by(Service.created_at.desc(), Service.id.asc())
        .all()
    )


def get_service_by_id(s: "Session", service_id: str) -> Service | None:
    """Service with sections (ordered by order_index via the relationship)."""
    return s.get(Service, service_id)


def validate_service_payload(s: "Session", payload: dict) -> list[str]:
    errors = []
    name = (payload.get("name") or "").strip()
    eyebrow = (payload.get("eyebrow") or "").strip()
    status_id = (payload.get("status_id") or "").strip()
    if not name or not eyebrow or not status_id:
        errors.append(REQUIRED_MESSAGE)
    elif get_status(s, status_id) is None:
        errors.append("Unknown visibility status.")
    return errors


def _section_layout(position: int) -> tuple[str, bool]:
    """First section is the standard drill layout; the second is mirrored."""
    icon_name = "Drill" if position == 0 else "Server"
    return icon_name, position == 1


def build_sections(sections: list[dict]) -> list[ServiceSection]:
    rows = []
    for position, sec in enumerate(sections):
        icon_name, is_reversed = _section_layout(position)
        rows.append(
            ServiceSection(
                title=sec.get("title") or "",
                description=sec.get("description"),
                image_url=sec.get("image_url"),
                icon_name=icon_name,
                features=list(sec.get("features") or []),
                order_index=position,
                is_reversed=is_reversed,
            )
        )
    return rows


def _apply(service: Service, payload: dict) -> dict:
    changes = {}
    for field in FIELDS:
        value = (payload.get(field) or "").strip()
        if field not in ("name", "eyebrow"):
            value = value or None
        if getattr(service, field) != value:
            changes[field] = {"old": getattr(service, field), "new": value}
            setattr(service, field, value)
    status_id = (payload.get("status_id") or "").strip()
    if service.status_id != status_id:
        changes["status_id"] = {"old": service.status_id, "new": status_id}
        service.status_id = status_id
    return changes


def save_service(
    s: "Session",
    service_id: str | None,
    payload: dict,
    sections: list[dict],
    user: "SessionUser",
) -> Service:
    """
    Create or update a service page. Sections are replaced wholesale
    in the order given.
    """
    now = datetime.utcnow()
    if is_real_id(service_id):
        service = s.get(Service, service_id)
        if service is None:
            raise ServiceNotFound(service_id)
        action = "service.edit"
        changes = _apply(service, payload)
        service.updated_at = now
        service.updated_by_user_id = user.id
        # Flush the deletes before inserting the replacement rows.
        service.sections.clear()
        s.flush()
    else:
        action = "service.create"
        service = Service(created_at=now, updated_at=now, created_by_user_id=user.id, updated_by_user_id=user.id)
        changes = _apply(service, payload)
        s.add(service)

    service.sections.extend(build_sections(sections))
    s.flush()

    record_event(
        s,
        actor=user,
        action=action,
        entity_type="Service",
        entity_id=service.id,
        metadata={"name": service.name, "sections": len(sections), "changes": changes},
    )
    return service


def delete_service(s: "Session", service: Service, user: "SessionUser") -> None:
    record_event(
        s,
        actor=user,
        action="service.delete",
        entity_type="Service",
        entity_id=service.id,
        metadata={"name": service.name},
    )
    s.delete(service)
