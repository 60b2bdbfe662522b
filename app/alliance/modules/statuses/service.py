from __future__ import annotations

from typing import TYPE_CHECKING

from app.alliance.modules.statuses.models import PUBLISHED, Status

if TYPE_CHECKING:
    from sqlalchemy.orm import Session


def get_all_statuses(s: "Session") -> list[Status]:
    """All content statuses, ordered by name."""
    return s.query(Status).order_by(Status.name.asc()).all()


def get_status(s: "Session", status_id: str | None) -> Status | None:
    if not status_id:
        return None
    return s.get(Status, status_id)


def is_published(status: Status | None) -> bool:
    return bool(status and status.name == PUBLISHED)
