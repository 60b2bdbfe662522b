from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.alliance.models import Base, new_id

PUBLISHED = "published"
DRAFT = "draft"
ARCHIVED = "archived"

DEFAULT_STATUSES = (PUBLISHED, DRAFT, ARCHIVED)


class Status(Base):
    __tablename__ = "statuses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)  # e.g. "published"
