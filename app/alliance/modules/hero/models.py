from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.alliance.models import Base, new_id
from app.alliance.modules.statuses.models import Status


class HeroSection(Base):
    """A homepage carousel slide."""

    __tablename__ = "hero_sections"
    __table_args__ = (Index("idx_hero_sections_created_at", "created_at"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    emphasis: Mapped[str | None] = mapped_column(String(255), nullable=True)  # italic second line
    subtitle: Mapped[str | None] = mapped_column(Text, nullable=True)  # "description" in forms
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    button_text: Mapped[str | None] = mapped_column(String(128), nullable=True)  # "category" eyebrow
    button_link: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    status_id: Mapped[str] = mapped_column(ForeignKey("statuses.id"), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
    created_by_user_id: Mapped[str | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    updated_by_user_id: Mapped[str | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    status: Mapped[Status] = relationship(lazy="joined")

    @property
    def status_name(self) -> str | None:
        return self.status.name if self.status else None

    # Form-facing aliases (the editor and templates use these names).
    @property
    def category(self) -> str | None:
        return self.button_text

    @property
    def description(self) -> str | None:
        return self.subtitle

    @property
    def link(self) -> str | None:
        return self.button_link
