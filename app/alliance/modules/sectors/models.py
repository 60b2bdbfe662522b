from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.alliance.models import Base, new_id
from app.alliance.modules.statuses.models import Status


class SectorDetail(Base):
    """Singleton page content for one industry sector, keyed by slug."""

    __tablename__ = "sector_details"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    slug: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)  # e.g. "geophysical"

    hero_eyebrow: Mapped[str | None] = mapped_column(String(255), nullable=True)
    hero_title_main: Mapped[str] = mapped_column(String(255), nullable=False)
    hero_title_italic: Mapped[str | None] = mapped_column(String(255), nullable=True)
    hero_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    hero_image: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    portfolio_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    portfolio_description: Mapped[str | None] = mapped_column(Text, nullable=True)

    status_id: Mapped[str] = mapped_column(ForeignKey("statuses.id"), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
    updated_by_user_id: Mapped[str | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    status: Mapped[Status] = relationship(lazy="joined")
    sections: Mapped[list["SectorSection"]] = relationship(
        back_populates="sector",
        cascade="all, delete-orphan",
        order_by="SectorSection.order_index",
        lazy="selectin",
    )

    @property
    def status_label(self) -> str | None:
        return self.status.name if self.status else None


class SectorSection(Base):
    __tablename__ = "sector_sections"
    __table_args__ = (Index("idx_sector_sections_sector_order", "sector_id", "order_index"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    sector_id: Mapped[str] = mapped_column(ForeignKey("sector_details.id", ondelete="CASCADE"), nullable=False)

    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    features: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    sector: Mapped[SectorDetail] = relationship(back_populates="sections")
