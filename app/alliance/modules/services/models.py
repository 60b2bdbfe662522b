from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.alliance.models import Base, new_id
from app.alliance.modules.statuses.models import Status


class Service(Base):
    __tablename__ = "services"
    __table_args__ = (Index("idx_services_created_at", "created_at"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)

    # Required
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    eyebrow: Mapped[str] = mapped_column(String(255), nullable=False)
    status_id: Mapped[str] = mapped_column(ForeignKey("statuses.id"), nullable=False)

    # Hero block
    emphasis: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    hero_image: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
    created_by_user_id: Mapped[str | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    updated_by_user_id: Mapped[str | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    status: Mapped[Status] = relationship(lazy="joined")
    sections: Mapped[list["ServiceSection"]] = relationship(
        back_populates="service",
        cascade="all, delete-orphan",
        order_by="ServiceSection.order_index",
        lazy="selectin",
    )

    @property
    def status_label(self) -> str | None:
        return self.status.name if self.status else None


class ServiceSection(Base):
    __tablename__ = "service_sections"
    __table_args__ = (Index("idx_service_sections_service_order", "service_id", "order_index"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    service_id: Mapped[str] = mapped_column(ForeignKey("services.id", ondelete="CASCADE"), nullable=False)

    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    icon_name: Mapped[str] = mapped_column(String(64), nullable=False, default="Drill")
    features: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_reversed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    service: Mapped[Service] = relationship(back_populates="sections")
