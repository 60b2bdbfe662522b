"""initial schema: accounts, rbac, audit, statuses and site content

Revision ID: a7c1e4f20b31
Revises:
Create Date: 2026-10-19 09:12:44.208113

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a7c1e4f20b31'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    """Create every table the application expects."""
    conn = op.get_bind()
    inspector = sa.inspect(conn)
    existing_tables = set(inspector.get_table_names())

    if "users" not in existing_tables:
        op.create_table(
            "users",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("email", sa.String(320), nullable=False, unique=True),
            sa.Column("full_name", sa.String(255), nullable=False, server_default=""),
            sa.Column("password_hash", sa.String(255), nullable=False),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        )

    if "roles" not in existing_tables:
        op.create_table(
            "roles",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("key", sa.String(64), nullable=False, unique=True),
            sa.Column("name", sa.String(128), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        )

    if "permissions" not in existing_tables:
        op.create_table(
            "permissions",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("key", sa.String(128), nullable=False, unique=True),
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        )

    if "user_roles" not in existing_tables:
        op.create_table(
            "user_roles",
            sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
            sa.Column("role_id", sa.String(36), sa.ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
        )

    if "role_permissions" not in existing_tables:
        op.create_table(
            "role_permissions",
            sa.Column("role_id", sa.String(36), sa.ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
            sa.Column(
                "permission_id", sa.String(36), sa.ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True
            ),
        )

    if "audit_events" not in existing_tables:
        op.create_table(
            "audit_events",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
            sa.Column("request_id", sa.String(64), nullable=True),
            sa.Column("actor_user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
            sa.Column("actor_user_email", sa.String(320), nullable=True),
            sa.Column("action", sa.String(128), nullable=False),
            sa.Column("entity_type", sa.String(128), nullable=True),
            sa.Column("entity_id", sa.String(128), nullable=True),
            sa.Column("reason", sa.String(512), nullable=True),
            sa.Column("metadata_json", sa.Text(), nullable=True),
            sa.Column("client_ip", sa.String(64), nullable=True),
        )
        op.create_index("idx_audit_events_created_at", "audit_events", ["created_at"])
        op.create_index("idx_audit_events_action", "audit_events", ["action"])

    if "statuses" not in existing_tables:
        op.create_table(
            "statuses",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("name", sa.String(64), nullable=False, unique=True),
        )

    if "hero_sections" not in existing_tables:
        op.create_table(
            "hero_sections",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("title", sa.String(255), nullable=False),
            sa.Column("emphasis", sa.String(255), nullable=True),
            sa.Column("subtitle", sa.Text(), nullable=True),
            sa.Column("image_url", sa.String(1024), nullable=True),
            sa.Column("button_text", sa.String(128), nullable=True),
            sa.Column("button_link", sa.String(1024), nullable=True),
            sa.Column("status_id", sa.String(36), sa.ForeignKey("statuses.id"), nullable=False),
            *_timestamps(),
            sa.Column("created_by_user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
            sa.Column("updated_by_user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        )
        op.create_index("idx_hero_sections_created_at", "hero_sections", ["created_at"])

    if "services" not in existing_tables:
        op.create_table(
            "services",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column("eyebrow", sa.String(255), nullable=False),
            sa.Column("status_id", sa.String(36), sa.ForeignKey("statuses.id"), nullable=False),
            sa.Column("emphasis", sa.String(255), nullable=True),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("hero_image", sa.String(1024), nullable=True),
            *_timestamps(),
            sa.Column("created_by_user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
            sa.Column("updated_by_user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        )
        op.create_index("idx_services_created_at", "services", ["created_at"])

    if "service_sections" not in existing_tables:
        op.create_table(
            "service_sections",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("service_id", sa.String(36), sa.ForeignKey("services.id", ondelete="CASCADE"), nullable=False),
            sa.Column("title", sa.String(255), nullable=False, server_default=""),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("image_url", sa.String(1024), nullable=True),
            sa.Column("icon_name", sa.String(64), nullable=False, server_default="Drill"),
            sa.Column("features", sa.JSON(), nullable=False),
            sa.Column("order_index", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("is_reversed", sa.Boolean(), nullable=False, server_default=sa.false()),
        )
        op.create_index("idx_service_sections_service_order", "service_sections", ["service_id", "order_index"])

    if "sector_details" not in existing_tables:
        op.create_table(
            "sector_details",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("slug", sa.String(64), nullable=False, unique=True),
            sa.Column("hero_eyebrow", sa.String(255), nullable=True),
            sa.Column("hero_title_main", sa.String(255), nullable=False),
            sa.Column("hero_title_italic", sa.String(255), nullable=True),
            sa.Column("hero_description", sa.Text(), nullable=True),
            sa.Column("hero_image", sa.String(1024), nullable=True),
            sa.Column("portfolio_title", sa.String(255), nullable=True),
            sa.Column("portfolio_description", sa.Text(), nullable=True),
            sa.Column("status_id", sa.String(36), sa.ForeignKey("statuses.id"), nullable=False),
            *_timestamps(),
            sa.Column("updated_by_user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        )

    if "sector_sections" not in existing_tables:
        op.create_table(
            "sector_sections",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column(
                "sector_id", sa.String(36), sa.ForeignKey("sector_details.id", ondelete="CASCADE"), nullable=False
            ),
            sa.Column("title", sa.String(255), nullable=False, server_default=""),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("image_url", sa.String(1024), nullable=True),
            sa.Column("features", sa.JSON(), nullable=False),
            sa.Column("order_index", sa.Integer(), nullable=False, server_default="0"),
        )
        op.create_index("idx_sector_sections_sector_order", "sector_sections", ["sector_id", "order_index"])


def downgrade() -> None:
    """Drop every table, children first."""
    op.drop_table("sector_sections")
    op.drop_table("sector_details")
    op.drop_table("service_sections")
    op.drop_table("services")
    op.drop_table("hero_sections")
    op.drop_table("statuses")
    op.drop_table("audit_events")
    op.drop_table("role_permissions")
    op.drop_table("user_roles")
    op.drop_table("permissions")
    op.drop_table("roles")
    op.drop_table("users")
