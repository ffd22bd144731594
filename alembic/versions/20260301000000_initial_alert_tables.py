"""Initial schema: OpenAPI specs, API endpoints and alerts.

Revision ID: 20260301000000
Revises:
Create Date: 2026-03-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20260301000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "open_api_specs",
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("spec", sa.Text(), nullable=False),
        sa.Column("extension", sa.String(length=16), nullable=False),
        sa.Column(
            "minimized_spec_context",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint("extension IN ('JSON', 'YAML')", name="ck_open_api_specs_extension"),
        sa.PrimaryKeyConstraint("name"),
    )
    op.create_table(
        "api_endpoints",
        sa.Column("uuid", sa.String(length=36), nullable=False),
        sa.Column("path", sa.String(length=2048), nullable=False),
        sa.Column("host", sa.String(length=1024), nullable=False),
        sa.Column("method", sa.String(length=16), nullable=False),
        sa.Column("openapi_spec_name", sa.String(length=255), nullable=True),
        sa.ForeignKeyConstraint(["openapi_spec_name"], ["open_api_specs.name"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index(op.f("ix_api_endpoints_host"), "api_endpoints", ["host"], unique=False)
    op.create_table(
        "alerts",
        sa.Column("uuid", sa.String(length=36), nullable=False),
        sa.Column("type", sa.String(length=64), nullable=False),
        sa.Column("risk_score", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="OPEN"),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column(
            "context",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("resolution_message", sa.Text(), nullable=True),
        sa.Column("api_endpoint_uuid", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["api_endpoint_uuid"], ["api_endpoints.uuid"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index(op.f("ix_alerts_type"), "alerts", ["type"], unique=False)
    op.create_index(op.f("ix_alerts_risk_score"), "alerts", ["risk_score"], unique=False)
    op.create_index(op.f("ix_alerts_status"), "alerts", ["status"], unique=False)
    op.create_index(op.f("ix_alerts_api_endpoint_uuid"), "alerts", ["api_endpoint_uuid"], unique=False)
    op.create_index(
        "uq_alerts_unresolved_endpoint_type_description",
        "alerts",
        ["api_endpoint_uuid", "type", "description"],
        unique=True,
        postgresql_where=sa.text("status != 'RESOLVED'"),
    )


def downgrade() -> None:
    op.drop_index("uq_alerts_unresolved_endpoint_type_description", table_name="alerts")
    op.drop_index(op.f("ix_alerts_api_endpoint_uuid"), table_name="alerts")
    op.drop_index(op.f("ix_alerts_status"), table_name="alerts")
    op.drop_index(op.f("ix_alerts_risk_score"), table_name="alerts")
    op.drop_index(op.f("ix_alerts_type"), table_name="alerts")
    op.drop_table("alerts")
    op.drop_index(op.f("ix_api_endpoints_host"), table_name="api_endpoints")
    op.drop_table("api_endpoints")
    op.drop_table("open_api_specs")
