"""initial

Revision ID: 0001
Revises: 
Create Date: 2026-02-09
"""

from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "voip_integrations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("agency_id", sa.String(length=64), nullable=False),
        sa.Column("provider", sa.String(length=32), nullable=False, server_default="ringcentral"),
        sa.Column("access_token", sa.Text(), nullable=False),
        sa.Column("refresh_token", sa.Text(), nullable=False),
        sa.Column("token_expires_at", sa.DateTime(timezone=True)),
        sa.Column("last_sync_at", sa.DateTime(timezone=True)),
        sa.Column("last_sync_error", sa.String(length=1024)),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_voip_integrations_agency_id", "voip_integrations", ["agency_id"])

    op.create_table(
        "call_events",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("agency_id", sa.String(length=64), nullable=False),
        sa.Column(
            "voip_integration_id",
            sa.Integer(),
            sa.ForeignKey("voip_integrations.id"),
            nullable=False,
        ),
        sa.Column("external_call_id", sa.String(length=128), nullable=False),
        sa.Column("provider", sa.String(length=32), nullable=False),
        sa.Column("direction", sa.String(length=16), nullable=False),
        sa.Column("call_type", sa.String(length=32)),
        sa.Column("from_number", sa.String(length=64)),
        sa.Column("to_number", sa.String(length=64)),
        sa.Column("call_started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("call_ended_at", sa.DateTime(timezone=True)),
        sa.Column("duration_seconds", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("result", sa.String(length=64)),
        sa.Column("extension_id", sa.String(length=64)),
        sa.Column("extension_name", sa.String(length=255)),
        sa.Column("matched_team_member_id", sa.String(length=64)),
        sa.Column("raw_payload", sa.JSON(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.UniqueConstraint(
            "provider", "external_call_id", name="uq_call_events_provider_external_id"
        ),
    )
    op.create_index(
        "ix_call_events_agency_started", "call_events", ["agency_id", "call_started_at"]
    )
    op.create_index("ix_call_events_from_number", "call_events", ["from_number"])
    op.create_index("ix_call_events_to_number", "call_events", ["to_number"])
    op.create_index(
        "ix_call_events_matched_team_member_id", "call_events", ["matched_team_member_id"]
    )

    op.create_table(
        "call_metrics_daily",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("agency_id", sa.String(length=64), nullable=False),
        sa.Column("team_member_id", sa.String(length=64), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("total_calls", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("inbound_calls", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("outbound_calls", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("answered_calls", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("missed_calls", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_talk_seconds", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_calculated_at", sa.DateTime(timezone=True)),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.UniqueConstraint(
            "agency_id", "team_member_id", "date", name="uq_call_metrics_daily_member_date"
        ),
    )
    op.create_index("ix_call_metrics_daily_agency_id", "call_metrics_daily", ["agency_id"])


def downgrade() -> None:
    op.drop_index("ix_call_metrics_daily_agency_id", table_name="call_metrics_daily")
    op.drop_table("call_metrics_daily")
    op.drop_table("call_events")
    op.drop_index("ix_voip_integrations_agency_id", table_name="voip_integrations")
    op.drop_table("voip_integrations")
