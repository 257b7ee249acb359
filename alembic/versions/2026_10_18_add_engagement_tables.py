"""add engagement tables

Revision ID: 7a3c1e9d4b20
Revises:
Create Date: 2026-10-18 09:12:40.118532

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "7a3c1e9d4b20"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id_column() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        primary_key=True,
        server_default=sa.text("gen_random_uuid()"),
    )


def _timestamp_columns() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    ]


def upgrade() -> None:
    """Upgrade schema: contact_agents, ai_qualifications and contact_analytics tables."""
    op.create_table(
        "contact_agents",
        _id_column(),
        sa.Column("contact_id", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("phone", sa.String(length=32), nullable=False),
        sa.Column("agent_id", sa.String(length=255), nullable=False),
        sa.Column("agent_name", sa.String(length=255), nullable=True),
        sa.Column(
            "conversation_history",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column(
            "is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")
        ),
        *_timestamp_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_contact_agents_phone", "contact_agents", ["phone"], unique=False)
    op.create_index(
        "ix_contact_agents_phone_active",
        "contact_agents",
        ["phone", "is_active"],
        unique=False,
    )

    op.create_table(
        "ai_qualifications",
        _id_column(),
        sa.Column("contact_id", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=32), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "source", sa.String(length=32), nullable=False, server_default="ai_chat"
        ),
        sa.Column("campaign_id", sa.String(length=255), nullable=True),
        sa.Column("campaign_name", sa.String(length=255), nullable=True),
        sa.Column("agent_id", sa.String(length=255), nullable=True),
        sa.Column("agent_name", sa.String(length=255), nullable=True),
        sa.Column(
            "category", sa.String(length=32), nullable=False, server_default="pending"
        ),
        sa.Column("score", sa.Integer(), nullable=False, server_default="50"),
        sa.Column("total_messages", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "keywords",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column(
            "first_contact_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "last_message_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column("notes", sa.Text(), nullable=False, server_default=""),
        sa.Column("user_id", sa.String(length=255), nullable=True),
        *_timestamp_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_ai_qualifications_phone", "ai_qualifications", ["phone"], unique=False
    )
    op.create_index(
        "ix_ai_qualifications_source", "ai_qualifications", ["source"], unique=False
    )
    op.create_index(
        "ix_ai_qualifications_campaign_id",
        "ai_qualifications",
        ["campaign_id"],
        unique=False,
    )
    op.create_index(
        "ix_ai_qualifications_agent_id", "ai_qualifications", ["agent_id"], unique=False
    )

    op.create_table(
        "contact_analytics",
        _id_column(),
        sa.Column("contact_id", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=32), nullable=False),
        sa.Column("contact_name", sa.String(length=255), nullable=False, server_default=""),
        sa.Column(
            "interest_level",
            sa.String(length=32),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("interest_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "interest_reason",
            sa.Text(),
            nullable=False,
            server_default="Not yet analyzed",
        ),
        sa.Column(
            "analysis_method", sa.String(length=16), nullable=False, server_default="none"
        ),
        sa.Column("total_messages", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("inbound_messages", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("outbound_messages", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "ai_agent_interactions",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column(
            "first_contact_time",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "last_contact_time",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "conversation_duration", sa.Integer(), nullable=False, server_default="0"
        ),
        sa.Column(
            "key_topics",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column(
            "objections",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column(
            "positive_signals",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column(
            "negative_signals",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("last_analyzed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("user_id", sa.String(length=255), nullable=True),
        *_timestamp_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_contact_analytics_phone", "contact_analytics", ["phone"], unique=False
    )
    op.create_index(
        "ix_contact_analytics_interest_level",
        "contact_analytics",
        ["interest_level"],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_contact_analytics_interest_level", table_name="contact_analytics")
    op.drop_index("ix_contact_analytics_phone", table_name="contact_analytics")
    op.drop_table("contact_analytics")

    op.drop_index("ix_ai_qualifications_agent_id", table_name="ai_qualifications")
    op.drop_index("ix_ai_qualifications_campaign_id", table_name="ai_qualifications")
    op.drop_index("ix_ai_qualifications_source", table_name="ai_qualifications")
    op.drop_index("ix_ai_qualifications_phone", table_name="ai_qualifications")
    op.drop_table("ai_qualifications")

    op.drop_index("ix_contact_agents_phone_active", table_name="contact_agents")
    op.drop_index("ix_contact_agents_phone", table_name="contact_agents")
    op.drop_table("contact_agents")
