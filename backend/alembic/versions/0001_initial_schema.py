"""Profiles, horses, their history and the due reminder log.

Revision ID: 0001
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

_COMPLIANCE_STATUS = ("GREEN", "YELLOW", "RED")
_VACCINE_CATEGORY = ("INFLUENZA", "HERPES", "TETANUS", "WEST_NILE_VIRUS")
_VACCINATION_SEQUENCE = ("V1", "V2", "V3", "BOOSTER")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        server_default=sa.func.now(),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(length=320), nullable=False, unique=True),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column(
            "role", sa.Enum("OWNER", "VET", name="profilerole"), nullable=False
        ),
        sa.Column("first_name", sa.String(length=120)),
        sa.Column("last_name", sa.String(length=120)),
        sa.Column("stall_name", sa.String(length=255)),
        sa.Column("practice_name", sa.String(length=255)),
        sa.Column("zip", sa.String(length=16)),
        sa.Column(
            "notify_vaccination", sa.Boolean(), nullable=False, server_default=sa.true()
        ),
        sa.Column("notify_hoof", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        "horses",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "owner_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("breed", sa.String(length=120)),
        sa.Column("birth_year", sa.Integer()),
        sa.Column("iso_nr", sa.String(length=32)),
        sa.Column("fei_nr", sa.String(length=16)),
        sa.Column("chip_id", sa.String(length=15)),
        sa.Column(
            "gender", sa.Enum("STALLION", "MARE", "GELDING", name="horsegender")
        ),
        sa.Column("color", sa.String(length=64)),
        sa.Column("breeding_association", sa.String(length=120)),
        sa.Column("weight_kg", sa.Integer()),
        *_timestamps(),
    )
    op.create_index("ix_horses_owner_id", "horses", ["owner_id"])

    op.create_table(
        "vaccination_records",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "horse_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("horses.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "vaccine_type",
            sa.Enum(*_VACCINE_CATEGORY, name="vaccinecategory"),
            nullable=False,
        ),
        sa.Column("administered_on", sa.Date(), nullable=False),
        sa.Column(
            "sequence", sa.Enum(*_VACCINATION_SEQUENCE, name="vaccinationsequence")
        ),
        sa.Column("is_booster", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("administered_by", sa.String(length=255)),
        sa.Column(
            "status",
            sa.Enum("VERIFIED", "PENDING", "PLANNED", name="vaccinationstatus"),
            nullable=False,
        ),
        *_timestamps(),
    )
    op.create_index(
        "ix_vaccination_records_horse_id", "vaccination_records", ["horse_id"]
    )

    op.create_table(
        "service_records",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "horse_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("horses.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "service_type",
            sa.Enum(
                "FARRIER", "DEWORMING", "DENTIST", "PHYSIO", "OTHER", name="servicetype"
            ),
            nullable=False,
        ),
        sa.Column("performed_on", sa.Date(), nullable=False),
        sa.Column("provider", sa.String(length=255)),
        sa.Column("notes", sa.String(length=1024)),
        *_timestamps(),
    )
    op.create_index("ix_service_records_horse_id", "service_records", ["horse_id"])

    # the native enum types belong to vaccination_records
    op.create_table(
        "vaccination_due_notifications",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "owner_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "horse_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("horses.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "vaccine_type",
            sa.Enum(*_VACCINE_CATEGORY, name="vaccinecategory", native_enum=False),
            nullable=False,
        ),
        sa.Column(
            "sequence_phase",
            sa.Enum(
                *_VACCINATION_SEQUENCE, name="vaccinationsequence", native_enum=False
            ),
            nullable=False,
        ),
        _created_at(),
        sa.UniqueConstraint(
            "owner_id",
            "horse_id",
            "vaccine_type",
            "sequence_phase",
            name="uq_vaccination_due_notification",
        ),
    )

    op.create_table(
        "hoof_due_notifications",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "owner_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "horse_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("horses.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "notified_for",
            sa.Enum(*_COMPLIANCE_STATUS, name="compliancestatus"),
            nullable=False,
        ),
        _created_at(),
        sa.UniqueConstraint(
            "owner_id", "horse_id", "notified_for", name="uq_hoof_due_notification"
        ),
    )


def downgrade() -> None:
    op.drop_table("hoof_due_notifications")
    op.drop_table("vaccination_due_notifications")
    op.drop_index("ix_service_records_horse_id", table_name="service_records")
    op.drop_table("service_records")
    op.drop_index("ix_vaccination_records_horse_id", table_name="vaccination_records")
    op.drop_table("vaccination_records")
    op.drop_index("ix_horses_owner_id", table_name="horses")
    op.drop_table("horses")
    op.drop_table("profiles")

    bind = op.get_bind()
    for enum_name in (
        "compliancestatus",
        "servicetype",
        "vaccinationstatus",
        "vaccinationsequence",
        "vaccinecategory",
        "horsegender",
        "profilerole",
    ):
        sa.Enum(name=enum_name).drop(bind, checkfirst=True)
