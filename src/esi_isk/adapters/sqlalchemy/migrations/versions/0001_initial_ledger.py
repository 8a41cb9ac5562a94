"""Initial ledger schema.

Revision ID: 0001_initial_ledger
Revises:
Create Date: 2026-10-18

"""

from __future__ import annotations

from typing import TYPE_CHECKING

import sqlalchemy as sa
from alembic import op

from esi_isk.adapters.sqlalchemy.mappings import ISKAmount, UTCDateTime

if TYPE_CHECKING:
    from collections.abc import Sequence

revision: str = "0001_initial_ledger"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "character",
        sa.Column("character_id", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("corporation_id", sa.BigInteger(), nullable=False),
        sa.Column("alliance_id", sa.BigInteger(), nullable=False),
        sa.Column("received", sa.Integer(), nullable=False),
        sa.Column("received_isk", ISKAmount(), nullable=False),
        sa.Column("received_30", sa.Integer(), nullable=False),
        sa.Column("received_isk_30", ISKAmount(), nullable=False),
        sa.Column("donated", sa.Integer(), nullable=False),
        sa.Column("donated_isk", ISKAmount(), nullable=False),
        sa.Column("donated_30", sa.Integer(), nullable=False),
        sa.Column("donated_isk_30", ISKAmount(), nullable=False),
        sa.Column("last_donated", UTCDateTime(), nullable=True),
        sa.Column("last_received", UTCDateTime(), nullable=True),
        sa.Column("good_standing", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("character_id", name=op.f("pk_character")),
    )
    op.create_table(
        "ledger_state",
        sa.Column("key", sa.String(length=64), nullable=False),
        sa.Column("timestamp", UTCDateTime(), nullable=True),
        sa.PrimaryKeyConstraint("key", name=op.f("pk_ledger_state")),
    )
    op.create_table(
        "donation",
        sa.Column("ref_id", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("donator", sa.BigInteger(), nullable=False),
        sa.Column("recipient", sa.BigInteger(), nullable=False),
        sa.Column("amount", ISKAmount(), nullable=False),
        sa.Column("timestamp", UTCDateTime(), nullable=False),
        sa.Column("reason", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("ref_id", name=op.f("pk_donation")),
    )
    with op.batch_alter_table("donation", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_donation_donator"), ["donator"], unique=False)
        batch_op.create_index(batch_op.f("ix_donation_recipient"), ["recipient"], unique=False)
        batch_op.create_index(batch_op.f("ix_donation_timestamp"), ["timestamp"], unique=False)

    op.create_table(
        "contract",
        sa.Column("contract_id", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("donator", sa.BigInteger(), nullable=False),
        sa.Column("receiver", sa.BigInteger(), nullable=False),
        sa.Column("amount", ISKAmount(), nullable=False),
        sa.Column("timestamp", UTCDateTime(), nullable=False),
        sa.Column("accepted", sa.Boolean(), nullable=False),
        sa.Column("note", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("contract_id", name=op.f("pk_contract")),
    )
    with op.batch_alter_table("contract", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_contract_donator"), ["donator"], unique=False)
        batch_op.create_index(batch_op.f("ix_contract_receiver"), ["receiver"], unique=False)
        batch_op.create_index(batch_op.f("ix_contract_timestamp"), ["timestamp"], unique=False)


def downgrade() -> None:
    with op.batch_alter_table("contract", schema=None) as batch_op:
        batch_op.drop_index(batch_op.f("ix_contract_timestamp"))
        batch_op.drop_index(batch_op.f("ix_contract_receiver"))
        batch_op.drop_index(batch_op.f("ix_contract_donator"))
    op.drop_table("contract")

    with op.batch_alter_table("donation", schema=None) as batch_op:
        batch_op.drop_index(batch_op.f("ix_donation_timestamp"))
        batch_op.drop_index(batch_op.f("ix_donation_recipient"))
        batch_op.drop_index(batch_op.f("ix_donation_donator"))
    op.drop_table("donation")

    op.drop_table("ledger_state")
    op.drop_table("character")
