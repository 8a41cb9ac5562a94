"""SQLAlchemy mapping metadata for the ledger."""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal
from functools import cache
from typing import TYPE_CHECKING, Final

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    DateTime,
    Dialect,
    Integer,
    Numeric,
    String,
    Table,
    TypeDecorator,
    orm,
)
from sqlalchemy.orm import configure_mappers

from esi_isk.domain.model import Contract, Donation, as_isk

if TYPE_CHECKING:
    from sqlalchemy.types import TypeEngine

ISK_PRECISION: Final[int] = 28
ISK_SCALE: Final[int] = 6


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class ISKAmount(TypeDecorator[Decimal]):
    """Exact ISK amounts: NUMERIC where supported, decimal text on SQLite."""

    impl = Numeric(ISK_PRECISION, ISK_SCALE)
    cache_ok = True

    def load_dialect_impl(self, dialect: Dialect) -> TypeEngine[object]:
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String(48))
        return dialect.type_descriptor(Numeric(ISK_PRECISION, ISK_SCALE, asdecimal=True))

    def process_bind_param(self, value: Decimal | None, dialect: Dialect) -> Decimal | str | None:
        if value is None:
            return None
        amount = as_isk(value)
        if dialect.name == "sqlite":
            return format(amount, "f")
        return amount

    def process_result_value(
        self, value: Decimal | str | float | None, dialect: Dialect
    ) -> Decimal | None:
        _ = dialect
        if value is None:
            return None
        return as_isk(value)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Ledger ------------------------------------------------------------------------

character_table = Table(
    "character",
    mapper_registry.metadata,
    Column("character_id", BigInteger, primary_key=True, autoincrement=False),
    Column("corporation_id", BigInteger, nullable=False, default=0),
    Column("alliance_id", BigInteger, nullable=False, default=0),
    Column("received", Integer, nullable=False, default=0),
    Column("received_isk", ISKAmount, nullable=False, default=Decimal(0)),
    Column("received_30", Integer, nullable=False, default=0),
    Column("received_isk_30", ISKAmount, nullable=False, default=Decimal(0)),
    Column("donated", Integer, nullable=False, default=0),
    Column("donated_isk", ISKAmount, nullable=False, default=Decimal(0)),
    Column("donated_30", Integer, nullable=False, default=0),
    Column("donated_isk_30", ISKAmount, nullable=False, default=Decimal(0)),
    Column("last_donated", UTCDateTime, nullable=True),
    Column("last_received", UTCDateTime, nullable=True),
    Column("good_standing", Boolean, nullable=False, default=False),
)

ledger_state_table = Table(
    "ledger_state",
    mapper_registry.metadata,
    Column("key", String(64), primary_key=True),
    Column("timestamp", UTCDateTime, nullable=True),
)

# History -----------------------------------------------------------------------

donation_table = Table(
    "donation",
    mapper_registry.metadata,
    Column("ref_id", BigInteger, primary_key=True, autoincrement=False),
    Column("donator", BigInteger, nullable=False, index=True),
    Column("recipient", BigInteger, nullable=False, index=True),
    Column("amount", ISKAmount, nullable=False),
    Column("timestamp", UTCDateTime, nullable=False, index=True),
    Column("reason", String, nullable=True),
)

contract_table = Table(
    "contract",
    mapper_registry.metadata,
    Column("contract_id", BigInteger, primary_key=True, autoincrement=False),
    Column("donator", BigInteger, nullable=False, index=True),
    Column("receiver", BigInteger, nullable=False, index=True),
    Column("amount", ISKAmount, nullable=False),
    Column("timestamp", UTCDateTime, nullable=False, index=True),
    Column("accepted", Boolean, nullable=False, default=False),
    Column("note", String, nullable=True),
)


@cache
def start_mappers() -> orm.registry:
    """Map the history entities; ledger rows are read and written with Core."""

    mapper_registry.map_imperatively(Donation, donation_table)
    mapper_registry.map_imperatively(Contract, contract_table)

    configure_mappers()
    return mapper_registry
