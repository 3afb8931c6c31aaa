"""Custom SQLAlchemy column types for UBIQA tables."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, Numeric
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import DateTime, TypeDecorator

from ubiqa.adapters.db.dialects import DialectName
from ubiqa.domain.utils import ensure_utc

if TYPE_CHECKING:
    from sqlalchemy.engine.interfaces import Dialect

__all__ = ["MONEY", "PORTABLE_JSON", "UTCDateTime"]


PORTABLE_JSON = JSON(none_as_null=True).with_variant(
    JSONB(none_as_null=True), "postgresql"
)

#: Query copy of a price amount, read back as float; the JSON record stays canonical.
MONEY = Numeric(14, 2, asdecimal=False)


class UTCDateTime(TypeDecorator[datetime]):  # pylint: disable=too-many-ancestors
    """Timezone-aware UTC datetime.

    Values are stored and returned as aware UTC datetimes; naive inputs are
    treated as UTC. SQLite stores naive UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> Any:
        if value is None:
            return None
        value = ensure_utc(value)
        if dialect.name == DialectName.SQLITE.value:
            return value.replace(tzinfo=None)
        return value

    def process_result_value(self, value: Any, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        return ensure_utc(value) if isinstance(value, datetime) else value

    def process_literal_param(self, value: datetime | None, dialect: Dialect) -> Any:
        return self.process_bind_param(value, dialect)

    @property
    def python_type(self) -> type[datetime]:
        return datetime
