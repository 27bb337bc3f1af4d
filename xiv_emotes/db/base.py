from datetime import datetime, timezone
from enum import IntEnum
from typing import Any

from sqlalchemy import BigInteger, DateTime, Integer
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator


class TZDateTime(TypeDecorator):
    """DateTime(timezone=True) that treats naive values as UTC in both directions."""

    impl = DateTime(timezone=True)
    cache_ok = True

    @staticmethod
    def _as_utc(value: datetime | None) -> datetime | None:
        if value is None or value.tzinfo is not None:
            return value
        return value.replace(tzinfo=timezone.utc)

    def process_bind_param(self, value: datetime | None, dialect: Any) -> datetime | None:
        return self._as_utc(value)

    def process_result_value(self, value: datetime | None, dialect: Any) -> datetime | None:
        return self._as_utc(value)


class IntEnumType(TypeDecorator):
    """Stores an IntEnum as its integer value and loads it back as the enum."""

    impl = Integer
    cache_ok = True

    def __init__(self, enum_class: type[IntEnum], *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.enum_class = enum_class

    def process_bind_param(self, value: IntEnum | int | None, dialect: Any) -> int | None:
        if value is None:
            return None
        return int(self.enum_class(value))

    def process_result_value(self, value: int | None, dialect: Any) -> IntEnum | None:
        if value is None:
            return None
        return self.enum_class(value)


def utcnow() -> datetime:
    """Column default and update stamp."""
    return datetime.now(timezone.utc)


# Snowflakes are stored zero-padded to the width of 2**64 - 1
EXTERNAL_ID_LENGTH = 20


class Base(DeclarativeBase):
    """Declarative base for all emote bot ORM models."""

    type_annotation_map = {
        int: BigInteger,
    }
