"""Discord User ORM model.

This module defines the User entity: the surrogate-keyed mapping of a Discord
user snowflake plus that user's personal display preferences.

Design principles:
- user_id (bigserial) is the internal identity used by every foreign key
- discord_id (fixed-width snowflake string) is unique and never re-keyed
- Rows are created lazily on first sight with placeholder preferences and
  is_set_flg = False; the placeholders are never surfaced as configuration
- Rows are never deleted
"""

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, CHAR
from sqlalchemy.orm import Mapped, mapped_column

from xiv_emotes.db.base import EXTERNAL_ID_LENGTH, Base, IntEnumType, TZDateTime, utcnow
from xiv_emotes.preferences.types import (
    DEFAULT_GENDER,
    DEFAULT_LANGUAGE,
    UNCONFIGURED,
    Configured,
    Gender,
    Language,
    Preference,
)


class User(Base):
    """
    Discord User entity.

    Holds the personal language/gender preference. When is_set_flg is False
    the language and gender columns are placeholders: read ``preference``
    instead of the raw columns.
    """

    __tablename__ = "users"

    # -------------------------------------------------------------------------
    # Identity
    # -------------------------------------------------------------------------

    # Surrogate key. All relationships point here, never at discord_id.
    user_id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)

    # Zero-padded snowflake. The unique constraint is what makes concurrent
    # first-sight inserts converge on a single row.
    discord_id: Mapped[str] = mapped_column(
        CHAR(EXTERNAL_ID_LENGTH), unique=True, nullable=False
    )

    # -------------------------------------------------------------------------
    # Preferences
    # -------------------------------------------------------------------------

    language: Mapped[Language] = mapped_column(
        IntEnumType(Language), nullable=False, default=DEFAULT_LANGUAGE
    )
    gender: Mapped[Gender] = mapped_column(
        IntEnumType(Gender), nullable=False, default=DEFAULT_GENDER
    )

    # False until the user runs a settings command.
    is_set_flg: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="false"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------

    insert_tm: Mapped[datetime] = mapped_column(
        TZDateTime, nullable=False, default=utcnow
    )
    update_tm: Mapped[datetime] = mapped_column(
        TZDateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    @property
    def preference(self) -> Preference:
        """The user's preference as a tagged state."""
        if not self.is_set_flg:
            return UNCONFIGURED
        return Configured(language=self.language, gender=self.gender)

    def __repr__(self) -> str:
        return (
            f"<User(user_id={self.user_id}, discord_id='{self.discord_id}', "
            f"is_set_flg={self.is_set_flg})>"
        )
