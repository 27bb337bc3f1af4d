"""Discord Guild (Server) ORM model.

Same lifecycle as User: created lazily on first sight with placeholder
preferences, configured by a server settings command, never deleted.
A guild additionally owns the command prefix used to detect emote commands
in its channels.
"""

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, CHAR, String
from sqlalchemy.orm import Mapped, mapped_column

from xiv_emotes.db.base import EXTERNAL_ID_LENGTH, Base, IntEnumType, TZDateTime, utcnow
from xiv_emotes.preferences.types import (
    DEFAULT_GENDER,
    DEFAULT_LANGUAGE,
    DEFAULT_PREFIX,
    MAX_PREFIX_LENGTH,
    UNCONFIGURED,
    Configured,
    Gender,
    GuildPreference,
    Language,
    Preference,
)


class Guild(Base):
    """
    Discord Guild entity.

    Guild-wide language/gender apply to members that never configured their
    own. The prefix is always meaningful, configured or not.
    """

    __tablename__ = "guilds"

    guild_id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    discord_id: Mapped[str] = mapped_column(
        CHAR(EXTERNAL_ID_LENGTH), unique=True, nullable=False
    )

    language: Mapped[Language] = mapped_column(
        IntEnumType(Language), nullable=False, default=DEFAULT_LANGUAGE
    )
    gender: Mapped[Gender] = mapped_column(
        IntEnumType(Gender), nullable=False, default=DEFAULT_GENDER
    )
    prefix: Mapped[str] = mapped_column(
        String(MAX_PREFIX_LENGTH), nullable=False, default=DEFAULT_PREFIX
    )
    is_set_flg: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="false"
    )

    insert_tm: Mapped[datetime] = mapped_column(
        TZDateTime, nullable=False, default=utcnow
    )
    update_tm: Mapped[datetime] = mapped_column(
        TZDateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    @property
    def preference(self) -> Preference:
        """The guild's language/gender as a tagged state."""
        if not self.is_set_flg:
            return UNCONFIGURED
        return Configured(language=self.language, gender=self.gender)

    def to_guild_preference(self) -> GuildPreference:
        return GuildPreference(preference=self.preference, prefix=self.prefix)

    def __repr__(self) -> str:
        return (
            f"<Guild(guild_id={self.guild_id}, discord_id='{self.discord_id}', "
            f"prefix='{self.prefix}')>"
        )
