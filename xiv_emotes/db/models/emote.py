"""FFXIV Emote ORM model.

This module defines the emote catalog: one row per upstream emote.

Design principles:
- xiv_id (the game's emote sheet row ID) is the external identity
- command is fixed after the first registration; re-syncing only touches update_tm
- A command reassigned upstream to another xiv_id is a different row, never a merge
- Rows are never deleted, so every EmoteLog can rely on its emote existing
"""

from datetime import datetime

from sqlalchemy import BigInteger, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from xiv_emotes.db.base import Base, TZDateTime, utcnow

MAX_COMMAND_LENGTH = 30


class Emote(Base):
    """
    FFXIV Emote entity.

    Maintained exclusively by the catalog sync. Log events never create
    emote rows.
    """

    __tablename__ = "emotes"

    emote_id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)

    # Row ID in the game's Emote sheet (e.g. 1 = /surprised).
    xiv_id: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)

    # Text command with its leading slash, e.g. "/dance".
    command: Mapped[str] = mapped_column(
        String(MAX_COMMAND_LENGTH), unique=True, nullable=False
    )

    insert_tm: Mapped[datetime] = mapped_column(
        TZDateTime, nullable=False, default=utcnow
    )
    update_tm: Mapped[datetime] = mapped_column(
        TZDateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    def __repr__(self) -> str:
        return f"<Emote(xiv_id={self.xiv_id}, command='{self.command}')>"
