"""Emote Bot Database Models.

All models use SQLAlchemy 2.0 syntax with PostgreSQL dialect.
"""

from xiv_emotes.db.base import Base
from xiv_emotes.db.models.emote import Emote
from xiv_emotes.db.models.emote_log import EmoteLog, EmoteLogTag
from xiv_emotes.db.models.guild import Guild
from xiv_emotes.db.models.user import User

__all__ = [
    "Base",
    "Emote",
    "EmoteLog",
    "EmoteLogTag",
    "Guild",
    "User",
]
