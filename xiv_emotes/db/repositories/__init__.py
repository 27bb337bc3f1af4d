"""Repository layer for database operations.

Provides clean separation between data access and business logic.
Repository functions take an AsyncSession and never commit; transactions
are owned by the caller.
"""

from xiv_emotes.db.repositories.emote_log_repository import (
    EmoteLogQuery,
    LogDirection,
    count_emote_logs,
    insert_tags,
    record_invocation,
)
from xiv_emotes.db.repositories.emote_repository import (
    find_emote_by_command,
    find_emote_id,
    list_emotes,
    register_emote,
)
from xiv_emotes.db.repositories.identity_repository import (
    find_guild_key,
    find_user_key,
    resolve_guild,
    resolve_user,
    resolve_user_keys,
    resolve_users,
)
from xiv_emotes.db.repositories.preference_repository import (
    get_guild_preference,
    get_user_preference,
    set_guild_preference,
    set_user_preference,
)

__all__ = [
    "EmoteLogQuery",
    "LogDirection",
    "count_emote_logs",
    "insert_tags",
    "record_invocation",
    "find_emote_by_command",
    "find_emote_id",
    "list_emotes",
    "register_emote",
    "find_guild_key",
    "find_user_key",
    "resolve_guild",
    "resolve_user",
    "resolve_user_keys",
    "resolve_users",
    "get_guild_preference",
    "get_user_preference",
    "set_guild_preference",
    "set_user_preference",
]
