"""Emote usage log ORM models.

EmoteLog is APPEND-ONLY: one row per successful emote invocation, never
updated or deleted. EmoteLogTag rows record the users mentioned in that
invocation and are written in the same transaction as their log.
"""

from datetime import datetime

from sqlalchemy import BigInteger, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from xiv_emotes.db.base import Base, TZDateTime, utcnow


class EmoteLog(Base):
    """
    A single emote invocation.

    guild_id is NULL for direct messages. sent_at is the Discord event time;
    insert_tm is when the row was written.
    """

    __tablename__ = "emote_logs"

    emote_log_id: Mapped[int] = mapped_column(
        BigInteger, primary_key=True, autoincrement=True
    )

    # Invoker
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.user_id"), nullable=False
    )

    # NULL outside of a guild
    guild_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("guilds.guild_id"), nullable=True
    )

    # Surrogate key of the emote (not its xiv_id)
    emote_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("emotes.emote_id"), nullable=False
    )

    sent_at: Mapped[datetime] = mapped_column(TZDateTime, nullable=False)

    insert_tm: Mapped[datetime] = mapped_column(
        TZDateTime, nullable=False, default=utcnow
    )
    update_tm: Mapped[datetime] = mapped_column(
        TZDateTime, nullable=False, default=utcnow
    )

    tags: Mapped[list["EmoteLogTag"]] = relationship(
        "EmoteLogTag",
        back_populates="emote_log",
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        # Per-user sent statistics
        Index("ix_emote_logs_user_id", "user_id"),
        # Per-guild statistics
        Index("ix_emote_logs_guild_id", "guild_id"),
        # Per-emote statistics
        Index("ix_emote_logs_emote_id", "emote_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<EmoteLog(emote_log_id={self.emote_log_id}, user_id={self.user_id}, "
            f"emote_id={self.emote_id})>"
        )


class EmoteLogTag(Base):
    """
    A user mentioned in an emote invocation.

    Composite primary key (emote_log_id, user_id): tagging the same user
    twice in one invocation collapses to one row.
    """

    __tablename__ = "emote_log_tags"

    emote_log_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("emote_logs.emote_log_id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.user_id"), primary_key=True
    )

    insert_tm: Mapped[datetime] = mapped_column(
        TZDateTime, nullable=False, default=utcnow
    )
    update_tm: Mapped[datetime] = mapped_column(
        TZDateTime, nullable=False, default=utcnow
    )

    emote_log: Mapped["EmoteLog"] = relationship("EmoteLog", back_populates="tags")

    __table_args__ = (
        # Received statistics look tags up by user
        Index("ix_emote_log_tags_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<EmoteLogTag(emote_log_id={self.emote_log_id}, user_id={self.user_id})>"
        )
