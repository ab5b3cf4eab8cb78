"""
SQLAlchemy ORM models for persistent storage.

Models mirror the dataclass models but add database persistence.
"""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class UserAccountDB(Base):
    """
    A community member known by their Twitch identity.

    Created on first login or on the first chat message from an unseen
    identity. Never deleted.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    twitch_id: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    username: Mapped[str] = mapped_column(String(255))
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    profile_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False)
    currency: Mapped[int] = mapped_column(Integer, default=0)
    last_pack_claimed: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self) -> str:
        return f"<UserAccountDB(twitch_id={self.twitch_id}, username={self.username})>"


class CardDefinitionDB(Base):
    """
    A card template with a supply cap.

    max_supply of -1 means unlimited. current_supply counts minted instances
    and is only ever changed through a conditional increment.
    """

    __tablename__ = "card_definitions"
    __table_args__ = (
        UniqueConstraint("name", "type", "rarity", name="uq_definition_name_type_rarity"),
        CheckConstraint("max_supply >= -1", name="ck_definition_max_supply"),
        CheckConstraint("current_supply >= 0", name="ck_definition_current_supply"),
        CheckConstraint(
            "max_supply = -1 OR current_supply <= max_supply",
            name="ck_definition_supply_cap",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), index=True)
    type: Mapped[str] = mapped_column(String(50))
    rarity: Mapped[str] = mapped_column(String(50))
    attack: Mapped[int] = mapped_column(Integer, default=0)
    defense: Mapped[int] = mapped_column(Integer, default=0)
    character_image_url: Mapped[str] = mapped_column(Text)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    max_supply: Mapped[int] = mapped_column(Integer, default=-1)
    current_supply: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self) -> str:
        return (
            f"<CardDefinitionDB(name={self.name}, "
            f"supply={self.current_supply}/{self.max_supply})>"
        )


class CardInstanceDB(Base):
    """
    A minted card owned by one user.

    Descriptive fields and supply numbers are copied from the definition at
    mint time. Rows are never updated after insert.
    """

    __tablename__ = "card_instances"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    definition_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("card_definitions.id", ondelete="SET NULL"), nullable=True
    )
    owner_id: Mapped[str | None] = mapped_column(String(64), index=True, nullable=True)
    name: Mapped[str] = mapped_column(String(255))
    type: Mapped[str] = mapped_column(String(50))
    rarity: Mapped[str] = mapped_column(String(50))
    attack: Mapped[int] = mapped_column(Integer, default=0)
    defense: Mapped[int] = mapped_column(Integer, default=0)
    character_image_url: Mapped[str] = mapped_column(Text)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    max_supply: Mapped[int] = mapped_column(Integer)
    current_supply: Mapped[int] = mapped_column(Integer)
    minted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self) -> str:
        return f"<CardInstanceDB(id={self.id}, name={self.name}, owner={self.owner_id})>"
