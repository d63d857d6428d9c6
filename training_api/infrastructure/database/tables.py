"""
SQLAlchemy table definitions for locally stored profiles.

The layout matches the table the administrative tooling creates: lists are
jsonb, counters bigint, and every column except the key may hold NULL for
a zero value.
"""

from typing import List, Optional

from sqlalchemy import JSON, BigInteger, Float, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# jsonb on PostgreSQL, JSON everywhere else
StringList = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Declarative base for profile tables."""


class UserProfile(Base):
    """Maps to the 'users' table."""

    __tablename__ = "users"

    account_id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    account_name: Mapped[Optional[str]] = mapped_column(Text, unique=True)
    account_names: Mapped[Optional[List[str]]] = mapped_column(StringList, default=list)
    avatar: Mapped[Optional[str]] = mapped_column(Text, default="")
    background: Mapped[Optional[str]] = mapped_column(Text, default="")
    vip: Mapped[Optional[str]] = mapped_column(Text, default="")
    social_credits: Mapped[Optional[float]] = mapped_column(Float, default=0.0)
    kills: Mapped[Optional[int]] = mapped_column(BigInteger, default=0)
    deaths: Mapped[Optional[int]] = mapped_column(BigInteger, default=0)
    cop_chase_rating: Mapped[Optional[int]] = mapped_column(BigInteger, default=0)
    punishments: Mapped[Optional[List[str]]] = mapped_column(StringList, default=list)
    verification: Mapped[Optional[str]] = mapped_column(Text, default="")
    achievement: Mapped[Optional[str]] = mapped_column(Text, default="")
    telegram: Mapped[Optional[str]] = mapped_column(Text, default="")
    prefix: Mapped[Optional[str]] = mapped_column(Text, default="")
    star: Mapped[Optional[str]] = mapped_column(Text, default="")
    application_verification: Mapped[Optional[str]] = mapped_column(Text, default="")


# Columns a client may sort search results by
SORTABLE_COLUMNS = {
    "account_id": UserProfile.account_id,
    "account_name": UserProfile.account_name,
    "social_credits": UserProfile.social_credits,
    "kills": UserProfile.kills,
    "deaths": UserProfile.deaths,
    "cop_chase_rating": UserProfile.cop_chase_rating,
}
