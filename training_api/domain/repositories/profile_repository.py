"""
Profile Repository for PostgreSQL operations.
Handles lookups and searches of locally stored user profiles.
"""

from typing import List

from sqlalchemy import Text, cast, or_, select
from sqlalchemy.exc import SQLAlchemyError

from training_api.core.exceptions import (
    DatabaseError,
    InvalidQueryParameterError,
    ProfileNotFoundError,
)
from training_api.core.logging import get_logger
from training_api.domain.models.user import LocalUser, ShortUser
from training_api.infrastructure.database import SORTABLE_COLUMNS, Database, UserProfile

logger = get_logger(__name__)

DEFAULT_ORDER_BY = "account_id"


def resolve_order_by(order_by: str):
    """
    Translate a client sort expression into an ORDER BY clause.

    Accepts a sortable column name optionally followed by ``asc`` or
    ``desc``, e.g. ``account_name desc``.

    Raises:
        InvalidQueryParameterError: If the column is not sortable
    """
    parts = order_by.strip().split()
    if not parts or len(parts) > 2:
        raise InvalidQueryParameterError("orderBy", order_by)

    column = SORTABLE_COLUMNS.get(parts[0].lower())
    if column is None:
        raise InvalidQueryParameterError("orderBy", order_by)

    direction = parts[1].lower() if len(parts) == 2 else "asc"
    if direction == "asc":
        return column.asc()
    if direction == "desc":
        return column.desc()
    raise InvalidQueryParameterError("orderBy", order_by)


class ProfileRepository:
    """Repository for profile operations."""

    def __init__(self, database: Database):
        """Initialize profile repository."""
        self.database = database

    async def get_by_id(self, account_id: int) -> LocalUser:
        """
        Get profile by account ID.

        Args:
            account_id: Account ID (same as the upstream user ID)

        Returns:
            LocalUser: Stored profile

        Raises:
            ProfileNotFoundError: If no profile has this ID
            DatabaseError: If the query fails
        """
        try:
            async with self.database.session() as session:
                row = await session.get(UserProfile, account_id)
        except SQLAlchemyError as e:
            raise DatabaseError(f"Error getting profile {account_id}: {e}") from e

        if row is None:
            raise ProfileNotFoundError(account_id)

        return LocalUser.model_validate(row)

    async def search(
        self,
        query: str,
        limit: int,
        offset: int,
        order_by: str = DEFAULT_ORDER_BY,
    ) -> List[ShortUser]:
        """
        Search profiles by name or ID substring.

        Args:
            query: Case-insensitive substring, empty matches everything
            limit: Maximum number of rows to return
            offset: Number of rows to skip
            order_by: Sortable column, optionally followed by asc/desc

        Returns:
            List of matching profiles, empty when nothing matches

        Raises:
            InvalidQueryParameterError: If order_by is not sortable
            DatabaseError: If the query fails
        """
        order_clause = resolve_order_by(order_by)
        pattern = f"%{query}%"

        stmt = (
            select(UserProfile.account_id, UserProfile.account_name)
            .where(
                or_(
                    UserProfile.account_name.ilike(pattern),
                    cast(UserProfile.account_id, Text).ilike(pattern),
                )
            )
            .order_by(order_clause)
            .limit(limit)
            .offset(offset)
        )

        try:
            async with self.database.session() as session:
                result = await session.execute(stmt)
                rows = result.all()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Error searching profiles: {e}") from e

        logger.debug(
            f"Retrieved {len(rows)} profiles (query={query!r}, limit={limit}, "
            f"offset={offset}, order_by={order_by!r})"
        )
        return [ShortUser(id=account_id, login=account_name or "") for account_id, account_name in rows]

    async def save(self, profile: LocalUser) -> LocalUser:
        """
        Insert or update a profile.

        Args:
            profile: Profile to store

        Returns:
            LocalUser: The stored profile

        Raises:
            DatabaseError: If the write fails
        """
        try:
            async with self.database.session() as session:
                await session.merge(UserProfile(**profile.model_dump()))
                await session.commit()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Error saving profile {profile.account_id}: {e}") from e

        logger.info(f"Saved profile {profile.account_id} ({profile.account_name})")
        return profile
