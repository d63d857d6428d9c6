"""
User Service Layer.
Merges upstream users with local profiles and runs profile searches.
"""

import re
from typing import List, Optional, Union

from training_api.core.exceptions import InvalidQueryParameterError, ProfileNotFoundError
from training_api.core.logging import get_logger, log_error
from training_api.core.training_external_service import TrainingApiClient
from training_api.domain.models.user import LongUser, ShortUser, UpstreamUser
from training_api.domain.repositories.profile_repository import (
    DEFAULT_ORDER_BY,
    ProfileRepository,
)

logger = get_logger(__name__)

MIN_LIMIT = 1
MAX_LIMIT = 1000
MIN_PAGE = 1

# SQL OFFSET is a signed 64-bit integer
MAX_INT64 = 2**63 - 1

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def _parse_int(name: str, raw: Optional[str], minimum: int, maximum: Optional[int] = None) -> int:
    if raw is None or not _INTEGER_RE.fullmatch(raw):
        raise InvalidQueryParameterError(name, raw)
    value = int(raw)
    if value < minimum or (maximum is not None and value > maximum):
        raise InvalidQueryParameterError(name, raw)
    return value


def parse_limit(raw: Optional[str]) -> int:
    """Parse the ``limit`` query parameter (1..1000)."""
    return _parse_int("limit", raw, MIN_LIMIT, MAX_LIMIT)


def parse_page(raw: Optional[str]) -> int:
    """Parse the ``page`` query parameter (1..2**63-1)."""
    return _parse_int("page", raw, MIN_PAGE, MAX_INT64)


def page_offset(page: int, limit: int) -> int:
    """
    Row offset of a 1-indexed page.

    Raises:
        InvalidQueryParameterError: If the offset does not fit in 64 bits
    """
    offset = (page - 1) * limit
    if offset > MAX_INT64:
        raise InvalidQueryParameterError("page", str(page))
    return offset


class UserService:
    """Service class for v2 user operations."""

    def __init__(self, client: TrainingApiClient, repository: ProfileRepository):
        """Initialize user service."""
        self.client = client
        self.repository = repository

    async def lookup_by_nickname(self, nickname: str) -> Union[LongUser, UpstreamUser]:
        """
        Get an upstream user by nickname, enriched with the local profile when one exists.

        Upstream errors propagate. Storage errors never do: a missing
        profile or a failing database both fall back to the plain
        upstream user, and only the latter is logged.
        """
        upstream_user = await self.client.get_user(nickname)

        try:
            profile = await self.repository.get_by_id(upstream_user.id)
        except ProfileNotFoundError:
            return upstream_user
        except Exception as e:
            # TODO: surface database outages as 500 once clients can handle it
            log_error(e, {"account_id": upstream_user.id, "nickname": nickname})
            return upstream_user

        return LongUser.merge(upstream_user, profile)

    async def search(
        self,
        query: str,
        limit: int,
        page: int,
        order_by: str = DEFAULT_ORDER_BY,
    ) -> List[ShortUser]:
        """
        Search local profiles one page at a time.

        Args:
            query: Substring of the account name or ID
            limit: Page size
            page: 1-indexed page number
            order_by: Sortable column

        Returns:
            List of ShortUser rows
        """
        offset = page_offset(page, limit)
        logger.debug(f"Searching profiles: query={query!r}, limit={limit}, page={page}, offset={offset}")
        return await self.repository.search(query, limit, offset, order_by)
