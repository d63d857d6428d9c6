"""
Training Router.
Proxies the upstream game-server API and serves local profile lookups.
"""

from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response

from training_api.api.deps.providers import get_training_client, get_user_service
from training_api.api.services.user_service import UserService, parse_limit, parse_page
from training_api.api.templates.response_templates import empty_response, error_json, write_json
from training_api.core.exceptions import (
    InvalidQueryParameterError,
    ProfileNotFoundError,
    TrainingAPIException,
    UpstreamStatusError,
)
from training_api.core.logging import get_logger, log_error
from training_api.core.training_external_service import TrainingApiClient
from training_api.domain.repositories.profile_repository import DEFAULT_ORDER_BY

logger = get_logger(__name__)

# Create router
router = APIRouter()


async def _proxy(client: TrainingApiClient, path: str) -> Response:
    result = await client.fetch(path)
    return write_json(result.status_code, result.payload)


@router.get("/online")
async def online(client: TrainingApiClient = Depends(get_training_client)) -> Response:
    """Players currently online, passed through from upstream."""
    return await _proxy(client, "/online")


@router.get("/admins")
async def admins(client: TrainingApiClient = Depends(get_training_client)) -> Response:
    """Server admins, passed through from upstream."""
    return await _proxy(client, "/admin")


@router.get("/user")
async def users(client: TrainingApiClient = Depends(get_training_client)) -> Response:
    """Upstream user listing."""
    return await _proxy(client, "/user")


@router.get("/user/{user}")
async def user(user: str, client: TrainingApiClient = Depends(get_training_client)) -> Response:
    """Single upstream user by name."""
    return await _proxy(client, f"/user/{quote(user, safe='')}")


@router.get("/v2/user")
async def v2_user(
    nickname: Optional[str] = Query(None, description="Upstream login to look up"),
    limit: Optional[str] = Query(None, description="Page size (1-1000)"),
    page: Optional[str] = Query(None, description="Page number (1-indexed)"),
    order_by: Optional[str] = Query(None, alias="orderBy", description="Sortable column, optionally with asc/desc"),
    search: str = Query("", description="Substring of the account name or ID"),
    user_service: UserService = Depends(get_user_service),
) -> Response:
    """
    Look up one user by nickname, or page through local profiles.

    With ``nickname`` the upstream user is returned, merged with the local
    profile when one exists. Without it ``limit`` and ``page`` are required
    and a list of ``{"id", "login"}`` rows is returned.

    Examples:
        - /api/training/v2/user?nickname=Player
        - /api/training/v2/user?limit=20&page=2&search=pla&orderBy=account_name
    """
    if nickname:
        return await _lookup_by_nickname(user_service, nickname)

    try:
        limit_value = parse_limit(limit)
        page_value = parse_page(page)
        found_users = await user_service.search(
            search, limit_value, page_value, order_by or DEFAULT_ORDER_BY
        )
    except InvalidQueryParameterError as e:
        logger.debug(f"Rejected v2 user search: {e.message}")
        return empty_response(status.HTTP_400_BAD_REQUEST)
    except ProfileNotFoundError:
        return empty_response(status.HTTP_404_NOT_FOUND)
    except Exception as e:
        log_error(e, {"search": search, "limit": limit, "page": page, "orderBy": order_by})
        return empty_response(status.HTTP_500_INTERNAL_SERVER_ERROR)

    return write_json(status.HTTP_200_OK, found_users)


async def _lookup_by_nickname(user_service: UserService, nickname: str) -> Response:
    try:
        found = await user_service.lookup_by_nickname(nickname)
    except UpstreamStatusError as e:
        return error_json(e.status_code, e.message)
    except TrainingAPIException as e:
        logger.warning(f"Upstream lookup for {nickname!r} failed: {e.message}")
        return error_json(status.HTTP_400_BAD_REQUEST, "Bad Request")

    return write_json(status.HTTP_200_OK, found)
