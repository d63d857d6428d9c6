import os
import sys
from typing import Any, Dict, List, Optional

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from asgi_lifespan import LifespanManager

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)
os.environ.setdefault("ANYIO_BACKEND", "asyncio")

from training_api.core.config import Settings  # noqa: E402
from training_api.domain.models.user import LocalUser  # noqa: E402
from training_api.domain.repositories.profile_repository import ProfileRepository  # noqa: E402
from training_api.main import create_app  # noqa: E402

API = "/api/training"


class FakeUpstream:
    """Canned answers for the upstream game-server API, keyed by path below /api."""

    def __init__(self):
        self.routes: Dict[str, Dict[str, Any]] = {}
        self.requests: List[httpx.Request] = []

    def add(
        self,
        path: str,
        status_code: int = 200,
        json: Any = None,
        content: Optional[bytes] = None,
        exc: Optional[Exception] = None,
    ) -> None:
        self.routes[path] = {
            "status_code": status_code,
            "json": json,
            "content": content,
            "exc": exc,
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.startswith("/api"):
            path = path[len("/api"):]

        route = self.routes.get(path)
        if route is None:
            return httpx.Response(404, json={"error": "not found"})
        if route["exc"] is not None:
            raise route["exc"]
        if route["content"] is not None:
            return httpx.Response(route["status_code"], content=route["content"])
        return httpx.Response(route["status_code"], json=route["json"])


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def upstream() -> FakeUpstream:
    """Stub upstream API shared by the app under test."""
    return FakeUpstream()


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway SQLite database."""
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'training.db'}",
        LOG_LEVEL="INFO",
    )


@pytest.fixture
def app(test_settings, upstream):
    return create_app(test_settings, transport=httpx.MockTransport(upstream.handler))


@pytest.fixture
async def async_client(app):
    """Shared HTTPX async client with FastAPI lifespan handling."""
    async with LifespanManager(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as client:
            yield client


@pytest.fixture
async def profile_repository(app, async_client) -> ProfileRepository:
    """Repository on the database the running app uses."""
    return ProfileRepository(app.state.database)


@pytest.fixture
def sample_profile() -> LocalUser:
    return LocalUser(
        account_id=42,
        account_name="Chazari",
        account_names=["Chazari", "Chaz"],
        avatar="avatar.png",
        background="bg.png",
        vip="gold",
        social_credits=12.5,
        kills=100,
        deaths=40,
        cop_chase_rating=1500,
        punishments=["mute 1h"],
        verification="verified",
        achievement="veteran",
        telegram="@chazari",
        prefix="[T]",
        star="*",
        application_verification="approved",
    )


@pytest.fixture
def upstream_user_payload() -> Dict[str, Any]:
    return {
        "id": 42,
        "login": "Chazari",
        "access": 1,
        "moder": 0,
        "verify": 1,
        "verifyText": "Verified player",
        "mute": 0,
        "online": 1,
        "playerid": 7,
        "regdate": "2021-03-04 10:00:00",
        "lastlogin": "2024-01-01 12:00:00",
        "warn": [
            {"reason": "flood", "admin": "Root", "bantime": "2023-05-05 10:00:00"},
        ],
    }
