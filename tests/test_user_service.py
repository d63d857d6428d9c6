import pytest

from training_api.api.services.user_service import (
    UserService,
    page_offset,
    parse_limit,
    parse_page,
)
from training_api.core.exceptions import InvalidQueryParameterError, ProfileNotFoundError
from training_api.domain.models.user import LocalUser, LongUser, UpstreamUser

pytestmark = pytest.mark.anyio


class RecordingRepository:
    def __init__(self, profile=None):
        self.profile = profile
        self.searches = []

    async def get_by_id(self, account_id):
        if self.profile is None:
            raise ProfileNotFoundError(account_id)
        return self.profile

    async def search(self, query, limit, offset, order_by="account_id"):
        self.searches.append((query, limit, offset, order_by))
        return []


class StubClient:
    def __init__(self, user):
        self.user = user

    async def get_user(self, nickname):
        return self.user


@pytest.mark.parametrize("limit", [1, 7, 250, 1000])
@pytest.mark.parametrize("page", [1, 2, 13])
async def test_search_offset_is_page_minus_one_times_limit(limit, page):
    repository = RecordingRepository()
    service = UserService(StubClient(None), repository)

    await service.search("abc", limit, page, "account_name")

    assert repository.searches == [("abc", limit, (page - 1) * limit, "account_name")]


def test_page_offset():
    assert page_offset(1, 50) == 0
    assert page_offset(4, 25) == 75


def test_page_offset_rejects_offsets_past_int64():
    assert page_offset(2**53, 1000) == (2**53 - 1) * 1000
    with pytest.raises(InvalidQueryParameterError):
        page_offset(2**62, 1000)


def test_parse_limit_bounds():
    assert parse_limit("1") == 1
    assert parse_limit("1000") == 1000
    for raw in ["0", "1001", "abc", "", None, "-3", "1e3"]:
        with pytest.raises(InvalidQueryParameterError):
            parse_limit(raw)


def test_parse_page_bounds():
    assert parse_page("1") == 1
    assert parse_page("+2") == 2
    assert parse_page("99999") == 99999
    assert parse_page("9223372036854775807") == 2**63 - 1
    for raw in ["0", "-1", "abc", "", None, "9223372036854775808"]:
        with pytest.raises(InvalidQueryParameterError):
            parse_page(raw)


async def test_lookup_merges_when_profile_exists(sample_profile):
    upstream_user = UpstreamUser(id=42, login="Chazari")
    service = UserService(StubClient(upstream_user), RecordingRepository(sample_profile))

    found = await service.lookup_by_nickname("Chazari")

    assert isinstance(found, LongUser)
    assert found.login == "Chazari"
    assert found.kills == sample_profile.kills


async def test_lookup_returns_upstream_user_when_profile_missing():
    upstream_user = UpstreamUser(id=42, login="Chazari")
    service = UserService(StubClient(upstream_user), RecordingRepository())

    found = await service.lookup_by_nickname("Chazari")

    assert found is upstream_user


def test_local_user_treats_nulls_as_zero_values():
    user = LocalUser.model_validate(
        {"account_id": 1, "account_name": None, "punishments": None, "kills": None, "social_credits": None}
    )

    assert user == LocalUser(account_id=1)
