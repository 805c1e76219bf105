"""Unit tests for the GitHub REST client."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from config import GitHubConfig
from plugins.github.client import GitHubClient, GitHubRequestError

# ==================== Helpers ====================


def _response(status=200, body=None, links=None, headers=None, text=""):
    resp = AsyncMock()
    resp.status = status
    resp.json = AsyncMock(return_value=body)
    resp.text = AsyncMock(return_value=text)
    resp.links = links or {}
    resp.headers = headers or {}
    return resp


def _cm(resp=None, error=None):
    if error is not None:
        return AsyncMock(
            __aenter__=AsyncMock(side_effect=error),
            __aexit__=AsyncMock(return_value=False),
        )
    return AsyncMock(
        __aenter__=AsyncMock(return_value=resp),
        __aexit__=AsyncMock(return_value=False),
    )


@pytest.fixture
def gh_config():
    return GitHubConfig(api_base_url="https://api.github.test", per_page=2)


@pytest.fixture
def mock_session():
    session = MagicMock()
    session.close = AsyncMock()
    return session


@pytest.fixture
def session_cls(mock_session):
    with patch("plugins.github.client.aiohttp.ClientSession") as cls:
        cls.return_value = mock_session
        yield cls


def _client(gh_config):
    return GitHubClient("ghp_token", "test-agent/1.0", config=gh_config)


# ==================== Session lifecycle ====================


@pytest.mark.asyncio
class TestSessionLifecycle:
    """Tests for session construction and headers."""

    async def test_headers(self, gh_config, session_cls, mock_session):
        async with _client(gh_config):
            pass

        headers = session_cls.call_args.kwargs["headers"]
        assert headers["Authorization"] == "Bearer ghp_token"
        assert headers["User-Agent"] == "test-agent/1.0"
        assert headers["Accept"] == "application/vnd.github+json"
        assert headers["X-GitHub-Api-Version"] == "2022-11-28"
        assert session_cls.call_args.kwargs["timeout"].total == 30
        mock_session.close.assert_awaited_once()

    async def test_no_token_no_authorization_header(self, gh_config, session_cls):
        async with GitHubClient(None, "test-agent/1.0", config=gh_config):
            pass

        assert "Authorization" not in session_cls.call_args.kwargs["headers"]

    async def test_request_outside_context_raises(self, gh_config):
        with pytest.raises(RuntimeError):
            await _client(gh_config).get_membership("acme", "eng", "bob")


# ==================== Membership endpoints ====================


@pytest.mark.asyncio
class TestMembershipEndpoints:
    """Tests for GET/PUT/DELETE membership."""

    async def test_get_membership(self, gh_config, session_cls, mock_session):
        mock_session.request = MagicMock(
            return_value=_cm(_response(body={"role": "member", "state": "active"}))
        )

        async with _client(gh_config) as client:
            data = await client.get_membership("acme", "eng", "bob")

        assert data == {"role": "member", "state": "active"}
        mock_session.request.assert_called_once_with(
            "GET",
            "https://api.github.test/orgs/acme/teams/eng/memberships/bob",
            json=None,
            params=None,
        )

    async def test_add_or_update_membership(self, gh_config, session_cls, mock_session):
        mock_session.request = MagicMock(
            return_value=_cm(
                _response(body={"role": "maintainer", "state": "pending"})
            )
        )

        async with _client(gh_config) as client:
            data = await client.add_or_update_membership(
                "acme", "eng", "bob", "maintainer"
            )

        assert data["state"] == "pending"
        mock_session.request.assert_called_once_with(
            "PUT",
            "https://api.github.test/orgs/acme/teams/eng/memberships/bob",
            json={"role": "maintainer"},
            params=None,
        )

    async def test_add_without_role_sends_empty_body(
        self, gh_config, session_cls, mock_session
    ):
        mock_session.request = MagicMock(
            return_value=_cm(_response(body={"role": "member", "state": "active"}))
        )

        async with _client(gh_config) as client:
            await client.add_or_update_membership("acme", "eng", "bob", None)

        assert mock_session.request.call_args.kwargs["json"] == {}

    async def test_remove_membership(self, gh_config, session_cls, mock_session):
        resp = _response(status=204)
        mock_session.request = MagicMock(return_value=_cm(resp))

        async with _client(gh_config) as client:
            result = await client.remove_membership("acme", "eng", "bob")

        assert result is None
        resp.json.assert_not_awaited()
        assert mock_session.request.call_args.args[0] == "DELETE"

    async def test_path_values_are_encoded(self, gh_config, session_cls, mock_session):
        mock_session.request = MagicMock(return_value=_cm(_response(status=204)))

        async with _client(gh_config) as client:
            await client.remove_membership(
                "acme", "eng", "bob/../../../../orgs/acme/teams/admins/memberships/x"
            )

        assert mock_session.request.call_args.args[1] == (
            "https://api.github.test/orgs/acme/teams/eng/memberships/"
            "bob%2F..%2F..%2F..%2F..%2Forgs%2Facme%2Fteams%2Fadmins%2Fmemberships%2Fx"
        )

    async def test_query_characters_are_encoded(
        self, gh_config, session_cls, mock_session
    ):
        mock_session.request = MagicMock(
            return_value=_cm(_response(body={"role": "member", "state": "active"}))
        )

        async with _client(gh_config) as client:
            await client.get_membership("ac me", "eng#x", "bob?role=maintainer")

        assert mock_session.request.call_args.args[1] == (
            "https://api.github.test/orgs/ac%20me/teams/eng%23x/memberships/"
            "bob%3Frole%3Dmaintainer"
        )


# ==================== Errors ====================


@pytest.mark.asyncio
class TestErrors:
    """Tests for error responses and transport failures."""

    async def test_error_with_field_errors(self, gh_config, session_cls, mock_session):
        mock_session.request = MagicMock(
            return_value=_cm(
                _response(
                    status=422,
                    body={
                        "message": "Validation Failed",
                        "errors": [{"message": "a"}, {"message": "b"}],
                    },
                )
            )
        )

        async with _client(gh_config) as client:
            with pytest.raises(GitHubRequestError) as exc_info:
                await client.add_or_update_membership("acme", "eng", "bob", "member")

        assert exc_info.value.status == 422
        assert exc_info.value.message == "Validation Failed"
        assert exc_info.value.errors == [{"message": "a"}, {"message": "b"}]

    async def test_error_keeps_headers(self, gh_config, session_cls, mock_session):
        mock_session.request = MagicMock(
            return_value=_cm(
                _response(
                    status=403,
                    body={"message": "API rate limit exceeded"},
                    headers={"X-RateLimit-Remaining": "0"},
                )
            )
        )

        async with _client(gh_config) as client:
            with pytest.raises(GitHubRequestError) as exc_info:
                await client.get_membership("acme", "eng", "bob")

        assert exc_info.value.headers["X-RateLimit-Remaining"] == "0"

    async def test_error_without_json_body(self, gh_config, session_cls, mock_session):
        mock_session.request = MagicMock(
            return_value=_cm(_response(status=502, body=None, text=""))
        )

        async with _client(gh_config) as client:
            with pytest.raises(GitHubRequestError) as exc_info:
                await client.get_membership("acme", "eng", "bob")

        assert exc_info.value.status == 502
        assert exc_info.value.message == "HTTP 502"
        assert exc_info.value.errors == []

    async def test_connection_error(self, gh_config, session_cls, mock_session):
        mock_session.request = MagicMock(
            return_value=_cm(error=aiohttp.ClientConnectionError("refused"))
        )

        async with _client(gh_config) as client:
            with pytest.raises(GitHubRequestError) as exc_info:
                await client.get_membership("acme", "eng", "bob")

        assert exc_info.value.status is None
        assert "refused" in exc_info.value.message

    async def test_timeout(self, gh_config, session_cls, mock_session):
        mock_session.request = MagicMock(
            return_value=_cm(error=asyncio.TimeoutError())
        )

        async with _client(gh_config) as client:
            with pytest.raises(GitHubRequestError) as exc_info:
                await client.get_membership("acme", "eng", "bob")

        assert exc_info.value.status is None
        assert "timed out" in exc_info.value.message


# ==================== Pagination ====================


@pytest.mark.asyncio
class TestPagination:
    """Tests for Link-header pagination."""

    async def test_drains_all_pages(self, gh_config, session_cls, mock_session):
        next_url = "https://api.github.test/organizations/1/team/2/members?per_page=2&page=2"
        mock_session.request = MagicMock(
            side_effect=[
                _cm(
                    _response(
                        body=[{"login": "alice"}, {"login": "bob"}],
                        links={"next": {"url": next_url}},
                    )
                ),
                _cm(_response(body=[{"login": "carol"}])),
            ]
        )

        async with _client(gh_config) as client:
            members = [m async for m in client.list_members("acme", "eng")]

        assert [m["login"] for m in members] == ["alice", "bob", "carol"]
        first, second = mock_session.request.call_args_list
        assert first.args == (
            "GET",
            "https://api.github.test/orgs/acme/teams/eng/members",
        )
        assert first.kwargs["params"] == {"per_page": 2}
        assert second.args == ("GET", next_url)
        assert second.kwargs["params"] is None

    async def test_pending_invitations_endpoint(
        self, gh_config, session_cls, mock_session
    ):
        mock_session.request = MagicMock(
            return_value=_cm(_response(body=[{"login": "dave"}]))
        )

        async with _client(gh_config) as client:
            invites = [
                i async for i in client.list_pending_invitations("acme", "eng")
            ]

        assert invites == [{"login": "dave"}]
        assert (
            mock_session.request.call_args.args[1]
            == "https://api.github.test/orgs/acme/teams/eng/invitations"
        )

    async def test_list_path_values_are_encoded(
        self, gh_config, session_cls, mock_session
    ):
        mock_session.request = MagicMock(return_value=_cm(_response(body=[])))

        async with _client(gh_config) as client:
            members = [m async for m in client.list_members("acme", "eng/../admins")]

        assert members == []
        assert (
            mock_session.request.call_args.args[1]
            == "https://api.github.test/orgs/acme/teams/eng%2F..%2Fadmins/members"
        )

    async def test_error_on_later_page_propagates(
        self, gh_config, session_cls, mock_session
    ):
        mock_session.request = MagicMock(
            side_effect=[
                _cm(
                    _response(
                        body=[{"login": "alice"}],
                        links={"next": {"url": "https://api.github.test/next"}},
                    )
                ),
                _cm(_response(status=500, body={"message": "Server Error"})),
            ]
        )

        async with _client(gh_config) as client:
            with pytest.raises(GitHubRequestError) as exc_info:
                [m async for m in client.list_members("acme", "eng")]

        assert exc_info.value.status == 500
