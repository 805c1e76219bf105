"""Pytest configuration and fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest

import config
from plugins.base import ResourceHandlerRequest
from plugins.github.client import GitHubRequestError


class FakeGitHubClient:
    """Stand-in for GitHubClient driven by AsyncMocks shared across instances."""

    def __init__(self, api, token, user_agent):
        self.api = api
        self.token = token
        self.user_agent = user_agent

    async def __aenter__(self):
        self.api.opened += 1
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.api.closed += 1

    async def get_membership(self, org, team_slug, username):
        return await self.api.get_membership(org, team_slug, username)

    async def add_or_update_membership(self, org, team_slug, username, role):
        return await self.api.add_or_update_membership(org, team_slug, username, role)

    async def remove_membership(self, org, team_slug, username):
        return await self.api.remove_membership(org, team_slug, username)

    async def list_members(self, org, team_slug):
        for item in self.api.members(org, team_slug):
            if isinstance(item, Exception):
                raise item
            yield item

    async def list_pending_invitations(self, org, team_slug):
        for item in self.api.invitations(org, team_slug):
            if isinstance(item, Exception):
                raise item
            yield item


@pytest.fixture(autouse=True)
def reset_global_config():
    """Each test starts from a fresh configuration singleton."""
    config.reset_config()
    yield
    config.reset_config()


@pytest.fixture
def github_api():
    """Mocked GitHub API capability shared by every client a handler opens."""
    api = MagicMock()
    api.opened = 0
    api.closed = 0
    api.get_membership = AsyncMock(
        side_effect=GitHubRequestError("Not Found", status=404)
    )
    api.add_or_update_membership = AsyncMock(
        return_value={"role": "member", "state": "active"}
    )
    api.remove_membership = AsyncMock(return_value=None)
    api.members = MagicMock(return_value=[])
    api.invitations = MagicMock(return_value=[])
    api.tokens = []
    return api


@pytest.fixture
def client_factory(github_api):
    """Client factory recording the credentials each client was built with."""

    def factory(token, user_agent):
        github_api.tokens.append((token, user_agent))
        return FakeGitHubClient(github_api, token, user_agent)

    return factory


@pytest.fixture
def desired_state():
    """Sample desired state for a team membership."""
    return {
        "Org": "acme",
        "TeamSlug": "eng",
        "Username": "bob",
        "Role": "member",
        "GitHubAccess": "ghp_testtoken",
    }


@pytest.fixture
def make_request(desired_state):
    """Build a ResourceHandlerRequest, optionally overriding desired state."""

    def _make(**overrides):
        state = dict(desired_state)
        state.update(overrides.pop("state", {}))
        return ResourceHandlerRequest(
            desired_resource_state=state,
            logical_resource_identifier=overrides.pop(
                "logical_resource_identifier", "BobEngMembership"
            ),
            **overrides,
        )

    return _make
