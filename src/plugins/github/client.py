"""
GitHub REST client for team membership calls.

A GitHubClient is a short-lived handle: it is built from the credentials of
one request, used for one remote interaction, and closed afterwards. Errors
come back as GitHubRequestError whatever their origin (HTTP status or
transport failure).
"""

import asyncio
import logging
from typing import Any, AsyncIterator, Dict, List, Optional
from urllib.parse import quote

import aiohttp

from config import GitHubConfig, get_config

logger = logging.getLogger(__name__)


class GitHubRequestError(Exception):
    """Raised when a GitHub API request fails."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        errors: Optional[List[Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message
        self.status = status
        self.errors = errors or []
        self.headers = headers or {}
        super().__init__(message)


class GitHubClient:
    """
    Minimal async GitHub client for the team membership endpoints.

    Use as an async context manager so the underlying session is always
    closed:

        async with GitHubClient(token, user_agent) as client:
            data = await client.get_membership("acme", "eng", "bob")
    """

    def __init__(
        self,
        token: Optional[str],
        user_agent: str,
        config: Optional[GitHubConfig] = None,
    ):
        self.config = config or get_config().github
        self._token = token
        self._user_agent = user_agent
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "GitHubClient":
        self._session = aiohttp.ClientSession(
            headers=self._get_headers(),
            timeout=aiohttp.ClientTimeout(total=self.config.request_timeout),
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    # Membership endpoints

    async def get_membership(
        self, org: str, team_slug: str, username: str
    ) -> Dict[str, Any]:
        """GET a team membership; returns ``{role, state, url}``."""
        data, _ = await self._request(
            "GET", self._membership_path(org, team_slug, username)
        )
        return data

    async def add_or_update_membership(
        self, org: str, team_slug: str, username: str, role: Optional[str]
    ) -> Dict[str, Any]:
        """PUT a team membership (idempotent create-or-update)."""
        payload = {"role": role} if role else {}
        data, _ = await self._request(
            "PUT", self._membership_path(org, team_slug, username), json=payload
        )
        return data

    async def remove_membership(self, org: str, team_slug: str, username: str) -> None:
        """DELETE a team membership."""
        await self._request("DELETE", self._membership_path(org, team_slug, username))

    def list_members(self, org: str, team_slug: str) -> AsyncIterator[Dict[str, Any]]:
        """Iterate over all active members of a team, across pages."""
        return self.paginate(f"{self._team_path(org, team_slug)}/members")

    def list_pending_invitations(
        self, org: str, team_slug: str
    ) -> AsyncIterator[Dict[str, Any]]:
        """Iterate over all pending invitations of a team, across pages."""
        return self.paginate(f"{self._team_path(org, team_slug)}/invitations")

    async def paginate(
        self, path: str, params: Optional[Dict[str, Any]] = None
    ) -> AsyncIterator[Dict[str, Any]]:
        """
        Yield every item of a paginated list endpoint.

        GitHub returns a ``Link`` header with a ``rel="next"`` URL while more
        pages remain; the next URL already carries the query string, so
        params are only sent with the first request.
        """
        url: Optional[str] = self._url(path)
        query = {"per_page": self.config.per_page, **(params or {})}
        page = 0

        while url:
            page += 1
            items, response_links = await self._request(
                "GET", url, params=query, absolute=True
            )
            logger.debug(f"Fetched page {page} of {path}: {len(items or [])} items")
            for item in items or []:
                yield item

            next_link = response_links.get("next")
            url = str(next_link["url"]) if next_link else None
            query = None

    # Private helper methods

    def _get_headers(self) -> Dict[str, str]:
        """Get HTTP headers for GitHub API requests."""
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": self.config.api_version,
            "User-Agent": self._user_agent,
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _url(self, path: str) -> str:
        return f"{self.config.api_base_url}{path}"

    @staticmethod
    def _team_path(org: str, team_slug: str) -> str:
        # Every value must stay a single path segment
        return f"/orgs/{quote(org, safe='')}/teams/{quote(team_slug, safe='')}"

    @classmethod
    def _membership_path(cls, org: str, team_slug: str, username: str) -> str:
        return (
            f"{cls._team_path(org, team_slug)}/memberships/{quote(username, safe='')}"
        )

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        absolute: bool = False,
    ) -> tuple[Any, Dict[str, Any]]:
        """
        Send one request and return ``(body, links)``.

        Raises:
            GitHubRequestError: On any non-2xx status or transport failure.
        """
        if self._session is None:
            raise RuntimeError("GitHubClient must be used as an async context manager")

        url = path if absolute else self._url(path)
        logger.debug(f"GitHub API {method} {url}")

        try:
            async with self._session.request(
                method, url, json=json, params=params
            ) as response:
                if response.status >= 400:
                    raise await self._build_error(response)

                if response.status == 204:
                    return None, {}

                body = await response.json(content_type=None)
                return body, dict(response.links)

        except GitHubRequestError:
            raise
        except asyncio.TimeoutError:
            raise GitHubRequestError(
                f"Request to {url} timed out after {self.config.request_timeout}s"
            )
        except aiohttp.ClientError as e:
            raise GitHubRequestError(f"Request to {url} failed: {e}")

    @staticmethod
    async def _build_error(response: aiohttp.ClientResponse) -> GitHubRequestError:
        """Turn an error response into a GitHubRequestError."""
        headers = dict(response.headers)
        try:
            body = await response.json(content_type=None)
        except ValueError:
            body = None

        if isinstance(body, dict):
            message = body.get("message") or f"HTTP {response.status}"
            errors = body.get("errors") or []
        else:
            text = await response.text()
            message = text or f"HTTP {response.status}"
            errors = []

        logger.debug(f"GitHub API error {response.status}: {message}")
        return GitHubRequestError(
            message, status=response.status, errors=errors, headers=headers
        )
