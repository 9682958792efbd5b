"""
Travis Client
=============
Asynchronous Travis CI API (v2) client built on httpx.

Endpoints:
    public repositories   — TRAVIS_API_URL     (api.travis-ci.org)
    private repositories  — TRAVIS_PRO_API_URL (api.travis-ci.com)

Authentication:
    token     — POST /auth/github {"github_token": ...} → {"access_token": ...}
    password  — a temporary GitHub authorization is created with basic auth,
                exchanged as above, then deleted again

Every call takes an explicit Session; the client itself holds no
authentication state. No request is retried.
"""
import logging
from typing import Any, Optional, Tuple

import httpx

from git_travis.core.config import (
    GITHUB_API_URL,
    HTTP_TIMEOUT,
    TRAVIS_API_URL,
    TRAVIS_PRO_API_URL,
    USER_AGENT,
)
from git_travis.core.constants import GITHUB_AUTH_NOTE, GITHUB_AUTH_SCOPES
from git_travis.core.errors import AuthenticationError, MalformedHistoryError, NotFoundError
from git_travis.models.session import Credentials, Session

logger = logging.getLogger(__name__)


def _json_object(response: httpx.Response) -> dict:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


class TravisClient:

    def __init__(
        self,
        public_url: str = TRAVIS_API_URL,
        pro_url: str = TRAVIS_PRO_API_URL,
        github_url: str = GITHUB_API_URL,
        timeout: float = HTTP_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.public_url = public_url.rstrip("/")
        self.pro_url = pro_url.rstrip("/")
        self.github_url = github_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _client(self, headers=None, auth=None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers=headers,
            auth=auth,
            timeout=self.timeout,
            transport=self.transport,
        )

    def _base_url(self, pro: bool) -> str:
        return self.pro_url if pro else self.public_url

    # -------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------
    def anonymous_session(self, pro: bool = False) -> Session:
        return Session(base_url=self._base_url(pro), pro=pro)

    async def authenticate(self, credentials: Credentials, pro: bool = True) -> Session:
        """
        Exchange credentials for a Travis access token.

        Raises
        ------
        AuthenticationError
            GitHub or Travis rejected the credentials.
        """
        base_url = self._base_url(pro)
        if credentials.uses_token:
            access_token = await self._exchange_github_token(
                base_url, credentials.token.get_secret_value()
            )
        else:
            username = credentials.username
            password = credentials.password.get_secret_value()
            auth_id, github_token = await self._create_github_authorization(username, password)
            try:
                access_token = await self._exchange_github_token(base_url, github_token)
            finally:
                await self._delete_github_authorization(username, password, auth_id)

        logger.info("Authenticated against %s", base_url)
        return Session(base_url=base_url, access_token=access_token, pro=pro)

    async def _exchange_github_token(self, base_url: str, github_token: str) -> str:
        headers = Session(base_url=base_url).headers
        async with self._client(headers=headers) as client:
            response = await client.post(
                f"{base_url}/auth/github", json={"github_token": github_token}
            )
        if response.status_code != 200:
            logger.error("Travis rejected GitHub token (HTTP %d)", response.status_code)
            raise AuthenticationError(
                "travis rejected the github token", response.status_code
            )
        access_token = _json_object(response).get("access_token")
        if not access_token:
            raise AuthenticationError("travis returned no access token", response.status_code)
        return access_token

    async def _create_github_authorization(self, username: str, password: str) -> Tuple[Any, str]:
        headers = {"User-Agent": USER_AGENT, "Accept": "application/vnd.github.v3+json"}
        async with self._client(headers=headers, auth=(username, password)) as client:
            response = await client.post(
                f"{self.github_url}/authorizations",
                json={"scopes": GITHUB_AUTH_SCOPES, "note": GITHUB_AUTH_NOTE},
            )
        if response.status_code == 401 and "required" in response.headers.get("X-GitHub-OTP", ""):
            raise AuthenticationError("github two-factor authentication required", 401)
        if response.status_code not in (200, 201):
            logger.error("GitHub authorization failed (HTTP %d)", response.status_code)
            raise AuthenticationError("github rejected username/password", response.status_code)
        data = _json_object(response)
        if not data.get("token"):
            raise AuthenticationError("github returned no token", response.status_code)
        return data.get("id"), data["token"]

    async def _delete_github_authorization(self, username: str, password: str, auth_id) -> None:
        if auth_id is None:
            return
        headers = {"User-Agent": USER_AGENT, "Accept": "application/vnd.github.v3+json"}
        try:
            async with self._client(headers=headers, auth=(username, password)) as client:
                response = await client.delete(f"{self.github_url}/authorizations/{auth_id}")
            if response.status_code not in (200, 204):
                logger.warning(
                    "Could not delete temporary GitHub authorization %s (HTTP %d)",
                    auth_id, response.status_code,
                )
        except httpx.HTTPError as e:
            logger.warning("Could not delete temporary GitHub authorization %s: %s", auth_id, e)

    # -------------------------------------------------------------------
    # Builds
    # -------------------------------------------------------------------
    async def fetch_builds(self, session: Session, owner: str, repo: str) -> Any:
        """Raw build history; either a list (legacy) or {builds, commits}."""
        url = f"{session.base_url}/repos/{owner}/{repo}/builds"
        async with self._client(headers=session.headers) as client:
            response = await client.get(url)
        if response.status_code == 404:
            raise NotFoundError(owner, repo)
        response.raise_for_status()
        try:
            return response.json()
        except ValueError as e:
            logger.error("Build history for %s/%s is not JSON: %s", owner, repo, e)
            raise MalformedHistoryError(owner, repo) from e

    async def fetch_build_detail(self, session: Session, owner: str, repo: str, build_id: str) -> Any:
        """Raw build detail; a non-JSON body raises ValueError."""
        url = f"{session.base_url}/repos/{owner}/{repo}/builds/{build_id}"
        async with self._client(headers=session.headers) as client:
            response = await client.get(url)
        response.raise_for_status()
        return response.json()
