"""
Visibility Check
================
Asks GitHub whether a repository is public:

    HEAD /repos/{owner}/{repo}  →  200 public, 404 private/unknown,
                                   anything else UnknownVisibilityError
"""
import logging
from typing import Optional

import httpx

from git_travis.core.config import GITHUB_API_URL, HTTP_TIMEOUT, USER_AGENT
from git_travis.core.errors import UnknownVisibilityError

logger = logging.getLogger(__name__)


class GitHubVisibilityChecker:

    def __init__(
        self,
        api_url: str = GITHUB_API_URL,
        timeout: float = HTTP_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self.headers = {"User-Agent": USER_AGENT}

    async def is_public(self, owner: str, repo: str) -> bool:
        url = f"{self.api_url}/repos/{owner}/{repo}"
        async with httpx.AsyncClient(
            headers=self.headers, timeout=self.timeout, transport=self.transport
        ) as client:
            response = await client.head(url)

        logger.debug("Visibility of %s/%s: HTTP %d", owner, repo, response.status_code)
        if response.status_code == 200:
            return True
        if response.status_code == 404:
            return False
        raise UnknownVisibilityError(owner, repo, response.status_code)
