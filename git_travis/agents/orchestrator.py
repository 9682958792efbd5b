"""
Status Pipeline
===============
Composes the stages for one repository, strictly in sequence:

    visibility check → (authentication) → build history → resolve → report

Errors propagate unchanged; the CLI and the HTTP API decide what is fatal.
"""
import asyncio
import logging
from typing import Any, Callable, Optional

import typer

from git_travis.agents.build_resolver import resolve
from git_travis.agents.status_reporter import StatusReporter
from git_travis.core.errors import AuthenticationError
from git_travis.core.output_formatter import GlyphSet, format_header
from git_travis.models.session import Session
from git_travis.models.status_report import StatusReport
from git_travis.services.credentials import CredentialSource
from git_travis.services.travis_client import TravisClient
from git_travis.services.visibility import GitHubVisibilityChecker

logger = logging.getLogger(__name__)


class StatusPipeline:

    def __init__(
        self,
        client: Optional[TravisClient] = None,
        visibility: Optional[GitHubVisibilityChecker] = None,
        credentials: Optional[CredentialSource] = None,
        glyphs: Optional[GlyphSet] = None,
        echo: Callable[[str], Any] = typer.echo,
    ) -> None:
        self.client = client or TravisClient()
        self.visibility = visibility or GitHubVisibilityChecker()
        self.credentials = credentials
        self.echo = echo
        self.reporter = StatusReporter(self.client, glyphs=glyphs, echo=echo)
        self._pro_session: Optional[Session] = None

    async def open_session(self, owner: str, repo: str) -> Session:
        """
        Anonymous session for public repositories, authenticated otherwise.
        The authenticated session is opened once and reused for later
        private repositories.
        """
        if await self.visibility.is_public(owner, repo):
            return self.client.anonymous_session(pro=False)

        if self.credentials is None:
            raise AuthenticationError(f"{owner}/{repo} is private and no credentials are configured")
        if self._pro_session is not None:
            return self._pro_session

        logger.info("%s/%s is private, authenticating", owner, repo)
        # the prompt source blocks on stdin
        credentials = await asyncio.to_thread(self.credentials.get_credentials)
        self._pro_session = await self.client.authenticate(credentials, pro=True)
        self.echo("")
        return self._pro_session

    async def run(self, owner: str, repo: str, branch: str) -> StatusReport:
        self.echo(format_header(owner, repo, branch))
        session = await self.open_session(owner, repo)

        raw_history = await self.client.fetch_builds(session, owner, repo)
        resolved = resolve(owner, repo, branch, raw_history)
        logger.debug(
            "Resolved %s/%s:%s to build %s (stale=%s)",
            owner, repo, branch, resolved.build.id, resolved.is_stale,
        )

        detail = await self.reporter.report(session, owner, repo, resolved)
        return StatusReport(owner=owner, repo=repo, branch=branch, resolved=resolved, detail=detail)
