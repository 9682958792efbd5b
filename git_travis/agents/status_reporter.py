"""
Status Reporter
===============
Fetches the detail of one resolved build, normalises the provider shape and
prints the summary.

Detail shapes:
    joined — {"build": {"state": ...}, "commit": {"sha": ..., ...}, "jobs": [...]}
    flat   — {"state": ..., "commit": "<sha>", "message": ..., "matrix": [...]}

FIELD_ALIASES maps each canonical field to its joined-shape path and its
flat-shape path. It is applied once, right after the fetch; exactly one of
the two paths is populated for a given shape.
"""
import logging
from typing import Any, Callable, Dict, Optional, Tuple

import httpx
import typer
from pydantic import ValidationError

from git_travis.core.errors import DetailFetchError
from git_travis.core.output_formatter import (
    GlyphSet,
    first_line,
    format_detail_lines,
    format_fetch_failure,
    make_glyphs,
    render_preamble,
    short_sha,
)
from git_travis.models.build import ResolvedBuild
from git_travis.models.build_detail import BuildDetail, Job
from git_travis.models.session import Session

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Field alias table: canonical → (preferred path, fallback path)
# ---------------------------------------------------------------------------
FIELD_ALIASES: Dict[str, Tuple[Tuple[str, ...], Tuple[str, ...]]] = {
    "message":      (("commit", "message"),      ("message",)),
    "sha":          (("commit", "sha"),          ("commit",)),
    "compare_url":  (("commit", "compare_url"),  ("compare_url",)),
    "branch":       (("commit", "branch"),       ("branch",)),
    "author_name":  (("commit", "author_name"),  ("author_name",)),
    "author_email": (("commit", "author_email"), ("author_email",)),
    "state":        (("build", "state"),         ("state",)),
    "jobs":         (("jobs",),                  ("matrix",)),
}


def _lookup(payload: Any, path: Tuple[str, ...]) -> Any:
    current = payload
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def _pick(payload: Dict[str, Any], canonical: str) -> Any:
    preferred, fallback = FIELD_ALIASES[canonical]
    value = _lookup(payload, preferred)
    if value is None:
        value = _lookup(payload, fallback)
    # flat shape: "commit" is the sha string, never a mapping
    if canonical == "sha" and isinstance(value, dict):
        return None
    return value


def normalize_detail(payload: Dict[str, Any]) -> BuildDetail:
    """Collapse either detail shape into a BuildDetail."""
    fields = {name: _pick(payload, name) for name in FIELD_ALIASES}
    jobs = fields.pop("jobs") or []
    fields["message"] = first_line(fields["message"])
    fields["sha"] = short_sha(fields["sha"])
    return BuildDetail(
        **fields,
        jobs=[Job.from_payload(job) for job in jobs if isinstance(job, dict)],
    )


class StatusReporter:
    """
    Fetches and prints the detail for a resolved build.
    Output goes through ``echo`` so callers can capture it.
    """

    def __init__(
        self,
        client,
        glyphs: Optional[GlyphSet] = None,
        echo: Callable[[str], Any] = typer.echo,
    ) -> None:
        self.client = client
        self.glyphs = glyphs or make_glyphs()
        self.echo = echo

    async def fetch_detail(self, session: Session, owner: str, repo: str, build_id: str) -> BuildDetail:
        try:
            payload = await self.client.fetch_build_detail(session, owner, repo, build_id)
        except httpx.HTTPError as e:
            logger.error("Detail fetch for %s/%s build %s failed: %s", owner, repo, build_id, e)
            raise DetailFetchError(owner, repo, build_id, str(e)) from e
        except ValueError as e:
            logger.error("Detail for %s/%s build %s is not JSON: %s", owner, repo, build_id, e)
            raise DetailFetchError(owner, repo, build_id, "invalid JSON in detail response") from e
        if not isinstance(payload, dict):
            raise DetailFetchError(owner, repo, build_id, "unexpected detail payload")
        try:
            return normalize_detail(payload)
        except ValidationError as e:
            raise DetailFetchError(owner, repo, build_id, str(e)) from e

    async def report(self, session: Session, owner: str, repo: str, resolved: ResolvedBuild) -> BuildDetail:
        """
        Fetch detail for ``resolved.build`` and print the summary.

        Raises
        ------
        DetailFetchError
            After printing the failure line for this repository.
        """
        for line in render_preamble(owner, repo, resolved, self.glyphs):
            self.echo(line)

        try:
            detail = await self.fetch_detail(session, owner, repo, resolved.build.id)
        except DetailFetchError:
            self.echo(format_fetch_failure(owner, repo, self.glyphs))
            raise

        for line in format_detail_lines(detail, self.glyphs):
            self.echo(line)
        return detail
