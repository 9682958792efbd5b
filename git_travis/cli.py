"""
git-travis CLI
==============
Prints the latest Travis CI build status for the current branch.

    git-travis                       # origin + branch of the current checkout
    git-travis owner/repo            # explicit repository, branch "master"
    git-travis owner/repo:dev a/b    # several repositories, per-target branch

Exit codes:
    0 — every repository reported
    1 — git missing/unparseable origin, or at least one repository failed
"""
import asyncio
import logging
from typing import List, Optional

import httpx
import typer

from git_travis.agents.orchestrator import StatusPipeline
from git_travis.agents.origin_resolver import OriginResolver
from git_travis.core.config import GITHUB_ACCESS_TOKEN, LOG_LEVEL
from git_travis.core.constants import DEFAULT_BRANCH
from git_travis.core.errors import (
    DetailFetchError,
    GitCommandError,
    GitTravisError,
    ParseError,
    ToolNotFoundError,
)
from git_travis.core.output_formatter import make_glyphs
from git_travis.models.repository import RepositoryRef
from git_travis.services.credentials import select_credential_source
from git_travis.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="git-travis",
    help="Show the latest Travis CI build status for a git repository.",
    add_completion=False,
)


def parse_target(target: str, branch: Optional[str] = None) -> RepositoryRef:
    """Parse ``owner/repo[:branch]``; ``branch`` overrides the inline one."""
    slug, _, inline_branch = target.partition(":")
    owner, sep, repo = slug.partition("/")
    if not sep or not owner.strip() or not repo.strip() or "/" in repo:
        raise ParseError(f"invalid repository {target!r}, expected owner/repo[:branch]")
    return RepositoryRef(
        owner=owner,
        repo=repo,
        branch=branch or inline_branch or DEFAULT_BRANCH,
    )


def resolve_targets(targets: Optional[List[str]], branch: Optional[str]) -> List[RepositoryRef]:
    if targets:
        return [parse_target(t, branch) for t in targets]
    ref = OriginResolver().resolve()
    if branch:
        ref = ref.model_copy(update={"branch": branch})
    return [ref]


async def report_all(pipeline: StatusPipeline, refs: List[RepositoryRef]) -> int:
    """Report every repository in order; returns the number of failures."""
    failures = 0
    for ref in refs:
        try:
            await pipeline.run(ref.owner, ref.repo, ref.branch)
        except DetailFetchError:
            # the reporter already printed the failure line
            failures += 1
        except (GitTravisError, httpx.HTTPError) as e:
            logger.debug("Reporting %s failed", ref.slug, exc_info=True)
            typer.echo(f"{ref.slug}: {e}", err=True)
            failures += 1
    return failures


@app.command()
def status(
    targets: Optional[List[str]] = typer.Argument(
        None, help="Repositories as owner/repo[:branch]. Defaults to the git origin."
    ),
    branch: Optional[str] = typer.Option(
        None, "--branch", "-b", help="Branch to report (overrides detection)."
    ),
    ascii_only: bool = typer.Option(
        False, "--ascii", help="Use ASCII status markers (OK / X / O)."
    ),
    color: bool = typer.Option(True, "--color/--no-color", help="Colorize status markers."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Show the latest build status for each repository."""
    setup_logging(logging.DEBUG if verbose else LOG_LEVEL)

    try:
        refs = resolve_targets(targets, branch)
    except (ToolNotFoundError, GitCommandError, ParseError) as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)

    pipeline = StatusPipeline(
        credentials=select_credential_source(GITHUB_ACCESS_TOKEN),
        glyphs=make_glyphs(True if ascii_only else None, color),
    )
    failures = asyncio.run(report_all(pipeline, refs))
    if failures:
        raise typer.Exit(code=1)


def run() -> None:
    """Console-script entry point."""
    app()


if __name__ == "__main__":
    run()
