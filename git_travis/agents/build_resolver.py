"""
Build Resolver
==============
Selects the build (and commit) to report for a branch from the provider's
build history.

Shape handling:
    FlatHistory   — first build whose ``branch`` matches wins; commit data is
                    embedded in the build, so no Commit is returned.
    JoinedHistory — first commit whose ``branch`` matches, then first build
                    whose ``commit_id`` equals that commit's id.

Fallback:
    When nothing matches the branch, the newest build overall (and, for the
    joined shape, the newest commit) is substituted and the result is marked
    stale with an advisory message. Staleness is a normal condition, not an
    error: a freshly pushed branch simply has no build yet.

Ordering:
    Provider order is newest first. Ties resolve by first match in that
    order; the history is never re-sorted.
"""
import logging
from typing import Optional

from git_travis.core.constants import STALE_ADVISORY
from git_travis.core.errors import NotFoundError
from git_travis.models.build import (
    Build,
    Commit,
    FlatHistory,
    HistoryResponse,
    JoinedHistory,
    ResolvedBuild,
    parse_history,
)

logger = logging.getLogger(__name__)


def _finalize(
    branch: str,
    item: Optional[Build],
    fallback: Optional[Build],
    commit: Optional[Commit],
    owner: str = "",
    repo: str = "",
) -> ResolvedBuild:
    """Shared fallback/staleness step for both history shapes."""
    advisory = None
    if item is None:
        advisory = STALE_ADVISORY.format(branch=branch)
        item = fallback
    if item is None:
        raise NotFoundError(owner, repo)
    if advisory:
        logger.info("No build on %s, falling back to build %s", branch, item.id)
    return ResolvedBuild(
        build=item,
        commit=commit,
        is_stale=advisory is not None,
        advisory=advisory,
    )


def resolve_flat(branch: str, history: FlatHistory, owner: str = "", repo: str = "") -> ResolvedBuild:
    item = next((b for b in history.builds if b.branch == branch), None)
    other = history.builds[0] if history.builds else None
    return _finalize(branch, item, other, None, owner, repo)


def resolve_joined(branch: str, history: JoinedHistory, owner: str = "", repo: str = "") -> ResolvedBuild:
    item = None
    commit = next((c for c in history.commits if c.branch == branch), None)
    if commit is not None:
        item = next((b for b in history.builds if b.commit_id == commit.id), None)

    other = history.builds[0] if history.builds else None
    if item is None:
        commit = history.commits[0] if history.commits else None
    return _finalize(branch, item, other, commit, owner, repo)


def resolve_build(
    branch: str,
    history: HistoryResponse,
    owner: str = "",
    repo: str = "",
) -> ResolvedBuild:
    """
    Resolve the build to report for ``branch``.

    Raises
    ------
    NotFoundError
        The history contains no builds at all.
    """
    if isinstance(history, FlatHistory):
        return resolve_flat(branch, history, owner, repo)
    return resolve_joined(branch, history, owner, repo)


def resolve(owner: str, repo: str, branch: str, raw_history) -> ResolvedBuild:
    """Parse a raw history response (either shape) and resolve it."""
    history = parse_history(raw_history, owner, repo)
    logger.debug("Build history for %s/%s is %s-shaped", owner, repo, history.kind)
    return resolve_build(branch, history, owner, repo)
