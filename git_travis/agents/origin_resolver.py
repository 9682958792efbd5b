"""
Origin Resolver
===============
Derives (owner, repo, branch) from the local git checkout.

Two read-only git invocations:
    git remote -v   — locate the ``origin`` remote and parse its URL
    git status      — read the current branch from the first line

Supported remote URL forms:
    git@github.com:owner/repo.git
    git://github.com/owner/repo.git
    https://github.com/owner/repo.git
"""
import logging
import os
import shutil
import subprocess
from typing import List, Optional

from pydantic import ValidationError

from git_travis.core.constants import (
    BRANCH_PREFIXES,
    DEFAULT_BRANCH,
    ORIGIN_REMOTE,
    REMOTE_ANNOTATIONS,
)
from git_travis.core.errors import GitCommandError, ParseError, ToolNotFoundError
from git_travis.models.repository import RemoteOrigin, RepositoryRef

logger = logging.getLogger(__name__)


class GitCommandRunner:
    """
    Thin wrapper around the git executable.
    Resolves git on PATH once; raises ToolNotFoundError when it is missing.
    """

    def __init__(self, cwd: Optional[str] = None, git: Optional[str] = None) -> None:
        self.cwd = cwd or os.getcwd()
        self.git = git or shutil.which("git")
        if not self.git:
            raise ToolNotFoundError("git")

    def _run(self, *args: str) -> str:
        cmd = [self.git, *args]
        try:
            res = subprocess.run(
                cmd,
                cwd=self.cwd,
                check=True,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError:
            raise ToolNotFoundError(self.git)
        except subprocess.CalledProcessError as e:
            logger.error("git %s failed: %s", " ".join(args), e.stderr)
            raise GitCommandError(["git", *args], e.returncode, e.stderr or "")
        return res.stdout

    def list_remotes(self) -> List[str]:
        """Lines of ``git remote -v``."""
        return self._run("remote", "-v").splitlines()

    def current_status_text(self) -> str:
        """Output of ``git status``."""
        return self._run("status")


def _strip_suffix(value: str, suffix: str) -> str:
    if value.endswith(suffix):
        return value[: -len(suffix)]
    return value


def parse_remote_url(url: str) -> RemoteOrigin:
    """
    Parse a remote URL into owner/repo.

    The host part is dropped according to the URL prefix, then a trailing
    ``.git`` is removed and the path is split on ``/``. The first segment is
    the owner, the second the repository.

    Raises
    ------
    ParseError
        Unknown prefix, fewer than two path segments, or an empty segment.
    """
    url = url.strip()
    if url.startswith("git@"):
        _, sep, path = url.partition(":")
    elif url.startswith("git://") or url.startswith("https://"):
        rest = url.split("://", 1)[1]
        _, sep, path = rest.partition("/")
    else:
        raise ParseError(f"failed to parse git remote: unsupported url {url!r}")

    if not sep:
        raise ParseError(f"failed to parse git remote: {url!r}")

    segments = _strip_suffix(path.rstrip("/"), ".git").split("/")
    if len(segments) < 2:
        raise ParseError(f"failed to parse git remote: {url!r}")

    try:
        return RemoteOrigin(owner=segments[0], repo=segments[1])
    except ValidationError:
        raise ParseError(f"failed to parse git remote: {url!r}")


def find_origin_url(remote_lines: List[str]) -> str:
    """
    Return the URL of the first remote line named ``origin``.

    Lines look like ``origin\\tgit@github.com:o/r.git (fetch)``.
    Only an exact remote name matches; ``origin2`` does not.
    """
    for line in remote_lines:
        name, sep, rest = line.partition("\t")
        if not sep or name.strip() != ORIGIN_REMOTE:
            continue
        for annotation in REMOTE_ANNOTATIONS:
            rest = rest.replace(annotation, "")
        url = rest.strip()
        if url:
            return url
    raise ParseError("failed to parse git remote: no 'origin' remote configured")


def parse_branch(status_text: str) -> str:
    """Branch name from the first line of ``git status``; ``master`` when empty."""
    lines = status_text.strip().splitlines()
    first = lines[0] if lines else ""
    for prefix in BRANCH_PREFIXES:
        if first.startswith(prefix):
            first = first[len(prefix):]
            break
    return first.strip() or DEFAULT_BRANCH


class OriginResolver:
    """Resolves the repository identity of a local checkout."""

    def __init__(self, git: Optional[GitCommandRunner] = None) -> None:
        self.git = git or GitCommandRunner()

    def resolve(self) -> RepositoryRef:
        url = find_origin_url(self.git.list_remotes())
        origin = parse_remote_url(url)
        branch = parse_branch(self.git.current_status_text())
        logger.debug("Resolved origin %s on branch %s", origin.slug, branch)
        return RepositoryRef(owner=origin.owner, repo=origin.repo, branch=branch)
