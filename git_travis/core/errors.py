"""
Errors
======
Exception taxonomy shared by the resolvers, the reporter and the drivers.

Only the outermost driver (CLI or HTTP API) decides whether an error is
fatal or advisory. Staleness is never an error.

Fatal (process exits non-zero):
    ToolNotFoundError     — git executable is not on PATH
    GitCommandError       — git exited with a non-zero status
    ParseError            — origin remote missing or undecomposable

Per repository (reported, next repository continues):
    MalformedHistoryError — build history in neither known shape
    NotFoundError         — provider has no builds for the repository
    UnknownVisibilityError — GitHub answered neither 200 nor 404
    AuthenticationError   — credential exchange rejected
    DetailFetchError      — detail request failed after resolution
"""
from typing import Optional


class GitTravisError(Exception):
    """Base class for every error raised by git-travis."""


class ToolNotFoundError(GitTravisError):
    def __init__(self, tool: str) -> None:
        self.tool = tool
        super().__init__(f"not found: {tool}")


class GitCommandError(GitTravisError):
    def __init__(self, args: list, returncode: int, stderr: str = "") -> None:
        self.args_list = list(args)
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip() or f"exit status {returncode}"
        super().__init__(f"`{' '.join(self.args_list)}` failed: {detail}")


class ParseError(GitTravisError):
    """Raised when the origin remote cannot be decomposed into owner/repo."""


class MalformedHistoryError(GitTravisError):
    def __init__(self, owner: str = "", repo: str = "") -> None:
        self.owner = owner
        self.repo = repo
        target = f"{owner}/{repo}" if owner and repo else "repository"
        super().__init__(f"failed to fetch info for {target}")


class NotFoundError(GitTravisError):
    def __init__(self, owner: str = "", repo: str = "") -> None:
        self.owner = owner
        self.repo = repo
        target = f" for {owner}/{repo}" if owner and repo else ""
        super().__init__(f"no builds found{target}")


class UnknownVisibilityError(GitTravisError):
    def __init__(self, owner: str, repo: str, status_code: int) -> None:
        self.owner = owner
        self.repo = repo
        self.status_code = status_code
        super().__init__(
            f"unknown visibility for {owner}/{repo} (HTTP {status_code})"
        )


class AuthenticationError(GitTravisError):
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class DetailFetchError(GitTravisError):
    def __init__(self, owner: str, repo: str, build_id: str, reason: str = "") -> None:
        self.owner = owner
        self.repo = repo
        self.build_id = build_id
        self.reason = reason
        super().__init__(f"failed to fetch info for {owner}/{repo}")
