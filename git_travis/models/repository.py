"""
Repository Models
=================
Identity of the repository whose builds are reported.

    RemoteOrigin  — owner/repo parsed from the origin remote URL
    RepositoryRef — owner/repo plus the branch to report on
"""
from pydantic import BaseModel, ConfigDict, field_validator

from git_travis.core.constants import DEFAULT_BRANCH


class RemoteOrigin(BaseModel):
    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str

    @field_validator("owner", "repo")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"


class RepositoryRef(RemoteOrigin):
    branch: str = DEFAULT_BRANCH

    @field_validator("branch")
    @classmethod
    def _default_branch(cls, value: str) -> str:
        return value.strip() or DEFAULT_BRANCH
