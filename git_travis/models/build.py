"""
Build History Models
====================
Value objects parsed from the provider's build history response.

The history arrives in one of two shapes, modelled as a tagged union:

    FlatHistory   — legacy: a top-level list of builds, each carrying its
                    own ``branch`` (commit data embedded in the build)
    JoinedHistory — current: ``{"builds": [...], "commits": [...]}`` joined
                    on ``build.commit_id == commit.id``

Provider ids arrive as integers and are normalised to strings.
"""
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError

from git_travis.core.errors import MalformedHistoryError


def _as_text(value):
    if value is None:
        return None
    return str(value)


ProviderId = Annotated[str, BeforeValidator(_as_text)]
OptionalProviderId = Annotated[Optional[str], BeforeValidator(_as_text)]


class Commit(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: ProviderId
    branch: Optional[str] = None
    sha: Optional[str] = None
    message: Optional[str] = None
    author_name: Optional[str] = None
    author_email: Optional[str] = None
    compare_url: Optional[str] = None


class Build(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: ProviderId
    commit_id: OptionalProviderId = None
    result: Optional[int] = None   # legacy: 0 passed, non-zero failed
    status: Optional[int] = None   # legacy: None while running
    state: Optional[str] = None
    number: OptionalProviderId = None
    branch: Optional[str] = None   # legacy shape only


class FlatHistory(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["flat"] = "flat"
    builds: List[Build] = Field(default_factory=list)


class JoinedHistory(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["joined"] = "joined"
    builds: List[Build] = Field(default_factory=list)
    commits: List[Commit] = Field(default_factory=list)


HistoryResponse = Annotated[Union[FlatHistory, JoinedHistory], Field(discriminator="kind")]


class ResolvedBuild(BaseModel):
    """Output of the build resolver: the build to report and its commit."""
    model_config = ConfigDict(frozen=True)

    build: Build
    commit: Optional[Commit] = None
    is_stale: bool = False
    advisory: Optional[str] = None


def parse_history(raw, owner: str = "", repo: str = "") -> HistoryResponse:
    """
    Detect the response shape and parse it into the matching variant.

    A plain list at the top level is the flat (legacy) shape; a mapping
    carrying a ``builds`` list is the joined shape. Anything else raises
    MalformedHistoryError.
    """
    try:
        if isinstance(raw, list):
            return FlatHistory(builds=raw)
        if isinstance(raw, dict) and isinstance(raw.get("builds"), list):
            return JoinedHistory(
                builds=raw["builds"],
                commits=raw.get("commits") or [],
            )
    except ValidationError as e:
        raise MalformedHistoryError(owner, repo) from e
    raise MalformedHistoryError(owner, repo)
