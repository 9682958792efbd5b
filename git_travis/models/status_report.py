"""
Status Report Model
Everything one pipeline run learned about a repository: the resolved build
and its normalised detail.
"""
from pydantic import BaseModel, ConfigDict

from .build import ResolvedBuild
from .build_detail import BuildDetail


class StatusReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    branch: str
    resolved: ResolvedBuild
    detail: BuildDetail
