"""
Build Detail Model
==================
Normalised detail of exactly one build, independent of the provider shape.

Fields:
    message       — first line of the commit message
    sha           — abbreviated commit sha (7 characters)
    compare_url   — provider compare link for the push
    branch        — branch the build ran on
    author_name   — commit author
    author_email  — commit author email
    state         — overall build state (passed, failed, started, ...)
    jobs          — matrix entries, one per language/version combination
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .build import OptionalProviderId


class Job(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: OptionalProviderId = None
    state: Optional[str] = None
    finished_at: Optional[datetime] = None
    language: Optional[str] = None
    language_config_value: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Job":
        """Build a Job from a raw matrix/jobs entry, reading its language config."""
        config = payload.get("config") or {}
        language = config.get("language")
        value = config.get(language) if language else None
        if isinstance(value, (list, tuple)):
            value = ", ".join(str(v) for v in value)
        elif value is not None:
            value = str(value)
        return cls(
            number=payload.get("number"),
            state=payload.get("state"),
            finished_at=payload.get("finished_at"),
            language=language,
            language_config_value=value,
        )


class BuildDetail(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str = ""
    sha: str = ""
    compare_url: Optional[str] = None
    branch: Optional[str] = None
    author_name: Optional[str] = None
    author_email: Optional[str] = None
    state: Optional[str] = None
    jobs: List[Job] = Field(default_factory=list)
