"""
GET /status/{owner}/{repo}
Resolves and returns the latest build status for a repository as JSON.
Private repositories require GITHUB_ACCESS_TOKEN; the API never prompts.
"""
import logging

import httpx
from fastapi import APIRouter, HTTPException, Query

from git_travis.agents.orchestrator import StatusPipeline
from git_travis.core import config
from git_travis.core.constants import DEFAULT_BRANCH
from git_travis.core.errors import (
    AuthenticationError,
    DetailFetchError,
    MalformedHistoryError,
    NotFoundError,
    UnknownVisibilityError,
)
from git_travis.core.output_formatter import make_glyphs
from git_travis.services.credentials import TokenSource

logger = logging.getLogger(__name__)

router = APIRouter()


def build_pipeline() -> StatusPipeline:
    token = config.GITHUB_ACCESS_TOKEN
    return StatusPipeline(
        credentials=TokenSource(token) if token else None,
        glyphs=make_glyphs(ascii_only=True, color=False),
        echo=lambda line: logger.debug("%s", line),
    )


@router.get("/status/{owner}/{repo}")
async def get_status(owner: str, repo: str, branch: str = Query(DEFAULT_BRANCH)):
    pipeline = build_pipeline()
    try:
        report = await pipeline.run(owner, repo, branch)
    except (NotFoundError, MalformedHistoryError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except AuthenticationError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except (UnknownVisibilityError, DetailFetchError, httpx.HTTPError) as e:
        logger.error("Status lookup for %s/%s failed: %s", owner, repo, e)
        raise HTTPException(status_code=502, detail=str(e))

    return {
        "owner": report.owner,
        "repo": report.repo,
        "branch": report.branch,
        "is_stale": report.resolved.is_stale,
        "advisory": report.resolved.advisory,
        "build": report.resolved.build.model_dump(),
        "commit": report.resolved.commit.model_dump() if report.resolved.commit else None,
        "detail": report.detail.model_dump(mode="json"),
    }
