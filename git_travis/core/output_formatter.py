"""
Output Formatter
================
THE SINGLE SOURCE OF TRUTH for all report lines.

STRICT DETERMINISM CONTRACT:
  - This module NEVER performs I/O.
  - This module NEVER reads environment variables.
  - Given the same inputs, it ALWAYS returns the exact same lines.

Report layout:
    Fetching build status for {owner}/{repo}:{branch}
       {advisory}
        {glyph} {owner}/{repo}
            Compare:  {compare_url}
            {glyph} {sha} ({branch}) {message} ({name} <{email}>) ({state})
                {glyph} {number} {language} {version} ({state})

Glyph rules:
    overall state — failed → bad, passed → good, anything else → progress
    build (list)  — status None → progress, result non-zero → bad, else good;
                    builds without result/status fall back to the state rule
    job           — failed → bad, unfinished → progress, else good
"""
import sys
from dataclasses import dataclass
from typing import List, Optional

import typer

from git_travis.core.constants import (
    BAD,
    BAD_ASCII,
    GOOD,
    GOOD_ASCII,
    PROGRESS,
    PROGRESS_ASCII,
    SHA_LENGTH,
    STATE_FAILED,
    STATE_PASSED,
)
from git_travis.models.build import Build, ResolvedBuild
from git_travis.models.build_detail import BuildDetail, Job

ADVISORY_INDENT = "  "
BUILD_INDENT = "   "
DETAIL_INDENT = "       "
JOB_INDENT = "           "


@dataclass(frozen=True)
class GlyphSet:
    good: str
    bad: str
    progress: str
    color: bool = True

    def muted(self, text: str) -> str:
        return typer.style(text, fg="white") if self.color else text


def make_glyphs(ascii_only: Optional[bool] = None, color: bool = True) -> GlyphSet:
    """
    Build the glyph set for the current terminal.
    Windows consoles get the degraded ASCII set unless told otherwise.
    """
    if ascii_only is None:
        ascii_only = sys.platform == "win32"
    good, bad, progress = (GOOD_ASCII, BAD_ASCII, PROGRESS_ASCII) if ascii_only else (GOOD, BAD, PROGRESS)
    if color:
        good = typer.style(good, fg="green")
        bad = typer.style(bad, fg="red")
        progress = typer.style(progress, fg="yellow")
    return GlyphSet(good=good, bad=bad, progress=progress, color=color)


# ---------------------------------------------------------------------------
# Glyph selection
# ---------------------------------------------------------------------------
def state_glyph(state: Optional[str], glyphs: GlyphSet) -> str:
    if state == STATE_FAILED:
        return glyphs.bad
    if state == STATE_PASSED:
        return glyphs.good
    return glyphs.progress


def build_glyph(build: Build, glyphs: GlyphSet) -> str:
    if build.result is None and build.status is None:
        return state_glyph(build.state, glyphs)
    if build.status is None:
        return glyphs.progress
    return glyphs.bad if build.result else glyphs.good


def job_glyph(job: Job, glyphs: GlyphSet) -> str:
    if job.state == STATE_FAILED:
        return glyphs.bad
    if job.finished_at is None:
        return glyphs.progress
    return glyphs.good


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------
def first_line(message: Optional[str]) -> str:
    if not message:
        return ""
    return message.split("\n")[0].rstrip("\r")


def short_sha(sha: Optional[str]) -> str:
    return (sha or "")[:SHA_LENGTH]


def _line(indent: str, *parts: Optional[str]) -> str:
    return " ".join([indent, *[p for p in parts if p is not None and p != ""]])


# ---------------------------------------------------------------------------
# Report lines
# ---------------------------------------------------------------------------
def format_header(owner: str, repo: str, branch: str) -> str:
    return f"Fetching build status for {owner}/{repo}:{branch}"


def format_advisory(resolved: ResolvedBuild) -> Optional[str]:
    if not resolved.advisory:
        return None
    return _line(ADVISORY_INDENT, resolved.advisory)


def format_build_line(owner: str, repo: str, build: Build, glyphs: GlyphSet) -> str:
    return _line(BUILD_INDENT, build_glyph(build, glyphs), f"{owner}/{repo}")


def format_detail_lines(detail: BuildDetail, glyphs: GlyphSet) -> List[str]:
    author = f"({detail.author_name or ''} <{detail.author_email or ''}>)"
    lines = [
        _line(DETAIL_INDENT, "Compare: ", detail.compare_url or ""),
        _line(
            DETAIL_INDENT,
            state_glyph(detail.state, glyphs),
            detail.sha,
            f"({detail.branch or ''})",
            detail.message,
            author,
            glyphs.muted(f"({detail.state or ''})"),
        ),
    ]
    for job in detail.jobs:
        lines.append(_line(
            JOB_INDENT,
            job_glyph(job, glyphs),
            job.number,
            job.language,
            job.language_config_value,
            glyphs.muted(f"({job.state or ''})"),
        ))
    return lines


def format_fetch_failure(owner: str, repo: str, glyphs: GlyphSet) -> str:
    return _line(BUILD_INDENT, glyphs.bad, f"failed to fetch info for {owner}/{repo}")


def render_preamble(owner: str, repo: str, resolved: ResolvedBuild, glyphs: GlyphSet) -> List[str]:
    """Lines printed before the detail is fetched: advisory and build glyph."""
    lines = []
    advisory = format_advisory(resolved)
    if advisory:
        lines.append(advisory)
    lines.append(format_build_line(owner, repo, resolved.build, glyphs))
    return lines


def render_report(
    owner: str,
    repo: str,
    resolved: ResolvedBuild,
    detail: BuildDetail,
    glyphs: GlyphSet,
) -> List[str]:
    """Every line printed for one resolved build, excluding the header."""
    return render_preamble(owner, repo, resolved, glyphs) + format_detail_lines(detail, glyphs)
