"""
Unit Tests — Output Formatter
==============================
Glyph selection, truncation and exact report lines.
Glyphs are uncolored so every assertion uses exact string equality.
"""
import sys
import pytest
from unittest.mock import patch

from git_travis.core.output_formatter import (
    build_glyph,
    first_line,
    format_fetch_failure,
    format_header,
    job_glyph,
    make_glyphs,
    render_report,
    short_sha,
    state_glyph,
)
from git_travis.models.build import Build, Commit, ResolvedBuild
from git_travis.models.build_detail import BuildDetail, Job

GLYPHS = make_glyphs(ascii_only=False, color=False)


# ---------------------------------------------------------------------------
# 1. Glyph sets
# ---------------------------------------------------------------------------
class TestGlyphSets:

    def test_unicode_set(self):
        assert (GLYPHS.good, GLYPHS.bad, GLYPHS.progress) == ("✔", "✖", "♢")

    def test_ascii_set(self):
        glyphs = make_glyphs(ascii_only=True, color=False)
        assert (glyphs.good, glyphs.bad, glyphs.progress) == ("OK", "X", "O")

    def test_windows_console_gets_ascii_set(self):
        with patch.object(sys, "platform", "win32"):
            glyphs = make_glyphs(color=False)
        assert (glyphs.good, glyphs.bad, glyphs.progress) == ("OK", "X", "O")

    def test_other_platforms_get_unicode_set(self):
        with patch.object(sys, "platform", "linux"):
            glyphs = make_glyphs(color=False)
        assert glyphs.good == "✔"

    def test_explicit_choice_overrides_platform(self):
        with patch.object(sys, "platform", "win32"):
            glyphs = make_glyphs(ascii_only=False, color=False)
        assert glyphs.good == "✔"

    def test_colored_glyph_wraps_symbol(self):
        glyphs = make_glyphs(ascii_only=False, color=True)
        assert "✔" in glyphs.good
        assert glyphs.good != "✔"


# ---------------------------------------------------------------------------
# 2. Glyph selection
# ---------------------------------------------------------------------------
class TestStateGlyph:

    @pytest.mark.parametrize("state,expected", [
        ("failed", "✖"),
        ("passed", "✔"),
        ("pending", "♢"),
        ("started", "♢"),
        (None, "♢"),
    ])
    def test_mapping_is_total(self, state, expected):
        assert state_glyph(state, GLYPHS) == expected


class TestBuildGlyph:

    def test_running_legacy_build(self):
        assert build_glyph(Build(id="1", result=None, status=None, state="started"), GLYPHS) == "♢"

    def test_status_none_is_progress_even_with_result(self):
        assert build_glyph(Build(id="1", result=1, status=None), GLYPHS) == "♢"

    def test_failed_legacy_build(self):
        assert build_glyph(Build(id="1", result=1, status=1), GLYPHS) == "✖"

    def test_passed_legacy_build(self):
        assert build_glyph(Build(id="1", result=0, status=0), GLYPHS) == "✔"

    def test_joined_build_uses_state(self):
        assert build_glyph(Build(id="1", state="failed"), GLYPHS) == "✖"
        assert build_glyph(Build(id="1", state="passed"), GLYPHS) == "✔"


class TestJobGlyph:

    def test_failed_job(self):
        assert job_glyph(Job(state="failed", finished_at="2014-01-01T00:00:00Z"), GLYPHS) == "✖"

    def test_running_job(self):
        assert job_glyph(Job(state="started", finished_at=None), GLYPHS) == "♢"

    def test_finished_job(self):
        assert job_glyph(Job(state="passed", finished_at="2014-01-01T00:00:00Z"), GLYPHS) == "✔"


# ---------------------------------------------------------------------------
# 3. Truncation
# ---------------------------------------------------------------------------
def test_sha_truncated_to_seven():
    assert short_sha("abcdef1234567") == "abcdef1"


def test_short_sha_of_none():
    assert short_sha(None) == ""


def test_message_keeps_first_line():
    assert first_line("Fix the build\n\nLonger body here") == "Fix the build"


# ---------------------------------------------------------------------------
# 4. Report lines
# ---------------------------------------------------------------------------
def _detail():
    return BuildDetail(
        message="Fix the build",
        sha="abcdef1",
        compare_url="https://github.com/o/r/compare/a...b",
        branch="main",
        author_name="Dev",
        author_email="dev@example.com",
        state="passed",
        jobs=[
            Job(number="7.1", state="passed", finished_at="2014-01-01T00:00:00Z",
                language="node_js", language_config_value="0.10"),
            Job(number="7.2", state="started", language="node_js", language_config_value="0.8"),
        ],
    )


def test_header():
    assert format_header("o", "r", "main") == "Fetching build status for o/r:main"


def test_render_report_exact_lines():
    resolved = ResolvedBuild(build=Build(id="7", result=0, status=0), commit=Commit(id="1"))
    lines = render_report("o", "r", resolved, _detail(), GLYPHS)
    assert lines == [
        "    ✔ o/r",
        "        Compare:  https://github.com/o/r/compare/a...b",
        "        ✔ abcdef1 (main) Fix the build (Dev <dev@example.com>) (passed)",
        "            ✔ 7.1 node_js 0.10 (passed)",
        "            ♢ 7.2 node_js 0.8 (started)",
    ]


def test_render_report_stale_advisory_first():
    resolved = ResolvedBuild(
        build=Build(id="7", state="failed"),
        is_stale=True,
        advisory="no recent builds on x showing latest",
    )
    lines = render_report("o", "r", resolved, _detail(), GLYPHS)
    assert lines[0] == "   no recent builds on x showing latest"
    assert lines[1] == "    ✖ o/r"


def test_render_is_deterministic():
    resolved = ResolvedBuild(build=Build(id="7", result=0, status=0))
    first = render_report("o", "r", resolved, _detail(), GLYPHS)
    second = render_report("o", "r", resolved, _detail(), GLYPHS)
    assert "\n".join(first).encode() == "\n".join(second).encode()


def test_fetch_failure_line():
    assert format_fetch_failure("o", "r", GLYPHS) == "    ✖ failed to fetch info for o/r"
