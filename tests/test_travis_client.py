"""
Travis Client, Visibility & Credentials Tests
=============================================
HTTP collaborators exercised against httpx.MockTransport — no network.
"""
import asyncio
import json
import pytest
import httpx
from unittest.mock import MagicMock

from git_travis.core.errors import (
    AuthenticationError,
    MalformedHistoryError,
    NotFoundError,
    UnknownVisibilityError,
)
from git_travis.models.session import Credentials, Session
from git_travis.services.credentials import PromptSource, TokenSource, select_credential_source
from git_travis.services.travis_client import TravisClient
from git_travis.services.visibility import GitHubVisibilityChecker

PUBLIC = "https://travis.test"
PRO = "https://pro.travis.test"
GITHUB = "https://github.test"


def _client(handler):
    return TravisClient(
        public_url=PUBLIC, pro_url=PRO, github_url=GITHUB,
        transport=httpx.MockTransport(handler),
    )


# -----------------------------------------------------------------------
# Visibility
# -----------------------------------------------------------------------
class TestVisibility:

    def _checker(self, status_code, seen=None):
        def handler(request):
            if seen is not None:
                seen.append(request)
            return httpx.Response(status_code)
        return GitHubVisibilityChecker(api_url=GITHUB, transport=httpx.MockTransport(handler))

    def test_200_is_public(self):
        seen = []
        assert asyncio.run(self._checker(200, seen).is_public("o", "r")) is True
        assert seen[0].method == "HEAD"
        assert seen[0].url == "https://github.test/repos/o/r"
        assert seen[0].headers["User-Agent"] == "git-travis cli tool"

    def test_404_is_private(self):
        assert asyncio.run(self._checker(404).is_public("o", "r")) is False

    def test_other_status_is_unknown(self):
        with pytest.raises(UnknownVisibilityError) as exc:
            asyncio.run(self._checker(403).is_public("o", "r"))
        assert exc.value.status_code == 403


# -----------------------------------------------------------------------
# Sessions & authentication
# -----------------------------------------------------------------------
def test_anonymous_session_uses_public_endpoint():
    session = _client(lambda r: httpx.Response(200)).anonymous_session()
    assert session.base_url == PUBLIC
    assert session.authenticated is False
    assert "Authorization" not in session.headers


def test_token_authentication():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"access_token": "travis-abc"})

    session = asyncio.run(_client(handler).authenticate(Credentials(token="gh-token")))

    assert session.base_url == PRO
    assert session.pro is True
    assert session.headers["Authorization"] == "token travis-abc"
    assert seen[0].url == "https://pro.travis.test/auth/github"
    assert json.loads(seen[0].content) == {"github_token": "gh-token"}


def test_token_rejected():
    handler = lambda request: httpx.Response(403, json={"error": "nope"})
    with pytest.raises(AuthenticationError):
        asyncio.run(_client(handler).authenticate(Credentials(token="bad")))


def test_password_authentication_creates_and_deletes_github_token():
    calls = []

    def handler(request):
        calls.append((request.method, str(request.url)))
        if request.url.path == "/authorizations":
            assert request.headers["Authorization"].startswith("Basic ")
            return httpx.Response(201, json={"id": 42, "token": "temp-gh"})
        if request.url.path == "/auth/github":
            assert json.loads(request.content) == {"github_token": "temp-gh"}
            return httpx.Response(200, json={"access_token": "travis-xyz"})
        if request.url.path == "/authorizations/42":
            return httpx.Response(204)
        return httpx.Response(500)

    creds = Credentials(username="dev", password="secret")
    session = asyncio.run(_client(handler).authenticate(creds))

    assert session.access_token == "travis-xyz"
    assert calls == [
        ("POST", "https://github.test/authorizations"),
        ("POST", "https://pro.travis.test/auth/github"),
        ("DELETE", "https://github.test/authorizations/42"),
    ]


def test_password_rejected_by_github():
    handler = lambda request: httpx.Response(401, json={"message": "Bad credentials"})
    creds = Credentials(username="dev", password="wrong")
    with pytest.raises(AuthenticationError) as exc:
        asyncio.run(_client(handler).authenticate(creds))
    assert exc.value.status_code == 401


def test_two_factor_required():
    handler = lambda request: httpx.Response(401, headers={"X-GitHub-OTP": "required; sms"})
    creds = Credentials(username="dev", password="secret")
    with pytest.raises(AuthenticationError) as exc:
        asyncio.run(_client(handler).authenticate(creds))
    assert "two-factor" in str(exc.value)


def test_credentials_need_token_or_password():
    with pytest.raises(ValueError):
        Credentials(username="dev")


# -----------------------------------------------------------------------
# Builds
# -----------------------------------------------------------------------
def test_fetch_builds_sends_session_headers():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"builds": [], "commits": []})

    session = Session(base_url=PRO, access_token="tok", pro=True)
    raw = asyncio.run(_client(handler).fetch_builds(session, "o", "r"))

    assert raw == {"builds": [], "commits": []}
    assert seen[0].url == "https://pro.travis.test/repos/o/r/builds"
    assert seen[0].headers["Accept"] == "application/vnd.travis-ci.2+json"
    assert seen[0].headers["Authorization"] == "token tok"


def test_fetch_builds_unknown_repo():
    handler = lambda request: httpx.Response(404)
    with pytest.raises(NotFoundError):
        asyncio.run(_client(handler).fetch_builds(Session(base_url=PUBLIC), "o", "r"))


def test_fetch_builds_non_json_body_is_malformed_history():
    handler = lambda request: httpx.Response(200, text="<html>maintenance</html>")
    with pytest.raises(MalformedHistoryError) as exc:
        asyncio.run(_client(handler).fetch_builds(Session(base_url=PUBLIC), "o", "r"))
    assert str(exc.value) == "failed to fetch info for o/r"


def test_token_exchange_non_json_body_is_rejected():
    handler = lambda request: httpx.Response(200, text="<html>maintenance</html>")
    with pytest.raises(AuthenticationError):
        asyncio.run(_client(handler).authenticate(Credentials(token="gh-token")))


def test_fetch_build_detail_raises_http_errors():
    handler = lambda request: httpx.Response(500)
    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(_client(handler).fetch_build_detail(Session(base_url=PUBLIC), "o", "r", "9"))


# -----------------------------------------------------------------------
# Credential sources
# -----------------------------------------------------------------------
def test_token_source_selected_when_token_present():
    source = select_credential_source("abc")
    assert isinstance(source, TokenSource)
    assert source.get_credentials().token.get_secret_value() == "abc"


def test_prompt_source_selected_without_token():
    assert isinstance(select_credential_source(None), PromptSource)


def test_prompt_source_hides_password_and_reprompts_blank_username():
    prompt = MagicMock(side_effect=["", "dev", "secret"])
    creds = PromptSource(prompt=prompt).get_credentials()

    assert creds.username == "dev"
    assert creds.password.get_secret_value() == "secret"
    assert prompt.call_args_list[-1].kwargs == {"hide_input": True}


def test_prompt_source_asks_only_once():
    prompt = MagicMock(side_effect=["dev", "secret"])
    source = PromptSource(prompt=prompt)

    first = source.get_credentials()
    second = source.get_credentials()

    assert first is second
    assert prompt.call_count == 2
