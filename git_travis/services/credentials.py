"""
Credential Sources
==================
Selected once at startup:

    TokenSource  — GitHub token from GITHUB_ACCESS_TOKEN
    PromptSource — interactive GitHub username/password prompt

Both produce a Credentials value for TravisClient.authenticate().
"""
import logging
from typing import Callable, Optional, Protocol

import typer

from git_travis.models.session import Credentials

logger = logging.getLogger(__name__)


class CredentialSource(Protocol):
    def get_credentials(self) -> Credentials: ...


class TokenSource:
    def __init__(self, token: str) -> None:
        self.token = token

    def get_credentials(self) -> Credentials:
        return Credentials(token=self.token)


class PromptSource:
    """
    Asks for a GitHub username and a hidden password.
    The answer is kept, so a run over several private repositories prompts once.
    """

    def __init__(self, prompt: Callable[..., str] = typer.prompt) -> None:
        self.prompt = prompt
        self._credentials: Optional[Credentials] = None

    def get_credentials(self) -> Credentials:
        if self._credentials is not None:
            return self._credentials
        username = ""
        while not username.strip():
            username = self.prompt("username")
        password = ""
        while not password:
            password = self.prompt("password", hide_input=True)
        logger.debug("Collected interactive credentials for %s", username)
        self._credentials = Credentials(username=username.strip(), password=password)
        return self._credentials


def select_credential_source(
    token: Optional[str],
    prompt: Callable[..., str] = typer.prompt,
) -> CredentialSource:
    if token:
        logger.debug("Using GitHub token for Travis authentication")
        return TokenSource(token)
    return PromptSource(prompt)
