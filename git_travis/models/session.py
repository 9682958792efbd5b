"""
Session & Credentials
=====================
Credentials   — either a GitHub token or a GitHub username/password pair
Session       — an explicit, immutable handle on one Travis endpoint; produced
                by TravisClient.authenticate() (or anonymous_session()) and
                passed into every provider call
"""
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, SecretStr, model_validator

from git_travis.core.config import TRAVIS_ACCEPT, USER_AGENT


class Credentials(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: Optional[SecretStr] = None
    username: Optional[str] = None
    password: Optional[SecretStr] = None

    @model_validator(mode="after")
    def _one_method(self) -> "Credentials":
        if self.token is None and not (self.username and self.password):
            raise ValueError("either token or username and password are required")
        return self

    @property
    def uses_token(self) -> bool:
        return self.token is not None


class Session(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_url: str
    access_token: Optional[str] = None
    pro: bool = False

    @property
    def authenticated(self) -> bool:
        return bool(self.access_token)

    @property
    def headers(self) -> Dict[str, str]:
        headers = {
            "Accept": TRAVIS_ACCEPT,
            "User-Agent": USER_AGENT,
        }
        if self.access_token:
            headers["Authorization"] = f"token {self.access_token}"
        return headers
