"""
Configuration
=============
Loads environment variables from .env file using python-dotenv.

Environment Variables:
    GITHUB_ACCESS_TOKEN  — GitHub token exchanged for a Travis token on private repos
    TRAVIS_API_URL       — Travis API for public repositories (default: api.travis-ci.org)
    TRAVIS_PRO_API_URL   — Travis API for private repositories (default: api.travis-ci.com)
    GITHUB_API_URL       — GitHub API used for visibility and authorizations
    HTTP_TIMEOUT         — Per-request timeout in seconds (default: 20)
    USER_AGENT           — User-Agent header sent to every API
    LOG_LEVEL            — Root log level (default: WARNING)
    LOG_FILE             — Optional path; when set, logs are also written there

Credentials:
    When GITHUB_ACCESS_TOKEN is unset, the CLI prompts for a GitHub
    username and password instead. The HTTP API never prompts.
"""
import os
from dotenv import load_dotenv

load_dotenv()

GITHUB_ACCESS_TOKEN = os.getenv("GITHUB_ACCESS_TOKEN")

TRAVIS_API_URL = os.getenv("TRAVIS_API_URL", "https://api.travis-ci.org")
TRAVIS_PRO_API_URL = os.getenv("TRAVIS_PRO_API_URL", "https://api.travis-ci.com")
GITHUB_API_URL = os.getenv("GITHUB_API_URL", "https://api.github.com")

# Travis API v2 media type
TRAVIS_ACCEPT = "application/vnd.travis-ci.2+json"

HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", 20))
USER_AGENT = os.getenv("USER_AGENT", "git-travis cli tool")

LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")
LOG_FILE = os.getenv("LOG_FILE", "")
