"""
Constants
Centralised storage for glyphs, advisory wording and git parsing rules.
"""
DEFAULT_BRANCH = "master"
SHA_LENGTH = 7

ORIGIN_REMOTE = "origin"
BRANCH_PREFIXES = ("# On branch ", "On branch ")
REMOTE_ANNOTATIONS = (" (fetch)", " (push)")

STALE_ADVISORY = "no recent builds on {branch} showing latest"

# Glyphs: Unicode on capable terminals, ASCII fallback on Windows consoles
GOOD = "✔"
BAD = "✖"
PROGRESS = "♢"
GOOD_ASCII = "OK"
BAD_ASCII = "X"
PROGRESS_ASCII = "O"

STATE_FAILED = "failed"
STATE_PASSED = "passed"

# Scopes requested for the temporary GitHub authorization (password login)
GITHUB_AUTH_SCOPES = [
    "read:org",
    "user:email",
    "repo_deployment",
    "repo:status",
    "write:repo_hook",
]
GITHUB_AUTH_NOTE = "temporary token to auth against travis"
