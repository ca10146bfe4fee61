"""
werkday/shared.py
Process-level settings read from environment variables.
Exports: build_data_dir, build_github_api_url, build_jira_base_url, build_http_timeout_seconds,
         build_github_cache_max_age_seconds, ai_enabled
"""

import os
from pathlib import Path

DEFAULT_DATA_DIR = "~/.werkday"
DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_JIRA_URL_TEMPLATE = "https://{domain}.atlassian.net"
DEFAULT_HTTP_TIMEOUT_SECONDS = 30
DEFAULT_GITHUB_CACHE_MAX_AGE_SECONDS = 300
USER_AGENT = "Werkday"


def _positive_int_env(name: str, default: int) -> int:
    """Read a positive integer env var or raise RuntimeError naming it."""
    raw_value = os.getenv(name, str(default)).strip()
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise RuntimeError(f"Invalid {name}: expected a positive integer.") from exc
    if value <= 0:
        raise RuntimeError(f"Invalid {name}: expected a positive integer.")
    return value


def build_data_dir() -> Path:
    """Return the directory holding every Werkday JSON document."""
    raw_value = os.getenv("WERKDAY_DATA_DIR", "").strip() or DEFAULT_DATA_DIR
    return Path(raw_value).expanduser()


def build_github_api_url() -> str:
    return os.getenv("WERKDAY_GITHUB_API_URL", DEFAULT_GITHUB_API_URL).strip().rstrip("/")


def build_jira_base_url(domain: str) -> str:
    """Return the issue-tracker base URL for a site domain such as `acme`."""
    template = os.getenv("WERKDAY_JIRA_URL_TEMPLATE", "").strip() or DEFAULT_JIRA_URL_TEMPLATE
    return template.format(domain=domain.strip()).rstrip("/")


def build_http_timeout_seconds() -> int:
    return _positive_int_env("WERKDAY_HTTP_TIMEOUT_SECONDS", DEFAULT_HTTP_TIMEOUT_SECONDS)


def build_github_cache_max_age_seconds() -> int:
    """Return the cache age below which GitHub activity is served without refetching."""
    return _positive_int_env(
        "WERKDAY_GITHUB_CACHE_MAX_AGE_SECONDS", DEFAULT_GITHUB_CACHE_MAX_AGE_SECONDS
    )


def ai_enabled() -> bool:
    """Return whether language-model calls are enabled."""
    value = os.getenv("WERKDAY_AI_ENABLED", "true").strip().lower()
    return value not in {"0", "false", "no", "off"}
