"""
werkday/config.py
User-facing settings document (credentials, selections, model, preferences).
Exports: ConfigStore, DEFAULT_CONFIG, MASK_PLACEHOLDER, GitHubCredentials, JiraCredentials
"""

import copy
import logging
from dataclasses import dataclass
from typing import Any

from werkday.common.errors import NotAuthenticatedError
from werkday.common.payload import safe_dict
from werkday.store.blob import BlobStore

logger = logging.getLogger(__name__)

CONFIG_KEY = "config.json"
MASK_PLACEHOLDER = "***"
DEFAULT_MODEL = "openrouter/anthropic/claude-haiku-4.5"

DEFAULT_CONFIG: dict[str, dict[str, Any]] = {
    "sourceControl": {
        "token": None,
        "username": None,
        "avatarUrl": None,
        "organizations": [],
        "repositories": [],
    },
    "issueTracker": {
        "domain": None,
        "email": None,
        "apiToken": None,
        "displayName": None,
        "accountId": None,
        "projects": [],
    },
    "languageModel": {
        "apiKey": None,
        "model": DEFAULT_MODEL,
    },
    "preferences": {
        "theme": "dark",
        "sidebarCollapsed": False,
    },
}

SECRET_FIELDS: tuple[tuple[str, str], ...] = (
    ("sourceControl", "token"),
    ("issueTracker", "apiToken"),
    ("languageModel", "apiKey"),
)


@dataclass(frozen=True)
class GitHubCredentials:
    token: str
    username: str | None


@dataclass(frozen=True)
class JiraCredentials:
    domain: str
    email: str
    api_token: str
    projects: list[str]


def _is_real_secret(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip()) and value != MASK_PLACEHOLDER


class ConfigStore:
    """
    Config document with one-level-deep merge per top-level section.

    Secret fields never store the display placeholder: an incoming `"***"`
    keeps the current value, an explicit None clears it.
    """

    def __init__(self, blob: BlobStore) -> None:
        self.blob = blob

    def load(self) -> dict[str, dict[str, Any]]:
        """Return defaults overlaid with the saved document, section by section."""
        saved = safe_dict(self.blob.read(CONFIG_KEY, {}))
        config = copy.deepcopy(DEFAULT_CONFIG)
        for section, defaults in config.items():
            defaults.update(safe_dict(saved.get(section)))
        return config

    def save(self, partial: dict[str, Any]) -> dict[str, dict[str, Any]]:
        """
        Merge a partial update into the stored config and persist it.

        Args:
            partial: Mapping of section name to the fields to change.
        Returns:
            The full updated config (unmasked).
        """
        config = self.load()
        for section, updates in safe_dict(partial).items():
            if section not in config:
                logger.warning("Ignoring unknown config section %r.", section)
                continue
            if not isinstance(updates, dict):
                continue
            for field, value in updates.items():
                if (section, field) in SECRET_FIELDS and value == MASK_PLACEHOLDER:
                    continue
                config[section][field] = value
        self.blob.write(CONFIG_KEY, config)
        return config

    def masked(self) -> dict[str, dict[str, Any]]:
        """Config safe for display: real secrets become `"***"`, anything else None."""
        config = self.load()
        for section, field in SECRET_FIELDS:
            config[section][field] = MASK_PLACEHOLDER if _is_real_secret(config[section][field]) else None
        return config

    def has_secret(self, section: str, field: str) -> bool:
        return _is_real_secret(self.load().get(section, {}).get(field))

    def reset(self, section: str) -> dict[str, dict[str, Any]]:
        """Restore one section to its defaults."""
        if section not in DEFAULT_CONFIG:
            raise KeyError(section)
        config = self.load()
        config[section] = copy.deepcopy(DEFAULT_CONFIG[section])
        self.blob.write(CONFIG_KEY, config)
        return config

    def github_credentials(self) -> GitHubCredentials:
        """
        Raises:
            NotAuthenticatedError: When no usable token is stored.
        """
        section = self.load()["sourceControl"]
        if not _is_real_secret(section.get("token")):
            raise NotAuthenticatedError("GitHub not connected")
        return GitHubCredentials(token=section["token"], username=section.get("username") or None)

    def jira_credentials(self) -> JiraCredentials:
        """
        Raises:
            NotAuthenticatedError: When domain, email or token is missing.
        """
        section = self.load()["issueTracker"]
        if not (section.get("domain") and section.get("email") and _is_real_secret(section.get("apiToken"))):
            raise NotAuthenticatedError("JIRA not connected")
        projects = [str(key) for key in section.get("projects") or [] if str(key).strip()]
        return JiraCredentials(
            domain=str(section["domain"]),
            email=str(section["email"]),
            api_token=section["apiToken"],
            projects=projects,
        )
