"""Pydantic request bodies; JSON field names are camelCase."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def updates(self) -> dict[str, Any]:
        """Fields the client actually sent with a non-null value, camelCase keyed."""
        return self.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)


class GitHubConfigRequest(CamelModel):
    token: str | None = None
    username: str | None = None
    avatar_url: str | None = None
    organizations: list[str] | None = None
    repositories: list[str] | None = None


class GitHubValidateRequest(CamelModel):
    token: str | None = None


class JiraConfigRequest(CamelModel):
    domain: str | None = None
    email: str | None = None
    api_token: str | None = None
    projects: list[str] | None = None


class JiraValidateRequest(CamelModel):
    domain: str | None = None
    email: str | None = None
    api_token: str | None = None


class DateRangeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: str | None = Field(default=None, alias="from")
    to: str | None = None
    date: str | None = None


class JiraSyncRequest(DateRangeRequest):
    stale_after_seconds: int | None = Field(default=None, alias="staleAfterSeconds", ge=0)


class NoteRequest(CamelModel):
    id: str | None = None
    title: str | None = Field(default=None, max_length=500)
    content: str | None = None
    created_at: str | None = None
    tags: list[str] | None = None


class LanguageModelRequest(CamelModel):
    api_key: str | None = None
    model: str | None = None
