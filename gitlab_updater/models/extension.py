"""Extension registration models."""

from enum import Enum
from typing import Any
from urllib.parse import urlparse
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ExtensionKind(str, Enum):
    """Kind of host extension managed by the updater."""
    PLUGIN = "plugin"
    THEME = "theme"


class ExtensionRegistration(BaseModel):
    """One plugin or theme that receives updates from a GitLab repo.

    Registrations are built from the options file and validated at load
    time. They are frozen: nothing changes them during a check cycle.
    """
    model_config = ConfigDict(frozen=True)

    kind: ExtensionKind
    slug: str = Field(..., min_length=1, description="Install directory name of the extension")
    base_name: str | None = Field(
        default=None,
        description="Relative path of the plugin main file, e.g. 'my-plugin/my-plugin.php'"
    )
    access_token: str = Field(..., min_length=1, description="Personal access token with 'api' scope")
    gitlab_url: str = Field(..., min_length=1, description="GitLab URL, e.g. https://gitlab.com")
    repo: str | None = Field(
        default=None,
        description="Project path with user or group, e.g. 'group/repo'"
    )

    @field_validator("slug", "access_token")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("slug")
    @classmethod
    def _single_directory(cls, value: str) -> str:
        # The slug becomes a directory name under the staging and install dirs
        if "/" in value or "\\" in value or value.startswith("."):
            raise ValueError("must be a plain directory name (no separators, no leading dot)")
        return value

    @field_validator("gitlab_url")
    @classmethod
    def _untrailingslash(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value.startswith(("http://", "https://")):
            raise ValueError("must be an http(s) URL")
        try:
            host = urlparse(value).hostname
        except ValueError:
            host = None
        if not host:
            raise ValueError("must name a host")
        return value

    @field_validator("repo")
    @classmethod
    def _encode_repo(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip().strip("/")
        if not value:
            return None
        return value.replace("/", "%2F")

    @model_validator(mode="before")
    @classmethod
    def _drop_theme_base_name(cls, data: Any) -> Any:
        # Themes are keyed by slug only
        if isinstance(data, dict) and data.get("kind") in (ExtensionKind.THEME, "theme"):
            data = {**data, "base_name": None}
        return data

    @model_validator(mode="after")
    def _check_base_name(self) -> "ExtensionRegistration":
        if self.kind == ExtensionKind.PLUGIN and not (self.base_name or "").strip():
            raise ValueError("plugins need a base_name (e.g. 'my-plugin/my-plugin.php')")
        return self

    @property
    def settings_key(self) -> str:
        """Key used in the transient and in the options file."""
        if self.kind == ExtensionKind.PLUGIN:
            return self.base_name
        return self.slug

    @property
    def project_api_url(self) -> str:
        """Base URL of the project in the GitLab REST API."""
        if self.repo is None:
            return self.gitlab_url
        return f"{self.gitlab_url}/api/v4/projects/{self.repo}"

    @classmethod
    def from_option(cls, kind: ExtensionKind | str, record: dict[str, Any]) -> "ExtensionRegistration":
        """Build a registration from a stored options record."""
        kind = ExtensionKind(kind)
        key = record.get("settings-array-key") or ""
        return cls(
            kind=kind,
            # Plugin keys look like "dir/main.php"; the directory is the slug
            slug=record.get("slug") or key.split("/", 1)[0],
            base_name=key if kind == ExtensionKind.PLUGIN else None,
            access_token=record.get("access-token", ""),
            gitlab_url=record.get("gitlab-url", ""),
            repo=record.get("repo"),
        )

    def to_option(self) -> dict[str, Any]:
        """Serialize into the options record layout."""
        record = {
            "settings-array-key": self.settings_key,
            "slug": self.slug,
            "access-token": self.access_token,
            "gitlab-url": self.gitlab_url,
        }
        if self.repo is not None:
            record["repo"] = self.repo
        return record

    def masked(self) -> str:
        """One-line description without the token."""
        source = self.repo.replace("%2F", "/") if self.repo else self.gitlab_url
        return f"{self.kind.value} {self.settings_key} <- {source}"
