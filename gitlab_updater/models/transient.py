"""Update transient data models.

The transient is the host's cached update-check state. The host fills
``checked`` with installed versions, the updater adds entries to
``response`` for extensions that have a newer release.
"""

from datetime import datetime, timezone
from typing import Any
from pydantic import BaseModel, Field


class UpdateDescriptor(BaseModel):
    """Download metadata for one available update."""
    slug: str
    package: str = Field(..., description="Download URL of the archive")
    new_version: str
    plugin: str | None = Field(default=None, description="Plugin base name (plugins only)")
    theme: str | None = Field(default=None, description="Theme slug (themes only)")

    @property
    def identifier(self) -> str:
        return self.plugin or self.theme or self.slug

    def to_host(self) -> dict[str, Any]:
        """Shape the descriptor the way the host reads it."""
        return self.model_dump(exclude_none=True)


class UpdateTransient(BaseModel):
    """Update-check state for one extension kind."""
    checked: dict[str, str] = Field(
        default_factory=dict,
        description="Settings key -> installed version"
    )
    response: dict[str, UpdateDescriptor] = Field(
        default_factory=dict,
        description="Settings key -> available update"
    )
    last_checked: datetime | None = None

    @classmethod
    def from_installed(cls, installed: dict[str, str]) -> "UpdateTransient":
        return cls(checked=dict(installed), last_checked=datetime.now(timezone.utc))
