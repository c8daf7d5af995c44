"""Options store for extension registrations.

Handles loading, saving, and validating the registrations the updater
manages. The file keeps one option map per extension kind, keyed by the
settings key, in the same record layout the options page writes.
"""

import json
from pathlib import Path
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from gitlab_updater.core.errors import ConfigError
from gitlab_updater.models.extension import ExtensionKind, ExtensionRegistration

OPTION_NAMES = {
    ExtensionKind.PLUGIN: "gitlab-updater-plugins",
    ExtensionKind.THEME: "gitlab-updater-themes",
}


class OptionsFile(BaseModel):
    """Raw layout of the options file."""
    model_config = ConfigDict(populate_by_name=True)

    plugins: dict[str, dict] = Field(default_factory=dict, alias="gitlab-updater-plugins")
    themes: dict[str, dict] = Field(default_factory=dict, alias="gitlab-updater-themes")

    def records(self, kind: ExtensionKind) -> dict[str, dict]:
        return self.plugins if kind == ExtensionKind.PLUGIN else self.themes


class OptionsStore:
    """Manages the persisted registrations."""

    def __init__(self, options_path: Path):
        self.options_path = Path(options_path)
        self._options: Optional[OptionsFile] = None

    @property
    def options(self) -> OptionsFile:
        if self._options is None:
            self.load()
        return self._options

    def load(self) -> OptionsFile:
        """Load options from disk; a missing file means no registrations."""
        if not self.options_path.exists():
            self._options = OptionsFile()
            return self._options

        try:
            with open(self.options_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            self._options = OptionsFile.model_validate(data)
        except json.JSONDecodeError as e:
            raise ConfigError(
                f"Options file is not valid JSON: {self.options_path}",
                details=str(e),
                cause=e
            ) from e
        except PydanticValidationError as e:
            raise ConfigError(
                f"Options file has an unexpected layout: {self.options_path}",
                details=str(e),
                cause=e
            ) from e

        return self._options

    def save(self) -> None:
        """Write options to disk."""
        self.options_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.options_path, "w", encoding="utf-8") as f:
            f.write(self.options.model_dump_json(by_alias=True, indent=2))

    def registrations(self, kind: ExtensionKind | str) -> list[ExtensionRegistration]:
        """Validate and return the registrations of one kind.

        Raises:
            ConfigError: if a stored record is incomplete or malformed.
        """
        kind = ExtensionKind(kind)
        result = []
        for key, record in self.options.records(kind).items():
            try:
                result.append(ExtensionRegistration.from_option(kind, record))
            except PydanticValidationError as e:
                raise ConfigError(
                    f"Invalid {kind.value} registration '{key}'",
                    details=str(e),
                    suggestion=f"Remove it with 'gitlab-updater remove {kind.value} {key}' and add it again",
                    cause=e
                ) from e
        return result

    def add(self, registration: ExtensionRegistration) -> None:
        """Insert or replace a registration and save."""
        self.options.records(registration.kind)[registration.settings_key] = registration.to_option()
        self.save()

    def remove(self, kind: ExtensionKind | str, key: str) -> bool:
        """Remove a registration. Returns False if it was not there."""
        records = self.options.records(ExtensionKind(kind))
        if key not in records:
            return False
        del records[key]
        self.save()
        return True

    def clear(self) -> None:
        """Delete the options file."""
        self.options_path.unlink(missing_ok=True)
        self._options = OptionsFile()
