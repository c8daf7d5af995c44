"""Archive relocator - gives an extracted archive the directory name of its slug.

The host derives the install directory from the top-level folder of the
archive. GitLab names that folder after project, ref and commit SHA, so it
has to be renamed to the slug before the host installs it.
"""

import time
from pathlib import Path
from typing import Any, Iterable, Mapping

from gitlab_updater.capabilities.filesystem import FileSystemCapability
from gitlab_updater.core.errors import CapabilityError, RelocationError
from gitlab_updater.core.logging import get_logger
from gitlab_updater.models.extension import ExtensionKind, ExtensionRegistration

log = get_logger("relocator")


class ArchiveRelocator:
    """Moves extracted sources of registered extensions into ``{remote_source}/{slug}``."""

    def __init__(
        self,
        kind: ExtensionKind,
        registrations: Iterable[ExtensionRegistration],
        fs: FileSystemCapability
    ):
        self.kind = kind
        self.registrations = list(registrations)
        self._fs = fs

    def filter_source(self, source: str | Path, remote_source: str | Path, install_args: Mapping[str, Any] | None) -> str | Path:
        """Hook handler for the pre-install lifecycle point.

        Only acts when the install target matches one of our settings keys.
        """
        target = (install_args or {}).get(self.kind.value)
        if not target:
            return source

        for registration in self.registrations:
            if target == registration.settings_key:
                source = self.relocate(source, remote_source, registration.slug)
        return source

    def relocate(self, source: str | Path, remote_source: str | Path, slug: str) -> str | Path:
        """Copy ``source`` into ``{remote_source}/{slug}`` and delete ``source``.

        Returns the new source path, or ``source`` unchanged when
        ``remote_source`` does not exist or ``source`` already is the
        slug directory.
        """
        try:
            if not self._fs.exists(remote_source):
                return source
        except CapabilityError as e:
            raise RelocationError(
                f"Cannot access install staging directory for {slug}",
                source=str(source),
                slug=slug,
                cause=e
            ) from e

        source_path = Path(source)
        destination = Path(remote_source) / slug

        if source_path.resolve() == destination.resolve():
            return destination

        if source_path.resolve() == Path(remote_source).resolve():
            raise RelocationError(
                "Archive has no top-level directory to relocate",
                source=str(source),
                slug=slug
            )

        started = time.monotonic()
        try:
            self._fs.mkdir(destination)
            self._fs.copy_dir(source_path, destination)
            self._fs.delete(source_path, recursive=True)
        except CapabilityError as e:
            raise RelocationError(
                f"Could not relocate archive source for {slug}",
                source=str(source),
                slug=slug,
                cause=e
            ) from e

        log.source_relocated(slug, str(source), str(destination), (time.monotonic() - started) * 1000)
        return destination
