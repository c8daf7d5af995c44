"""Local host - a small stand-in for the CMS update lifecycle.

Keeps one update transient per extension kind as JSON in the state
directory, fires the lifecycle hooks, and performs the download and
install steps the CMS would normally do.
"""

import tempfile
import zipfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from gitlab_updater.capabilities.filesystem import FileSystemCapability
from gitlab_updater.capabilities.network import NetworkFetchCapability
from gitlab_updater.core.errors import CapabilityError, ConfigError, InstallError, RelocationError
from gitlab_updater.core.logging import get_logger
from gitlab_updater.gitlab.client import GitLabClient
from gitlab_updater.hooks.dispatcher import HookDispatcher, PRE_INSTALL, pre_check, read_transient
from gitlab_updater.models.extension import ExtensionKind
from gitlab_updater.models.transient import UpdateDescriptor, UpdateTransient

log = get_logger("host")


class LocalHost:
    """Runs check and install cycles against a local install directory."""

    def __init__(
        self,
        dispatcher: HookDispatcher,
        fs: FileSystemCapability,
        network: NetworkFetchCapability,
        state_dir: str | Path
    ):
        self.dispatcher = dispatcher
        self.fs = fs
        self.network = network
        self.state_dir = Path(state_dir)

    def _transient_path(self, kind: ExtensionKind) -> Path:
        return self.state_dir / f"update_{kind.value}s.json"

    def _store(self, kind: ExtensionKind, transient: UpdateTransient) -> None:
        path = self._transient_path(kind)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(transient.model_dump_json(indent=2), encoding="utf-8")

    def _load_raw(self, kind: ExtensionKind) -> UpdateTransient:
        path = self._transient_path(kind)
        if not path.exists():
            return UpdateTransient()
        try:
            return UpdateTransient.model_validate_json(path.read_text(encoding="utf-8"))
        except PydanticValidationError as e:
            raise ConfigError(
                f"Stored update state is corrupt: {path}",
                suggestion="Run 'gitlab-updater check' again to rebuild it",
                cause=e
            ) from e

    def check_updates(self, kind: ExtensionKind | str, installed: dict[str, str]) -> UpdateTransient:
        """Run one update-check cycle for ``kind``.

        ``installed`` maps settings keys to installed versions.
        """
        kind = ExtensionKind(kind)
        transient = UpdateTransient.from_installed(installed)
        transient = self.dispatcher.apply(pre_check(kind.value), transient)
        self._store(kind, transient)
        return self.dispatcher.apply(read_transient(kind.value), transient)

    def load_transient(self, kind: ExtensionKind | str) -> UpdateTransient:
        kind = ExtensionKind(kind)
        return self.dispatcher.apply(read_transient(kind.value), self._load_raw(kind))

    def pending(self, kind: ExtensionKind | str, key: str) -> Optional[UpdateDescriptor]:
        return self.load_transient(kind).response.get(key)

    def install(self, kind: ExtensionKind | str, key: str, install_dir: str | Path) -> Path:
        """Download, extract, relocate and install the pending update for ``key``.

        Returns the directory the extension was installed to.

        Raises:
            InstallError: when there is no pending update, the download
                fails or the archive is unusable.
        """
        kind = ExtensionKind(kind)
        descriptor = self.pending(kind, key)
        if descriptor is None:
            raise InstallError(
                f"No pending update for {kind.value} {key}",
                extension_name=key,
                suggestion="Run 'gitlab-updater check' first"
            )

        self.state_dir.mkdir(parents=True, exist_ok=True)
        work_dir = Path(tempfile.mkdtemp(prefix="upgrade-", dir=self.state_dir))
        try:
            archive = work_dir / "package.zip"
            result = self.network.download(descriptor.package, archive)
            if not result.success:
                raise InstallError(
                    f"Download of {key} {descriptor.new_version} failed",
                    extension_name=key,
                    version=descriptor.new_version,
                    details=f"{result.error} ({GitLabClient.mask(descriptor.package)})"
                )

            remote_source = self.fs.mkdir(work_dir / "extract")
            source = self._extract(archive, remote_source, key)
            source = self.dispatcher.apply(PRE_INSTALL, source, remote_source, {kind.value: key}, strict=True)

            destination = Path(install_dir) / Path(source).name
            if self.fs.exists(destination):
                self.fs.delete(destination, recursive=True)
            self.fs.move(source, destination)
        except (CapabilityError, RelocationError) as e:
            raise InstallError(
                f"Could not install {key} {descriptor.new_version}",
                extension_name=key,
                version=descriptor.new_version,
                details=e.message,
                cause=e
            ) from e
        finally:
            if self.fs.exists(work_dir):
                self.fs.delete(work_dir, recursive=True)

        self._mark_installed(kind, key, descriptor.new_version)
        log.info(
            f"Installed {key} {descriptor.new_version} to {destination}",
            component="host",
            kind=kind.value,
            extension=key,
            success=True,
        )
        return destination

    def _extract(self, archive: Path, target: Path, key: str) -> Path:
        """Extract ``archive`` into ``target`` and return its top-level directory."""
        try:
            with zipfile.ZipFile(archive, "r") as zf:
                members = zf.namelist()
                target_resolved = target.resolve()
                for member in members:
                    member_dest = (target / member).resolve()
                    if not member_dest.is_relative_to(target_resolved):
                        raise InstallError(
                            f"Archive member escapes the extract directory: {member!r}",
                            extension_name=key
                        )
                zf.extractall(target)
        except zipfile.BadZipFile as e:
            raise InstallError(f"Invalid ZIP file for {key}", extension_name=key, cause=e) from e

        entries = list(target.iterdir())
        if len(entries) != 1 or not entries[0].is_dir():
            raise InstallError(
                f"Archive for {key} must contain exactly one top-level directory",
                extension_name=key
            )
        return entries[0]

    def _mark_installed(self, kind: ExtensionKind, key: str, version: str) -> None:
        transient = self._load_raw(kind)
        transient.response.pop(key, None)
        transient.checked[key] = version
        self._store(kind, transient)
