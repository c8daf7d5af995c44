"""Filesystem capability.

Provides controlled access to the filesystem the host installs into.
All directory operations of the relocator and the local host go through
this capability, never through direct file access.
"""

import shutil
from pathlib import Path

from gitlab_updater.core.errors import CapabilityError
from gitlab_updater.models.capability import CapabilityDescriptor, CapabilityStatus
from .base import Capability


class FileSystemCapability(Capability):
    """Check, create, copy, move and delete paths."""

    def __init__(self, allowed_paths: list[str | Path] | None = None):
        """Initialize with optional path restrictions.

        Args:
            allowed_paths: If provided, only these paths (and their subdirectories) are accessible.
                          If None, all paths are accessible.
        """
        self._allowed_paths = [Path(p).resolve() for p in allowed_paths] if allowed_paths else None

    @property
    def descriptor(self) -> CapabilityDescriptor:
        restrictions = []
        if self._allowed_paths:
            restrictions.append(f"Limited to: {', '.join(str(p) for p in self._allowed_paths)}")

        return CapabilityDescriptor(
            name="fs",
            description="Directory operations used while installing archives",
            status=CapabilityStatus.RESTRICTED if self._allowed_paths else CapabilityStatus.AVAILABLE,
            operations=["exists", "mkdir", "copy_dir", "move", "delete"],
            restrictions=restrictions
        )

    def _is_path_allowed(self, path: Path) -> bool:
        """Check if a path is within allowed paths."""
        if self._allowed_paths is None:
            return True
        resolved = path.resolve()
        return any(
            resolved == allowed or allowed in resolved.parents
            for allowed in self._allowed_paths
        )

    def _checked(self, path: str | Path, operation: str) -> Path:
        path = Path(path)
        if not self._is_path_allowed(path):
            raise CapabilityError(
                f"Path not allowed: {path}",
                capability_name=self.name,
                operation=operation
            )
        return path

    def exists(self, path: str | Path) -> bool:
        return self._checked(path, "exists").exists()

    def mkdir(self, path: str | Path) -> Path:
        """Create a directory (and parents). Existing directories are fine."""
        path = self._checked(path, "mkdir")
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CapabilityError(
                f"Could not create directory: {path}",
                capability_name=self.name,
                operation="mkdir",
                cause=e
            ) from e
        return path

    def copy_dir(self, src: str | Path, dst: str | Path) -> Path:
        """Copy the contents of ``src`` into ``dst``, merging with what is there."""
        src = self._checked(src, "copy_dir")
        dst = self._checked(dst, "copy_dir")
        if not src.is_dir():
            raise CapabilityError(
                f"Not a directory: {src}",
                capability_name=self.name,
                operation="copy_dir"
            )
        try:
            shutil.copytree(src, dst, symlinks=True, dirs_exist_ok=True)
        except (OSError, shutil.Error) as e:
            raise CapabilityError(
                f"Could not copy {src} to {dst}",
                capability_name=self.name,
                operation="copy_dir",
                cause=e
            ) from e
        return dst

    def move(self, src: str | Path, dst: str | Path) -> Path:
        """Move ``src`` to ``dst``. ``dst`` must not exist."""
        src = self._checked(src, "move")
        dst = self._checked(dst, "move")
        if dst.exists():
            raise CapabilityError(
                f"Destination already exists: {dst}",
                capability_name=self.name,
                operation="move"
            )
        try:
            dst.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(src), str(dst))
        except OSError as e:
            raise CapabilityError(
                f"Could not move {src} to {dst}",
                capability_name=self.name,
                operation="move",
                cause=e
            ) from e
        return dst

    def delete(self, path: str | Path, recursive: bool = False) -> bool:
        """Delete a file or directory. Returns False if nothing was there."""
        path = self._checked(path, "delete")
        if not path.exists() and not path.is_symlink():
            return False
        try:
            if path.is_dir() and not path.is_symlink():
                if recursive:
                    shutil.rmtree(path)
                else:
                    path.rmdir()
            else:
                path.unlink()
        except OSError as e:
            raise CapabilityError(
                f"Could not delete: {path}",
                capability_name=self.name,
                operation="delete",
                cause=e
            ) from e
        return True
