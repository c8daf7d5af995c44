"""Updater package - check, resolve and relocate updates from GitLab."""

from .filters import ForeignUpdateFilter
from .flows import ExtensionUpdater, PluginUpdater, ThemeUpdater, create_updaters
from .prober import UpdateProber
from .relocator import ArchiveRelocator
from .resolver import PackageResolver
from .versioning import compare_versions, is_newer

__all__ = [
    "ArchiveRelocator",
    "ExtensionUpdater",
    "ForeignUpdateFilter",
    "PackageResolver",
    "PluginUpdater",
    "ThemeUpdater",
    "UpdateProber",
    "compare_versions",
    "create_updaters",
    "is_newer",
]
