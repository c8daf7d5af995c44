"""Plugin and theme update flows.

Each flow bundles prober, resolver, relocator and foreign-update filter for
one extension kind and hooks them into the host lifecycle.
"""

from typing import Iterable

from gitlab_updater.capabilities.filesystem import FileSystemCapability
from gitlab_updater.gitlab.client import GitLabClient
from gitlab_updater.hooks.dispatcher import HookDispatcher, PRE_INSTALL, pre_check, read_transient
from gitlab_updater.models.extension import ExtensionKind, ExtensionRegistration
from gitlab_updater.models.transient import UpdateTransient
from .filters import ForeignUpdateFilter
from .prober import UpdateProber
from .relocator import ArchiveRelocator
from .resolver import PackageResolver


class ExtensionUpdater:
    """Update flow for one extension kind.

    Registrations of other kinds are ignored. If two registrations share a
    settings key the later one wins.
    """

    kind: ExtensionKind

    def __init__(
        self,
        registrations: Iterable[ExtensionRegistration],
        client: GitLabClient,
        fs: FileSystemCapability
    ):
        by_key = {}
        for registration in registrations:
            if registration.kind == self.kind:
                by_key[registration.settings_key] = registration
        self.registrations = list(by_key.values())

        self.resolver = PackageResolver(client)
        self.prober = UpdateProber(self.kind, self.registrations, client, self.resolver)
        self.relocator = ArchiveRelocator(self.kind, self.registrations, fs)
        self.foreign_filter = ForeignUpdateFilter(self.registrations)

    def check(self, transient: UpdateTransient) -> UpdateTransient:
        return self.prober.probe(transient)

    def _handlers(self):
        return (
            (pre_check(self.kind.value), self.prober.probe),
            (read_transient(self.kind.value), self.foreign_filter.filter),
            (PRE_INSTALL, self.relocator.filter_source),
        )

    def attach(self, dispatcher: HookDispatcher) -> None:
        """Register this flow's handlers on the host lifecycle points."""
        for hook, handler in self._handlers():
            dispatcher.register(hook, handler)

    def detach(self, dispatcher: HookDispatcher) -> None:
        for hook, handler in self._handlers():
            dispatcher.unregister(hook, handler)


class PluginUpdater(ExtensionUpdater):
    """Plugin flow: keyed by plugin base name, install args carry 'plugin'."""
    kind = ExtensionKind.PLUGIN


class ThemeUpdater(ExtensionUpdater):
    """Theme flow: keyed by slug, install args carry 'theme'."""
    kind = ExtensionKind.THEME


def create_updaters(
    registrations: Iterable[ExtensionRegistration],
    client: GitLabClient,
    fs: FileSystemCapability
) -> list[ExtensionUpdater]:
    registrations = list(registrations)
    return [
        PluginUpdater(registrations, client, fs),
        ThemeUpdater(registrations, client, fs),
    ]
