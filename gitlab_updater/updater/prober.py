"""Update prober - compares the newest GitLab tag with the installed version."""

from typing import Iterable

from gitlab_updater.core.errors import APIError, UpdaterError
from gitlab_updater.core.logging import get_logger
from gitlab_updater.gitlab.client import GitLabClient
from gitlab_updater.models.extension import ExtensionKind, ExtensionRegistration
from gitlab_updater.models.transient import UpdateTransient
from .resolver import PackageResolver
from .versioning import is_newer

log = get_logger("prober")


class UpdateProber:
    """Checks every registration of one kind against the update transient.

    Errors never leave ``probe``: a registration whose check fails is
    skipped for this cycle and the next registration is checked.
    """

    def __init__(
        self,
        kind: ExtensionKind,
        registrations: Iterable[ExtensionRegistration],
        client: GitLabClient,
        resolver: PackageResolver
    ):
        self.kind = kind
        self.registrations = list(registrations)
        self._client = client
        self._resolver = resolver

    def probe(self, transient: UpdateTransient) -> UpdateTransient:
        """Add update descriptors to ``transient`` for outdated extensions."""
        if not transient.checked:
            return transient

        for registration in self.registrations:
            try:
                self._probe_one(transient, registration)
            except UpdaterError as e:
                log.check_skipped(self.kind.value, registration.settings_key, e.message)

        return transient

    def _probe_one(self, transient: UpdateTransient, registration: ExtensionRegistration) -> None:
        key = registration.settings_key

        installed = transient.checked.get(key)
        if installed is None:
            log.check_skipped(self.kind.value, key, "not installed")
            return

        try:
            latest = self._client.latest_tag(registration)
        except APIError as e:
            log.check_skipped(self.kind.value, key, e.message, status_code=e.status_code)
            return

        if latest is None:
            log.check_skipped(self.kind.value, key, "repository has no tags")
            return

        if not is_newer(latest, installed):
            log.check_skipped(self.kind.value, key, f"{installed} is up to date (latest tag {latest})")
            return

        log.update_found(self.kind.value, key, installed, latest)
        self._resolver.resolve(transient, registration, latest)
