"""Package resolver - turns a newer tag into a published update descriptor."""

from gitlab_updater.core.logging import get_logger
from gitlab_updater.gitlab.client import GitLabClient
from gitlab_updater.models.extension import ExtensionKind, ExtensionRegistration
from gitlab_updater.models.transient import UpdateDescriptor, UpdateTransient

log = get_logger("resolver")


class PackageResolver:
    """Builds the archive URL for a tag and publishes it if it is reachable."""

    def __init__(self, client: GitLabClient):
        self._client = client

    def package_url(self, registration: ExtensionRegistration, version: str) -> str:
        return self._client.archive_url(registration, version)

    def describe(self, registration: ExtensionRegistration, version: str, package_url: str) -> UpdateDescriptor:
        key = registration.settings_key
        is_plugin = registration.kind == ExtensionKind.PLUGIN
        return UpdateDescriptor(
            slug=registration.slug,
            package=package_url,
            new_version=version,
            plugin=key if is_plugin else None,
            theme=None if is_plugin else key,
        )

    def resolve(self, transient: UpdateTransient, registration: ExtensionRegistration, version: str) -> bool:
        """Publish an update for ``registration`` into ``transient``.

        The archive URL is requested once; only a 200 answer publishes the
        descriptor. Returns True if the transient was changed.
        """
        package_url = self.package_url(registration, version)

        if not self._client.package_available(package_url):
            log.check_skipped(
                registration.kind.value,
                registration.settings_key,
                f"archive for {version} is not reachable",
            )
            return False

        transient.response[registration.settings_key] = self.describe(registration, version, package_url)
        return True
