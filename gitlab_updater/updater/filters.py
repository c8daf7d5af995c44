"""Foreign update filter.

An extension with the same slug may also exist in a public directory, and
the host then offers that directory's release as an update. For our
registrations only updates pointing at the registration's GitLab are kept.
"""

from typing import Iterable

from gitlab_updater.core.logging import get_logger
from gitlab_updater.models.extension import ExtensionRegistration
from gitlab_updater.models.transient import UpdateTransient

log = get_logger("filters")


class ForeignUpdateFilter:
    """Drops transient entries for our keys whose package lives elsewhere."""

    def __init__(self, registrations: Iterable[ExtensionRegistration]):
        self.registrations = list(registrations)

    def filter(self, transient: UpdateTransient) -> UpdateTransient:
        if not transient.response:
            return transient

        for registration in self.registrations:
            key = registration.settings_key
            entry = transient.response.get(key)
            if entry is not None and registration.gitlab_url not in entry.package:
                del transient.response[key]
                log.debug(
                    f"Removed foreign update for {key}",
                    component="filters",
                    kind=registration.kind.value,
                    extension=key,
                )

        return transient
