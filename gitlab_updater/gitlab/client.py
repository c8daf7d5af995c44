"""GitLab REST client for tag lists and archive URLs."""

from typing import Any
from urllib.parse import urlencode
import json

from gitlab_updater.capabilities.network import NetworkFetchCapability
from gitlab_updater.core.errors import APIError
from gitlab_updater.models.extension import ExtensionRegistration


class GitLabClient:
    """Talks to the GitLab API on behalf of one or more registrations.

    The access token travels as the ``private_token`` query parameter,
    so every URL built here is a secret and must not be logged as is.
    """

    def __init__(self, network: NetworkFetchCapability):
        self._network = network

    @staticmethod
    def tags_url(registration: ExtensionRegistration) -> str:
        query = urlencode({"private_token": registration.access_token})
        return f"{registration.project_api_url}/repository/tags?{query}"

    @staticmethod
    def archive_url(registration: ExtensionRegistration, ref: str) -> str:
        query = urlencode({"sha": ref, "private_token": registration.access_token})
        return f"{registration.project_api_url}/repository/archive.zip?{query}"

    @staticmethod
    def mask(url: str) -> str:
        """Replace the token in a URL built by this client."""
        head, sep, query = url.partition("?")
        if not sep:
            return url
        parts = []
        for pair in query.split("&"):
            name, _, value = pair.partition("=")
            parts.append(f"{name}=***" if name == "private_token" else pair)
        return f"{head}?{'&'.join(parts)}"

    def fetch_tags(self, registration: ExtensionRegistration) -> list[dict[str, Any]]:
        """Return the tag list of the project, newest first.

        Raises:
            APIError: on transport errors, non-200 statuses and payloads
                that are not a JSON array.
        """
        url = self.tags_url(registration)
        result = self._network.get(url)

        if not result.success:
            raise APIError(
                f"Could not fetch tags for {registration.settings_key}",
                url=self.mask(url),
                details=result.error
            )

        if result.status_code != 200:
            raise APIError(
                f"GitLab returned {result.status_code} for the tag list of {registration.settings_key}",
                status_code=result.status_code,
                url=self.mask(url)
            )

        try:
            data = json.loads(result.value["body"])
        except (json.JSONDecodeError, TypeError) as e:
            raise APIError(
                f"Tag list of {registration.settings_key} is not valid JSON",
                status_code=result.status_code,
                url=self.mask(url),
                cause=e
            ) from e

        if not isinstance(data, list):
            raise APIError(
                f"Tag list of {registration.settings_key} is not a JSON array",
                status_code=result.status_code,
                url=self.mask(url)
            )

        return data

    def latest_tag(self, registration: ExtensionRegistration) -> str | None:
        """Name of the newest tag, or None when the project has no tags."""
        tags = self.fetch_tags(registration)
        if not tags:
            return None

        first = tags[0]
        name = first.get("name") if isinstance(first, dict) else None
        if not isinstance(name, str) or not name.strip():
            raise APIError(
                f"Newest tag of {registration.settings_key} has no name",
                status_code=200,
                url=self.mask(self.tags_url(registration))
            )
        return name.strip()

    def package_available(self, package_url: str) -> bool:
        """True only if GET on the package URL answers 200."""
        result = self._network.probe(package_url)
        return result.success and result.status_code == 200
