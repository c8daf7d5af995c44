"""Network capability.

Provides blocking HTTP GET for the GitLab calls.
"""

from pathlib import Path
from urllib.parse import urlparse

import httpx

from gitlab_updater.models.capability import CapabilityDescriptor, CapabilityResult, CapabilityStatus
from .base import Capability

DOWNLOAD_CHUNK = 81920


def _hostname(url: str) -> str:
    try:
        return (urlparse(url).hostname or "").lower()
    except ValueError:
        return ""


class NetworkFetchCapability(Capability):
    """Make HTTP GET requests and stream downloads."""

    def __init__(
        self,
        allowed_domains: list[str] | None = None,
        timeout: float = 30.0,
        verify: bool = True,
        user_agent: str | None = None,
        transport: httpx.BaseTransport | None = None
    ):
        """Initialize network capability.

        Args:
            allowed_domains: If provided, only these domains are accessible.
                           If None, all domains are allowed.
            timeout: Request timeout in seconds.
            verify: Verify TLS certificates.
            user_agent: User-Agent header sent with every request.
            transport: Custom httpx transport (used by tests).
        """
        self._allowed_domains = allowed_domains
        self._timeout = timeout
        self._verify = verify
        self._headers = {"User-Agent": user_agent} if user_agent else {}
        self._transport = transport

    @property
    def descriptor(self) -> CapabilityDescriptor:
        restrictions = []
        if self._allowed_domains:
            restrictions.append(f"Limited to domains: {', '.join(self._allowed_domains)}")
        restrictions.append(f"Timeout: {self._timeout}s")

        return CapabilityDescriptor(
            name="net.fetch",
            description="Make an HTTP GET request",
            status=CapabilityStatus.AVAILABLE,
            operations=["get", "probe", "download"],
            restrictions=restrictions
        )

    def _is_domain_allowed(self, url: str) -> bool:
        """Check if a URL's domain is allowed."""
        if self._allowed_domains is None:
            return True

        domain = _hostname(url)
        return any(
            domain == allowed or domain.endswith(f".{allowed}")
            for allowed in self._allowed_domains
        )

    def _client(self) -> httpx.Client:
        return httpx.Client(
            timeout=self._timeout,
            verify=self._verify,
            headers=self._headers,
            transport=self._transport,
            follow_redirects=True,
        )

    def get(self, url: str) -> CapabilityResult:
        """GET ``url`` and return ``{status_code, headers, body}``.

        A non-2xx status is still a successful call; only transport
        problems produce a failed result.
        """
        if not self._is_domain_allowed(url):
            return CapabilityResult.fail(f"Domain not allowed: {_hostname(url)}")

        try:
            with self._client() as client:
                response = client.get(url)
        except httpx.TimeoutException:
            return CapabilityResult.fail(f"Request timed out after {self._timeout}s")
        except httpx.HTTPError as e:
            return CapabilityResult.fail(f"Request error: {e}")
        except (httpx.InvalidURL, ValueError) as e:
            return CapabilityResult.fail(f"Invalid URL: {e}")

        return CapabilityResult.ok({
            "status_code": response.status_code,
            "headers": dict(response.headers),
            "body": response.text
        }, status_code=response.status_code)

    def probe(self, url: str) -> CapabilityResult:
        """GET ``url`` without reading the body. The value is the status code."""
        if not self._is_domain_allowed(url):
            return CapabilityResult.fail(f"Domain not allowed: {_hostname(url)}")

        try:
            with self._client() as client:
                with client.stream("GET", url) as response:
                    status = response.status_code
        except httpx.TimeoutException:
            return CapabilityResult.fail(f"Request timed out after {self._timeout}s")
        except httpx.HTTPError as e:
            return CapabilityResult.fail(f"Request error: {e}")
        except (httpx.InvalidURL, ValueError) as e:
            return CapabilityResult.fail(f"Invalid URL: {e}")

        return CapabilityResult.ok(status, status_code=status)

    def download(self, url: str, destination: str | Path) -> CapabilityResult:
        """Stream ``url`` into ``destination``. The value is the byte count."""
        if not self._is_domain_allowed(url):
            return CapabilityResult.fail(f"Domain not allowed: {_hostname(url)}")

        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        written = 0
        try:
            with self._client() as client:
                with client.stream("GET", url) as response:
                    if response.status_code != 200:
                        return CapabilityResult.fail(
                            f"Unexpected status {response.status_code}",
                            status_code=response.status_code
                        )
                    with open(destination, "wb") as f:
                        for chunk in response.iter_bytes(DOWNLOAD_CHUNK):
                            f.write(chunk)
                            written += len(chunk)
        except httpx.TimeoutException:
            return CapabilityResult.fail(f"Download timed out after {self._timeout}s")
        except (httpx.HTTPError, OSError) as e:
            return CapabilityResult.fail(f"Download error: {e}")
        except (httpx.InvalidURL, ValueError) as e:
            return CapabilityResult.fail(f"Invalid URL: {e}")

        return CapabilityResult.ok(written, status_code=200)
