"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

# Add project root to Python path so 'gitlab_updater' is findable
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import io
import tempfile
import zipfile
from typing import Generator

import httpx
import pytest

from gitlab_updater.capabilities import FileSystemCapability, NetworkFetchCapability
from gitlab_updater.gitlab.client import GitLabClient
from gitlab_updater.models.extension import ExtensionKind, ExtensionRegistration

GITLAB_URL = "https://gitlab.example.com"
PROJECTS_PREFIX = "/api/v4/projects/"


def make_archive(top_dir: str, files: dict[str, str]) -> bytes:
    """Build a zip shaped like a GitLab repository archive."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        zf.writestr(f"{top_dir}/", "")
        for name, content in files.items():
            zf.writestr(f"{top_dir}/{name}", content)
    return buffer.getvalue()


class FakeGitLab:
    """In-memory GitLab answering the tag list and archive endpoints.

    Projects are keyed by their plain path ('acme/my-plugin').
    """

    def __init__(self):
        self.tags: dict[str, tuple[int, object]] = {}
        self.archives: dict[tuple[str, str], tuple[int, bytes]] = {}
        self.unreachable: set[str] = set()
        self.requests: list[httpx.Request] = []

    def add_tags(self, project: str, *names: str, status: int = 200):
        self.tags[project] = (status, [{"name": name, "target": "0" * 40} for name in names])

    def add_archive(self, project: str, ref: str, content: bytes = b"PK", status: int = 200):
        self.archives[(project, ref)] = (status, content)

    def requests_for(self, suffix: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith(suffix)]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if not path.startswith(PROJECTS_PREFIX) or "/repository/" not in path:
            return httpx.Response(404, json={"message": "404 Not Found"})

        project, _, endpoint = path[len(PROJECTS_PREFIX):].partition("/repository/")
        if project in self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)

        if request.url.params.get("private_token") != "secret":
            return httpx.Response(401, json={"message": "401 Unauthorized"})

        if endpoint == "tags":
            status, payload = self.tags.get(project, (404, {"message": "404 Project Not Found"}))
            if isinstance(payload, (bytes, str)):
                return httpx.Response(status, content=payload)
            return httpx.Response(status, json=payload)

        if endpoint == "archive.zip":
            status, content = self.archives.get(
                (project, request.url.params.get("sha")),
                (404, b'{"message": "404 File Not Found"}')
            )
            return httpx.Response(status, content=content)

        return httpx.Response(404, json={"message": "404 Not Found"})


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def gitlab() -> FakeGitLab:
    return FakeGitLab()


@pytest.fixture
def network(gitlab: FakeGitLab) -> NetworkFetchCapability:
    return NetworkFetchCapability(transport=httpx.MockTransport(gitlab.handler))


@pytest.fixture
def client(network: NetworkFetchCapability) -> GitLabClient:
    return GitLabClient(network)


@pytest.fixture
def fs() -> FileSystemCapability:
    return FileSystemCapability()


@pytest.fixture
def plugin_registration() -> ExtensionRegistration:
    return ExtensionRegistration(
        kind=ExtensionKind.PLUGIN,
        slug="my-plugin",
        base_name="my-plugin/my-plugin.php",
        access_token="secret",
        gitlab_url=GITLAB_URL,
        repo="acme/my-plugin",
    )


@pytest.fixture
def theme_registration() -> ExtensionRegistration:
    return ExtensionRegistration(
        kind=ExtensionKind.THEME,
        slug="my-theme",
        access_token="secret",
        gitlab_url=GITLAB_URL + "/",
        repo="acme/my-theme",
    )


@pytest.fixture(autouse=True)
def isolated_environment(temp_dir: Path, monkeypatch):
    """Point config at a temp data dir and keep logs off the console."""
    from gitlab_updater.config import reset_config
    from gitlab_updater.core.logging import reset_logging

    monkeypatch.setenv("GITLAB_UPDATER_DATA_DIR", str(temp_dir / "data"))
    monkeypatch.setenv("GITLAB_UPDATER_LOG_CONSOLE", "false")
    monkeypatch.setenv("GITLAB_UPDATER_LOG_FILE", "false")
    reset_config()
    reset_logging()
    yield
    reset_config()
    reset_logging()


@pytest.fixture
def archive():
    """Factory for GitLab-shaped zip archives."""
    return make_archive
