"""Tests for registration and transient models."""

import pytest
from pydantic import ValidationError

from gitlab_updater.models.extension import ExtensionKind, ExtensionRegistration
from gitlab_updater.models.transient import UpdateDescriptor, UpdateTransient


class TestExtensionRegistration:
    """Tests for ExtensionRegistration validation."""

    def test_repo_is_url_encoded(self, plugin_registration):
        assert plugin_registration.repo == "acme%2Fmy-plugin"

    def test_nested_group_is_encoded(self):
        reg = ExtensionRegistration(
            kind="theme",
            slug="t",
            access_token="secret",
            gitlab_url="https://gitlab.com",
            repo="/acme/web/t/",
        )
        assert reg.repo == "acme%2Fweb%2Ft"

    def test_trailing_slash_removed(self, theme_registration):
        assert theme_registration.gitlab_url == "https://gitlab.example.com"

    def test_settings_key_plugin_is_base_name(self, plugin_registration):
        assert plugin_registration.settings_key == "my-plugin/my-plugin.php"

    def test_settings_key_theme_is_slug(self, theme_registration):
        assert theme_registration.settings_key == "my-theme"

    def test_project_api_url(self, plugin_registration):
        assert plugin_registration.project_api_url == (
            "https://gitlab.example.com/api/v4/projects/acme%2Fmy-plugin"
        )

    def test_project_api_url_legacy_form(self):
        reg = ExtensionRegistration(
            kind=ExtensionKind.THEME,
            slug="old-theme",
            access_token="secret",
            gitlab_url="https://gitlab.com/api/v4/projects/acme%2Fold-theme/",
        )
        assert reg.repo is None
        assert reg.project_api_url == "https://gitlab.com/api/v4/projects/acme%2Fold-theme"

    def test_plugin_requires_base_name(self):
        with pytest.raises(ValidationError):
            ExtensionRegistration(
                kind=ExtensionKind.PLUGIN,
                slug="my-plugin",
                access_token="secret",
                gitlab_url="https://gitlab.com",
                repo="acme/my-plugin",
            )

    def test_theme_ignores_base_name(self):
        reg = ExtensionRegistration(
            kind=ExtensionKind.THEME,
            slug="my-theme",
            base_name="my-theme/style.css",
            access_token="secret",
            gitlab_url="https://gitlab.com",
        )
        assert reg.base_name is None
        assert reg.settings_key == "my-theme"

    def test_blank_token_rejected(self):
        with pytest.raises(ValidationError):
            ExtensionRegistration(
                kind=ExtensionKind.THEME,
                slug="my-theme",
                access_token="   ",
                gitlab_url="https://gitlab.com",
            )

    def test_non_http_url_rejected(self):
        with pytest.raises(ValidationError):
            ExtensionRegistration(
                kind=ExtensionKind.THEME,
                slug="my-theme",
                access_token="secret",
                gitlab_url="gitlab.com",
            )

    @pytest.mark.parametrize("url", ["https://:443", "https://?x", "https://#x", "https://@"])
    def test_url_without_host_rejected(self, url):
        with pytest.raises(ValidationError):
            ExtensionRegistration(
                kind=ExtensionKind.THEME,
                slug="my-theme",
                access_token="secret",
                gitlab_url=url,
            )

    @pytest.mark.parametrize("slug", ["../../escaped", "a/b", "a\\b", "..", ".hidden"])
    def test_slug_must_be_plain_directory_name(self, slug):
        with pytest.raises(ValidationError):
            ExtensionRegistration(
                kind=ExtensionKind.THEME,
                slug=slug,
                access_token="secret",
                gitlab_url="https://gitlab.com",
                repo="acme/my-theme",
            )

    def test_plugin_option_without_slug_field(self):
        reg = ExtensionRegistration.from_option("plugin", {
            "settings-array-key": "my-plugin/my-plugin.php",
            "access-token": "secret",
            "gitlab-url": "https://gitlab.com",
            "repo": "acme/my-plugin",
        })
        assert reg.slug == "my-plugin"
        assert reg.base_name == "my-plugin/my-plugin.php"

    def test_registration_is_frozen(self, plugin_registration):
        with pytest.raises(ValidationError):
            plugin_registration.slug = "other"

    def test_option_record_layout(self, plugin_registration):
        record = plugin_registration.to_option()
        assert record == {
            "settings-array-key": "my-plugin/my-plugin.php",
            "slug": "my-plugin",
            "access-token": "secret",
            "gitlab-url": "https://gitlab.example.com",
            "repo": "acme%2Fmy-plugin",
        }
        assert ExtensionRegistration.from_option("plugin", record) == plugin_registration

    def test_theme_option_without_slug_field(self):
        """Theme records from the options page only carry the settings key."""
        reg = ExtensionRegistration.from_option("theme", {
            "settings-array-key": "my-theme",
            "access-token": "secret",
            "gitlab-url": "https://gitlab.com/",
            "repo": "acme/my-theme",
        })
        assert reg.slug == "my-theme"
        assert reg.repo == "acme%2Fmy-theme"

    def test_masked_hides_token(self, plugin_registration):
        text = plugin_registration.masked()
        assert "secret" not in text
        assert "acme/my-plugin" in text


class TestTransient:
    """Tests for UpdateTransient and UpdateDescriptor."""

    def test_from_installed_copies_versions(self):
        installed = {"my-theme": "1.0"}
        transient = UpdateTransient.from_installed(installed)
        installed["my-theme"] = "9.9"
        assert transient.checked == {"my-theme": "1.0"}
        assert transient.response == {}
        assert transient.last_checked is not None

    def test_descriptor_to_host_drops_other_kind(self):
        descriptor = UpdateDescriptor(
            slug="my-theme",
            theme="my-theme",
            package="https://gitlab.com/archive.zip?sha=2.0",
            new_version="2.0",
        )
        assert descriptor.to_host() == {
            "slug": "my-theme",
            "theme": "my-theme",
            "package": "https://gitlab.com/archive.zip?sha=2.0",
            "new_version": "2.0",
        }
        assert descriptor.identifier == "my-theme"

    def test_transient_json_roundtrip(self):
        transient = UpdateTransient(checked={"a/a.php": "1.0"})
        transient.response["a/a.php"] = UpdateDescriptor(
            slug="a", plugin="a/a.php", package="https://x/archive.zip", new_version="1.1"
        )
        restored = UpdateTransient.model_validate_json(transient.model_dump_json())
        assert restored == transient
