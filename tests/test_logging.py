"""Tests for structured logging and error formatting."""

import json
import logging

from gitlab_updater.core.errors import APIError, ConfigError, RelocationError, format_exception_chain
from gitlab_updater.core.logging import JSONFormatter, get_logger, reset_logging, setup_logging


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("gitlab_updater.prober", logging.INFO, __file__, 1, "Update available", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:

    def test_context_fields(self):
        data = json.loads(JSONFormatter().format(make_record(component="prober", extension="my-theme", kind="theme")))

        assert data["level"] == "INFO"
        assert data["logger"] == "gitlab_updater.prober"
        assert data["message"] == "Update available"
        assert data["extension"] == "my-theme"
        assert data["kind"] == "theme"

    def test_extra_data_merged(self):
        data = json.loads(JSONFormatter().format(make_record(extra_data={"source": "/tmp/x"})))

        assert data["source"] == "/tmp/x"


class TestSetupLogging:

    def test_file_handler_writes_json(self, temp_dir):
        reset_logging()
        setup_logging(level="DEBUG", log_dir=temp_dir / "logs", file_enabled=True, console_enabled=False)

        get_logger("test").check_skipped("plugin", "my-plugin/my-plugin.php", "tag list returned 404", status_code=404)
        for handler in logging.getLogger("gitlab_updater").handlers:
            handler.flush()

        line = (temp_dir / "logs" / "gitlab-updater.log").read_text().strip().splitlines()[-1]
        data = json.loads(line)
        assert data["status_code"] == 404
        assert data["component"] == "prober"
        reset_logging()

    def test_setup_is_idempotent(self, temp_dir):
        reset_logging()
        setup_logging(console_enabled=True, file_enabled=False)
        setup_logging(console_enabled=True, file_enabled=False)

        assert len(logging.getLogger("gitlab_updater").handlers) == 1
        reset_logging()


class TestErrors:

    def test_api_error_suggestions(self):
        assert "token" in APIError("denied", status_code=401).suggestion
        assert "scope" in APIError("forbidden", status_code=403).suggestion
        assert "repo path" in APIError("missing", status_code=404).suggestion

    def test_user_friendly_format(self):
        text = ConfigError("Missing option", config_key="GITLAB_UPDATER_DATA_DIR").format_user_friendly()

        assert text.startswith("❌ Missing option")
        assert "💡 Try: Set the GITLAB_UPDATER_DATA_DIR" in text

    def test_exception_chain(self):
        cause = OSError("disk full")
        error = RelocationError("Could not relocate", source="/tmp/a", slug="a", cause=cause)

        text = format_exception_chain(error)

        assert "Could not relocate" in text
        assert "OSError: disk full" in text
