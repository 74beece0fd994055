"""Tests for settings resolution and the CLI entry point."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from duplicati_exporter import cli
from duplicati_exporter.core.config import DEFAULT_PORT


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    """Run without inherited settings or a stray ``.env`` file."""
    for name in ("PORT", "HOST", "LOG_LEVEL", "LOG_JSON"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class TestLoadSettings:
    """Tests for ``cli.load_settings``."""

    def test_default_port(self):
        assert cli.load_settings([]).PORT == DEFAULT_PORT == 9118

    def test_option_overrides_default(self):
        assert cli.load_settings(["-p", "9010"]).PORT == 9010
        assert cli.load_settings(["--port", "9011"]).PORT == 9011

    def test_env_overrides_option(self, monkeypatch):
        """``PORT`` in the environment beats ``--port``."""
        monkeypatch.setenv("PORT", "9200")

        assert cli.load_settings(["-p", "9010"]).PORT == 9200

    def test_option_overrides_dotenv(self, tmp_path):
        """A ``.env`` file only fills in what the command line leaves out."""
        (tmp_path / ".env").write_text("PORT=9300\nHOST=10.0.0.1\n")

        settings = cli.load_settings(["-p", "9010"])

        assert settings.PORT == 9010
        assert settings.HOST == "10.0.0.1"

    def test_log_level_is_normalised(self):
        assert cli.load_settings(["--log-level", "debug"]).LOG_LEVEL == "DEBUG"

    def test_rejects_non_numeric_port(self):
        with pytest.raises(SystemExit):
            cli.load_settings(["-p", "abc"])


class TestMain:
    """Tests for ``cli.main``."""

    @patch("duplicati_exporter.cli.setup_logging")
    @patch("duplicati_exporter.cli.uvicorn.run")
    def test_runs_uvicorn_on_resolved_port(self, mock_run, mock_logging):
        """The app is served on the resolved host and port."""
        cli.main(["-p", "9010", "--host", "127.0.0.1"])

        mock_logging.assert_called_once_with(level="INFO", json_format=False)
        kwargs = mock_run.call_args.kwargs
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 9010
        assert kwargs["log_config"] is None
