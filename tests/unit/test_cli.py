"""
Tests for the command-line interface.
"""

import json

import pytest
from click.testing import CliRunner

from vendor_status.cli import cli
from vendor_status.services.source_checker import SourceCheckResult


@pytest.fixture
def runner():
    return CliRunner()


class TestNormalizeCommand:
    """Test normalizing saved documents."""

    def test_named_source(self, runner, fixtures_dir):
        result = runner.invoke(
            cli,
            ["--log-level", "ERROR", "normalize", str(fixtures_dir / "gale_status.rss"), "--source", "gale"],
        )

        assert result.exit_code == 0, result.output
        report = json.loads(result.output)
        assert report["totalComponents"] == 2
        assert report["errorCount"] == 1

    def test_config_file(self, runner, fixtures_dir, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text(
            json.dumps(
                {
                    "format": "path_addressed",
                    "itemsPath": "exlibris.services.service",
                    "outageField": "outages",
                    "wireFormat": "xml",
                }
            )
        )
        result = runner.invoke(
            cli,
            [
                "--log-level", "ERROR",
                "normalize", str(fixtures_dir / "exlibris_services.xml"),
                "--config", str(config_path),
            ],
        )

        assert result.exit_code == 0, result.output
        report = json.loads(result.output)
        assert [c["name"] for c in report["components"]] == [
            "Alma EU01",
            "Primo NA02",
            "Leganto AP01",
        ]

    def test_requires_exactly_one_config_source(self, runner, fixtures_dir):
        result = runner.invoke(cli, ["normalize", str(fixtures_dir / "gale_status.rss")])
        assert result.exit_code == 2

    def test_unknown_source(self, runner, fixtures_dir):
        result = runner.invoke(
            cli, ["normalize", str(fixtures_dir / "gale_status.rss"), "--source", "nope"]
        )
        assert result.exit_code == 1
        assert "Unknown source: nope" in result.output


class TestSourcesCommand:
    def test_lists_builtin_sources(self, runner):
        result = runner.invoke(cli, ["sources"])

        assert result.exit_code == 0
        assert "ProQuest" in result.output
        assert "Springshare" in result.output

    def test_sources_file(self, runner, tmp_path):
        path = tmp_path / "sources.json"
        path.write_text(
            json.dumps([{"name": "Solo", "url": "https://solo.example/", "config": {"format": "feed"}}])
        )
        result = runner.invoke(cli, ["--sources-file", str(path), "sources"])

        assert result.exit_code == 0
        assert "Solo" in result.output
        assert "Ebsco" not in result.output


class FakeChecker:
    """Stands in for the HTTP checker so no network is used."""

    def __init__(self, settings, service):
        self.settings = settings

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None

    async def check_all(self, sources):
        return [
            SourceCheckResult(
                name=source.name,
                url=source.url,
                status_code=200,
                is_error=source.name == "OCLC",
                response_time_ms=5.0,
                error_message="1 of 3 components have issues" if source.name == "OCLC" else None,
            )
            for source in sources
        ]


class TestCheckCommand:
    """Test the live check command with a fake checker."""

    def test_healthy_selection(self, runner, monkeypatch):
        monkeypatch.setattr("vendor_status.cli.SourceChecker", FakeChecker)
        result = runner.invoke(cli, ["check", "--source", "Gale"])

        assert result.exit_code == 0, result.output
        assert "Gale" in result.output
        assert "HEALTHY" in result.output
        assert "1/1 sources healthy" in result.output

    def test_errors_exit_nonzero(self, runner, monkeypatch):
        monkeypatch.setattr("vendor_status.cli.SourceChecker", FakeChecker)
        result = runner.invoke(cli, ["check", "-s", "Gale", "-s", "OCLC", "--json"])

        assert result.exit_code == 1
        payload = json.loads(result.output)
        assert payload["summary"]["errorSources"] == 1
        assert [r["name"] for r in payload["results"]] == ["Gale", "OCLC"]


class TestLogLevel:
    """Test how the group picks its logging level."""

    @pytest.fixture
    def recorded(self, monkeypatch):
        calls = []

        def record(**kwargs):
            calls.append(kwargs)

        monkeypatch.setattr("vendor_status.cli.setup_logging", record)
        return calls

    def test_falls_back_to_configured_level(self, runner, recorded, monkeypatch):
        monkeypatch.setenv("VENDOR_STATUS_LOGGING__LEVEL", "DEBUG")

        result = runner.invoke(cli, ["sources"])

        assert result.exit_code == 0, result.output
        assert recorded[0]["level"] == "DEBUG"

    def test_option_overrides_configured_level(self, runner, recorded, monkeypatch):
        monkeypatch.setenv("VENDOR_STATUS_LOGGING__LEVEL", "DEBUG")

        result = runner.invoke(cli, ["--log-level", "ERROR", "sources"])

        assert result.exit_code == 0, result.output
        assert recorded[0]["level"] == "ERROR"
