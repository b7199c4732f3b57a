"""Tests for the Typer CLI."""

import json

import pytest
from typer.testing import CliRunner

from truthcheck_system.cli import main as cli_main
from truthcheck_system.config.logging import configure_logging
from truthcheck_system.config.settings import Settings
from truthcheck_system.pipelines import TrustPipeline

runner = CliRunner()

ARTICLE = (
    "The FDA is advising consumers to throw away recalled cinnamon products "
    "due to elevated lead levels, the agency announced Tuesday."
)


@pytest.fixture(autouse=True)
def offline(monkeypatch):
    monkeypatch.setattr(cli_main.settings, "bias_snapshot_path", None)
    monkeypatch.setattr(cli_main.settings, "bias_snapshot_url", None)
    offline_settings = Settings(_env_file=None, gemini_api_key=None, serper_api_key=None)
    build = TrustPipeline.from_settings.__func__
    monkeypatch.setattr(
        TrustPipeline,
        "from_settings",
        classmethod(lambda cls: build(cls, offline_settings)),
    )
    yield
    configure_logging()


def test_status():
    result = runner.invoke(cli_main.app, ["status"])
    assert result.exit_code == 0
    assert "TruthCheck Status" in result.stdout


def test_bias():
    result = runner.invoke(cli_main.app, ["bias", "edition.cnn.com"])
    assert result.exit_code == 0
    assert "left" in result.stdout


def test_bias_unknown():
    result = runner.invoke(cli_main.app, ["bias", "notcnn.com"])
    assert "unknown" in result.stdout


def test_reload_bias_from_file(tmp_path):
    snapshot = tmp_path / "bias.json"
    snapshot.write_text(json.dumps({"example.org": "center"}))
    result = runner.invoke(cli_main.app, ["reload-bias", str(snapshot)])
    assert result.exit_code == 0
    assert "Loaded 1 domains" in result.stdout


def test_reload_bias_failure(tmp_path):
    snapshot = tmp_path / "bias.json"
    snapshot.write_text(json.dumps({"example.org": "sideways"}))
    result = runner.invoke(cli_main.app, ["reload-bias", str(snapshot)])
    assert result.exit_code == 1


def test_analyze_json(tmp_path):
    article = tmp_path / "article.txt"
    article.write_text(ARTICLE)
    result = runner.invoke(
        cli_main.app, ["analyze", str(article), "--source-url", "https://apnews.com/x", "--json"]
    )

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert len(payload["claims"]) == 1
    assert payload["claims"][0]["scores"]["ai_rating"] == "n/a"
    assert payload["summary"]["total_claims"] == 1
    assert payload["stats"]["claims_scored"] == 1


def test_analyze_table(tmp_path):
    article = tmp_path / "article.txt"
    article.write_text(ARTICLE)
    result = runner.invoke(cli_main.app, ["analyze", str(article)])
    assert result.exit_code == 0
    assert "Scored Claims" in result.stdout
    assert "Summary" in result.stdout


def test_analyze_missing_file(tmp_path):
    result = runner.invoke(cli_main.app, ["analyze", str(tmp_path / "absent.txt")])
    assert result.exit_code != 0


def test_reload_bias_without_source():
    result = runner.invoke(cli_main.app, ["reload-bias"])
    assert result.exit_code == 2


def test_reload_bias_from_configured_url(tmp_path, monkeypatch):
    snapshot = tmp_path / "bias.json"
    snapshot.write_text(json.dumps({"example.org": "right", "example.net": "left"}))
    monkeypatch.setattr(cli_main.settings, "bias_snapshot_url", str(snapshot))
    result = runner.invoke(cli_main.app, ["reload-bias"])
    assert result.exit_code == 0
    assert "Loaded 2 domains" in result.stdout
