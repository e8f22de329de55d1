"""Tests for the Typer command-line interface."""

from __future__ import annotations

from typer.testing import CliRunner

from news_digest import cli
from news_digest.errors import DeliveryError, FeedError
from news_digest.runner import PipelineOutcome

runner = CliRunner()


def test_missing_api_key_exits_with_guidance():
    result = runner.invoke(cli.app, ["run", "--no-log-file"])

    assert result.exit_code == 1
    assert "OPEN_AI_API_KEY" in result.output
    assert "README.md" in result.output


def test_options_override_config(monkeypatch):
    captured = {}

    def fake_run_pipeline(cfg, console=None, output_path=None, now=None):
        captured["cfg"] = cfg
        captured["output_path"] = output_path
        return PipelineOutcome()

    monkeypatch.setattr(cli, "run_pipeline", fake_run_pipeline)

    result = runner.invoke(
        cli.app,
        [
            "run",
            "--api-key",
            "sk-test",
            "--feed-url",
            "https://example.com/rss",
            "--target-lang",
            "JA",
            "--window-hours",
            "12",
            "--no-strict-notify",
            "--output",
            "digest.md",
        ],
    )

    assert result.exit_code == 0, result.output
    cfg = captured["cfg"]
    assert cfg.provider.api_key == "sk-test"
    assert cfg.feed.url == "https://example.com/rss"
    assert cfg.feed.window_hours == 12
    assert cfg.translate.target_lang == "JA"
    assert cfg.notify.strict is False
    assert str(captured["output_path"]) == "digest.md"


def test_fatal_pipeline_errors_exit_one(monkeypatch):
    def failing(cfg, console=None, output_path=None, now=None):
        raise FeedError("Failed to fetch feed")

    monkeypatch.setattr(cli, "run_pipeline", failing)

    result = runner.invoke(cli.app, ["run"])

    assert result.exit_code == 1


def test_delivery_error_exits_one(monkeypatch):
    def failing(cfg, console=None, output_path=None, now=None):
        raise DeliveryError("1 of 2 webhook deliveries failed", failures=[("https://x", OSError("io"))])

    monkeypatch.setattr(cli, "run_pipeline", failing)

    result = runner.invoke(cli.app, ["run"])

    assert result.exit_code == 1


def test_provider_option_switches_to_gemini_defaults(monkeypatch):
    captured = {}

    def fake_run_pipeline(cfg, console=None, output_path=None, now=None):
        captured["cfg"] = cfg
        return PipelineOutcome()

    monkeypatch.setattr(cli, "run_pipeline", fake_run_pipeline)

    result = runner.invoke(cli.app, ["run", "--provider", "gemini"])

    assert result.exit_code == 0, result.output
    provider = captured["cfg"].provider
    assert provider.name == "gemini"
    assert provider.api_key_env == "GOOGLE_API_KEY"
    assert provider.base_url == "https://generativelanguage.googleapis.com"
    assert provider.model == "gemini-2.0-flash"


def test_provider_option_keeps_explicit_model(monkeypatch):
    captured = {}

    def fake_run_pipeline(cfg, console=None, output_path=None, now=None):
        captured["cfg"] = cfg
        return PipelineOutcome()

    monkeypatch.setattr(cli, "run_pipeline", fake_run_pipeline)

    result = runner.invoke(cli.app, ["run", "--provider", "gemini", "--model", "gemini-2.5-pro"])

    assert result.exit_code == 0, result.output
    assert captured["cfg"].provider.model == "gemini-2.5-pro"


def test_gemini_without_google_key_exits_with_guidance(monkeypatch):
    monkeypatch.setenv("OPEN_AI_API_KEY", "o-key")

    result = runner.invoke(cli.app, ["run", "--provider", "gemini", "--no-log-file"])

    assert result.exit_code == 1
    assert "GOOGLE_API_KEY" in result.output
