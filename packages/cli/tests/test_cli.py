"""Tests for the CLI entry point."""

import json
from unittest.mock import AsyncMock, MagicMock

from click.testing import CliRunner

from codecritique_cli.cli import main
from codecritique_core.errors import ConfigError, TransportError
from codecritique_core.models import File, PullRequest, Review

PR = PullRequest(title="Fix bug", description="Details", files=(File("a.py", "+x"),), branch="fix/bug")


def _make_config(provider="Ollama", printer="json", git_provider="GitHub"):
    return {
        "provider": provider,
        "ollama_url": "http://localhost:11434/api/generate",
        "ollama_model": "llama3",
        "groq_api_key": None,
        "git_provider": git_provider,
        "github_token": "tok",
        "printer": printer,
        "timeout": None,
    }


def _patch_common(mocker, config=None, review=None):
    """Patch config loading, PR fetching and the orchestrator for most tests."""
    cfg = config or _make_config()
    load = mocker.patch("codecritique_core.config.load_config", return_value=cfg)
    fetch = mocker.patch("codecritique_cli.commands.review.fetch_pull_request", return_value=PR)
    orchestrator = MagicMock()
    orchestrator.review = AsyncMock(return_value=(review or Review(summary="Looks good")).attach(PR))
    orchestrator_cls = mocker.patch("codecritique_cli.commands.review.ReviewOrchestrator", return_value=orchestrator)
    return load, fetch, orchestrator_cls, orchestrator


class TestCLIValidation:
    def test_invalid_repo_path(self, mocker):
        _patch_common(mocker)
        result = CliRunner().invoke(main, ["review", "justarepo", "1"])
        assert result.exit_code != 0
        assert "owner/repo" in result.output

    def test_pr_number_must_be_integer(self, mocker):
        _patch_common(mocker)
        result = CliRunner().invoke(main, ["review", "owner/repo", "abc"])
        assert result.exit_code != 0

    def test_unknown_provider_choice_rejected(self, mocker):
        _patch_common(mocker)
        result = CliRunner().invoke(main, ["review", "owner/repo", "1", "--provider", "Claude"])
        assert result.exit_code != 0


class TestCLIReview:
    def test_prints_json_review(self, mocker):
        _, fetch, orchestrator_cls, orchestrator = _patch_common(mocker)

        result = CliRunner().invoke(main, ["review", "owner/repo", "42"])

        assert result.exit_code == 0, result.output
        fetch.assert_called_once()
        assert fetch.call_args.args[1:] == ("owner/repo", 42)
        orchestrator.review.assert_awaited_once_with(PR, timeout=None)
        assert json.loads(result.stdout)["summary"] == "Looks good"

    def test_cli_options_passed_as_overrides(self, mocker):
        load, _, _, _ = _patch_common(mocker)

        CliRunner().invoke(
            main,
            ["review", "owner/repo", "1", "--provider", "groq", "--format", "markdown", "--timeout", "30"],
        )

        overrides = load.call_args.kwargs["cli_overrides"]
        assert overrides == {"provider": "Groq", "printer": "markdown", "timeout": 30.0}

    def test_config_path_from_group_option(self, mocker):
        load, _, _, _ = _patch_common(mocker)

        CliRunner().invoke(main, ["--config", "custom.yml", "review", "owner/repo", "1"])

        assert load.call_args.args[0] == "custom.yml"

    def test_timeout_from_config_reaches_orchestrator(self, mocker):
        config = _make_config()
        config["timeout"] = 12.5
        _, _, _, orchestrator = _patch_common(mocker, config=config)

        CliRunner().invoke(main, ["review", "owner/repo", "1"])

        orchestrator.review.assert_awaited_once_with(PR, timeout=12.5)

    def test_markdown_output(self, mocker):
        _patch_common(mocker, config=_make_config(printer="markdown"))

        result = CliRunner().invoke(main, ["review", "owner/repo", "1"])

        assert result.exit_code == 0, result.output
        assert "# CodeCritique Review" in result.stdout
        assert "**Title:** Fix bug" in result.stdout

    def test_critique_error_exits_non_zero(self, mocker):
        _, _, _, orchestrator = _patch_common(mocker)
        error = TransportError("Ollama returned non-OK status: 500", status_code=500)
        error.step = "send prompt"
        orchestrator.review.side_effect = error

        result = CliRunner().invoke(main, ["review", "owner/repo", "1"])

        assert result.exit_code == 1
        assert "send prompt: Ollama returned non-OK status: 500" in result.output

    def test_fetch_error_exits_non_zero(self, mocker):
        _, fetch, orchestrator_cls, _ = _patch_common(mocker)
        fetch.side_effect = ConfigError("GITHUB_TOKEN environment variable is not set.")

        result = CliRunner().invoke(main, ["review", "owner/repo", "1"])

        assert result.exit_code == 1
        assert "GITHUB_TOKEN" in result.output
        orchestrator_cls.assert_not_called()

    def test_unknown_printer_in_config(self, mocker):
        _, fetch, _, _ = _patch_common(mocker, config=_make_config(printer="pdf"))

        result = CliRunner().invoke(main, ["review", "owner/repo", "1"])

        assert result.exit_code == 1
        assert "pdf" in result.output
        fetch.assert_not_called()

    def test_bad_config_exits_non_zero(self, mocker):
        _, fetch, _, _ = _patch_common(mocker)
        mocker.patch(
            "codecritique_core.config.load_config",
            side_effect=ConfigError("timeout must be a number of seconds, got 'soon'"),
        )

        result = CliRunner().invoke(main, ["review", "owner/repo", "1"])

        assert result.exit_code == 1
        assert "timeout must be a number" in result.output
        fetch.assert_not_called()
