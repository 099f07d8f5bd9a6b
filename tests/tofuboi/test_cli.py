"""Unit tests for CLI argument parsing, env var application and `fetch`."""

import os
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from tofuboi.cli import _FLAG_TO_ENV, _MESSAGE_RULE, apply_args_to_env, cli
from tofuboi.errors import VideoUnavailable
from tofuboi.transcript import TranscriptEntry

_ALL_ENV_VARS = ["TOFUBOI_LOG_LEVEL", *[env for _, env in _FLAG_TO_ENV]]


@pytest.fixture(autouse=True)
def _clean_env():
    """Ensure apply_args_to_env changes don't leak between tests."""
    saved = {var: os.environ.get(var) for var in _ALL_ENV_VARS}
    yield
    for var, value in saved.items():
        if value is None:
            os.environ.pop(var, None)
        else:
            os.environ[var] = value


@pytest.fixture()
def runner():
    return CliRunner()


class TestCliCommands:
    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "tofuboi" in result.output

    def test_help_shows_commands(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Commands:" in result.output
        assert "run" in result.output
        assert "fetch" in result.output

    def test_run_help(self, runner):
        result = runner.invoke(cli, ["run", "--help"])
        assert result.exit_code == 0
        assert "--verbose" in result.output
        assert "--budget" in result.output
        assert "--default-lang" in result.output


class TestRunValidation:
    @pytest.mark.parametrize("budget", ["0", "-1"])
    def test_non_positive_budget_rejected(self, runner, budget):
        result = runner.invoke(cli, ["run", "--budget", budget])
        assert result.exit_code != 0
        assert "must be positive" in result.output

    def test_run_flags_reach_run_bot(self, runner):
        with patch("tofuboi.main.run_bot") as mock_run_bot:
            result = runner.invoke(
                cli, ["run", "--budget", "500", "--default-lang", "es"]
            )
        assert result.exit_code == 0
        mock_run_bot.assert_called_once()
        assert os.environ["TOFUBOI_MESSAGE_BUDGET"] == "500"
        assert os.environ["TOFUBOI_DEFAULT_LANG"] == "es"


class TestApplyArgsToEnv:
    def test_verbose_sets_debug(self):
        apply_args_to_env(verbose=True, log_level="ERROR")
        assert os.environ["TOFUBOI_LOG_LEVEL"] == "DEBUG"

    def test_log_level_uppercased(self):
        apply_args_to_env(log_level="warning")
        assert os.environ["TOFUBOI_LOG_LEVEL"] == "WARNING"

    def test_none_values_skipped(self):
        os.environ.pop("TOFUBOI_MESSAGE_BUDGET", None)
        apply_args_to_env(budget=None)
        assert "TOFUBOI_MESSAGE_BUDGET" not in os.environ

    def test_path_resolved(self, tmp_path):
        apply_args_to_env(config_dir=tmp_path / "cfg")
        assert os.environ["TOFUBOI_DIR"] == str((tmp_path / "cfg").resolve())


class TestFetchCommand:
    def _entries(self, *texts: str) -> list[TranscriptEntry]:
        return [TranscriptEntry(t, 0.0, 1.0, "en") for t in texts]

    def test_prints_chunked_messages(self, runner):
        fetch = AsyncMock(return_value=(self._entries("one", "two", "three"), None))
        with patch("tofuboi.transcript.fetch_with_fallback", fetch):
            result = runner.invoke(cli, ["fetch", "vid", "--budget", "8"])

        assert result.exit_code == 0, result.output
        assert "one\ntwo\n" + _MESSAGE_RULE in result.output
        assert "three\n" + _MESSAGE_RULE in result.output
        fetch.assert_awaited_once_with("vid", "en", ("en", "zh-HK", "zh-TW"))

    def test_passes_language_and_fallbacks(self, runner):
        fetch = AsyncMock(return_value=(self._entries("hola"), "notice line"))
        with patch("tofuboi.transcript.fetch_with_fallback", fetch):
            result = runner.invoke(
                cli, ["fetch", "vid", "--lang", "fr", "--fallback-langs", "es,en"]
            )

        assert result.exit_code == 0, result.output
        fetch.assert_awaited_once_with("vid", "fr", ("es", "en"))
        assert "hola" in result.output

    def test_fetch_error_exits_non_zero(self, runner):
        fetch = AsyncMock(side_effect=VideoUnavailable("vid"))
        with patch("tofuboi.transcript.fetch_with_fallback", fetch):
            result = runner.invoke(cli, ["fetch", "vid"])

        assert result.exit_code == 1
        assert "Error fetching transcript" in result.output

    def test_budget_too_small_exits_non_zero(self, runner):
        fetch = AsyncMock(return_value=(self._entries("世界"), None))
        with patch("tofuboi.transcript.fetch_with_fallback", fetch):
            result = runner.invoke(cli, ["fetch", "vid", "--budget", "2"])

        assert result.exit_code == 1
        assert "Error processing transcript" in result.output

    def test_empty_transcript_exits_non_zero(self, runner):
        fetch = AsyncMock(return_value=([], None))
        with patch("tofuboi.transcript.fetch_with_fallback", fetch):
            result = runner.invoke(cli, ["fetch", "vid"])

        assert result.exit_code == 1
        assert "empty" in result.output

    def test_zero_budget_rejected(self, runner):
        result = runner.invoke(cli, ["fetch", "vid", "--budget", "0"])
        assert result.exit_code != 0
        assert "must be positive" in result.output
