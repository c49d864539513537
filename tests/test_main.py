"""Tests for the fowlrot entry point.

The clock and os.execvp are patched; the mnemonic encoder is a real shell
command standing in for HumanReadableSeed.
"""

from __future__ import annotations

import hashlib
import logging
import os
from unittest.mock import patch

import pytest

from fowlrot.main import VERSION, main

_WINDOW_START = 1_700_000_040
_NOW = _WINDOW_START + 17
_ENCODER = "sh -c 'echo alpha beta gamma' sh"
# Words depend on the digest, so the code follows the window.
_DIGEST_ENCODER = "sh -c 'echo \"$2\"' sh"


@pytest.fixture(autouse=True)
def _env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FOWLROT_SECRET", "abc")
    monkeypatch.setenv("FOWLROT_MODULO", "60")
    monkeypatch.setenv("FOWLROT_BIN", "fowl")
    monkeypatch.setenv("FOWLROT_HRS_BIN", _ENCODER)
    monkeypatch.delenv("FOWLROT_LOG_LEVEL", raising=False)


def _patched_now(ts: int = _NOW):
    return patch("fowlrot.main.utc_timestamp", return_value=ts)


def _patched_exec():
    return patch("fowlrot.services.launcher.os.execvp")


def _code_at(ts: int) -> str:
    """Run fowlrot at *ts* and return the code handed to fowl."""
    with _patched_now(ts), _patched_exec() as execvp:
        assert main(["--connect", "7657"]) == 0
    return execvp.call_args.args[1][-1]


# ── Help / Version / Usage ───────────────────────────────────────────────────


class TestUsage:
    @pytest.mark.parametrize("flag", ["-h", "--help"])
    def test_help(self, flag: str, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([flag]) == 0
        out = capsys.readouterr().out
        assert "Usage: fowlrot" in out
        assert "FOWLROT_SECRET" in out

    @pytest.mark.parametrize("flag", ["-v", "--version"])
    def test_version(self, flag: str, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([flag]) == 0
        assert capsys.readouterr().out.strip() == f"fowlrot v{VERSION}"

    def test_help_only_as_first_argument(self) -> None:
        with _patched_now(), _patched_exec() as execvp:
            assert main(["--connect", "7657", "--help"]) == 0
        assert execvp.call_args.args[1][-2] == "--help"

    def test_no_arguments(self, capsys: pytest.CaptureFixture[str]) -> None:
        with _patched_exec() as execvp:
            assert main([]) == 1
        err = capsys.readouterr().err
        assert "No arguments provided to fowl" in err
        assert "Usage: fowlrot" in err
        execvp.assert_not_called()


# ── Run ──────────────────────────────────────────────────────────────────────


class TestRun:
    def test_execs_fowl_with_code(self) -> None:
        with _patched_now(), _patched_exec() as execvp:
            assert main(["--allow-connect", "7657"]) == 0
        execvp.assert_called_once_with(
            "fowl", ["fowl", "--allow-connect", "7657", "961-alpha-beta-gamma"]
        )

    def test_logs_code(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO), _patched_now(), _patched_exec():
            main(["--connect", "7657"])
        assert "Using code: 961-alpha-beta-gamma (rotates in 43s, at 2023-11-14T22:15:00+00:00)" in caplog.text
        assert "Executing: fowl --connect 7657 961-alpha-beta-gamma" in caplog.text

    def test_peers_in_same_window_agree(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FOWLROT_HRS_BIN", _DIGEST_ENCODER)
        assert _code_at(_WINDOW_START) == _code_at(_WINDOW_START + 59)

    def test_code_changes_at_window_boundary(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FOWLROT_HRS_BIN", _DIGEST_ENCODER)
        assert _code_at(_WINDOW_START + 59) != _code_at(_WINDOW_START + 60)

    def test_undecodable_secret(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FOWLROT_HRS_BIN", _DIGEST_ENCODER)
        monkeypatch.setenv("FOWLROT_SECRET", os.fsdecode(b"ab\xffc"))
        code = _code_at(_NOW)
        digest = hashlib.sha256(b"1700000040ab\xffc").hexdigest()
        assert code.endswith(f"-{digest}")

    def test_exec_failure(self) -> None:
        with _patched_now(), patch(
            "fowlrot.services.launcher.os.execvp", side_effect=FileNotFoundError("fowl")
        ):
            assert main(["--connect", "7657"]) == 1


# ── Failures ─────────────────────────────────────────────────────────────────


class TestFailures:
    def test_empty_secret(self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
        monkeypatch.setenv("FOWLROT_SECRET", "")
        with _patched_now(), _patched_exec() as execvp:
            assert main(["--connect", "7657"]) == 1
        execvp.assert_not_called()
        assert "FOWLROT_SECRET cannot be empty" in caplog.text

    def test_small_window(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FOWLROT_MODULO", "19")
        with _patched_now(), _patched_exec() as execvp:
            assert main(["--connect", "7657"]) == 1
        execvp.assert_not_called()

    def test_unparseable_window(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FOWLROT_MODULO", "sixty")
        with _patched_now(), _patched_exec() as execvp:
            assert main(["--connect", "7657"]) == 1
        execvp.assert_not_called()

    def test_encoder_failure(self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
        monkeypatch.setenv("FOWLROT_HRS_BIN", "sh -c 'exit 4' sh")
        with _patched_now(), _patched_exec() as execvp:
            assert main(["--connect", "7657"]) == 1
        execvp.assert_not_called()
        assert "Failed to generate mnemonic words" in caplog.text

    def test_encoder_empty_output(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FOWLROT_HRS_BIN", "sh -c 'true' sh")
        with _patched_now(), _patched_exec() as execvp:
            assert main(["--connect", "7657"]) == 1
        execvp.assert_not_called()
