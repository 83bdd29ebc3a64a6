"""Tests for CLI output formatting utilities and the notifier."""

from __future__ import annotations

import logging

import pytest

from dataviz_gen.cli import output
from dataviz_gen.cli.output import NotificationLevel, Notifier, OutputColor


def test_success_with_prefix(capsys: pytest.CaptureFixture[str]) -> None:
    """Test success message includes checkmark emoji by default."""
    output.success("Test message")
    captured = capsys.readouterr()
    assert "✅ Test message" in captured.out


def test_success_without_prefix(capsys: pytest.CaptureFixture[str]) -> None:
    """Test success message without emoji prefix."""
    output.success("Test message", prefix=False)
    captured = capsys.readouterr()
    assert "✅" not in captured.out
    assert "Test message" in captured.out


def test_error_writes_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    """Test error message writes to stderr by default."""
    output.error("Error message")
    captured = capsys.readouterr()
    assert "❌ Error message" in captured.err
    assert captured.out == ""


def test_error_to_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    """Test error message can be written to stdout."""
    output.error("Error message", err=False)
    captured = capsys.readouterr()
    assert "❌ Error message" in captured.out


def test_info_and_warning_prefixes(capsys: pytest.CaptureFixture[str]) -> None:
    """Test info and warning messages carry their emoji."""
    output.info("Info message")
    output.warning("Warning message")
    captured = capsys.readouterr()
    assert "ℹ️  Info message" in captured.out
    assert "⚠️  Warning message" in captured.out


def test_plain_with_color(capsys: pytest.CaptureFixture[str]) -> None:
    """Test plain message with and without color has no prefix."""
    output.plain("Colored message", color=OutputColor.WHITE)
    output.plain("Plain message")
    captured = capsys.readouterr()
    assert "Colored message" in captured.out
    assert "Plain message" in captured.out


def test_data_prefix(capsys: pytest.CaptureFixture[str]) -> None:
    """Test data message includes chart emoji."""
    output.data("Data preview:")
    captured = capsys.readouterr()
    assert "📊 Data preview:" in captured.out


def test_notifier_displays_and_records(capsys: pytest.CaptureFixture[str]) -> None:
    """Test notifier writes through the console helpers."""
    notifier = Notifier()
    notifier.success("Chart ready")
    notifier.error("Failed to render chart")

    captured = capsys.readouterr()
    assert "✅ Chart ready" in captured.out
    assert "❌ Failed to render chart" in captured.err
    assert list(notifier.history) == [
        (NotificationLevel.SUCCESS, "Chart ready"),
        (NotificationLevel.ERROR, "Failed to render chart"),
    ]


def test_quiet_notifier_only_logs(
    capsys: pytest.CaptureFixture[str], caplog: pytest.LogCaptureFixture
) -> None:
    """Test quiet notifier logs without console output."""
    notifier = Notifier(quiet=True)
    logger = logging.getLogger("dataviz_gen")
    logger.addHandler(caplog.handler)
    try:
        with caplog.at_level(logging.INFO, logger="dataviz_gen"):
            notifier.warning("Using default theme")
    finally:
        logger.removeHandler(caplog.handler)

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""
    assert "Using default theme" in caplog.text


def test_notifier_accepts_level_names() -> None:
    """Test string levels are converted to NotificationLevel."""
    notifier = Notifier(quiet=True)
    notifier.notify("hello", "info")
    assert list(notifier.history) == [(NotificationLevel.INFO, "hello")]
    with pytest.raises(ValueError):
        notifier.notify("hello", "fatal")


def test_notifier_keeps_only_recent_history() -> None:
    """Test history is bounded to the most recent notifications."""
    notifier = Notifier(quiet=True, history_size=3)
    for tick in range(5):
        notifier.error(f"Tick {tick} failed")

    assert [message for _, message in notifier.history] == [
        "Tick 2 failed",
        "Tick 3 failed",
        "Tick 4 failed",
    ]
