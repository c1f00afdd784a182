"""Tests for color handling and tags in navgrid logging output."""

from navgrid.logging_utils import (
    Color,
    LOG_TAG_ERROR,
    colored,
    log_error,
    log_motion,
)


def test_colored_respects_no_color(monkeypatch):
    monkeypatch.setenv("NAVGRID_NO_COLOR", "1")
    assert colored("plain", Color.RED) == "plain"


def test_colored_wraps_text(monkeypatch):
    monkeypatch.delenv("NAVGRID_NO_COLOR", raising=False)
    text = colored("hi", Color.GREEN, bold=True)
    assert text.startswith(Color.BOLD.value + Color.GREEN.value)
    assert text.endswith(Color.RESET.value)


def test_error_tag_printed(monkeypatch, capsys):
    monkeypatch.setenv("NAVGRID_NO_COLOR", "1")
    log_error("no path")
    assert capsys.readouterr().out.strip() == f"{LOG_TAG_ERROR} no path"


def test_motion_only_logged_when_verbose(monkeypatch, capsys):
    monkeypatch.setenv("NAVGRID_NO_COLOR", "1")
    monkeypatch.delenv("NAVGRID_VERBOSE", raising=False)
    log_motion("step")
    assert capsys.readouterr().out == ""

    monkeypatch.setenv("NAVGRID_VERBOSE", "true")
    log_motion("step")
    assert "step" in capsys.readouterr().out
