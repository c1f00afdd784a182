"""Tests for configuration validation."""

import pytest

from navgrid.config import Config


def test_defaults_are_valid():
    Config.validate()
    assert "Navgrid Configuration" in Config.display()


@pytest.mark.parametrize(
    "name,value",
    [
        ("GRID_WIDTH", 0),
        ("GRID_HEIGHT", -5),
        ("PILLAR_SIZE", 0),
        ("PILLAR_SIZE", 500),
        ("PILLAR_MAX_ATTEMPTS", -1),
        ("ROBOT_SPEED", 0.0),
        ("RUN_SPEED", -1.0),
    ],
)
def test_invalid_values_rejected(monkeypatch, name, value):
    monkeypatch.setattr(Config, name, value)
    with pytest.raises(ValueError):
        Config.validate()


def test_unbounded_pillar_attempts_displayed(monkeypatch):
    monkeypatch.setattr(Config, "PILLAR_MAX_ATTEMPTS", 0)
    Config.validate()
    assert "unbounded" in Config.display()
