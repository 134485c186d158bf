"""Pytest configuration and shared fixtures."""

import pytest
import structlog
from hypothesis import Verbosity, settings

# Configure Hypothesis profiles
settings.register_profile("ci", max_examples=200, deadline=None)
settings.register_profile("dev", max_examples=50, deadline=None)
settings.register_profile("debug", max_examples=10, verbosity=Verbosity.verbose)

# Load profile from environment or default to "dev"
import os

profile = os.environ.get("HYPOTHESIS_PROFILE", "dev")
settings.load_profile(profile)


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo any structlog configuration a test (e.g. a CLI run) installed."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def engine_settings(monkeypatch):
    """Engine settings, restored after the test."""
    from calcengine.config import settings as engine_settings

    for field in type(engine_settings).model_fields:
        monkeypatch.setattr(engine_settings, field, getattr(engine_settings, field))
    return engine_settings


@pytest.fixture
def degrees(engine_settings):
    """Switch trigonometry to degrees for one test."""
    from calcengine.config import AngleUnit

    engine_settings.angle_unit = AngleUnit.DEGREES
    return engine_settings


@pytest.fixture
def calculator():
    """Provide a fresh Calculator session."""
    from calcengine import Calculator

    return Calculator()


@pytest.fixture
def idle():
    """Provide the idle calculator state."""
    from calcengine import clear_all

    return clear_all()


@pytest.fixture
def sample_displays():
    """Display strings covering the interesting shapes."""
    return [
        "0",
        "7",
        "-7",
        "0.5",
        "-0.5",
        "100",
        "123.456",
        "1234567890123456",
        "0.00000000000001",
        "1.234567890e+21",
        "-9.876543210e-25",
    ]
