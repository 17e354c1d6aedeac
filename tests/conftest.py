"""Shared fixtures for schedule tests."""

from datetime import datetime
from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"

# 2024-01-15 is a Monday
MONDAY = datetime(2024, 1, 15)


def fixture_path(name: str) -> Path:
    return FIXTURES / f"{name}.json"


def read_fixture(name: str) -> str:
    return fixture_path(name).read_text(encoding="utf-8")


@pytest.fixture
def normal_json():
    """Mon-Fri day-shift 08:00 9h and evening-shift 17:00 6h."""
    return read_fixture("schedule_normal")


@pytest.fixture
def overlapping_json():
    return read_fixture("schedule_overlapping")


@pytest.fixture
def overnight_json():
    return read_fixture("schedule_overnight")
