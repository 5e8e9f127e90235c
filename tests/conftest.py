"""Shared fixtures for shift-rotation tests."""

import pytest
from datetime import date

from shift_rotation.config import CycleModel, default_cycle_model
from shift_rotation.engine import ShiftEngine
from shift_rotation.generator import ScheduleGenerator
from shift_rotation.mapper import DateCycleMapper

ANCHOR = date(2023, 1, 1)  # Sunday; team 31 is on cycle day 1


@pytest.fixture
def anchor() -> date:
    """The epoch anchor date of the built-in rotation."""
    return ANCHOR


@pytest.fixture
def model() -> CycleModel:
    """The built-in five-team, 35-day rotation."""
    return default_cycle_model()


@pytest.fixture
def mapper(model: CycleModel) -> DateCycleMapper:
    return DateCycleMapper(model)


@pytest.fixture
def generator(mapper: DateCycleMapper) -> ScheduleGenerator:
    return ScheduleGenerator(mapper)


@pytest.fixture
def engine(model: CycleModel) -> ShiftEngine:
    """Fully wired engine (runs the startup coverage self-check)."""
    return ShiftEngine(model)
