"""Shared fixtures for shift-board tests."""

import pytest
from datetime import date

from shift_board.demo import demo_session
from shift_board.engine import Session
from shift_board.models import Employee, Period, SlotStatus, WeekSchedule

MONDAY = date(2024, 11, 11)
THURSDAY = date(2024, 11, 14)


@pytest.fixture
def e1() -> Employee:
    """Employee with room for two more shifts."""
    return Employee(id="E1", name="Anna Ivanova", limit=5, current_shifts=3)


@pytest.fixture
def e2() -> Employee:
    """Employee already at the shift limit."""
    return Employee(id="E2", name="Petr Smirnov", limit=6, current_shifts=6)


@pytest.fixture
def empty_week() -> WeekSchedule:
    """Week of free slots, two per period."""
    return WeekSchedule.empty(MONDAY, slots_per_period=2)


@pytest.fixture
def session(empty_week: WeekSchedule, e1: Employee, e2: Employee) -> Session:
    """
    Session with E1 (3/5), E2 (6/6) and E3 (1/4).

    E3 holds the Monday morning base slot; Thursday day base is urgent;
    Sunday evening extra is unavailable.
    """
    monday = empty_week.days[0]
    held = monday.period(Period.MORNING).base_slot
    held.status = SlotStatus.TAKEN
    held.employee_id = "E3"

    urgent = empty_week.days[3].period(Period.DAY).base_slot
    urgent.status = SlotStatus.URGENT
    urgent.urgent = True

    blocked = empty_week.days[6].period(Period.EVENING).slots[1]
    blocked.status = SlotStatus.UNAVAILABLE

    e3 = Employee(id="E3", name="Maria Petrova", limit=4, current_shifts=1)
    return Session(empty_week, [e1, e2, e3])


@pytest.fixture
def demo() -> Session:
    """Session on the built-in demo week."""
    return demo_session()
