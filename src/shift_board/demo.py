"""
Built-in demo week: five employees and the week of 11-17 November 2024.
"""

from datetime import date
from typing import List

from .engine import Session
from .models import Employee, Period, ScheduleConfig, SlotStatus, WeekSchedule

DEMO_START_DATE = date(2024, 11, 11)


def demo_employees() -> List[Employee]:
    """The fixed demo roster."""
    return [
        Employee(id="1", name="Анна Иванова", limit=5, current_shifts=3),
        Employee(id="2", name="Петр Смирнов", limit=6, current_shifts=5),
        Employee(id="3", name="Мария Петрова", limit=4, current_shifts=3),
        Employee(id="4", name="Иван Сидоров", limit=5, current_shifts=4),
        Employee(id="5", name="Елена Козлова", limit=6, current_shifts=3),
    ]


def demo_week() -> WeekSchedule:
    """
    Generate the demo week.

    Base morning slots of the first two days go to employee 1, base day
    slots of the first two days to employee 2, base evening slots of the
    first three days to employee 3. The base day slot of the fourth day
    needs an urgent replacement.
    """
    week = WeekSchedule.empty(DEMO_START_DATE, slots_per_period=2)

    held_by = {Period.MORNING: ("1", 2), Period.DAY: ("2", 2), Period.EVENING: ("3", 3)}

    for idx, day in enumerate(week.days):
        for period, (employee_id, days_held) in held_by.items():
            base = day.period(period).base_slot
            if idx < days_held:
                base.status = SlotStatus.TAKEN
                base.employee_id = employee_id

        if idx == 3:
            urgent = day.period(Period.DAY).base_slot
            urgent.status = SlotStatus.URGENT
            urgent.urgent = True

    return week


def demo_config() -> ScheduleConfig:
    return ScheduleConfig(week=demo_week(), employees=demo_employees())


def demo_session() -> Session:
    """Open a session on the demo week."""
    config = demo_config()
    return Session(config.week, config.employees)
