"""
Data models for the shift assignment board.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Dict, List, Optional


DAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


class Period(str, Enum):
    """The three fixed shift periods of a working day."""

    MORNING = "morning"
    DAY = "day"
    EVENING = "evening"

    @property
    def code(self) -> str:
        """Single-letter code used inside slot identifiers."""
        return self.value[0]


class SlotKind(str, Enum):
    BASE = "base"
    EXTRA = "extra"


class SlotStatus(str, Enum):
    UNAVAILABLE = "unavailable"
    FREE = "free"
    TAKEN = "taken"
    URGENT = "urgent"


class Role(str, Enum):
    """Role of the user on whose behalf an operation runs."""

    EMPLOYEE = "employee"
    ADMIN = "admin"


class Capability(str, Enum):
    ASSIGN_SELF = "assign_self"
    ASSIGN_OTHERS = "assign_others"
    CANCEL_OWN = "cancel_own"
    CANCEL_OTHERS = "cancel_others"
    MANAGE_URGENCY = "manage_urgency"


ROLE_CAPABILITIES: Dict[Role, frozenset] = {
    Role.EMPLOYEE: frozenset({Capability.ASSIGN_SELF, Capability.CANCEL_OWN}),
    Role.ADMIN: frozenset(Capability),
}


def role_can(role: Role, capability: Capability) -> bool:
    """Check the capability table for a role."""
    return capability in ROLE_CAPABILITIES[Role(role)]


def slot_id_for(day: date, period: Period, position: int) -> str:
    """Build the week-unique identifier of a slot, e.g. ``14.11-d-1``."""
    return f"{day.strftime('%d.%m')}-{Period(period).code}-{position}"


@dataclass
class Employee:
    """An employee with a shift capacity limit."""

    id: str
    name: str
    limit: int
    current_shifts: int = 0

    def __post_init__(self):
        if self.limit <= 0:
            raise ValueError(
                f"Shift limit for {self.name} must be positive, got {self.limit}"
            )
        if not 0 <= self.current_shifts <= self.limit:
            raise ValueError(
                f"Current shifts for {self.name} must be between 0 and "
                f"{self.limit}, got {self.current_shifts}"
            )

    @property
    def utilization(self) -> float:
        """Fraction of the shift limit already used."""
        return self.current_shifts / self.limit

    @property
    def is_at_limit(self) -> bool:
        return self.current_shifts >= self.limit

    @property
    def initials(self) -> str:
        return "".join(part[0] for part in self.name.split() if part)


@dataclass
class Slot:
    """A single assignable position inside a shift period."""

    id: str
    kind: SlotKind
    status: SlotStatus = SlotStatus.FREE
    employee_id: Optional[str] = None
    urgent: bool = False

    def __post_init__(self):
        self.kind = SlotKind(self.kind)
        self.status = SlotStatus(self.status)

        if (self.status == SlotStatus.TAKEN) != (self.employee_id is not None):
            raise ValueError(
                f"Slot {self.id}: status 'taken' requires an assigned employee "
                f"and only 'taken' slots may have one"
            )
        if self.urgent != (self.status == SlotStatus.URGENT):
            raise ValueError(
                f"Slot {self.id}: urgent flag must be set exactly when status is 'urgent'"
            )

    @property
    def is_taken(self) -> bool:
        return self.status == SlotStatus.TAKEN

    @property
    def is_assignable(self) -> bool:
        return self.status != SlotStatus.UNAVAILABLE


@dataclass
class ShiftPeriod:
    """An ordered sequence of slots for one period of a day."""

    period: Period
    slots: List[Slot] = field(default_factory=list)

    def __post_init__(self):
        self.period = Period(self.period)

    @property
    def base_slot(self) -> Optional[Slot]:
        """The first slot, conventionally the base one."""
        return self.slots[0] if self.slots else None

    def get_slot(self, slot_id: str) -> Optional[Slot]:
        for slot in self.slots:
            if slot.id == slot_id:
                return slot
        return None


@dataclass
class DaySchedule:
    """One calendar day with its morning, day and evening periods."""

    date: date
    day_name: str
    periods: Dict[Period, ShiftPeriod]

    def __post_init__(self):
        if set(self.periods) != set(Period):
            raise ValueError(
                f"Day {self.date} must have exactly the periods "
                f"{', '.join(p.value for p in Period)}"
            )

    @property
    def label(self) -> str:
        """Short date label, e.g. ``14.11``."""
        return self.date.strftime("%d.%m")

    def period(self, period: Period) -> ShiftPeriod:
        return self.periods[Period(period)]

    def all_slots(self) -> List[Slot]:
        return [slot for p in Period for slot in self.periods[p].slots]


@dataclass
class WeekSchedule:
    """Seven consecutive day schedules."""

    days: List[DaySchedule]

    def __post_init__(self):
        if len(self.days) != 7:
            raise ValueError(f"A week has exactly 7 days, got {len(self.days)}")

        for prev, cur in zip(self.days, self.days[1:]):
            if cur.date - prev.date != timedelta(days=1):
                raise ValueError(
                    f"Week days must be consecutive, got {prev.date} then {cur.date}"
                )

        seen = set()
        for slot in self.all_slots():
            if slot.id in seen:
                raise ValueError(f"Duplicate slot id '{slot.id}' in week")
            seen.add(slot.id)

    @property
    def start_date(self) -> date:
        return self.days[0].date

    @property
    def end_date(self) -> date:
        return self.days[-1].date

    def get_day(self, day: date) -> Optional[DaySchedule]:
        for day_schedule in self.days:
            if day_schedule.date == day:
                return day_schedule
        return None

    def all_slots(self) -> List[Slot]:
        return [slot for day in self.days for slot in day.all_slots()]

    @classmethod
    def empty(cls, start_date: date, slots_per_period: int = 2) -> "WeekSchedule":
        """
        Build a week of free slots starting at ``start_date``.

        The first slot of every period is the base slot, the rest are extra.
        """
        if slots_per_period < 1:
            raise ValueError(
                f"Each period needs at least one slot, got {slots_per_period}"
            )

        days = []
        for k in range(7):
            day = start_date + timedelta(days=k)
            periods = {
                period: ShiftPeriod(
                    period=period,
                    slots=[
                        Slot(
                            id=slot_id_for(day, period, position),
                            kind=SlotKind.BASE if position == 1 else SlotKind.EXTRA,
                        )
                        for position in range(1, slots_per_period + 1)
                    ],
                )
                for period in Period
            }
            days.append(
                DaySchedule(date=day, day_name=DAY_LABELS[day.weekday()], periods=periods)
            )
        return cls(days=days)


@dataclass
class ScheduleConfig:
    """Everything needed to open a session: the week and its roster."""

    week: WeekSchedule
    employees: List[Employee]

    @property
    def employee_ids(self) -> List[str]:
        return [emp.id for emp in self.employees]

    def get_employee(self, employee_id: str) -> Employee:
        """Get an employee by id."""
        for emp in self.employees:
            if emp.id == employee_id:
                return emp
        raise ValueError(f"Employee '{employee_id}' not found")
