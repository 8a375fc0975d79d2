"""
Shift assignment engine.

A ``Session`` owns the week schedule and the employee roster and is the only
way to change either of them. Every operation validates the whole request
before touching state, so a rejected request leaves the session unchanged.
"""

import copy
import logging
import threading
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional

from .models import (
    Capability,
    Employee,
    Period,
    Role,
    Slot,
    SlotStatus,
    WeekSchedule,
    role_can,
)

logger = logging.getLogger(__name__)


class ShiftBoardError(Exception):
    """Base exception for rejected engine operations."""

    pass


class NotFoundError(ShiftBoardError):
    """Raised for an unknown slot, employee or date/period combination."""

    pass


class AuthorizationError(ShiftBoardError):
    """Raised when the requesting role lacks the needed capability."""

    pass


class CapacityExceeded(ShiftBoardError):
    """Raised when an employee is already at their shift limit."""

    pass


class InvalidStateError(ShiftBoardError):
    """Raised when a slot's status does not allow the requested transition."""

    pass


@dataclass
class AssignmentResult:
    """Outcome of a successful assignment."""

    slot: Slot
    employee: Employee
    released: Optional[Employee] = None  # Previous occupant, if replaced


@dataclass
class CancellationResult:
    """Outcome of a successful cancellation."""

    slot: Slot
    employee: Employee


class Session:
    """Holds one week of shifts and the roster assigned to it."""

    def __init__(self, week: WeekSchedule, employees: List[Employee]):
        """
        Initialize the session.

        Args:
            week: The week schedule; the session keeps its own copy
            employees: The roster; copied like the week

        Raises:
            ValueError: If the roster and the week are inconsistent
        """
        self._lock = threading.RLock()
        self._week = copy.deepcopy(week)
        self._employees: Dict[str, Employee] = {}

        for emp in employees:
            if emp.id in self._employees:
                raise ValueError(f"Duplicate employee id '{emp.id}'")
            self._employees[emp.id] = copy.copy(emp)

        held = {emp_id: 0 for emp_id in self._employees}
        for slot in self._week.all_slots():
            if slot.employee_id is None:
                continue
            if slot.employee_id not in self._employees:
                raise ValueError(
                    f"Slot {slot.id} references unknown employee '{slot.employee_id}'"
                )
            held[slot.employee_id] += 1

        # Shift counts may include shifts outside this week, never fewer
        for emp_id, count in held.items():
            emp = self._employees[emp_id]
            if count > emp.current_shifts:
                raise ValueError(
                    f"{emp.name} holds {count} slots this week but has only "
                    f"{emp.current_shifts} shifts counted"
                )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_week_schedule(self) -> WeekSchedule:
        """Return a snapshot of the week schedule."""
        with self._lock:
            return copy.deepcopy(self._week)

    def get_roster(self) -> List[Employee]:
        """Return a snapshot of the roster in load order."""
        with self._lock:
            return [copy.copy(emp) for emp in self._employees.values()]

    def get_employee(self, employee_id: str) -> Employee:
        with self._lock:
            return copy.copy(self._require_employee(employee_id))

    def get_slot(self, slot_id: str, day: date, period: Period) -> Slot:
        with self._lock:
            return copy.copy(self._require_slot(slot_id, day, period))

    def slots_for(self, employee_id: str) -> List[Slot]:
        """Slots currently taken by an employee, in week order."""
        with self._lock:
            self._require_employee(employee_id)
            return [
                copy.copy(slot)
                for slot in self._week.all_slots()
                if slot.employee_id == employee_id
            ]

    def urgent_count(self) -> int:
        """Number of slots flagged for urgent replacement."""
        with self._lock:
            return sum(1 for slot in self._week.all_slots() if slot.urgent)

    def utilization(self, employee_id: str) -> float:
        """Used fraction of an employee's shift limit, in [0, 1]."""
        with self._lock:
            return self._require_employee(employee_id).utilization

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def assign(
        self,
        slot_id: str,
        day: date,
        period: Period,
        employee_id: str,
        requesting_user_id: str,
        requesting_role: Role,
    ) -> AssignmentResult:
        """
        Assign an employee to a slot.

        A slot taken by someone else is released first, returning one shift
        to the previous occupant. Assigning an employee to the slot they
        already hold changes nothing.

        Returns:
            AssignmentResult with snapshots of the slot and the employee

        Raises:
            NotFoundError: Unknown slot or employee
            InvalidStateError: The slot is unavailable
            AuthorizationError: An employee assigning someone else, or
                displacing another occupant
            CapacityExceeded: The employee is at their limit
        """
        role = self._require_role(requesting_role)

        with self._lock:
            slot = self._require_slot(slot_id, day, period)
            employee = self._require_employee(employee_id)

            if not slot.is_assignable:
                self._reject(InvalidStateError(f"Slot {slot.id} is unavailable"))

            if employee_id == requesting_user_id:
                needed = Capability.ASSIGN_SELF
            else:
                needed = Capability.ASSIGN_OTHERS
            if not role_can(role, needed):
                self._reject(
                    AuthorizationError(
                        f"Role '{role.value}' may only assign its own user "
                        f"'{requesting_user_id}', not '{employee_id}'"
                    )
                )

            if slot.employee_id == employee_id:
                logger.debug("Slot %s already held by %s", slot.id, employee_id)
                return AssignmentResult(slot=copy.copy(slot), employee=copy.copy(employee))

            previous = None
            if slot.is_taken:
                if not role_can(role, Capability.ASSIGN_OTHERS):
                    self._reject(
                        AuthorizationError(
                            f"Slot {slot.id} is taken by another employee; "
                            f"only an admin can replace them"
                        )
                    )
                previous = self._employees[slot.employee_id]

            if employee.is_at_limit:
                self._reject(
                    CapacityExceeded(
                        f"Shift limit reached for {employee.name} "
                        f"({employee.current_shifts}/{employee.limit})"
                    )
                )

            if previous is not None:
                previous.current_shifts -= 1
                logger.info(
                    "Released %s from slot %s (%d/%d)",
                    previous.id,
                    slot.id,
                    previous.current_shifts,
                    previous.limit,
                )

            slot.status = SlotStatus.TAKEN
            slot.employee_id = employee.id
            slot.urgent = False
            employee.current_shifts += 1

            logger.info(
                "Assigned %s to slot %s (%d/%d)",
                employee.id,
                slot.id,
                employee.current_shifts,
                employee.limit,
            )
            return AssignmentResult(
                slot=copy.copy(slot),
                employee=copy.copy(employee),
                released=copy.copy(previous) if previous is not None else None,
            )

    def cancel(
        self,
        slot_id: str,
        day: date,
        period: Period,
        requesting_user_id: str,
        requesting_role: Role,
    ) -> CancellationResult:
        """
        Free a taken slot and give the shift back to its occupant.

        Raises:
            NotFoundError: Unknown slot
            InvalidStateError: The slot is not taken
            AuthorizationError: An employee cancelling someone else's slot
        """
        role = self._require_role(requesting_role)

        with self._lock:
            slot = self._require_slot(slot_id, day, period)

            if not slot.is_taken:
                self._reject(
                    InvalidStateError(
                        f"Slot {slot.id} is {slot.status.value}, only taken slots can be cancelled"
                    )
                )

            if slot.employee_id == requesting_user_id:
                needed = Capability.CANCEL_OWN
            else:
                needed = Capability.CANCEL_OTHERS
            if not role_can(role, needed):
                self._reject(
                    AuthorizationError(
                        f"Slot {slot.id} belongs to another employee; "
                        f"role '{role.value}' may only cancel its own shifts"
                    )
                )

            employee = self._employees[slot.employee_id]
            slot.status = SlotStatus.FREE
            slot.employee_id = None
            employee.current_shifts -= 1

            logger.info(
                "Cancelled slot %s for %s (%d/%d)",
                slot.id,
                employee.id,
                employee.current_shifts,
                employee.limit,
            )
            return CancellationResult(slot=copy.copy(slot), employee=copy.copy(employee))

    def mark_urgent(
        self,
        slot_id: str,
        day: date,
        period: Period,
        requesting_role: Role,
    ) -> Slot:
        """
        Flag a free slot as needing an urgent replacement.

        Raises:
            NotFoundError: Unknown slot
            AuthorizationError: The role cannot manage urgency
            InvalidStateError: The slot is not free
        """
        return self._set_urgency(slot_id, day, period, requesting_role, urgent=True)

    def clear_urgent(
        self,
        slot_id: str,
        day: date,
        period: Period,
        requesting_role: Role,
    ) -> Slot:
        """Withdraw the urgent flag, returning the slot to free."""
        return self._set_urgency(slot_id, day, period, requesting_role, urgent=False)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _set_urgency(
        self, slot_id: str, day: date, period: Period, requesting_role: Role, urgent: bool
    ) -> Slot:
        role = self._require_role(requesting_role)
        source = SlotStatus.FREE if urgent else SlotStatus.URGENT
        target = SlotStatus.URGENT if urgent else SlotStatus.FREE

        with self._lock:
            slot = self._require_slot(slot_id, day, period)

            if not role_can(role, Capability.MANAGE_URGENCY):
                self._reject(
                    AuthorizationError(f"Role '{role.value}' cannot change slot urgency")
                )
            if slot.status != source:
                self._reject(
                    InvalidStateError(
                        f"Slot {slot.id} is {slot.status.value}, expected {source.value}"
                    )
                )

            slot.status = target
            slot.urgent = urgent
            logger.info("Slot %s is now %s", slot.id, target.value)
            return copy.copy(slot)

    def _require_role(self, requesting_role: Role) -> Role:
        try:
            return Role(requesting_role)
        except ValueError:
            self._reject(AuthorizationError(f"Unknown role '{requesting_role}'"))

    def _require_employee(self, employee_id: str) -> Employee:
        employee = self._employees.get(employee_id)
        if employee is None:
            self._reject(NotFoundError(f"Employee '{employee_id}' not found"))
        return employee

    def _require_slot(self, slot_id: str, day: date, period: Period) -> Slot:
        day_schedule = self._week.get_day(day)
        if day_schedule is None:
            self._reject(NotFoundError(f"Date {day} is not in the current week"))

        try:
            shift_period = day_schedule.period(period)
        except ValueError:
            self._reject(NotFoundError(f"Unknown shift period '{period}'"))

        slot = shift_period.get_slot(slot_id)
        if slot is None:
            self._reject(
                NotFoundError(
                    f"Slot '{slot_id}' not found on {day_schedule.label} "
                    f"{shift_period.period.value}"
                )
            )
        return slot

    def _reject(self, error: ShiftBoardError) -> None:
        logger.info("Rejected: %s", error)
        raise error
