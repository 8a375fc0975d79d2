"""
Configuration loader for parsing a YAML week and roster.
"""

import logging
import yaml
from pathlib import Path
from typing import Dict, Any, List
from datetime import date

from .engine import Session
from .models import (
    Employee,
    Period,
    ScheduleConfig,
    ShiftPeriod,
    Slot,
    SlotStatus,
    WeekSchedule,
)

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Custom exception for configuration errors."""

    pass


class InvalidDateFormatError(ConfigurationError):
    """Raised when a date is not in ISO 8601 format (YYYY-MM-DD)."""

    pass


class ConfigLoader:
    """Loads and validates a shift board configuration from YAML files."""

    DEFAULT_SLOTS_PER_PERIOD = 2

    def __init__(self, config_path: str | Path):
        """
        Initialize the ConfigLoader with a configuration file path.

        Args:
            config_path: Path to the YAML configuration file

        Raises:
            FileNotFoundError: If config file doesn't exist
        """
        self.config_path = Path(config_path)

        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        self._raw_config: Dict[str, Any] | None = None
        self._config: ScheduleConfig | None = None

    def load(self) -> ScheduleConfig:
        """
        Load and parse the configuration file.

        Returns:
            ScheduleConfig object with the week and the roster

        Raises:
            InvalidDateFormatError: If dates are not in ISO 8601 format
            ConfigurationError: If configuration is invalid
        """
        with open(self.config_path, "r", encoding="utf-8") as f:
            self._raw_config = yaml.safe_load(f) or {}

        if not isinstance(self._raw_config, dict):
            raise ConfigurationError(
                f"Top level of {self.config_path} must be a mapping"
            )

        self._config = self._parse_config()
        self._validate()

        logger.debug(
            "Loaded %d employees for week starting %s",
            len(self._config.employees),
            self._config.week.start_date,
        )
        return self._config

    def reload(self) -> ScheduleConfig:
        """
        Reload the configuration from the file.

        Useful if the file has been modified.
        """
        return self.load()

    def load_session(self) -> Session:
        """
        Load the configuration and open a session on it.

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        config = self.load()
        try:
            return Session(config.week, config.employees)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

    @property
    def config(self) -> ScheduleConfig:
        """
        Get the loaded configuration.

        Raises:
            RuntimeError: If load() hasn't been called yet
        """
        if self._config is None:
            raise RuntimeError("Configuration not loaded. Call load() first.")
        return self._config

    @property
    def raw_config(self) -> Dict[str, Any]:
        """
        Get the raw configuration dictionary.

        Raises:
            RuntimeError: If load() hasn't been called yet
        """
        if self._raw_config is None:
            raise RuntimeError("Configuration not loaded. Call load() first.")
        return self._raw_config

    def _parse_config(self) -> ScheduleConfig:
        """Parse raw YAML data into ScheduleConfig object."""
        raw = self._raw_config

        week_raw = raw.get("week", {}) or {}
        start_date = week_raw.get("start_date")
        if not isinstance(start_date, date):
            raise InvalidDateFormatError(
                f"start_date must be in ISO 8601 format (YYYY-MM-DD), got: {start_date}. "
                f"Example: 2024-11-11"
            )

        slots_per_period = week_raw.get(
            "slots_per_period", self.DEFAULT_SLOTS_PER_PERIOD
        )
        if not isinstance(slots_per_period, int) or slots_per_period < 1:
            raise ConfigurationError(
                f"slots_per_period must be a positive integer, got: {slots_per_period}"
            )

        week = WeekSchedule.empty(start_date, slots_per_period)
        employees = self._parse_employees(raw.get("employees", []) or [])
        known_ids = {emp.id for emp in employees}

        used = set()
        for entry in raw.get("assignments", []) or []:
            slot = self._resolve_slot(week, entry, "assignments", used)
            employee_id = str(entry.get("employee", ""))
            if employee_id not in known_ids:
                raise ConfigurationError(
                    f"Assignment of slot {slot.id} references unknown employee "
                    f"'{employee_id}'"
                )
            slot.status = SlotStatus.TAKEN
            slot.employee_id = employee_id

        for entry in raw.get("urgent", []) or []:
            slot = self._resolve_slot(week, entry, "urgent", used)
            slot.status = SlotStatus.URGENT
            slot.urgent = True

        for entry in raw.get("unavailable", []) or []:
            slot = self._resolve_slot(week, entry, "unavailable", used)
            slot.status = SlotStatus.UNAVAILABLE

        return ScheduleConfig(week=week, employees=employees)

    def _parse_employees(self, employees_raw: List[Dict[str, Any]]) -> List[Employee]:
        """Parse the roster from raw config."""
        employees = []
        seen = set()

        for emp_data in employees_raw:
            emp_id = emp_data.get("id")
            name = emp_data.get("name")
            if emp_id is None or not name:
                raise ConfigurationError(
                    f"Every employee needs an 'id' and a 'name', got: {emp_data}"
                )
            emp_id = str(emp_id)
            if emp_id in seen:
                raise ConfigurationError(f"Duplicate employee id '{emp_id}'")
            seen.add(emp_id)

            limit = emp_data.get("limit")
            current = emp_data.get("current_shifts", 0)
            if not isinstance(limit, int) or not isinstance(current, int):
                raise ConfigurationError(
                    f"limit and current_shifts for {name} must be integers"
                )

            try:
                employees.append(
                    Employee(id=emp_id, name=name, limit=limit, current_shifts=current)
                )
            except ValueError as e:
                raise ConfigurationError(str(e)) from e

        return employees

    def _resolve_slot(
        self, week: WeekSchedule, entry: Dict[str, Any], section: str, used: set
    ) -> Slot:
        """Find the slot an assignments/urgent/unavailable entry points at."""
        day = entry.get("date")
        if not isinstance(day, date):
            raise InvalidDateFormatError(
                f"Date in '{section}' must be in ISO 8601 format (YYYY-MM-DD), "
                f"got: {day}. Example: 2024-11-14"
            )

        day_schedule = week.get_day(day)
        if day_schedule is None:
            raise ConfigurationError(
                f"Date {day} in '{section}' is outside the week "
                f"{week.start_date} to {week.end_date}"
            )

        period_name = str(entry.get("period", "")).lower()
        try:
            shift_period: ShiftPeriod = day_schedule.period(Period(period_name))
        except ValueError:
            raise ConfigurationError(
                f"Invalid period: '{period_name}'. "
                f"Valid periods: {', '.join(p.value for p in Period)}"
            )

        ref = entry.get("slot", 1)
        if isinstance(ref, int):
            if not 1 <= ref <= len(shift_period.slots):
                raise ConfigurationError(
                    f"Slot {ref} in '{section}' out of range 1..{len(shift_period.slots)} "
                    f"for {day_schedule.label} {period_name}"
                )
            slot = shift_period.slots[ref - 1]
        else:
            slot = shift_period.get_slot(str(ref))
            if slot is None:
                raise ConfigurationError(
                    f"Slot '{ref}' in '{section}' not found on "
                    f"{day_schedule.label} {period_name}"
                )

        if slot.id in used:
            raise ConfigurationError(f"Slot {slot.id} is listed more than once")
        used.add(slot.id)
        return slot

    def _validate(self) -> None:
        """
        Validate that the roster and the week agree.

        Raises:
            ConfigurationError: If configuration has issues
        """
        config = self._config

        if not config.employees:
            raise ConfigurationError("The roster has no employees")

        held: Dict[str, int] = {}
        for slot in config.week.all_slots():
            if slot.employee_id is not None:
                held[slot.employee_id] = held.get(slot.employee_id, 0) + 1

        for emp in config.employees:
            count = held.get(emp.id, 0)
            if count > emp.current_shifts:
                raise ConfigurationError(
                    f"{emp.name} holds {count} slots this week but current_shifts "
                    f"is {emp.current_shifts}"
                )
            if emp.is_at_limit:
                logger.warning(
                    "%s starts the week at the shift limit (%d/%d)",
                    emp.name,
                    emp.current_shifts,
                    emp.limit,
                )

    def get_summary(self) -> str:
        """
        Get a summary of the loaded configuration.

        Raises:
            RuntimeError: If load() hasn't been called yet
        """
        config = self.config
        slots = config.week.all_slots()

        lines = [
            f"Configuration from: {self.config_path}",
            f"Week: {config.week.start_date} to {config.week.end_date}",
            f"Slots: {len(slots)} "
            f"({sum(1 for s in slots if s.is_taken)} taken, "
            f"{sum(1 for s in slots if s.urgent)} urgent)",
            f"Employees: {len(config.employees)}",
        ]

        for emp in config.employees:
            lines.append(f"  - {emp.name}: {emp.current_shifts}/{emp.limit} shifts")

        return "\n".join(lines)
