"""
Shift Board - Assign employees to weekly work shifts within their limits.
"""

__version__ = "0.1.0"

from .config import ConfigLoader, ConfigurationError, InvalidDateFormatError
from .engine import (
    AssignmentResult,
    AuthorizationError,
    CancellationResult,
    CapacityExceeded,
    InvalidStateError,
    NotFoundError,
    Session,
    ShiftBoardError,
)
from .models import (
    Capability,
    DaySchedule,
    Employee,
    Period,
    Role,
    ScheduleConfig,
    ShiftPeriod,
    Slot,
    SlotKind,
    SlotStatus,
    WeekSchedule,
)
from .reporter import BoardReporter

__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "InvalidDateFormatError",
    "Session",
    "AssignmentResult",
    "CancellationResult",
    "ShiftBoardError",
    "NotFoundError",
    "AuthorizationError",
    "CapacityExceeded",
    "InvalidStateError",
    "ScheduleConfig",
    "Employee",
    "Slot",
    "SlotKind",
    "SlotStatus",
    "ShiftPeriod",
    "Period",
    "DaySchedule",
    "WeekSchedule",
    "Role",
    "Capability",
    "BoardReporter",
]
