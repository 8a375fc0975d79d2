"""
Reporting and output formatting for the shift board.
"""

import pandas as pd
from typing import Dict, List, Optional

from .engine import Session
from .models import Employee, Period, Slot, SlotStatus


class BoardReporter:
    """Formats and displays the current state of a session."""

    def __init__(self, session: Session, current_user_id: Optional[str] = None):
        self.session = session
        self.current_user_id = current_user_id

    def print_report(self, quiet: bool = False) -> None:
        """Print complete board report."""
        self._print_header()
        self._print_week_grid()

        if not quiet:
            self._print_roster()

    def _print_title(self, title: str) -> None:
        print("=" * 80)
        print(title)
        print("=" * 80)

    def _print_header(self) -> None:
        """Print report header."""
        week = self.session.get_week_schedule()
        self._print_title("SHIFT BOARD")

        print(f"\nWeek: {week.start_date} to {week.end_date}")
        urgent = self.session.urgent_count()
        if urgent:
            print(f"! {urgent} urgent replacement(s) needed")
        print()

    def _print_week_grid(self) -> None:
        """Print one row per day, one column per period."""
        self._print_title("WEEK")
        print(self.week_frame().to_string())
        print()

    def _print_roster(self) -> None:
        """Print employee utilization table."""
        self._print_title("EMPLOYEES")

        df = self.roster_frame()
        pd.options.display.float_format = "{:.2f}".format
        print(df.to_string())
        print()

    def week_frame(self) -> pd.DataFrame:
        """The week as a DataFrame indexed by day, one column per period."""
        week = self.session.get_week_schedule()
        names = self._names()

        data = []
        for day in week.days:
            row = {"Date": f"{day.day_name} {day.label}"}
            for period in Period:
                row[period.value.capitalize()] = " | ".join(
                    self._format_slot(slot, names) for slot in day.period(period).slots
                )
            data.append(row)

        return pd.DataFrame(data).set_index("Date")

    def roster_frame(self) -> pd.DataFrame:
        """Roster with shift counts and utilization."""
        data = []
        for emp in self.session.get_roster():
            data.append(
                {
                    "Employee": self._format_employee(emp),
                    "Shifts": emp.current_shifts,
                    "Limit": emp.limit,
                    "Utilization": emp.utilization,
                    "At Limit": "yes" if emp.is_at_limit else "",
                }
            )

        return pd.DataFrame(data).set_index("Employee")

    def _names(self) -> Dict[str, str]:
        return {emp.id: emp.name for emp in self.session.get_roster()}

    def _format_employee(self, emp: Employee) -> str:
        if emp.id == self.current_user_id:
            return f"{emp.name} (you)"
        return emp.name

    def _format_slot(self, slot: Slot, names: Dict[str, str]) -> str:
        if slot.status == SlotStatus.TAKEN:
            # First name only, as on the board
            label = names[slot.employee_id].split()[0]
            return f"*{label}" if slot.employee_id == self.current_user_id else label
        if slot.status == SlotStatus.URGENT:
            return f"!{slot.kind.value}"
        if slot.status == SlotStatus.UNAVAILABLE:
            return "-"
        return f"+{slot.kind.value}"

    def export_to_csv(self, filepath: str) -> None:
        """Export every slot of the week to a CSV file."""
        week = self.session.get_week_schedule()
        names = self._names()

        data: List[Dict[str, str]] = []
        for day in week.days:
            for period in Period:
                for slot in day.period(period).slots:
                    data.append(
                        {
                            "Date": day.date.isoformat(),
                            "Day": day.day_name,
                            "Period": period.value,
                            "Slot": slot.id,
                            "Kind": slot.kind.value,
                            "Status": slot.status.value,
                            "Employee": names.get(slot.employee_id, "")
                            if slot.employee_id
                            else "",
                        }
                    )

        df = pd.DataFrame(data)
        df.to_csv(filepath, index=False)
        print(f"\n✓ Board exported to {filepath}")
