"""Tests for board reporting and CSV export."""

import csv
import pytest
from datetime import date

from shift_board.engine import Session
from shift_board.models import Period, Role
from shift_board.reporter import BoardReporter


@pytest.fixture
def reporter(demo: Session) -> BoardReporter:
    return BoardReporter(demo, current_user_id="1")


class TestWeekFrame:
    """Tests for the week grid."""

    def test_one_row_per_day(self, reporter: BoardReporter):
        df = reporter.week_frame()

        assert list(df.columns) == ["Morning", "Day", "Evening"]
        assert df.index.name == "Date"
        assert list(df.index)[0] == "Mon 11.11"
        assert list(df.index)[-1] == "Sun 17.11"

    def test_slot_markers(self, reporter: BoardReporter):
        df = reporter.week_frame()

        # Own slot starred, others by first name
        assert df.loc["Mon 11.11", "Morning"] == "*Анна | +extra"
        assert df.loc["Mon 11.11", "Day"] == "Петр | +extra"
        assert df.loc["Thu 14.11", "Day"] == "!base | +extra"
        assert df.loc["Tue 12.11", "Day"] == "Петр | +extra"
        assert df.loc["Fri 15.11", "Evening"] == "+base | +extra"

    def test_grid_follows_session_changes(self, demo: Session, reporter: BoardReporter):
        demo.assign("15.11-m-2", date(2024, 11, 15), Period.MORNING, "5", "a", Role.ADMIN)
        assert reporter.week_frame().loc["Fri 15.11", "Morning"] == "+base | Елена"


class TestRosterFrame:
    """Tests for the utilization table."""

    def test_roster_columns(self, reporter: BoardReporter):
        df = reporter.roster_frame()

        assert list(df.columns) == ["Shifts", "Limit", "Utilization", "At Limit"]
        assert df.loc["Анна Иванова (you)", "Shifts"] == 3
        assert df.loc["Мария Петрова", "Utilization"] == pytest.approx(0.75)

    def test_at_limit_flag(self, demo: Session, reporter: BoardReporter):
        demo.assign("14.11-d-1", date(2024, 11, 14), Period.DAY, "2", "2", Role.EMPLOYEE)
        assert reporter.roster_frame().loc["Петр Смирнов", "At Limit"] == "yes"


class TestPrintReport:
    """Tests for printed output."""

    def test_full_report(self, reporter: BoardReporter, capsys):
        reporter.print_report(quiet=False)
        out = capsys.readouterr().out

        assert "SHIFT BOARD" in out
        assert "Week: 2024-11-11 to 2024-11-17" in out
        assert "1 urgent replacement(s) needed" in out
        assert "EMPLOYEES" in out

    def test_quiet_report_skips_roster(self, reporter: BoardReporter, capsys):
        reporter.print_report(quiet=True)
        out = capsys.readouterr().out

        assert "WEEK" in out
        assert "EMPLOYEES" not in out

    def test_no_urgent_line_when_nothing_urgent(self, demo: Session, capsys):
        demo.clear_urgent("14.11-d-1", date(2024, 11, 14), Period.DAY, Role.ADMIN)
        BoardReporter(demo).print_report()
        assert "urgent" not in capsys.readouterr().out


class TestCSVExport:
    """Tests for CSV export."""

    def test_export_writes_every_slot(self, reporter: BoardReporter, tmp_path):
        out_file = tmp_path / "board.csv"
        reporter.export_to_csv(str(out_file))

        with open(out_file, encoding="utf-8") as f:
            rows = list(csv.DictReader(f))

        assert len(rows) == 7 * 3 * 2
        assert list(rows[0].keys()) == [
            "Date",
            "Day",
            "Period",
            "Slot",
            "Kind",
            "Status",
            "Employee",
        ]
        first = rows[0]
        assert first["Slot"] == "11.11-m-1"
        assert first["Status"] == "taken"
        assert first["Employee"] == "Анна Иванова"

        urgent = [r for r in rows if r["Status"] == "urgent"]
        assert [r["Slot"] for r in urgent] == ["14.11-d-1"]
