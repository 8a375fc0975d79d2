"""Tests for the command line entry point."""

import pytest
from pathlib import Path

from shift_board.main import main

EXAMPLE_CONFIG = str(Path(__file__).parent.parent / "config" / "week.yaml")


def run(argv, capsys):
    with pytest.raises(SystemExit) as exc:
        main(argv)
    captured = capsys.readouterr()
    return exc.value.code, captured.out, captured.err


class TestCLI:
    """End-to-end runs of the CLI on the demo week and example config."""

    def test_show_demo_week(self, capsys):
        code, out, _ = run([], capsys)

        assert code == 0
        assert "SHIFT BOARD" in out
        assert "Анна Иванова (you)" in out

    def test_assign_by_position(self, capsys):
        code, out, _ = run(
            ["--user", "1", "assign", "2024-11-13", "morning", "1", "1"], capsys
        )

        assert code == 0
        assert "Shift assigned: Анна Иванова -> 13.11-m-1" in out

    def test_assign_someone_else_as_employee_fails(self, capsys):
        code, _, err = run(
            ["--user", "1", "assign", "2024-11-13", "morning", "13.11-m-1", "3"], capsys
        )

        assert code == 1
        assert "Not Allowed" in err

    def test_cancel_own_shift(self, capsys):
        code, out, _ = run(["--user", "3", "cancel", "2024-11-11", "evening", "1"], capsys)

        assert code == 0
        assert "Shift cancelled: 11.11-e-1" in out

    def test_cancel_free_slot_fails(self, capsys):
        code, _, err = run(["--user", "1", "cancel", "2024-11-15", "day", "2"], capsys)

        assert code == 1
        assert "Invalid Slot State" in err

    def test_mark_urgent_needs_admin(self, capsys):
        code, _, err = run(["mark-urgent", "2024-11-15", "day", "2"], capsys)
        assert code == 1
        assert "Not Allowed" in err

        code, out, _ = run(
            ["--role", "admin", "mark-urgent", "2024-11-15", "day", "2"], capsys
        )
        assert code == 0
        assert "2 urgent replacement(s) needed" in out

    def test_slot_position_out_of_range(self, capsys):
        code, _, err = run(["--user", "1", "assign", "2024-11-13", "day", "5", "1"], capsys)

        assert code == 1
        assert "Not Found" in err

    def test_with_config_file(self, capsys, tmp_path):
        out_file = tmp_path / "board.csv"
        code, out, _ = run(
            ["--config", EXAMPLE_CONFIG, "--quiet", "--export-csv", str(out_file)],
            capsys,
        )

        assert code == 0
        assert "Configuration loaded successfully" in out
        assert out_file.exists()

    def test_missing_config_file(self, capsys):
        code, _, err = run(["--config", "/nonexistent/week.yaml"], capsys)

        assert code == 1
        assert "not found" in err

    def test_invalid_date_argument(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["assign", "13.11", "day", "1", "1"])
        assert exc.value.code == 2
