"""
Main entry point for the shift board application.
"""

import sys
import argparse
import logging
from datetime import date

from .config import ConfigLoader, ConfigurationError, InvalidDateFormatError
from .demo import demo_session
from .engine import (
    AuthorizationError,
    CapacityExceeded,
    InvalidStateError,
    NotFoundError,
    Session,
)
from .models import Period, Role
from .reporter import BoardReporter

logger = logging.getLogger(__name__)


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"expected an ISO 8601 date (YYYY-MM-DD), got '{value}'"
        )


def _add_slot_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("date", type=_iso_date, help="Day of the shift (YYYY-MM-DD)")
    parser.add_argument(
        "period", choices=[p.value for p in Period], help="Shift period"
    )
    parser.add_argument(
        "slot", help="Slot id (e.g. 14.11-d-1) or position within the period (1, 2, ...)"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shift-board",
        description="Assign employees to weekly work shifts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show the demo week
  shift-board

  # Take a free slot as employee 1
  shift-board --user 1 assign 2024-11-13 morning 1 1

  # Flag a slot for urgent replacement from a config file
  shift-board --config config/week.yaml --role admin mark-urgent 2024-11-15 day 2
        """,
    )

    parser.add_argument(
        "--config", type=str, help="Path to YAML configuration file (default: demo week)"
    )
    parser.add_argument("--user", default="1", help="Id of the acting employee")
    parser.add_argument(
        "--role",
        choices=[r.value for r in Role],
        default=Role.EMPLOYEE.value,
        help="Role of the acting user",
    )
    parser.add_argument("--export-csv", type=str, help="Export the board to CSV file")
    parser.add_argument(
        "--quiet", action="store_true", help="Only show the week grid"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    actions = parser.add_subparsers(dest="action")

    assign = actions.add_parser("assign", help="Assign an employee to a slot")
    _add_slot_arguments(assign)
    assign.add_argument("employee", help="Id of the employee to assign")

    cancel = actions.add_parser("cancel", help="Cancel a taken slot")
    _add_slot_arguments(cancel)

    mark = actions.add_parser("mark-urgent", help="Flag a free slot as urgent")
    _add_slot_arguments(mark)

    clear = actions.add_parser("clear-urgent", help="Withdraw an urgent flag")
    _add_slot_arguments(clear)

    return parser


def resolve_slot_id(session: Session, day: date, period: str, slot: str) -> str:
    """Turn a 1-based position into a slot id; ids pass through unchanged."""
    if not slot.isdigit():
        return slot

    week = session.get_week_schedule()
    day_schedule = week.get_day(day)
    if day_schedule is None:
        raise NotFoundError(f"Date {day} is not in the current week")

    slots = day_schedule.period(period).slots
    position = int(slot)
    if not 1 <= position <= len(slots):
        raise NotFoundError(
            f"No slot {position} on {day_schedule.label} {period} "
            f"(has {len(slots)})"
        )
    return slots[position - 1].id


def run_action(session: Session, args: argparse.Namespace) -> str:
    """Apply the requested action and return a message for the user."""
    role = Role(args.role)
    slot_id = resolve_slot_id(session, args.date, args.period, args.slot)

    if args.action == "assign":
        result = session.assign(
            slot_id, args.date, args.period, args.employee, args.user, role
        )
        message = f"Shift assigned: {result.employee.name} -> {result.slot.id}"
        if result.released is not None:
            message += f" (replaces {result.released.name})"
        return message

    if args.action == "cancel":
        result = session.cancel(slot_id, args.date, args.period, args.user, role)
        return f"Shift cancelled: {result.slot.id} ({result.employee.name})"

    if args.action == "mark-urgent":
        slot = session.mark_urgent(slot_id, args.date, args.period, role)
        return f"Slot {slot.id} marked urgent"

    slot = session.clear_urgent(slot_id, args.date, args.period, role)
    return f"Slot {slot.id} no longer urgent"


def main(argv=None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        if args.config:
            print(f"Loading configuration from: {args.config}")
            loader = ConfigLoader(args.config)
            session = loader.load_session()
            print("✓ Configuration loaded successfully")
            print(loader.get_summary())
            print()
        else:
            session = demo_session()

        if args.action:
            print(f"✓ {run_action(session, args)}")
            print()

        reporter = BoardReporter(session, current_user_id=args.user)
        reporter.print_report(args.quiet)

        if args.export_csv:
            reporter.export_to_csv(args.export_csv)

        sys.exit(0)

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    except InvalidDateFormatError as e:
        print(f"Date Format Error: {e}", file=sys.stderr)
        print(
            "\n Tip: Use ISO 8601 format (YYYY-MM-DD) for all dates.", file=sys.stderr
        )
        sys.exit(1)

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        sys.exit(1)

    except NotFoundError as e:
        print(f"Not Found: {e}", file=sys.stderr)
        sys.exit(1)

    except AuthorizationError as e:
        print(f"Not Allowed: {e}", file=sys.stderr)
        sys.exit(1)

    except CapacityExceeded as e:
        print(f"Limit Exceeded: {e}", file=sys.stderr)
        sys.exit(1)

    except InvalidStateError as e:
        print(f"Invalid Slot State: {e}", file=sys.stderr)
        sys.exit(1)

    except Exception as e:
        logger.exception("Unexpected error")
        print(f"Unexpected Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
