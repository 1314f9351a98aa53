#!/usr/bin/env python3
"""Weekly event joiner.

Launches the command attached to each event of a weekly timetable, either
once for the event that is on right now or continuously as a daemon.
"""

import argparse
import logging
import sys
from datetime import date, datetime
from typing import Optional

from timetable import CommandArgs, Config, Instant, load_config, resolve_active, resolve_next_wakeup
from timetable.daemon import run_daemon
from timetable.launcher import command_by_name, command_for_event, launch
from transformer import ICalTransformer

logger = logging.getLogger("eventjoiner")


def parse_date(date_str: str) -> date:
    """Parse date string in YYYY-MM-DD format."""
    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Invalid date format: '{date_str}'. Expected YYYY-MM-DD."
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Launch the command for the current or next event of a weekly timetable.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 eventjoiner.py                      # run the event that is on now
  python3 eventjoiner.py --daemonize          # keep running, launch every event
  python3 eventjoiner.py -e math --no-run     # print the command for "math"
  python3 eventjoiner.py --export-ical week.ics
        """
    )

    parser.add_argument(
        "-c", "--config",
        default=None,
        help="Config file (default: $XDG_CONFIG_HOME/eventjoiner.toml)"
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "-l", "--launch",
        metavar="COMMAND",
        help="Launch a particular command from the config"
    )
    mode.add_argument(
        "-e", "--event",
        metavar="EVENT",
        help="Launch the command of a particular event from the config"
    )
    mode.add_argument(
        "-d", "--daemonize",
        action="store_true",
        help="Keep running and launch every event when its time comes"
    )
    mode.add_argument(
        "--sc", "--show-command",
        dest="show_command",
        metavar="COMMAND",
        help="Print a command from the config"
    )
    mode.add_argument(
        "--next",
        action="store_true",
        help="Print the next event and how long until it is due"
    )
    mode.add_argument(
        "--export-ical",
        metavar="PATH",
        help="Write the timetable to an iCalendar file"
    )

    parser.add_argument(
        "--no-run",
        action="store_true",
        help="Print the command instead of running it"
    )
    parser.add_argument(
        "--start-date",
        type=parse_date,
        default=None,
        help="First day of the iCalendar export (format: YYYY-MM-DD, default: today)"
    )
    parser.add_argument(
        "--end-date",
        type=parse_date,
        default=None,
        help="Last day of the iCalendar export (format: YYYY-MM-DD, default: no end)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug output"
    )

    return parser


def run_command(command: CommandArgs, no_run: bool) -> None:
    if no_run:
        print(command)
    else:
        launch(command)


def print_next(config: Config, now: Instant) -> None:
    wakeup = resolve_next_wakeup(config.timetable, config.notify_before, now)
    if wakeup is None:
        print("no event")
        return

    print(f"next event = {wakeup.event.name} at {wakeup.event.time}")
    print(f"due in {wakeup.delay}")


def export_ical(config: Config, output_path: str, start_date: date, end_date: Optional[date]) -> None:
    # Ensure output file has .ics extension
    if not output_path.lower().endswith(".ics"):
        output_path = f"{output_path}.ics"

    transformer = ICalTransformer(notify_before=config.notify_before)
    transformer.transform(config.timetable, start_date, end_date)
    transformer.save(output_path)

    print(f"Found {len(config.timetable)} timetable events.")
    print(f"Timetable saved to: {output_path}")


def run_active(config: Config, now: Instant, no_run: bool) -> None:
    event = resolve_active(config.timetable, config.notify_before, now)
    if event is None:
        print("no event")
        return

    print(f"event = {event.name}")
    run_command(command_for_event(config, event.name), no_run)


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point for the event joiner."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
        logger.debug("Loaded %d events from config", len(config.timetable))

        if args.show_command:
            print(command_by_name(config, args.show_command))
        elif args.launch:
            run_command(command_by_name(config, args.launch), args.no_run)
        elif args.event:
            run_command(command_for_event(config, args.event), args.no_run)
        elif args.daemonize:
            run_daemon(config)
        elif args.next:
            print_next(config, Instant.now())
        elif args.export_ical:
            export_ical(config, args.export_ical, args.start_date or date.today(), args.end_date)
        else:
            run_active(config, Instant.now(), args.no_run)

    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        sys.exit(130)
    except (ValueError, LookupError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error: An unexpected error occurred: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
