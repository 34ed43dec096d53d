from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from typing import Any, Dict, List, Optional

from .bootstrap import configure_logging
from .domain import CalendarError, EventType, ViewMode
from .services import ServiceContext, render_view
from .services.render import describe_event

logger = logging.getLogger(__name__)


def _add_event_fields(parser: argparse.ArgumentParser, *, required: bool) -> None:
    parser.add_argument("--title", required=required)
    parser.add_argument("--date", dest="day", required=required, help="YYYY-MM-DD")
    parser.add_argument("--start", dest="start_time", default="09:00" if required else None, help="HH:MM")
    parser.add_argument("--end", dest="end_time", default="10:00" if required else None, help="HH:MM")
    parser.add_argument("--type", dest="event_type", choices=[item.value for item in EventType])
    parser.add_argument("--location")
    parser.add_argument("--description")


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}: {exc}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Calm Calendar command line interface.")
    parser.add_argument("--log-level", default=None)
    subparsers = parser.add_subparsers(dest="command", required=True)

    show_parser = subparsers.add_parser("show", help="Render the calendar for a view window.")
    show_parser.add_argument("--view", choices=[mode.value for mode in ViewMode], default=None)
    show_parser.add_argument("--date", dest="day", type=_iso_date, default=None, help="Anchor date, YYYY-MM-DD.")
    show_parser.add_argument("--offline", action="store_true", help="Skip the remote reload.")

    add_parser = subparsers.add_parser("add", help="Create an event.")
    _add_event_fields(add_parser, required=True)

    edit_parser = subparsers.add_parser("edit", help="Update fields of an event.")
    edit_parser.add_argument("event_id")
    _add_event_fields(edit_parser, required=False)

    remove_parser = subparsers.add_parser("remove", help="Delete an event.")
    remove_parser.add_argument("event_id")

    subparsers.add_parser("sync", help="Reload events from the remote store.")
    return parser


def _event_fields(args: argparse.Namespace) -> Dict[str, Any]:
    fields: Dict[str, Any] = {
        "title": args.title,
        "date": args.day,
        "startTime": args.start_time,
        "endTime": args.end_time,
        "type": args.event_type,
        "location": args.location,
        "description": args.description,
    }
    return {key: value for key, value in fields.items() if value is not None}


def run(argv: Optional[List[str]] = None, *, context: Optional[ServiceContext] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    context = context or ServiceContext()
    controller = context.calendar()
    try:
        if args.command == "show":
            if not args.offline:
                controller.load()
            if args.view:
                controller.set_view_mode(args.view)
            if args.day:
                controller.set_anchor(args.day)
            print(render_view(controller.snapshot()))
        elif args.command == "add":
            event = controller.create(_event_fields(args))
            print(f"Created {describe_event(event)}")
        elif args.command == "edit":
            event = controller.update(args.event_id, _event_fields(args))
            print(f"Updated {describe_event(event)}")
        elif args.command == "remove":
            controller.delete(args.event_id)
            print(f"Deleted {args.event_id}")
        elif args.command == "sync":
            events = controller.load()
            print(f"{len(events)} event(s), {controller.current_sync_state().value}")
        else:  # pragma: no cover - argparse enforces choices
            parser.print_help()
            return 2

        context.events.flush(timeout=context.settings.remote.timeout)
        if args.command != "show" and controller.notice:
            print(controller.notice)
        return 0
    except CalendarError as exc:
        logger.info("Command %s rejected: %s", args.command, exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        context.close()


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
