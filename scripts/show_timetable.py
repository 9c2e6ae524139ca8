"""Show the weekly timetable for the selected classes.

Standalone CLI script. Fetches the day sheets, applies the saved class
selection and prints the timetable, writes it as HTML, or exports an image.

Run with: python scripts/show_timetable.py
List:     python scripts/show_timetable.py --list
Search:   python scripts/show_timetable.py --search cs10
Select:   python scripts/show_timetable.py --select "CS101 - A" --select "PHY Lab - B"
Deselect: python scripts/show_timetable.py --deselect "CS101 - A"
HTML:     python scripts/show_timetable.py --html data/export/timetable.html
Image:    python scripts/show_timetable.py --export png
Watch:    python scripts/show_timetable.py --watch

Exit codes:
  0 = success
  1 = error (message on stderr)
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Add project root to path for src imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.timetable.config import get_config  # noqa: E402
from src.timetable.export import IMAGE_TYPES, export_image  # noqa: E402
from src.timetable.logging import setup_logging  # noqa: E402
from src.timetable.models import TimetableSnapshot  # noqa: E402
from src.timetable.render import render_html, render_text  # noqa: E402
from src.timetable.selection import (  # noqa: E402
    SelectionStore,
    available_classes,
    search_classes,
)
from src.timetable.service import TimetableService  # noqa: E402


def _log(msg: str) -> None:
    """Write diagnostic messages to stderr so stdout stays clean."""
    print(msg, file=sys.stderr)


def _parse_args() -> argparse.Namespace:
    """Parse CLI arguments using argparse."""
    parser = argparse.ArgumentParser(
        description="Show the weekly class timetable from the spreadsheet source.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--select",
        action="append",
        default=[],
        metavar="CLASS",
        help='Add a class to the saved selection, e.g. "CS101 - A". Repeatable.',
    )
    parser.add_argument(
        "--deselect",
        action="append",
        default=[],
        metavar="CLASS",
        help="Remove a class from the saved selection. Repeatable.",
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Clear the saved selection before applying --select.",
    )

    output_group = parser.add_mutually_exclusive_group()
    output_group.add_argument(
        "--list",
        action="store_true",
        help="List every class available in the timetable.",
    )
    output_group.add_argument(
        "--search",
        type=str,
        default=None,
        help="List classes whose name contains the query (case-insensitive).",
    )
    output_group.add_argument(
        "--html",
        type=str,
        default=None,
        metavar="PATH",
        help="Write the timetable as a standalone HTML file.",
    )
    output_group.add_argument(
        "--export",
        choices=sorted(IMAGE_TYPES),
        default=None,
        help="Export the timetable as an image (timetable.<ext>).",
    )
    output_group.add_argument(
        "--watch",
        action="store_true",
        help="Reprint the timetable after every background refresh.",
    )

    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory for --export (default: TIMETABLE_EXPORT_DIR).",
    )
    return parser.parse_args()


def _update_selection(store: SelectionStore, args: argparse.Namespace) -> list[str]:
    if args.clear:
        store.clear()
    if args.select:
        store.add(*args.select)
    if args.deselect:
        store.remove(*args.deselect)
    return store.load()


def _report(
    service: TimetableService,
    store: SelectionStore,
    last_snapshot: TimetableSnapshot | None,
    last_error: str | None,
) -> tuple[TimetableSnapshot | None, str | None]:
    """Print a new snapshot, or a new error message, once each.

    Returns:
        The (snapshot, error) pair to compare against on the next poll.
    """
    if service.snapshot is not None and service.snapshot is not last_snapshot:
        print(render_text(service.grid(store.load())), flush=True)
    elif service.error and service.error != last_error:
        _log(service.error)
    return service.snapshot, service.error


async def _watch(service: TimetableService, store: SelectionStore) -> None:
    """Print the timetable after each refresh until interrupted."""
    await service.start()
    last_snapshot, last_error = None, None
    try:
        while True:
            last_snapshot, last_error = _report(
                service, store, last_snapshot, last_error
            )
            await asyncio.sleep(60)
    finally:
        await service.stop()


async def _main() -> int:
    args = _parse_args()
    config = get_config()
    setup_logging(json_output=config.log_json, log_level=config.log_level)

    store = SelectionStore(config.state_dir)
    selection = _update_selection(store, args)

    service = TimetableService(config=config)

    if args.watch:
        await _watch(service, store)
        return 0

    _log("Loading timetable...")
    snapshot = await service.refresh()
    if snapshot is None:
        _log(f"Error: {service.error}")
        return 1

    if args.list or args.search is not None:
        classes = available_classes(snapshot)
        if args.search is not None:
            classes = search_classes(classes, args.search)
        for name in classes:
            marker = "*" if name in selection else " "
            print(f"{marker} {name}")
        return 0

    grid = service.grid(selection)

    if args.html:
        path = Path(args.html)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_html(grid), encoding="utf-8")
        _log(f"Wrote {path}")
        return 0

    if args.export:
        path = await export_image(grid, args.export, args.output_dir, config)
        _log(f"Wrote {path}")
        return 0

    print(render_text(grid))
    return 0


def main() -> None:
    try:
        sys.exit(asyncio.run(_main()))
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    main()
