"""Flatten decoded sheets into a TimetableSnapshot."""

from collections.abc import Iterable, Sequence
from typing import Any

from src.timetable.errors import EmptyReason, EmptyResultError
from src.timetable.logging import get_logger
from src.timetable.models import ClassOccurrence, TimetableSnapshot
from src.timetable.parser import FIRST_DATA_ROW, decode_cell, extract_time_slots

log = get_logger(__name__)

DEFAULT_EXCLUDED_DAYS = ("Saturday",)


def normalize_sheet(
    day: str, rows: list[list[Any]]
) -> tuple[list[ClassOccurrence], list[str]]:
    """Turn one day's rows into occurrences.

    Args:
        day: Day name of the sheet (used as-is, e.g. "Monday").
        rows: Cell values per row, as returned by extract_rows().

    Returns:
        (occurrences, time slot labels of the header row)
    """
    time_slots = extract_time_slots(rows)
    occurrences: list[ClassOccurrence] = []

    for row in rows[FIRST_DATA_ROW:]:
        room = (row[0] if row else None) or "N/A"

        for col_index, value in enumerate(row):
            if col_index < 1 or not value:
                continue
            if col_index - 1 >= len(time_slots):
                continue

            content = decode_cell(value)
            if content is None:
                continue

            occurrences.append(
                ClassOccurrence(
                    course=content.course,
                    section=content.section,
                    instructor=content.instructor,
                    room=str(room),
                    day=day,
                    time=time_slots[col_index - 1],
                )
            )

    return occurrences, time_slots


def build_snapshot(
    sheets: Iterable[tuple[str, list[list[Any]]]],
    excluded_days: Sequence[str] = DEFAULT_EXCLUDED_DAYS,
) -> TimetableSnapshot:
    """Combine accepted sheets into a snapshot.

    Args:
        sheets: (day name, rows) for every sheet that parsed successfully.
        excluded_days: Day names whose occurrences are dropped.

    Raises:
        EmptyResultError: If no occurrences remain.
    """
    occurrences: list[ClassOccurrence] = []
    time_slots: dict[str, None] = {}
    sheets_loaded = 0

    for day, rows in sheets:
        sheets_loaded += 1
        sheet_occurrences, sheet_slots = normalize_sheet(day, rows)
        occurrences.extend(sheet_occurrences)
        time_slots.update(dict.fromkeys(sheet_slots))
        log.debug(
            "sheet_normalized",
            day=day,
            occurrences=len(sheet_occurrences),
            slots=len(sheet_slots),
        )

    excluded = set(excluded_days)
    kept = [o for o in occurrences if o.day not in excluded]

    if not kept:
        reason = (
            EmptyReason.NO_SHEETS_LOADED
            if sheets_loaded == 0
            else EmptyReason.ALL_FILTERED
        )
        log.error("snapshot_empty", reason=reason.value, sheets_loaded=sheets_loaded)
        raise EmptyResultError(reason)

    log.info(
        "snapshot_built",
        sheets_loaded=sheets_loaded,
        occurrences=len(kept),
        dropped=len(occurrences) - len(kept),
        time_slots=len(time_slots),
    )
    return TimetableSnapshot(
        occurrences=kept,
        time_slots=list(time_slots),
        sheets_loaded=sheets_loaded,
    )
