"""Grid layout: orders days and slots, and merges runs into spanning cells.

Slot labels carry no AM/PM marker. Hours below 7 are read as afternoon
hours, so "1:00-1:45" sorts after "12:00-12:45".

Merging rules per day, scanning slots left to right:
  - an occupied slot whose first course name contains "lab" spans 3 slots
  - any other occupied slot extends while the next slot's first occurrence
    has the same course, section and instructor
  - spans are clamped to the slots remaining
  - an empty slot is a single empty cell
"""

from collections.abc import Iterable, Sequence

from src.timetable.models import (
    ClassOccurrence,
    GridCell,
    TimetableGrid,
    TimetableSnapshot,
)

DAY_ORDER: tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

PALETTE: tuple[str, ...] = (
    "#4e79a7",
    "#f28e2c",
    "#e15759",
    "#76b7b2",
    "#59a14f",
    "#edc949",
    "#af7aa1",
    "#ff9da7",
    "#9c755f",
    "#bab0ab",
)

PM_HOUR_THRESHOLD = 7
LAB_SPAN = 3


def day_sort_key(day: str) -> int:
    """Position in the week; unknown labels sort after Sunday."""
    try:
        return DAY_ORDER.index(day)
    except ValueError:
        return len(DAY_ORDER)


def _to_int(text: str) -> int | None:
    text = text.strip()
    if not text:
        return 0
    try:
        return int(text)
    except ValueError:
        return None


def slot_start_minutes(slot: str) -> int:
    """Minutes since midnight of a slot's start, e.g. "1:00-1:45" -> 780.

    Labels without an "HH:MM" start count as 0.
    """
    start = slot.split("-")[0]
    if ":" not in start:
        return 0

    parts = start.split(":")
    hours = _to_int(parts[0])
    if hours is None:
        return 0
    minutes = _to_int(parts[1]) or 0

    if hours < PM_HOUR_THRESHOLD:
        hours += 12
    return hours * 60 + minutes


def sort_days(days: Iterable[str]) -> list[str]:
    return sorted(days, key=day_sort_key)


def sort_slots(slots: Iterable[str]) -> list[str]:
    return sorted(slots, key=slot_start_minutes)


def filter_selected(
    occurrences: Iterable[ClassOccurrence], selection: Iterable[str]
) -> list[ClassOccurrence]:
    """Keep occurrences whose "course - section" key is selected."""
    selected = set(selection)
    return [o for o in occurrences if o.class_key in selected]


def assign_colors(selection: Sequence[str]) -> dict[str, str]:
    """Give each selected course a palette colour, in selection order.

    Sections of the same course share a colour. The palette cycles.
    """
    colors: dict[str, str] = {}
    for key in selection:
        course = key.split(" - ")[0]
        if course not in colors:
            colors[course] = PALETTE[len(colors) % len(PALETTE)]
    return colors


def _same_class(a: ClassOccurrence, b: ClassOccurrence) -> bool:
    return (
        a.course == b.course
        and a.section == b.section
        and a.instructor == b.instructor
    )


def layout_day(
    buckets: dict[str, list[ClassOccurrence]], slots: Sequence[str]
) -> list[GridCell]:
    """Merge one day's slot buckets into cells whose spans sum to len(slots)."""
    cells: list[GridCell] = []
    i = 0
    while i < len(slots):
        slot = slots[i]
        in_slot = buckets.get(slot, [])

        if not in_slot:
            cells.append(GridCell(slot=slot))
            i += 1
            continue

        first = in_slot[0]
        col_span = 1
        if "lab" in first.course.lower():
            col_span = LAB_SPAN
        else:
            for next_slot in slots[i + 1 :]:
                next_in_slot = buckets.get(next_slot, [])
                if next_in_slot and _same_class(next_in_slot[0], first):
                    col_span += 1
                else:
                    break

        col_span = min(col_span, len(slots) - i)
        cells.append(
            GridCell(
                slot=slot,
                col_span=col_span,
                occurrences=list(in_slot),
                is_empty=False,
            )
        )
        i += col_span
    return cells


def build_grid(
    snapshot: TimetableSnapshot, selection: Sequence[str]
) -> TimetableGrid:
    """Lay out the selected classes of a snapshot.

    Days and slots come from every occurrence in the snapshot, so the grid
    keeps the same columns whatever is selected.
    """
    occurrences = snapshot.occurrences
    days = sort_days(dict.fromkeys(o.day for o in occurrences))
    slots = sort_slots(dict.fromkeys(o.time for o in occurrences))

    schedule: dict[str, dict[str, list[ClassOccurrence]]] = {
        day: {slot: [] for slot in slots} for day in days
    }
    for occurrence in filter_selected(occurrences, selection):
        schedule[occurrence.day][occurrence.time].append(occurrence)

    return TimetableGrid(
        days=days,
        slots=slots,
        rows={day: layout_day(schedule[day], slots) for day in days},
        colors=assign_colors(selection),
        selection=list(selection),
    )
