"""Parsing of Google Sheets gviz responses.

The sheet endpoint answers with JSONP rather than JSON:

    /*O_o*/
    google.visualization.Query.setResponse({"version":"0.6", ..., "table": {
        "cols": [...],
        "rows": [{"c": [{"v": "Room 1"}, null, {"v": "CS101(A)\\nJane Doe"}]}, ...]
    }});

Row layout inside a day's sheet:
    row 0 -> title row, ignored
    row 1 -> header row, time-slot labels such as "8:00-8:45"
    row 2+ -> one row per room; column 0 is the room name, the remaining
              columns hold "COURSE(SECTION)\\nInstructor" cells
"""

import json
import re
from typing import Any

from src.timetable.errors import SheetParseError
from src.timetable.models import CellContent

JSONP_MARKER = "google.visualization.Query.setResponse"

HEADER_ROW = 1
FIRST_DATA_ROW = 2
SLOT_SEPARATOR = "-"

_SECTION_RE = re.compile(r"\(([^)]+)\)")
_SECTION_STRIP_RE = re.compile(r"\s*\([^)]+\)")


def unwrap_jsonp(text: str, sheet: str = "") -> dict[str, Any]:
    """Strip the setResponse(...) wrapper and decode the JSON inside.

    Raises:
        SheetParseError: If the marker is missing or the payload is not JSON.
    """
    if JSONP_MARKER not in text:
        raise SheetParseError(
            sheet, "response did not contain expected JSONP wrapper"
        )

    json_text = text[text.find("(") + 1 : text.rfind(")")]
    if not json_text:
        raise SheetParseError(sheet, "could not extract JSON from response")

    try:
        payload = json.loads(json_text)
    except (ValueError, RecursionError) as e:
        raise SheetParseError(sheet, f"invalid JSON payload: {e}") from e

    if not isinstance(payload, dict):
        raise SheetParseError(sheet, "payload is not a JSON object")
    return payload


def extract_rows(payload: dict[str, Any], sheet: str = "") -> list[list[Any]]:
    """Flatten table.rows[].c[].v into a list of cell values per row.

    Null cells become None.

    Raises:
        SheetParseError: If table.rows is missing, not a list or empty.
    """
    table = payload.get("table")
    rows = table.get("rows") if isinstance(table, dict) else None
    if not isinstance(rows, list) or not rows:
        raise SheetParseError(sheet, "sheet is empty or has a malformed structure")

    result: list[list[Any]] = []
    for row in rows:
        cells = row.get("c") if isinstance(row, dict) else None
        if not isinstance(cells, list):
            result.append([])
            continue
        result.append(
            [cell.get("v") if isinstance(cell, dict) else None for cell in cells]
        )
    return result


def extract_time_slots(rows: list[list[Any]]) -> list[str]:
    """Read the slot labels from the header row.

    Only string values containing the separator are kept, and the kept
    labels are compacted: data column N maps to label N - 1.
    """
    if len(rows) <= HEADER_ROW:
        return []
    return [
        value
        for value in rows[HEADER_ROW]
        if isinstance(value, str) and SLOT_SEPARATOR in value
    ]


def decode_cell(value: Any) -> CellContent | None:
    """Decode a "COURSE(SECTION)\\nInstructor Name" cell.

    Returns None for absent cells and cells without a course.
    """
    if value is None or value == "":
        return None

    lines = str(value).split("\n")
    course_and_section = lines[0]
    instructor = lines[1] if len(lines) > 1 and lines[1] else "N/A"

    match = _SECTION_RE.search(course_and_section)
    section = match.group(1) if match else "N/A"
    course = _SECTION_STRIP_RE.sub("", course_and_section, count=1).strip()

    if not course:
        return None
    return CellContent(course=course, section=section, instructor=instructor)
