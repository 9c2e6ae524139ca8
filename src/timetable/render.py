"""HTML and plain-text rendering of a TimetableGrid.

The HTML is a single self-contained document (inline CSS, no external
assets) so the exporter can rasterise it offline.
"""

import html

from src.timetable.models import GridCell, TimetableGrid

EMPTY_BACKGROUND = "#f5f5f5"
EMPTY_COLOR = "#333"
CLASS_COLOR = "#fff"

GRID_SELECTOR = ".timetable-grid-container"

_STYLE = """
body { font-family: 'Segoe UI', Arial, sans-serif; margin: 0; padding: 16px; background: #fff; }
.timetable-grid-container { display: inline-block; min-width: 100%; }
.timetable-table { display: grid; border: 1px solid #ccc; }
.timetable-row { display: contents; }
.timetable-cell { border: 1px solid #ddd; padding: 6px; font-size: 12px; text-align: center; }
.timetable-header-cell { background: #2f3e4e; color: #fff; font-weight: 600; }
.timetable-day-separator .timetable-cell { background: #e8ecf1; font-weight: 700; text-align: left; }
.timetable-day-column-header { display: flex; flex-direction: column; gap: 4px; color: #555; }
.timetable-class-box + .timetable-class-box { border-top: 1px solid rgba(255,255,255,.5); margin-top: 4px; padding-top: 4px; }
.timetable-class-course { font-weight: 700; }
.timetable-message { padding: 32px; text-align: center; color: #555; }
"""

WELCOME_TITLE = "Welcome to your Timetable"
WELCOME_TEXT = (
    "Select one or more classes from the list on the left to display them on "
    "the grid."
)


def short_room(room: str) -> str:
    """Abbreviate long room names, e.g. "Academic Block 2" -> "AB 2"."""
    return room.replace("Academic Block", "AB")


def _e(text: object) -> str:
    return html.escape(str(text))


def _cell_html(cell: GridCell, colors: dict[str, str]) -> str:
    if cell.is_empty:
        background, color = EMPTY_BACKGROUND, EMPTY_COLOR
    else:
        background = colors.get(cell.occurrences[0].course, EMPTY_BACKGROUND)
        color = CLASS_COLOR

    classes = "timetable-cell timetable-class-cell" + (" empty" if cell.is_empty else "")
    parts = [
        f'<div class="{classes}" style="grid-column: span {cell.col_span}; '
        f'background-color: {background}; color: {color};">'
    ]
    for occurrence in cell.occurrences:
        parts.append(
            '<div class="timetable-class-box">'
            f'<div class="timetable-class-course">{_e(occurrence.course)}</div>'
            f'<div class="timetable-class-room">{_e(short_room(occurrence.room))}</div>'
            f'<div class="timetable-class-instructor">{_e(occurrence.instructor)}</div>'
            "</div>"
        )
    parts.append("</div>")
    return "".join(parts)


def render_grid_html(grid: TimetableGrid) -> str:
    """Render the grid fragment (no <html> wrapper)."""
    if not grid.selection:
        return (
            '<div class="timetable-grid-container"><div class="timetable-message">'
            f"<h3>{WELCOME_TITLE}</h3><p>{WELCOME_TEXT}</p></div></div>"
        )

    out = [
        '<div class="timetable-grid-container">',
        '<div class="timetable-table" style="grid-template-columns: '
        f'120px repeat({len(grid.slots)}, 1fr);">',
    ]

    # Header rows: slot numbers, then slot labels
    out.append('<div class="timetable-row timetable-header-row">')
    out.append('<div class="timetable-cell timetable-header-cell">Slots</div>')
    for index, _slot in enumerate(grid.slots, start=1):
        out.append(f'<div class="timetable-cell timetable-header-cell">{index}</div>')
    out.append("</div>")

    out.append('<div class="timetable-row timetable-header-row">')
    out.append('<div class="timetable-cell timetable-header-cell">Time</div>')
    for slot in grid.slots:
        out.append(f'<div class="timetable-cell timetable-header-cell">{_e(slot)}</div>')
    out.append("</div>")

    for day in grid.days:
        out.append(
            '<div class="timetable-row timetable-day-separator">'
            f'<div class="timetable-cell" style="grid-column: 1 / -1;">{_e(day)}</div>'
            "</div>"
        )
        out.append('<div class="timetable-row timetable-body-row">')
        out.append(
            '<div class="timetable-cell timetable-day-column-header">'
            "<span>Subject</span><span>Classroom</span><span>Teacher</span></div>"
        )
        for cell in grid.rows[day]:
            out.append(_cell_html(cell, grid.colors))
        out.append("</div>")

    out.append("</div></div>")
    return "\n".join(out)


def render_html(grid: TimetableGrid, title: str = "Timetable") -> str:
    """Render a complete HTML document for the grid."""
    return (
        "<!doctype html>\n"
        '<html lang="en"><head><meta charset="utf-8">'
        f"<title>{_e(title)}</title><style>{_STYLE}</style></head>"
        f"<body>{render_grid_html(grid)}</body></html>\n"
    )


def render_text(grid: TimetableGrid) -> str:
    """Render the grid as a plain-text listing, one line per cell."""
    if not grid.selection:
        return f"{WELCOME_TITLE}\n{WELCOME_TEXT}\n"

    lines: list[str] = []
    for day in grid.days:
        lines.append(day)
        slot_index = 0
        for cell in grid.rows[day]:
            first = grid.slots[slot_index]
            last = grid.slots[slot_index + cell.col_span - 1]
            slot_index += cell.col_span
            if cell.is_empty:
                continue
            start = first.split("-")[0].strip()
            end = last.split("-")[-1].strip()
            for occurrence in cell.occurrences:
                lines.append(
                    f"  {start:>5}-{end:<5}  {occurrence.course} ({occurrence.section})"
                    f"  {short_room(occurrence.room)}  {occurrence.instructor}"
                )
        lines.append("")
    return "\n".join(lines)
