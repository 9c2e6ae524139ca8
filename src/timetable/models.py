"""Pydantic models for timetable data.

All data structures use Pydantic v2 for validation and serialization.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


def class_key(course: str, section: str) -> str:
    """Selection key for a class, e.g. "CS101 - A"."""
    return f"{course} - {section}"


class SheetCode(BaseModel):
    """One day's sheet in the metadata document."""

    name: str  # Day name, e.g. "Monday"
    gid: str  # Sheet gid appended to the base URL


class SheetSource(BaseModel):
    """One region of the metadata document: base URL plus per-day sheets."""

    url: str
    codes: list[SheetCode]


class CellContent(BaseModel):
    """Fields decoded from a "COURSE(SECTION)\\nInstructor" cell."""

    course: str
    section: str = "N/A"
    instructor: str = "N/A"


class ClassOccurrence(BaseModel):
    """A single class instance at a given day and time slot."""

    model_config = ConfigDict(frozen=True)

    course: str
    section: str
    instructor: str
    room: str  # From column 0 of the sheet row
    day: str  # Sheet name, e.g. "Monday"
    time: str  # Slot label, e.g. "1:00-1:45"

    @property
    def class_key(self) -> str:
        return class_key(self.course, self.section)


class TimetableSnapshot(BaseModel):
    """Result of one fetch cycle. Replaced wholesale on refresh."""

    model_config = ConfigDict(frozen=True)

    occurrences: list[ClassOccurrence]
    time_slots: list[str]  # Unique labels, first-seen order
    sheets_loaded: int = 0
    fetched_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class GridCell(BaseModel):
    """One rendered cell of a day row, possibly spanning several slots."""

    slot: str
    col_span: int = Field(default=1, ge=1)
    occurrences: list[ClassOccurrence] = []
    is_empty: bool = True


class TimetableGrid(BaseModel):
    """Laid-out timetable for a selection, ready for rendering."""

    days: list[str]
    slots: list[str]
    rows: dict[str, list[GridCell]]
    colors: dict[str, str]  # Course name -> hex colour
    selection: list[str] = []
