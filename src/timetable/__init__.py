"""Weekly class timetable built from Google Sheets day sheets.

Fetches the per-day sheets, normalises their cells into class occurrences,
lays out the selected classes as a grid and exports it as an image.
"""

from src.timetable.fetcher import SheetFetcher
from src.timetable.layout import build_grid
from src.timetable.models import ClassOccurrence, GridCell, TimetableSnapshot
from src.timetable.selection import SelectionStore
from src.timetable.service import TimetableService

__all__ = [
    "SheetFetcher",
    "build_grid",
    "ClassOccurrence",
    "GridCell",
    "TimetableSnapshot",
    "SelectionStore",
    "TimetableService",
]
