"""Error hierarchy for timetable fetching and parsing.

Per-sheet errors (SheetFetchError, SheetParseError) are recoverable: the
fetcher logs them and moves on to the next sheet. MetadataFetchError and
EmptyResultError are surfaced to the caller.

TransientError marks failures worth retrying, so tenacity decorators can
classify them:
    retry=retry_if_exception_type(TransientError)
"""

from enum import Enum


class TimetableError(Exception):
    """Base exception for all timetable errors."""

    pass


class TransientError(TimetableError):
    """Temporary network failure that may succeed on retry.

    Examples: connection refused, timeouts, 503 Service Unavailable.
    """

    pass


class MetadataFetchError(TimetableError):
    """Metadata endpoint unreachable, non-success or malformed."""

    pass


class SheetError(TimetableError):
    """Failure tied to a single day's sheet."""

    def __init__(self, sheet: str, message: str) -> None:
        super().__init__(f"{sheet}: {message}")
        self.sheet = sheet


class SheetFetchError(SheetError):
    """Network or HTTP status failure while fetching one sheet."""

    pass


class SheetParseError(SheetError):
    """Sheet payload is missing its JSONP wrapper or is not well-formed."""

    pass


class EmptyReason(str, Enum):
    NO_SHEETS_LOADED = "no_sheets_loaded"
    ALL_FILTERED = "all_filtered"


class EmptyResultError(TimetableError):
    """No occurrences left to show.

    The reason distinguishes "every sheet failed" from "sheets loaded but
    every occurrence was filtered out".
    """

    def __init__(self, reason: EmptyReason) -> None:
        if reason is EmptyReason.NO_SHEETS_LOADED:
            message = (
                "No timetable data could be loaded. All sheets failed to load "
                "or were empty."
            )
        else:
            message = (
                "Timetable data was loaded, but no valid classes were found "
                "after filtering."
            )
        super().__init__(message)
        self.reason = reason
