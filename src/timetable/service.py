"""Process-wide timetable state with an init / refresh / teardown lifecycle.

TimetableService holds the current snapshot and replaces it whole after each
successful fetch. Refreshes come from an hourly timer task and from explicit
calls to refresh(). Overlapping refreshes are not deduplicated: whichever
finishes last wins. stop() cancels the timer only; a fetch already running
in a worker thread completes on its own. A refresh that fails in an
unexpected way is logged and the timer keeps running.
"""

import asyncio
from collections.abc import Sequence

from src.timetable.config import TimetableConfig, get_config
from src.timetable.errors import TimetableError
from src.timetable.fetcher import SheetFetcher
from src.timetable.layout import build_grid
from src.timetable.logging import get_logger
from src.timetable.models import TimetableGrid, TimetableSnapshot

logger = get_logger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load timetable data. Please try again later."


class TimetableService:
    """Owns the current snapshot and the background refresh timer."""

    def __init__(
        self,
        fetcher: SheetFetcher | None = None,
        config: TimetableConfig | None = None,
    ) -> None:
        self.config = config or get_config()
        self.fetcher = fetcher or SheetFetcher(self.config)
        self.snapshot: TimetableSnapshot | None = None
        self.error: str | None = None
        self._in_flight = 0
        self._timer: asyncio.Task | None = None

    @property
    def loading(self) -> bool:
        """True while at least one refresh is in flight."""
        return self._in_flight > 0

    async def refresh(self) -> TimetableSnapshot | None:
        """Fetch a new snapshot and swap it in.

        On failure the previous snapshot is kept and a generic message is
        stored in self.error.

        Returns:
            The new snapshot, or None if the fetch failed.
        """
        self._in_flight += 1
        try:
            snapshot = await asyncio.to_thread(self.fetcher.fetch_snapshot)
        except TimetableError as e:
            self.error = LOAD_ERROR_MESSAGE
            logger.error("refresh_failed", error=str(e), type=type(e).__name__)
            return None
        finally:
            self._in_flight -= 1

        self.snapshot = snapshot
        self.error = None
        logger.info(
            "refresh_completed",
            occurrences=len(snapshot.occurrences),
            sheets_loaded=snapshot.sheets_loaded,
        )
        return snapshot

    async def _run_timer(self) -> None:
        while True:
            await asyncio.sleep(self.config.refresh_interval_seconds)
            try:
                await self.refresh()
            except Exception as e:
                logger.error("refresh_crashed", error=str(e), type=type(e).__name__)

    async def start(self) -> None:
        """Load the first snapshot and start the refresh timer."""
        await self.refresh()
        if self._timer is None:
            self._timer = asyncio.create_task(self._run_timer())
            logger.info(
                "refresh_timer_started",
                interval_seconds=self.config.refresh_interval_seconds,
            )

    async def stop(self) -> None:
        """Cancel the refresh timer."""
        if self._timer is None:
            return
        self._timer.cancel()
        try:
            await self._timer
        except asyncio.CancelledError:
            pass
        self._timer = None
        logger.info("refresh_timer_stopped")

    def grid(self, selection: Sequence[str]) -> TimetableGrid | None:
        """Lay out the current snapshot for a selection."""
        if self.snapshot is None:
            return None
        return build_grid(self.snapshot, selection)
