"""SheetFetcher - loads the timetable from the spreadsheet source.

Two-step fetch:
  1. GET the metadata endpoint:
       {"karachi": {"url": "https://docs.google.com/.../gviz/tq?...&gid=",
                    "codes": [{"name": "Monday", "gid": "0"}, ...]}}
  2. GET f"{url}{gid}" for every day, one after another.

A sheet that fails to download or parse is logged and skipped; the remaining
sheets still produce a snapshot. Only the metadata request is retried.
"""

from typing import Any

import requests
from pydantic import ValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from src.timetable.config import TimetableConfig, get_config
from src.timetable.errors import (
    MetadataFetchError,
    SheetError,
    SheetFetchError,
    TransientError,
)
from src.timetable.logging import get_logger
from src.timetable.models import SheetCode, SheetSource, TimetableSnapshot
from src.timetable.normalizer import build_snapshot
from src.timetable.parser import extract_rows, unwrap_jsonp

log = get_logger(__name__)


class SheetFetcher:
    """Fetches metadata and per-day sheets and builds a TimetableSnapshot."""

    def __init__(
        self,
        config: TimetableConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config or get_config()
        self.session = session or requests.Session()

    def _get(self, url: str, **kwargs: Any) -> requests.Response:
        return self.session.get(
            url, timeout=self.config.request_timeout_seconds, **kwargs
        )

    def _get_metadata_once(self) -> dict[str, Any]:
        url = self.config.metadata_url
        try:
            resp = self._get(
                url,
                headers={
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                    "Cache-Control": "no-cache",
                },
            )
        except (requests.ConnectionError, requests.Timeout) as e:
            log.warning("metadata_request_failed", url=url, error=str(e))
            raise TransientError(f"Metadata request failed: {e}") from e
        except requests.RequestException as e:
            raise MetadataFetchError(f"Failed to fetch metadata: {e}") from e

        if resp.status_code >= 500:
            log.warning("metadata_server_error", url=url, status=resp.status_code)
            raise TransientError(f"Metadata endpoint returned {resp.status_code}")
        if not resp.ok:
            raise MetadataFetchError(
                f"Failed to fetch metadata: {resp.status_code} {resp.reason}"
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise MetadataFetchError(f"Metadata is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise MetadataFetchError("Metadata is not a JSON object")
        return data

    def fetch_metadata(self) -> SheetSource:
        """Fetch the metadata document and return the configured region.

        Transient failures are retried up to metadata_retry_attempts times.

        Raises:
            MetadataFetchError: If the endpoint is unreachable, answers with a
                non-success status, or the region is missing or malformed.
        """
        fetch = retry(
            stop=stop_after_attempt(self.config.metadata_retry_attempts),
            wait=wait_fixed(self.config.metadata_retry_wait_seconds),
            retry=retry_if_exception_type(TransientError),
            reraise=True,
        )(self._get_metadata_once)

        try:
            data = fetch()
        except TransientError as e:
            raise MetadataFetchError(str(e)) from e

        region = self.config.region
        if region not in data:
            raise MetadataFetchError(f"Metadata has no region {region!r}")
        try:
            source = SheetSource.model_validate(data[region])
        except ValidationError as e:
            raise MetadataFetchError(f"Malformed metadata for {region!r}: {e}") from e

        log.info("metadata_fetched", region=region, sheets=len(source.codes))
        return source

    def fetch_sheet_text(self, source: SheetSource, code: SheetCode) -> str:
        """Download one sheet's raw JSONP text.

        Raises:
            SheetFetchError: On network failure or non-success status.
        """
        url = f"{source.url}{code.gid}"
        try:
            resp = self._get(url)
        except requests.RequestException as e:
            raise SheetFetchError(code.name, f"request failed: {e}") from e

        if not resp.ok:
            raise SheetFetchError(
                code.name, f"HTTP {resp.status_code} {resp.reason}"
            )
        return resp.text

    def fetch_sheets(self, source: SheetSource) -> list[tuple[str, list[list[Any]]]]:
        """Fetch and parse every sheet, skipping the ones that fail."""
        sheets: list[tuple[str, list[list[Any]]]] = []
        for code in source.codes:
            try:
                text = self.fetch_sheet_text(source, code)
                rows = extract_rows(unwrap_jsonp(text, code.name), code.name)
            except SheetError as e:
                log.error(
                    "sheet_skipped",
                    sheet=code.name,
                    gid=code.gid,
                    error=str(e),
                    type=type(e).__name__,
                )
                continue

            log.debug("sheet_fetched", sheet=code.name, rows=len(rows))
            sheets.append((code.name, rows))
        return sheets

    def fetch_snapshot(self) -> TimetableSnapshot:
        """Run a full fetch cycle.

        Raises:
            MetadataFetchError: If the metadata cannot be loaded.
            EmptyResultError: If no sheet loaded, or everything was filtered.
        """
        source = self.fetch_metadata()
        sheets = self.fetch_sheets(source)
        return build_snapshot(sheets, excluded_days=self.config.excluded_days)
