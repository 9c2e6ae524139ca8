import json

import pytest

from src.timetable.config import TimetableConfig

SHEET_URL = "https://sheets.example.com/gviz/tq?tqx=out:json&gid="
METADATA_URL = "https://timetable.example.com/api/data"


def gviz(rows):
    """Wrap row values in a gviz JSONP response like Google Sheets sends."""
    payload = {
        "version": "0.6",
        "status": "ok",
        "table": {
            "rows": [
                {"c": [None if v is None else {"v": v} for v in row]} for row in rows
            ]
        },
    }
    return (
        "/*O_o*/\ngoogle.visualization.Query.setResponse("
        + json.dumps(payload)
        + ");"
    )


def day_sheet(*data_rows, header=("8:00-8:45", "8:45-9:30", "9:30-10:15")):
    return gviz([["Timetable"], ["Room", *header], *data_rows])


class FakeResponse:
    def __init__(self, status_code=200, text="", json_data=None):
        self.status_code = status_code
        self.text = text
        self._json = json_data
        self.reason = "OK" if status_code < 400 else "Error"

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._json is None:
            return json.loads(self.text)
        return self._json


class FakeSession:
    """Maps URLs to FakeResponse objects or exceptions to raise."""

    def __init__(self, routes):
        self.routes = routes
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append(url)
        result = self.routes[url]
        if isinstance(result, list):
            result = result.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


def metadata(codes, region="karachi"):
    return FakeResponse(
        json_data={
            region: {
                "url": SHEET_URL,
                "codes": [{"name": name, "gid": gid} for name, gid in codes],
            }
        }
    )


@pytest.fixture
def config(tmp_path):
    return TimetableConfig(
        metadata_url=METADATA_URL,
        metadata_retry_wait_seconds=0,
        state_dir=str(tmp_path / "state"),
        export_dir=str(tmp_path / "export"),
        _env_file=None,
    )
