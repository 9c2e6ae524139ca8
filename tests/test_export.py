import asyncio

import pytest

from src.timetable.export import export_filename, export_image
from src.timetable.models import TimetableGrid


@pytest.mark.parametrize(
    "fmt,expected",
    [("png", "timetable.png"), ("jpg", "timetable.jpg"), ("JPEG", "timetable.jpeg")],
)
def test_export_filename(fmt, expected):
    assert export_filename(fmt) == expected


def test_unknown_format_rejected_before_launching_browser(config, tmp_path):
    grid = TimetableGrid(days=[], slots=[], rows={}, colors={})
    with pytest.raises(ValueError, match="gif"):
        asyncio.run(export_image(grid, "gif", str(tmp_path), config))
    assert not any(tmp_path.iterdir())
