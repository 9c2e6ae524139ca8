import pytest

from src.timetable.errors import SheetParseError
from src.timetable.parser import (
    decode_cell,
    extract_rows,
    extract_time_slots,
    unwrap_jsonp,
)

from tests.conftest import gviz


class TestUnwrapJsonp:
    def test_strips_wrapper(self):
        payload = unwrap_jsonp(gviz([["a"]]))
        assert payload["table"]["rows"] == [{"c": [{"v": "a"}]}]

    def test_missing_marker(self):
        with pytest.raises(SheetParseError, match="JSONP wrapper"):
            unwrap_jsonp('{"table": {"rows": []}}', "Monday")

    def test_empty_payload(self):
        with pytest.raises(SheetParseError, match="could not extract"):
            unwrap_jsonp("google.visualization.Query.setResponse()")

    def test_invalid_json(self):
        with pytest.raises(SheetParseError, match="invalid JSON") as exc:
            unwrap_jsonp("google.visualization.Query.setResponse({oops});", "Tuesday")
        assert exc.value.sheet == "Tuesday"

    def test_deeply_nested_payload(self):
        nested = "[" * 100000 + "]" * 100000
        text = f"google.visualization.Query.setResponse({nested});"
        with pytest.raises(SheetParseError, match="invalid JSON") as exc:
            unwrap_jsonp(text, "Monday")
        assert exc.value.sheet == "Monday"


class TestExtractRows:
    def test_null_cells_become_none(self):
        rows = extract_rows(unwrap_jsonp(gviz([["Room 1", None, "CS101(A)"]])))
        assert rows == [["Room 1", None, "CS101(A)"]]

    @pytest.mark.parametrize(
        "payload",
        [{}, {"table": None}, {"table": {"rows": []}}, {"table": {"rows": "x"}}],
    )
    def test_malformed_table(self, payload):
        with pytest.raises(SheetParseError):
            extract_rows(payload)


class TestExtractTimeSlots:
    def test_keeps_labels_with_separator(self):
        rows = [["title"], ["Room", "8:00-8:45", None, "", "Break", "9:30-10:15"]]
        assert extract_time_slots(rows) == ["8:00-8:45", "9:30-10:15"]

    def test_no_header_row(self):
        assert extract_time_slots([["title"]]) == []

    def test_non_string_header_ignored(self):
        assert extract_time_slots([[], [1, "1:00-1:45"]]) == ["1:00-1:45"]


class TestDecodeCell:
    def test_full_cell(self):
        content = decode_cell("CS101 (A)\nJane Doe")
        assert content.course == "CS101"
        assert content.section == "A"
        assert content.instructor == "Jane Doe"

    def test_no_section_or_instructor(self):
        content = decode_cell("Physics")
        assert content.section == "N/A"
        assert content.instructor == "N/A"

    def test_blank_instructor_line(self):
        assert decode_cell("MTH201(B)\n").instructor == "N/A"

    def test_only_first_parenthetical_removed(self):
        content = decode_cell("Intro (Lab)(C2)\nDr. X")
        assert content.section == "Lab"
        assert content.course == "Intro(C2)"

    @pytest.mark.parametrize("value", [None, "", "(A)\nSomeone", "   \nJane"])
    def test_no_occurrence(self, value):
        assert decode_cell(value) is None
