from src.timetable.models import ClassOccurrence, TimetableSnapshot
from src.timetable.selection import SelectionStore, available_classes, search_classes


def test_round_trip(tmp_path):
    store = SelectionStore(str(tmp_path))
    store.save(["CS101 - A", "MTH201 - B"])
    assert set(SelectionStore(str(tmp_path)).load()) == {"CS101 - A", "MTH201 - B"}


def test_missing_file_is_empty(tmp_path):
    assert SelectionStore(str(tmp_path / "nested")).load() == []


def test_corrupt_file_is_empty(tmp_path):
    store = SelectionStore(str(tmp_path))
    store.state_file.write_text("{not json", encoding="utf-8")
    assert store.load() == []


def test_non_list_is_empty(tmp_path):
    store = SelectionStore(str(tmp_path))
    store.state_file.write_text('{"CS101 - A": true}', encoding="utf-8")
    assert store.load() == []


def test_add_remove_toggle(tmp_path):
    store = SelectionStore(str(tmp_path))
    assert store.add("CS101 - A", "CS101 - A", "PHY - C") == ["CS101 - A", "PHY - C"]
    assert store.remove("CS101 - A") == ["PHY - C"]
    assert store.toggle("PHY - C") == []
    assert store.toggle("MTH - B") == ["MTH - B"]
    store.clear()
    assert not store.state_file.exists()
    assert store.load() == []


def test_available_and_search():
    occurrences = [
        ClassOccurrence(
            course=course, section=section, instructor="X", room="R", day="Monday",
            time="8:00-8:45",
        )
        for course, section in [("MTH201", "B"), ("CS101", "A"), ("CS101", "A")]
    ]
    snapshot = TimetableSnapshot(occurrences=occurrences, time_slots=["8:00-8:45"])
    classes = available_classes(snapshot)
    assert classes == ["CS101 - A", "MTH201 - B"]
    assert search_classes(classes, "cs1") == ["CS101 - A"]
    assert search_classes(classes, "") == classes
