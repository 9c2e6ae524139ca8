from types import SimpleNamespace

from scripts.show_timetable import _report
from src.timetable.layout import build_grid
from src.timetable.models import ClassOccurrence, TimetableSnapshot
from src.timetable.selection import SelectionStore


def make_snapshot():
    return TimetableSnapshot(
        occurrences=[
            ClassOccurrence(
                course="CS101", section="A", instructor="X", room="R",
                day="Monday", time="8:00-8:45",
            )
        ],
        time_slots=["8:00-8:45"],
    )


def make_service(snapshot=None, error=None):
    return SimpleNamespace(
        snapshot=snapshot,
        error=error,
        grid=lambda selection: build_grid(snapshot, selection),
    )


def test_repeated_error_reported_once(tmp_path, capsys):
    store = SelectionStore(str(tmp_path))
    service = make_service(error="Failed to load timetable data.")

    state = _report(service, store, None, None)
    state = _report(service, store, *state)
    _report(service, store, *state)

    assert capsys.readouterr().err.count("Failed to load timetable data.") == 1


def test_new_snapshot_printed_once(tmp_path, capsys):
    store = SelectionStore(str(tmp_path))
    store.save(["CS101 - A"])
    service = make_service(snapshot=make_snapshot())

    state = _report(service, store, None, None)
    _report(service, store, *state)

    assert capsys.readouterr().out.count("CS101 (A)") == 1


def test_error_reported_again_after_recovery(tmp_path, capsys):
    store = SelectionStore(str(tmp_path))
    snapshot = make_snapshot()
    message = "Failed to load timetable data."

    state = _report(make_service(error=message), store, None, None)
    state = _report(make_service(snapshot=snapshot), store, *state)
    _report(make_service(snapshot=snapshot, error=message), store, *state)

    assert capsys.readouterr().err.count(message) == 2
