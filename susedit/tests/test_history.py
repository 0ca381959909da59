from hypothesis import given
from hypothesis import strategies as st

from susedit.chart import BeatsTime, Note
from susedit.timeline import NotesSnapshot

from ..history import ChartHistory


def snapshot(i: int) -> NotesSnapshot:
    return (Note(BeatsTime(i), 0, id=1),)


def test_that_only_the_most_recent_snapshots_are_kept() -> None:
    history = ChartHistory()
    for i in range(201):
        assert history.push(snapshot(i))
    assert len(history) == 200
    assert history.entries[0] == snapshot(1)
    assert history.entries[-1] == snapshot(200)
    assert history.at_head


def test_that_pushing_the_current_snapshot_does_nothing() -> None:
    history = ChartHistory()
    assert history.push(snapshot(0))
    assert not history.push(snapshot(0))
    assert len(history) == 1


def test_that_pushing_after_an_undo_drops_the_redo_branch() -> None:
    history = ChartHistory()
    for i in range(3):
        history.push(snapshot(i))
    assert history.undo() == snapshot(1)
    assert history.steps_behind_head == 1
    history.push(snapshot(5))
    assert history.at_head
    assert history.redo() is None
    assert history.entries == [snapshot(0), snapshot(1), snapshot(5)]


def test_undo_and_redo_bounds() -> None:
    history = ChartHistory()
    assert history.undo() is None
    assert history.redo() is None
    history.push(snapshot(0))
    history.push(snapshot(1))
    assert history.undo() == snapshot(0)
    assert history.undo() is None
    assert history.index == 0
    assert history.redo() == snapshot(1)
    assert history.redo() is None
    assert history.index == 1


def test_that_history_keeps_copies() -> None:
    history = ChartHistory()
    notes = [Note(BeatsTime(0), 0, id=1)]
    history.push(notes)
    notes[0].lane = 3
    assert history.current == (Note(BeatsTime(0), 0, id=1),)


def test_from_entries() -> None:
    entries = [snapshot(i) for i in range(10)]
    history = ChartHistory.from_entries(entries, index=7, capacity=5)
    assert history.entries == entries[5:]
    assert history.current == snapshot(7)
    assert ChartHistory.from_entries(entries, index=2, capacity=5).index == 0
    assert ChartHistory.from_entries(entries, index=99).current == snapshot(9)
    assert ChartHistory.from_entries([], index=3).current is None


@given(st.lists(st.sampled_from(["push", "undo", "redo"]), max_size=60))
def test_that_the_index_always_points_to_an_entry(actions: list) -> None:
    history = ChartHistory(capacity=10)
    for i, action in enumerate(actions):
        if action == "push":
            history.push(snapshot(i))
            assert history.at_head
        elif action == "undo":
            history.undo()
        else:
            history.redo()
        assert len(history) <= 10
        if len(history):
            assert 0 <= history.index < len(history)


def test_that_a_push_after_an_undo_always_returns_to_the_head() -> None:
    history = ChartHistory()
    for i in range(3):
        history.push(snapshot(i))
    history.undo()
    assert not history.push(snapshot(1))
    assert history.at_head
    assert history.redo() is None
    assert history.entries == [snapshot(0), snapshot(1)]
