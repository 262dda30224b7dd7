"""
Tests for the undo/redo history manager.
"""
import pytest

from utils.history_manager import HistoryManager, HistoryEntry


class Counter:
    """Tiny mutable target for undo/redo callables"""

    def __init__(self):
        self.value = 0

    def entry(self, amount, description=None):
        def redo():
            self.value += amount

        def undo():
            self.value -= amount

        redo()
        return HistoryEntry(description=description or f"Add {amount}", undo=undo, redo=redo)


@pytest.fixture
def history():
    return HistoryManager(max_history=5)


@pytest.fixture
def counter():
    return Counter()


# ══════════════════════════════════════════════════════════════════════════
# Push / undo / redo
# ══════════════════════════════════════════════════════════════════════════

class TestUndoRedo:

    def test_empty_history(self, history):
        assert not history.can_undo()
        assert not history.can_redo()
        assert history.undo() is False
        assert history.redo() is False
        assert history.get_current_description() == ""

    def test_undo_then_redo(self, history, counter):
        history.push(counter.entry(3))
        history.push(counter.entry(4))
        assert counter.value == 7

        assert history.undo() is True
        assert counter.value == 3
        assert history.can_redo()

        assert history.redo() is True
        assert counter.value == 7
        assert not history.can_redo()

    def test_push_discards_redo_branch(self, history, counter):
        history.push(counter.entry(1))
        history.push(counter.entry(2))
        history.undo()
        history.push(counter.entry(10, "Branch"))

        assert len(history) == 2
        assert not history.can_redo()
        assert history.get_current_description() == "Branch"
        assert counter.value == 11

    def test_overflow_drops_oldest(self, history, counter):
        for amount in range(1, 8):
            history.push(counter.entry(amount))

        assert len(history) == 5
        assert history.current_index == 4
        assert history.history[0].description == "Add 3"

        while history.undo():
            pass
        # The two oldest additions can no longer be reverted
        assert counter.value == 1 + 2

    def test_record_builds_entry(self, history):
        calls = []
        entry = history.record("Move", undo=lambda: calls.append('undo'), redo=lambda: calls.append('redo'))
        history.undo()
        history.redo()
        assert calls == ['undo', 'redo']
        assert entry.id
        assert entry.timestamp > 0

    def test_clear(self, history, counter):
        history.push(counter.entry(1))
        history.clear()
        assert len(history) == 0
        assert not history.can_undo()


# ══════════════════════════════════════════════════════════════════════════
# Descriptions and listeners
# ══════════════════════════════════════════════════════════════════════════

class TestDescriptionsAndListeners:

    def test_current_and_redo_descriptions(self, history, counter):
        history.push(counter.entry(1, "First"))
        history.push(counter.entry(2, "Second"))
        history.undo()
        assert history.get_current_description() == "First"
        assert history.get_redo_description() == "Second"

    def test_listener_receives_flags(self, history, counter):
        seen = []
        history.add_listener(lambda can_undo, can_redo: seen.append((can_undo, can_redo)))
        history.push(counter.entry(1))
        history.undo()
        history.redo()
        assert seen == [(True, False), (False, True), (True, False)]

    def test_failing_listener_does_not_block_others(self, history, counter):
        seen = []

        def broken(can_undo, can_redo):
            raise RuntimeError("listener failure")

        history.add_listener(broken)
        history.add_listener(lambda *flags: seen.append(flags))
        history.push(counter.entry(1))
        assert seen == [(True, False)]

    def test_remove_listener(self, history, counter):
        seen = []
        listener = lambda *flags: seen.append(flags)
        history.add_listener(listener)
        history.remove_listener(listener)
        history.push(counter.entry(1))
        assert seen == []
