"""Tests for debounced toast coalescing and the toast queue."""

import asyncio
from datetime import date

import pytest

from sprintboard.config import BoardConfig
from sprintboard.realtime.coalescer import ToastCoalescer, format_change, section_for_field
from sprintboard.realtime.events import FieldChange, ItemRef, ItemUpdateEvent
from sprintboard.realtime.scheduling import ManualScheduler
from sprintboard.realtime.toasts import ToastQueue
from sprintboard.workflow.models import ToastNotification


def _event(item_id="PROJ-101", field="status", to="In Progress", title="Fix login"):
    return ItemUpdateEvent(
        type="item.status_changed",
        item=ItemRef(id=item_id, title=title, assignee_id="u-alice"),
        change=FieldChange(field=field, to_value=to),
    )


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def queue():
    return ToastQueue()


@pytest.fixture
def coalescer(queue, scheduler):
    return ToastCoalescer(queue, BoardConfig(debounce_seconds=3.0), scheduler)


# ---------------------------------------------------------------------------
# format_change
# ---------------------------------------------------------------------------


class TestFormatChange:
    def test_status(self):
        assert format_change(FieldChange("status", "todo", "Done")) == "Status changed to Done"

    def test_assignee(self):
        assert format_change(FieldChange("assignee", None, "Bob")) == "Assigned to Bob"

    def test_due_date_from_iso_string(self):
        change = FieldChange("dueDate", None, "2026-03-14T09:30:00")
        assert format_change(change) == "Due date changed to 2026-03-14"

    def test_due_date_from_date(self):
        change = FieldChange("dueDate", None, date(2026, 3, 14))
        assert format_change(change) == "Due date changed to 2026-03-14"

    def test_comment(self):
        assert format_change(FieldChange("comment", None, "hi")) == "New comment added"

    def test_generic_field(self):
        assert format_change(FieldChange("priority", "low", "high")) == "priority was updated"

    def test_custom_messages(self):
        messages = {**BoardConfig().messages, "status": "Now {status}"}
        assert format_change(FieldChange("status", None, "Done"), messages) == "Now Done"


class TestSectionForField:
    @pytest.mark.parametrize(
        "field,section",
        [("status", "status"), ("assignee", "assignee"), ("dueDate", "dueDate"), ("comment", "title")],
    )
    def test_mapping(self, field, section):
        assert section_for_field(field) == section


# ---------------------------------------------------------------------------
# Coalescing
# ---------------------------------------------------------------------------


class TestCoalescing:
    def test_nothing_delivered_before_window_expires(self, coalescer, queue, scheduler):
        coalescer.add(_event())
        scheduler.advance(2.9)
        assert len(queue) == 0
        assert coalescer.pending_item_ids() == ["PROJ-101"]

    def test_single_event_delivered_after_window(self, coalescer, queue, scheduler):
        coalescer.add(_event())
        scheduler.advance(3.0)
        toasts = queue.snapshot()
        assert len(toasts) == 1
        assert toasts[0].item_id == "PROJ-101"
        assert toasts[0].title == "Fix login"
        assert toasts[0].changes == ["Status changed to In Progress"]
        assert toasts[0].highlight_section == "status"

    def test_burst_becomes_one_toast(self, coalescer, queue, scheduler):
        coalescer.add(_event(field="status", to="In Progress"))
        scheduler.advance(1.0)
        coalescer.add(_event(field="assignee", to="Bob"))

        scheduler.advance(2.5)  # t=3.5, the first timer would have fired here
        assert len(queue) == 0

        scheduler.advance(0.5)  # t=4.0
        toasts = queue.snapshot()
        assert len(toasts) == 1
        assert toasts[0].changes == ["Status changed to In Progress", "Assigned to Bob"]

    def test_identical_summaries_listed_once(self, coalescer, queue, scheduler):
        coalescer.add(_event(to="Done"))
        coalescer.add(_event(to="Done"))
        coalescer.add(_event(field="comment", to="a"))
        coalescer.add(_event(field="comment", to="b"))
        scheduler.advance(3.0)
        assert queue.snapshot()[0].changes == ["Status changed to Done", "New comment added"]

    def test_highlight_follows_last_trigger(self, coalescer, queue, scheduler):
        coalescer.add(_event(field="status"))
        coalescer.add(_event(field="comment", to="x"))
        scheduler.advance(3.0)
        assert queue.snapshot()[0].highlight_section == "title"

    def test_items_debounced_independently(self, coalescer, queue, scheduler):
        coalescer.add(_event(item_id="PROJ-101"))
        scheduler.advance(2.0)
        coalescer.add(_event(item_id="PROJ-102", title="Other"))
        scheduler.advance(1.0)
        assert [t.item_id for t in queue] == ["PROJ-101"]
        scheduler.advance(2.0)
        assert [t.item_id for t in queue] == ["PROJ-102", "PROJ-101"]

    def test_event_after_delivery_starts_fresh_burst(self, coalescer, queue, scheduler):
        coalescer.add(_event(to="In Progress"))
        scheduler.advance(3.0)
        coalescer.add(_event(to="Done"))
        scheduler.advance(3.0)

        newest, oldest = queue.snapshot()
        assert oldest.changes == ["Status changed to In Progress"]
        assert newest.changes == ["Status changed to Done"]
        assert newest.id != oldest.id

    def test_latest_title_wins(self, coalescer, queue, scheduler):
        coalescer.add(_event(title="Old title"))
        coalescer.add(_event(title="New title"))
        scheduler.advance(3.0)
        assert queue.snapshot()[0].title == "New title"

    def test_only_one_timer_live_per_item(self, coalescer, scheduler):
        for _ in range(5):
            coalescer.add(_event())
        assert scheduler.pending == 1


class TestFlushAndCancel:
    def test_flush_delivers_everything_now(self, coalescer, queue, scheduler):
        coalescer.add(_event(item_id="PROJ-101"))
        coalescer.add(_event(item_id="PROJ-102"))
        assert coalescer.flush() == 2
        assert len(queue) == 2
        assert scheduler.advance(10.0) == 0
        assert len(queue) == 2

    def test_cancel_all_drops_pending(self, coalescer, queue, scheduler):
        coalescer.add(_event())
        coalescer.cancel_all()
        scheduler.advance(10.0)
        assert len(queue) == 0
        assert coalescer.pending_item_ids() == []


@pytest.mark.slow
class TestRealLoop:
    @pytest.mark.asyncio
    async def test_default_window_on_event_loop(self):
        queue = ToastQueue()
        coalescer = ToastCoalescer(queue)
        coalescer.add(_event(field="status"))
        await asyncio.sleep(1.0)
        coalescer.add(_event(field="assignee", to="Bob"))
        await asyncio.sleep(2.5)
        assert len(queue) == 0
        await asyncio.sleep(1.0)
        assert len(queue) == 1
        assert len(queue.snapshot()[0].changes) == 2


# ---------------------------------------------------------------------------
# ToastQueue
# ---------------------------------------------------------------------------


class TestToastQueue:
    def _toast(self, toast_id):
        return ToastNotification(id=toast_id, item_id="PROJ-101", title="t")

    def test_newest_first(self, queue):
        queue.push(self._toast("a"))
        queue.push(self._toast("b"))
        assert [t.id for t in queue] == ["b", "a"]

    def test_dismiss_removes_only_that_toast(self, queue):
        queue.push(self._toast("a"))
        queue.push(self._toast("b"))
        assert queue.dismiss("a") is True
        assert [t.id for t in queue] == ["b"]

    def test_dismiss_unknown_is_false(self, queue):
        assert queue.dismiss("missing") is False

    def test_listener_sees_push_and_dismiss(self, queue):
        seen = []
        queue.add_listener(lambda action, toast: seen.append((action, toast.id)))
        queue.push(self._toast("a"))
        queue.dismiss("a")
        assert seen == [("pushed", "a"), ("dismissed", "a")]

    def test_clear(self, queue):
        queue.push(self._toast("a"))
        queue.clear()
        assert len(queue) == 0

    def test_clear_notifies_listeners(self, queue):
        seen = []
        queue.push(self._toast("a"))
        queue.push(self._toast("b"))
        queue.add_listener(lambda action, toast: seen.append((action, toast.id)))
        queue.clear()
        assert seen == [("dismissed", "b"), ("dismissed", "a")]
