"""Tests for board models and state machines."""

import pytest

from sprintboard.workflow.exceptions import InvalidTransitionError
from sprintboard.workflow.models import (
    Epic,
    EpicStatus,
    SprintState,
    WorkItem,
    WorkItemStatus,
    compute_ice_score,
)
from sprintboard.workflow.transitions import (
    EPIC_TRANSITIONS,
    SPRINT_TRANSITIONS,
    validate_epic_transition,
    validate_item_transition,
    validate_sprint_transition,
)


class TestIceScore:
    def test_average(self):
        assert compute_ice_score(4, 6, 8) == 6.0

    def test_rounded_to_two_decimals(self):
        assert compute_ice_score(4, 10, 8) == 7.33

    def test_epic_recompute(self):
        epic = Epic(id="epic-1", name="E", ease=1, impact=1, confidence=1, ice_score=0)
        assert epic.recompute_ice_score() == 1.0
        assert epic.ice_score == 1.0


class TestWorkItemDefaults:
    def test_defaults(self):
        item = WorkItem(id="PROJ-101", title="T", reporter_id="u-a", assignee_id="u-a")
        assert item.status is WorkItemStatus.TODO
        assert item.sprint == ""
        assert item.epic_id is None
        assert item.version == 1
        assert item.watchers == set()


class TestSprintTransitions:
    @pytest.mark.parametrize("from_state,to_state", sorted(
        SPRINT_TRANSITIONS, key=lambda t: (t[0].value, t[1].value)
    ))
    def test_allowed(self, from_state, to_state):
        validate_sprint_transition("sprint-1", from_state, to_state)

    def test_closed_cannot_reopen(self):
        with pytest.raises(InvalidTransitionError) as exc:
            validate_sprint_transition("sprint-1", SprintState.CLOSED, SprintState.ACTIVE)
        assert exc.value.kind == "sprint"
        assert str(exc.value) == "Invalid transition for sprint sprint-1: closed → active"

    def test_deleted_restores_only_to_planned(self):
        with pytest.raises(InvalidTransitionError):
            validate_sprint_transition("sprint-1", SprintState.DELETED, SprintState.ACTIVE)


class TestEpicTransitions:
    def test_every_live_status_can_be_deleted(self):
        for status in EpicStatus:
            if status is not EpicStatus.DELETED:
                assert (status, EpicStatus.DELETED) in EPIC_TRANSITIONS

    def test_restore_goes_to_active(self):
        validate_epic_transition("epic-1", EpicStatus.DELETED, EpicStatus.ACTIVE)
        with pytest.raises(InvalidTransitionError):
            validate_epic_transition("epic-1", EpicStatus.DELETED, EpicStatus.DONE)

    def test_archived_cannot_go_back_to_active(self):
        with pytest.raises(InvalidTransitionError):
            validate_epic_transition("epic-1", EpicStatus.ARCHIVED, EpicStatus.ACTIVE)


class TestItemTransitions:
    def test_forward_path(self):
        path = [
            WorkItemStatus.BACKLOG,
            WorkItemStatus.TODO,
            WorkItemStatus.IN_PROGRESS,
            WorkItemStatus.IN_REVIEW,
            WorkItemStatus.DONE,
        ]
        for current, nxt in zip(path, path[1:]):
            validate_item_transition("PROJ-101", current, nxt)

    def test_cannot_skip_review(self):
        with pytest.raises(InvalidTransitionError):
            validate_item_transition("PROJ-101", WorkItemStatus.IN_PROGRESS, WorkItemStatus.DONE)

    def test_done_reopens_to_in_progress(self):
        validate_item_transition("PROJ-101", WorkItemStatus.DONE, WorkItemStatus.IN_PROGRESS)
