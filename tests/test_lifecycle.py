"""Tests for status lifecycle graphs."""

import pytest

from testgrid.lifecycle import (
    PLAN_LIFECYCLE,
    PRODUCT_LIFECYCLE,
    TERMINAL_STATUSES,
    Status,
    StatusTransitionError,
)


class TestPlanLifecycle:
    @pytest.mark.parametrize("final", [Status.SUCCESS, Status.FAIL, Status.ERROR])
    def test_running_reaches_every_final_status(self, final):
        assert PLAN_LIFECYCLE.can_transition(Status.RUNNING, final)

    def test_pending_may_skip_running(self):
        assert PLAN_LIFECYCLE.can_transition(Status.PENDING, Status.FAIL)

    def test_same_status_is_allowed(self):
        assert PLAN_LIFECYCLE.can_transition(Status.SUCCESS, Status.SUCCESS)

    def test_cannot_go_back_to_running(self):
        assert not PLAN_LIFECYCLE.can_transition(Status.SUCCESS, Status.RUNNING)
        assert not PLAN_LIFECYCLE.can_transition(Status.RUNNING, Status.PENDING)

    def test_fail_can_be_finalized_to_error(self):
        assert PLAN_LIFECYCLE.can_transition(Status.FAIL, Status.ERROR)
        assert not PLAN_LIFECYCLE.can_transition(Status.ERROR, Status.FAIL)

    def test_success_is_final(self):
        assert PLAN_LIFECYCLE.is_final(Status.SUCCESS)
        assert PLAN_LIFECYCLE.is_final(Status.ERROR)
        assert not PLAN_LIFECYCLE.is_final(Status.FAIL)

    def test_unknown_status_cannot_transition(self):
        assert not PLAN_LIFECYCLE.can_transition(Status.RUNNING, Status.COMPLETED)

    def test_check_raises(self):
        with pytest.raises(StatusTransitionError) as exc_info:
            PLAN_LIFECYCLE.check(Status.SUCCESS, Status.RUNNING)

        assert exc_info.value.current == Status.SUCCESS
        assert exc_info.value.requested == Status.RUNNING
        assert "SUCCESS -> RUNNING" in str(exc_info.value)

    def test_successors(self):
        assert set(PLAN_LIFECYCLE.successors(Status.RUNNING)) == TERMINAL_STATUSES
        assert PLAN_LIFECYCLE.successors(Status.DID_NOT_RUN) == []


class TestProductLifecycle:
    def test_happy_path(self):
        order = [
            Status.EXECUTION_PLANNED,
            Status.RUNNING,
            Status.REPORT_GENERATION,
            Status.COMPLETED,
        ]
        for current, requested in zip(order, order[1:]):
            assert PRODUCT_LIFECYCLE.can_transition(current, requested)

    def test_completed_is_final(self):
        assert PRODUCT_LIFECYCLE.is_final(Status.COMPLETED)
        assert not PRODUCT_LIFECYCLE.can_transition(Status.COMPLETED, Status.RUNNING)
