"""Tests for the run summary."""

from datetime import datetime

import pytest

from testgrid.lifecycle import Status
from testgrid.output.summary import LINE_LENGTH, MAX_NAME_LENGTH, format_summary, human_readable_time_diff
from testgrid.plan.models import TestCase


@pytest.mark.parametrize(
    "elapsed_ms, expected",
    [
        (0, "less than a second"),
        (999, "less than a second"),
        (45_000, "45 seconds"),
        (125_000, "2 minutes 5 seconds"),
        (2 * 3_600_000 + 61_000, "2 hours 1 minutes"),
        (3 * 86_400_000 + 5 * 3_600_000, "3 days 5 hours"),
    ],
)
def test_human_readable_time_diff(elapsed_ms, expected):
    assert human_readable_time_diff(elapsed_ms) == expected


class TestFormatSummary:
    def finish(self, test_plan, status):
        test_plan.set_status(Status.RUNNING)
        test_plan.set_status(status)

    def test_success(self, test_plan):
        for scenario in test_plan.test_scenarios:
            scenario.status = Status.SUCCESS
        self.finish(test_plan, Status.SUCCESS)

        lines = format_summary(test_plan, 1500, finished_at=datetime(2018, 1, 17, 10, 30))

        assert lines[0] == "all tests passed..."
        assert "-" * LINE_LENGTH in lines
        assert "TEST RUN SUCCESS" in lines
        assert "Total Time: 1 seconds" in lines
        assert "Finished at: 2018-01-17 10:30:00" in lines

    def test_scenario_rows_are_padded(self, test_plan):
        test_plan.test_scenarios[0].status = Status.SUCCESS
        self.finish(test_plan, Status.SUCCESS)

        lines = format_summary(test_plan, 0)

        row = next(line for line in lines if line.startswith("login "))
        assert row == "login " + "." * (MAX_NAME_LENGTH - len("login ")) + " SUCCESS"

    def test_long_scenario_name(self, test_plan):
        test_plan.test_scenarios[0].name = "x" * 80
        self.finish(test_plan, Status.ERROR)

        lines = format_summary(test_plan, 0)

        assert "x" * 80 + "  PENDING" in lines

    def test_failures_are_listed(self, test_plan):
        sso = test_plan.get_scenario("sso")
        sso.test_cases = [
            TestCase(name="login", success=True, scenario_name="sso"),
            TestCase(name="logout", success=False, failure_message="expected 302", scenario_name="sso"),
        ]
        sso.status = Status.FAIL
        login = test_plan.get_scenario("login")
        login.test_cases = [TestCase(name="a", success=True, scenario_name="login")]
        login.status = Status.SUCCESS
        self.finish(test_plan, Status.FAIL)

        lines = format_summary(test_plan, 0)

        assert "There are test failures..." in lines
        assert "  sso::logout: expected 302" in lines
        # provisioning has no results and counts as one failed test
        assert "Tests run: 4, Failures/Errors: 2" in lines

    def test_error(self, test_plan):
        self.finish(test_plan, Status.ERROR)

        assert format_summary(test_plan, 0)[0] == "There are deployment/test errors..."

    def test_inconsistent_state(self, test_plan):
        test_plan.set_status(Status.RUNNING)

        lines = format_summary(test_plan, 0)

        assert lines[0].startswith("Inconsistent state detected (RUNNING)")
        assert "TEST RUN RUNNING" in lines
