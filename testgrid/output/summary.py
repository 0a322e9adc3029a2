"""Console summary of an executed test plan."""

from datetime import datetime

from ..lifecycle import Status
from ..plan.models import TestPlan

LINE_LENGTH = 72
MAX_NAME_LENGTH = 52


def human_readable_time_diff(elapsed_ms: int) -> str:
    """Render an elapsed time in its two largest units.

    >>> human_readable_time_diff(125_000)
    '2 minutes 5 seconds'
    """
    seconds = elapsed_ms // 1000
    minutes = elapsed_ms // (60 * 1000)
    hours = elapsed_ms // (60 * 60 * 1000)
    days = elapsed_ms // (24 * 60 * 60 * 1000)

    if seconds < 1:
        return "less than a second"
    if minutes < 1:
        return f"{seconds} seconds"
    if hours < 1:
        return f"{minutes} minutes {seconds % 60} seconds"
    if days < 1:
        return f"{hours} hours {minutes % 60} minutes"
    return f"{days} days {hours % 24} hours"


def _failure_lines(test_plan: TestPlan) -> list[str]:
    lines = ["There are test failures...", "Failed tests:"]
    total = 0
    failed = 0
    for scenario in test_plan.test_scenarios:
        total += len(scenario.test_cases)
        # A scenario without results counts as one failed test
        if not scenario.test_cases:
            total += 1
            failed += 1
        if scenario.status == Status.SUCCESS:
            continue
        for test_case in scenario.failed_test_cases:
            failed += 1
            lines.append(f"  {scenario.name}::{test_case.name}: {test_case.failure_message}")

    lines.extend(["", f"Tests run: {total}, Failures/Errors: {failed}", ""])
    return lines


def _status_lines(test_plan: TestPlan) -> list[str]:
    if test_plan.status == Status.SUCCESS:
        return ["all tests passed..."]
    if test_plan.status == Status.ERROR:
        return ["There are deployment/test errors..."]
    if test_plan.status == Status.FAIL:
        return _failure_lines(test_plan)
    return [
        f"Inconsistent state detected ({test_plan.status.value}). "
        "Scenario statuses did not resolve to a final test plan status."
    ]


def format_summary(
    test_plan: TestPlan,
    elapsed_ms: int,
    finished_at: datetime | None = None,
) -> list[str]:
    """Build the summary lines printed after a test plan run.

    Args:
        test_plan: The executed test plan.
        elapsed_ms: Wall-clock duration of the run in milliseconds.
        finished_at: Completion time, defaults to now.

    Returns:
        The summary, one entry per line.
    """
    separator = "-" * LINE_LENGTH
    lines = _status_lines(test_plan)

    lines.append(separator)
    lines.append(f"Test Plan Summary for {test_plan.infra_parameters}:")
    for scenario in test_plan.test_scenarios:
        name = f"{scenario.name} "
        padding = "." * max(MAX_NAME_LENGTH - len(name), 0)
        lines.append(f"{name}{padding} {scenario.status.value}")

    lines.append(separator)
    lines.append(f"TEST RUN {test_plan.status.value}")
    lines.append(separator)
    lines.append(f"Total Time: {human_readable_time_diff(elapsed_ms)}")
    lines.append(f"Finished at: {(finished_at or datetime.now()).strftime('%Y-%m-%d %H:%M:%S')}")
    lines.append(separator)
    return lines
