"""Test plan execution exceptions."""


class TestPlanExecutorError(Exception):
    """Raised when a test plan cannot be executed or its infrastructure released."""

    __test__ = False
