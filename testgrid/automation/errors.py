"""Test automation exceptions."""


class TestAutomationError(Exception):
    """Raised when a scenario's tests cannot be run or their results read."""

    __test__ = False

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(message)
