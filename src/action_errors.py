class ActionError(AssertionError):
    """Base class for failures raised by page actions and helpers."""


class WaitTimeoutError(ActionError):
    """An element, state or navigation did not occur within its timeout."""

    def __init__(self, message: str, selector: str = "", state: str = "", timeout_ms: int = 0):
        super().__init__(message)
        self.selector = selector
        self.state = state
        self.timeout_ms = timeout_ms


class ValueMismatchError(ActionError):
    """Entered value was not reflected back by the target input."""

    def __init__(self, field_label: str, expected: str, actual: str | None):
        super().__init__(f'{field_label} input value mismatch. Expected: "{expected}", got: "{actual}"')
        self.field_label = field_label
        self.expected = expected
        self.actual = actual


class NotFoundError(ActionError):
    pass


class PreconditionError(ActionError):
    pass
