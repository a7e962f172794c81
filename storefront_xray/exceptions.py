"""Custom exceptions for the storefront filter engine."""


class StorefrontError(Exception):
    """Base class for storefront errors."""


class InvalidCriteriaError(StorefrontError, ValueError):
    """Raised when a FilterCriteria value has the wrong shape.

    This is a caller contract violation (e.g. a non-string search or a
    rating outside the 1-5 range), so it is raised at construction time
    instead of being coerced.
    """

    def __init__(self, field: str, message: str):
        super().__init__(f"Invalid filter criteria for '{field}': {message}")
        self.field = field


class UnknownExecutionError(StorefrontError, LookupError):
    """Raised when an execution id is not present in the trace sink.

    Either the id never existed or all of its entries were evicted.
    """

    def __init__(self, execution_id: str):
        super().__init__(f"No trace entries for execution '{execution_id}'")
        self.execution_id = execution_id


class ClosedExecutionError(StorefrontError):
    """Raised when an entry is appended for an execution that already completed."""

    def __init__(self, execution_id: str):
        super().__init__(f"Execution '{execution_id}' is closed; its trace can no longer change")
        self.execution_id = execution_id
