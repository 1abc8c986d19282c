"""Error types shared by the core, the stores and the CLI."""


class TempoError(Exception):
    """Base class for all Tempo errors."""

    pass


class TaskNotFoundError(TempoError):
    """Raised when a store operation targets a task that does not exist."""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task with ID {task_id} not found")


class SaveFailedError(TempoError):
    """Raised when a commit fails. Nothing from the batch was persisted."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"Failed to save: {cause}")


class FetchFailedError(TempoError):
    """Raised when tasks cannot be read from a store."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"Failed to fetch data: {cause}")


class InvalidDataError(TempoError, ValueError):
    """Raised for malformed task or change data."""

    def __init__(self, message: str):
        super().__init__(f"Invalid data: {message}")


class InvalidRangeError(TempoError, ValueError):
    """Raised when an interval is built with start >= end."""

    pass
