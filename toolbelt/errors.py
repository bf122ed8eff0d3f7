"""Exceptions raised by toolbelt commands."""

from typing import List, Optional, Tuple


class ToolbeltError(Exception):
    """Base class for all toolbelt errors."""


class InputValidationError(ToolbeltError):
    """Input file does not match the expected shape."""

    def __init__(self, problems: List[Tuple[int, str]]):
        """
        Args:
            problems: List of (row number, message) tuples
        """
        self.problems = problems
        lines = [f"row {row}: {message}" for row, message in problems[:10]]
        if len(problems) > 10:
            lines.append(f"... and {len(problems) - 10} more")
        super().__init__("Invalid input:\n" + "\n".join(lines))


class InputFileError(ToolbeltError):
    """Input file is missing, unreadable or not UTF-8 CSV."""


class CheckpointWriteError(ToolbeltError):
    """Import progress could not be persisted."""


class ImportCancelled(ToolbeltError):
    """Import was cancelled by the user."""

    def __init__(self, batch_index: int):
        self.batch_index = batch_index
        super().__init__(f"Import cancelled after {batch_index} batches")


class ImportFailed(ToolbeltError):
    """Import kept failing after all retries were used."""

    def __init__(self, attempts: int, last_error: Exception):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Import failed after {attempts} attempts: {last_error}")


class ApiError(ToolbeltError):
    """A call to the remote platform failed."""

    def __init__(self, message: str, status: Optional[int] = None, reason: Optional[str] = None):
        self.message = message
        self.status = status
        self.reason = reason
        if status is not None:
            super().__init__(f"Error {status}: {reason}. {message}")
        else:
            super().__init__(message)


class RoutesIndexMissing(ToolbeltError):
    """The redirects index did not exist and had to be created."""
