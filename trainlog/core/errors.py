"""Domain-specific errors for the reconciliation pipeline.

Only fatal conditions are raised. Record-level problems (a malformed CSV
row, an undecodable stream fragment, a missing timestamp) are logged and
skipped by the readers instead.
"""


class TrainlogError(Exception):
    """Base exception for all pipeline errors."""

    pass


class CatalogError(TrainlogError):
    """Raised when the exercise catalog cannot be read or is inconsistent."""

    pass


class MappingError(TrainlogError):
    """Raised when the mapping report or its name lists cannot be read."""

    pass


class StreamParseError(TrainlogError):
    """Raised when the incremental export parser reaches an unrecoverable state."""

    def __init__(self, message: str, position: int | None = None):
        super().__init__(message)
        self.position = position


class SetValidationError(TrainlogError, ValueError):
    """Raised when a set carries a field that is illegal for its primary type."""

    pass


class ExportFormatError(TrainlogError):
    """Raised when a source export lacks the structure needed to read it."""

    pass
