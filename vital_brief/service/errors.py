class VitalBriefError(Exception):
    """Base class for errors raised by the collaborators around the insight engine."""


class RecordSourceError(VitalBriefError):
    """Daily records could not be acquired from a data source."""


class PersistenceError(VitalBriefError):
    """The local record history could not be saved or loaded."""

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"Failed to {operation} data: {reason}")
