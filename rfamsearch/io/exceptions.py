class SequenceSourceError(Exception):
    """Raised when input sequences cannot be loaded."""


class ResultSinkError(Exception):
    """Raised when results cannot be written."""
