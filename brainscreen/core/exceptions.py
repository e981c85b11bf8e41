"""
Custom exceptions for the brainscreen biomarker system.
"""


class BrainScreenError(Exception):
    """Base exception for all brainscreen errors."""

    def __init__(self, message: str, code: str = "BRAINSCREEN_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class ValidationError(BrainScreenError):
    """Invalid or missing input data (empty capture, missing band data, bad scores)."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="VALIDATION_ERROR")


class NumericError(BrainScreenError):
    """Unexpected arithmetic failure during transform or extraction."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="NUMERIC_ERROR")


class RecordingIOError(BrainScreenError):
    """File-system failure while writing or reading a biosignal recording."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="RECORDING_IO_ERROR")
