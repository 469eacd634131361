"""
Custom exceptions for UnitForge.
"""


class UnitForgeError(Exception):
    """Base exception for all UnitForge errors."""
    pass


class SourceParseError(UnitForgeError):
    """Raised when source code cannot be parsed."""
    def __init__(self, file_path: str, line_number: int, message: str):
        self.file_path = file_path
        self.line_number = line_number
        self.message = message
        super().__init__(f"Syntax error in {file_path} at line {line_number}: {message}")


class UnsupportedFileError(UnitForgeError):
    """Raised when a file extension has no known grammar."""
    pass


class CredentialError(UnitForgeError):
    """Raised when no API key can be resolved."""
    pass


class GenerationError(UnitForgeError):
    """Base class for failures while talking to the model."""
    pass


class QuotaError(GenerationError):
    """Provider-side rate limiting."""
    def __init__(self, message: str, retry_after: float | None = None):
        self.retry_after = retry_after
        super().__init__(message)


class TransientRequestError(GenerationError):
    """Any other failed request that is worth retrying."""
    pass


class EmptyResponseError(TransientRequestError):
    """The model answered with no text."""
    pass


class ExhaustedRetriesError(GenerationError):
    """All attempts for one prompt failed."""
    def __init__(self, attempts: int, last_error: BaseException | None):
        self.attempts = attempts
        self.last_error = last_error
        detail = str(last_error) if last_error is not None else "unknown error"
        super().__init__(
            f"Failed to get response from model after {attempts} attempts: {detail}"
        )
