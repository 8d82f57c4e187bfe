"""Exception hierarchy for the privnote client.

Every failure the pipeline can report derives from PrivnoteError so the
command-line entry point can turn it into a single diagnostic line and a
non-zero exit status.
"""

from typing import Optional


class PrivnoteError(Exception):
    """Base exception for privnote errors."""

    pass


class ConfigurationError(PrivnoteError):
    """Exception raised when settings cannot be resolved or are invalid."""

    pass


class InvalidDurationError(ConfigurationError):
    """Exception raised when a duration token is not recognised."""

    pass


class InputSourceError(PrivnoteError):
    """Exception raised when the note content cannot be acquired."""

    pass


class EntropySourceError(PrivnoteError):
    """Exception raised when the secure random source is unavailable."""

    pass


class CipherError(PrivnoteError):
    """Exception raised when encryption or decryption fails."""

    pass


class CipherUnavailableError(CipherError):
    """Exception raised when the cipher capability is missing."""

    pass


class NoteSubmissionError(PrivnoteError):
    """Exception raised when the note cannot be submitted to the service."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(NoteSubmissionError):
    """Exception raised when the service reply cannot be parsed."""

    pass
