"""Service response domain entity.

This module contains the ServiceResponse entity, the client-side view of
the note the service created.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ServiceResponse:
    """Immutable result of a note creation.

    Attributes:
        has_manual_password (bool): Whether the service recorded a manual password.
        policy (int): Expiry policy code reported by the service.
        expires_label (str): Expiry description reported by the service.
        note_link (str): Link to the created note, without any fragment.
        suppress_confirm_prompt (bool): Whether the reader confirmation is skipped.

    Example:
        >>> response = ServiceResponse(False, 0, "", "https://privnote.com/abc123", False)
        >>> response.note_link
        "https://privnote.com/abc123"
    """

    has_manual_password: bool
    policy: int
    expires_label: str
    note_link: str
    suppress_confirm_prompt: bool = False

    def __post_init__(self) -> None:
        if not self.note_link or not self.note_link.strip():
            raise ValueError("Note link cannot be empty")
