"""Note request domain entity for the privnote client.

This module contains the NoteRequest entity describing a single note
submission: the plaintext, the password protecting it and the options the
service applies to the note.
"""

from dataclasses import dataclass
from typing import Optional

from privnote.domain.services.password_service import generate_password


@dataclass(frozen=True)
class NoteRequest:
    """Immutable description of one note submission.

    Attributes:
        content (bytes): Plaintext of the note.
        password (str): Password the note is encrypted with.
        password_is_manual (bool): True when the user chose the password,
            False when it was generated locally.
        expiry_hours (str): Hour count sent as ``duration_hours``.
        notify_email (str): Address notified when the note is opened.
        notify_reference (str): Reference included in that notification.
        suppress_confirm_prompt (bool): Skip the reader's confirmation page.

    Business Rules:
        - Content and password must be non-empty
        - The expiry is a decimal hour count, already resolved from a token
        - A generated password is never marked as manual
    """

    content: bytes
    password: str
    password_is_manual: bool
    expiry_hours: str
    notify_email: str = ""
    notify_reference: str = ""
    suppress_confirm_prompt: bool = False

    def __post_init__(self) -> None:
        """Validate the request after initialization.

        Raises:
            ValueError: If content or password are empty, or the expiry is
                not a decimal hour count.
        """
        if not self.content:
            raise ValueError("Note content cannot be empty")
        if not self.password:
            raise ValueError("Note password cannot be empty")
        if not self.expiry_hours.isdigit():
            raise ValueError(f"Invalid expiry hours: {self.expiry_hours!r}")

    @classmethod
    def create(
        cls,
        content: bytes,
        expiry_hours: str,
        password: Optional[str] = None,
        notify_email: str = "",
        notify_reference: str = "",
        suppress_confirm_prompt: bool = False,
    ) -> "NoteRequest":
        """Factory method building a request, generating a password if needed.

        Args:
            content (bytes): Plaintext of the note.
            expiry_hours (str): Hour count for ``duration_hours``.
            password (Optional[str]): Manual password, or None to generate one.
            notify_email (str): Optional notification address.
            notify_reference (str): Optional notification reference.
            suppress_confirm_prompt (bool): Skip the reader's confirmation page.

        Returns:
            NoteRequest: New request instance.

        Raises:
            ValueError: If the request is invalid.
            EntropySourceError: If a password must be generated and the
                secure random source is unavailable.

        Example:
            >>> request = NoteRequest.create(b"hello", "1")
            >>> request.password_is_manual
            False
        """
        password_is_manual = bool(password)
        return cls(
            content=content,
            password=password if password_is_manual else generate_password(),
            password_is_manual=password_is_manual,
            expiry_hours=expiry_hours,
            notify_email=notify_email or "",
            notify_reference=notify_reference or "",
            suppress_confirm_prompt=suppress_confirm_prompt,
        )

    def __repr__(self) -> str:
        return (
            f"NoteRequest(content=<{len(self.content)} bytes>, password=<hidden>, "
            f"password_is_manual={self.password_is_manual}, "
            f"expiry_hours={self.expiry_hours!r})"
        )
