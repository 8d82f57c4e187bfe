"""Note domain service for the privnote client.

This module contains the NoteService that runs the secure submission
pipeline: check the cipher, encrypt the note, submit it and compose the
shareable link.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from privnote.domain.errors import PrivnoteError

if TYPE_CHECKING:
    from privnote.domain.entities.note_request import NoteRequest
    from privnote.domain.entities.service_response import ServiceResponse
    from privnote.domain.repositories.note_repository import NoteRepository
    from privnote.domain.services.cipher_service import CipherService

logger = logging.getLogger(__name__)


def compose_link(
    response: ServiceResponse, password: str, password_is_manual: bool
) -> str:
    """Build the link handed to the note's recipient.

    A generated password goes into the URL fragment, which browsers never
    send to the server, so the recipient can decrypt the note locally. A
    manual password is shared out-of-band and stays out of the link.

    Args:
        response (ServiceResponse): The created note.
        password (str): Password the note was encrypted with.
        password_is_manual (bool): Whether the user chose the password.

    Returns:
        str: ``note_link`` or ``note_link#password``.

    Example:
        >>> compose_link(response, "Ab3dE5gH9", False)
        "https://privnote.com/abc123#Ab3dE5gH9"
    """
    if password_is_manual:
        return response.note_link
    return f"{response.note_link}#{password}"


class NoteService:
    """Domain service for sharing notes.

    This service encapsulates the submission pipeline and depends only on
    the cipher and the repository abstraction it is given.
    """

    def __init__(self, cipher: "CipherService", note_repository: "NoteRepository"):
        """Initialize the note service with dependencies.

        Args:
            cipher: Cipher used to encrypt note content
            note_repository: Repository submitting encrypted notes
        """
        self._cipher = cipher
        self._note_repository = note_repository

    async def share_note(self, request: "NoteRequest") -> str:
        """Encrypt and submit a note, returning its shareable link.

        The cipher capability is checked before anything else so that a
        missing capability never results in a network request.

        Args:
            request: The note to share

        Returns:
            str: The shareable link

        Raises:
            CipherUnavailableError: If encryption is not available
            CipherError: If encryption fails
            NoteSubmissionError: If the service cannot be reached or refuses the note
            MalformedResponseError: If the service reply cannot be parsed
        """
        logger.info(
            f"Sharing note of {len(request.content)} bytes "
            f"({'manual' if request.password_is_manual else 'generated'} password)"
        )

        try:
            self._cipher.ensure_available()
            ciphertext = self._cipher.encrypt(request.content, request.password)
            response = await self._note_repository.create_note(request, ciphertext)
        except PrivnoteError as e:
            logger.error(f"Failed to share note: {e}")
            raise

        if response.has_manual_password != request.password_is_manual:
            logger.warning(
                "Service reported has_manual_pass="
                f"{response.has_manual_password}, expected {request.password_is_manual}"
            )

        logger.info(f"Note created at {response.note_link}")
        return compose_link(response, request.password, request.password_is_manual)
