"""Note repository interface for the privnote client.

This module defines the repository interface through which the domain
hands an encrypted note to the remote service.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from privnote.domain.entities.note_request import NoteRequest
    from privnote.domain.entities.service_response import ServiceResponse


class NoteRepository(ABC):
    """Abstract repository interface for note submission.

    This interface keeps the domain layer independent of the HTTP transport,
    so the pipeline can run against the real service or a test double.
    """

    @abstractmethod
    async def create_note(
        self, request: NoteRequest, ciphertext: str
    ) -> ServiceResponse:
        """Submit an encrypted note to the service.

        Only the ciphertext and the note options leave the client; the
        password itself is never part of the submission.

        Args:
            request (NoteRequest): Note options.
            ciphertext (str): Encrypted note content.

        Returns:
            ServiceResponse: The service's description of the created note.

        Raises:
            NoteSubmissionError: If the service cannot be reached or refuses the note.
            MalformedResponseError: If the reply cannot be parsed.
        """
        pass
