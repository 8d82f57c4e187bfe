"""Service wiring for the privnote client.

This module builds the domain service graph from resolved settings.

Functions:
    - get_note_repository: HTTP repository for the configured endpoint
    - get_note_service: Note service with its cipher and repository

Architecture:
    The domain layer only receives fully-resolved values here; it never
    reads configuration itself.
"""

import logging
from typing import Optional

import httpx

from privnote.domain.services.cipher_service import CipherService
from privnote.domain.services.note_service import NoteService
from privnote.infrastructure.repositories.httpx_note_repository import (
    HttpxNoteRepository,
)
from privnote.utils.config import Settings

logger = logging.getLogger(__name__)


def get_note_repository(
    settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None
) -> HttpxNoteRepository:
    """Create the note repository for the configured endpoint.

    Args:
        settings (Settings): Resolved settings.
        transport (Optional[httpx.AsyncBaseTransport]): Transport override.

    Returns:
        HttpxNoteRepository: Repository ready for use.
    """
    return HttpxNoteRepository(
        service_url=settings.service_url,
        timeout=settings.timeout,
        transport=transport,
    )


def get_note_service(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    cipher: Optional[CipherService] = None,
) -> NoteService:
    """Create and configure the note service with its dependencies.

    Args:
        settings (Settings): Resolved settings.
        transport (Optional[httpx.AsyncBaseTransport]): Transport override.
        cipher (Optional[CipherService]): Cipher override.

    Returns:
        NoteService: Configured domain service ready for use.
    """
    # Infrastructure layer: HTTP repository
    note_repository = get_note_repository(settings, transport)

    # Domain layer: service with the submission pipeline
    return NoteService(cipher or CipherService(), note_repository)
