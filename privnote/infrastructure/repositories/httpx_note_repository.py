"""HTTPX implementation of the note repository.

This module contains the concrete NoteRepository that talks to the
service's legacy note-creation endpoint. The endpoint only accepts requests
that look like the site's own XHR calls, so the form fields and headers are
reproduced exactly.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional
from urllib.parse import urlsplit

import httpx
from pydantic import ValidationError

from privnote.domain.entities.note_request import NoteRequest
from privnote.domain.entities.service_response import ServiceResponse
from privnote.domain.errors import MalformedResponseError, NoteSubmissionError
from privnote.domain.repositories.note_repository import NoteRepository
from privnote.infrastructure.schemas.legacy_note_payload import LegacyNotePayload
from privnote.utils.config import DEFAULT_TIMEOUT, PRIVNOTE_URL, USER_AGENT

logger = logging.getLogger(__name__)

TEXT_DATA_TYPE = "T"


def _flag(value: bool) -> str:
    return "true" if value else "false"


def build_form(request: NoteRequest, ciphertext: str) -> Dict[str, str]:
    """Build the form body for the legacy endpoint.

    Args:
        request (NoteRequest): Note options.
        ciphertext (str): Encrypted note content.

    Returns:
        Dict[str, str]: Form fields in the order the site sends them.
    """
    return {
        "data": ciphertext,
        "has_manual_pass": _flag(request.password_is_manual),
        "duration_hours": request.expiry_hours,
        "dont_ask": _flag(request.suppress_confirm_prompt),
        "data_type": TEXT_DATA_TYPE,
        "notify_email": request.notify_email,
        "notify_ref": request.notify_reference,
    }


def build_headers(service_url: str) -> Dict[str, str]:
    """Build the XHR-style headers expected by the legacy endpoint.

    Origin and Referer point at the endpoint's own site.

    Args:
        service_url (str): Legacy endpoint URL.

    Returns:
        Dict[str, str]: Request headers.

    Example:
        >>> build_headers("https://privnote.com/legacy/")["Origin"]
        "https://privnote.com"
    """
    parts = urlsplit(service_url)
    origin = f"{parts.scheme}://{parts.netloc}"
    return {
        "DNT": "1",
        "Connection": "keep-alive",
        "Content-Type": "application/x-www-form-urlencoded",
        "Origin": origin,
        "Referer": f"{origin}/",
        "User-Agent": USER_AGENT,
        "X-Requested-With": "XMLHttpRequest",
    }


class HttpxNoteRepository(NoteRepository):
    """HTTPX implementation of the note repository.

    Each submission opens a short-lived ``httpx.AsyncClient`` and closes it
    before returning. A submission is attempted exactly once: the note may
    already exist server-side when a failure is observed, so retrying could
    create a duplicate.
    """

    def __init__(
        self,
        service_url: str = PRIVNOTE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the repository.

        Args:
            service_url (str): Legacy endpoint URL.
            timeout (float): Network timeout in seconds.
            transport (Optional[httpx.AsyncBaseTransport]): Transport override,
                used by tests to avoid real network traffic.
        """
        self._service_url = service_url
        self._timeout = timeout
        self._transport = transport

    async def create_note(
        self, request: NoteRequest, ciphertext: str
    ) -> ServiceResponse:
        """Submit an encrypted note to the legacy endpoint.

        Args:
            request (NoteRequest): Note options.
            ciphertext (str): Encrypted note content.

        Returns:
            ServiceResponse: The service's description of the created note.

        Raises:
            NoteSubmissionError: On network failure or a non-2xx status.
            MalformedResponseError: If the body is not the expected JSON object.
        """
        form = build_form(request, ciphertext)
        headers = build_headers(self._service_url)

        logger.info(
            f"Submitting note to {self._service_url} "
            f"(duration_hours={request.expiry_hours}, "
            f"has_manual_pass={form['has_manual_pass']})"
        )

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    self._service_url, data=form, headers=headers
                )
        except httpx.HTTPError as e:
            logger.error(f"Failed to reach {self._service_url}: {e!r}")
            raise NoteSubmissionError(
                f"failed to reach {self._service_url}: {e}"
            ) from e

        if not response.is_success:
            logger.error(f"Service rejected the note: {response.status_code}")
            raise NoteSubmissionError(
                f"service rejected the note with status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = LegacyNotePayload.model_validate_json(response.content)
        except ValidationError as e:
            logger.error(f"Failed to parse service response: {e}")
            raise MalformedResponseError(
                "failed to parse service response", status_code=response.status_code
            ) from e

        logger.debug(f"Service created note with policy {payload.policy}")
        return payload.to_entity()
