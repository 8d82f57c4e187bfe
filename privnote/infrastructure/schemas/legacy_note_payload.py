"""Wire schemas for the service's legacy note endpoint.

This module contains the Pydantic model for the JSON object the service
returns after creating a note, and its conversion into the domain entity.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from privnote.domain.entities.service_response import ServiceResponse


class LegacyNotePayload(BaseModel):
    """Schema for the note creation reply.

    Attributes:
        has_manual_pass (bool): Whether the note was created with a manual password.
        policy (int): Expiry policy code.
        expires_js (str): Expiry description.
        note_link (str): Link to the created note.
        dont_ask (bool): Whether the reader confirmation is skipped.

    Example:
        >>> payload = LegacyNotePayload.model_validate(
        ...     {"note_link": "https://privnote.com/abc123", "policy": 0}
        ... )
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    has_manual_pass: bool = False
    policy: int = 0
    expires_js: Optional[str] = Field(default="")
    note_link: str
    dont_ask: bool = False

    @field_validator("note_link")
    @classmethod
    def note_link_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("note_link cannot be empty")
        return value.strip()

    def to_entity(self) -> ServiceResponse:
        """Convert the wire payload into the ServiceResponse domain entity.

        Returns:
            ServiceResponse: The converted response.
        """
        return ServiceResponse(
            has_manual_password=self.has_manual_pass,
            policy=self.policy,
            expires_label=self.expires_js or "",
            note_link=self.note_link,
            suppress_confirm_prompt=self.dont_ask,
        )
