"""Note lifetime tokens for the privnote client.

This module maps the short duration tokens accepted on the command line to
the hour counts the service expects in the ``duration_hours`` form field.

Business Rules:
    - Token ``0`` means "destroy after the first read, or after 30 days in
      an unread state". It is sent as ``0`` hours and keeps that meaning;
      it is never treated as a literal zero-hour lifetime.
    - Aliases (``24h``/``1d``, ``7d``/``1w``, ``30d``/``1m``) share one hour count.
"""

from dataclasses import dataclass
from typing import Dict, List

from privnote.domain.errors import InvalidDurationError


@dataclass(frozen=True)
class Duration:
    """Value object for a note lifetime.

    Attributes:
        token (str): User-facing token, e.g. ``"24h"``.
        usage (str): Human readable description of the lifetime.
        hours (str): Hour count as transmitted to the service.

    Example:
        >>> Duration(token="1h", usage="1 hour", hours="1").hours
        "1"
    """

    token: str
    usage: str
    hours: str


DEFAULT_DURATION_TOKEN = "0"

DURATIONS: Dict[str, Duration] = {
    duration.token: duration
    for duration in (
        Duration("0", "expire after 1st read, or 30 days in unread state", "0"),
        Duration("1h", "1 hour", "1"),
        Duration("24h", "24 hours", "24"),
        Duration("1d", "1 day", "24"),
        Duration("7d", "7 days", "168"),
        Duration("1w", "1 week", "168"),
        Duration("30d", "30 days", "720"),
        Duration("1m", "1 month", "720"),
    )
}


def valid_tokens() -> List[str]:
    """Return the accepted duration tokens in declaration order."""
    return list(DURATIONS)


def resolve_duration(token: str) -> Duration:
    """Look up the duration for a user-facing token.

    Args:
        token (str): Duration token as typed by the user.

    Returns:
        Duration: The matching duration value object.

    Raises:
        InvalidDurationError: If the token is not recognised.

    Example:
        >>> resolve_duration("1d").hours
        "24"
    """
    duration = DURATIONS.get(token.strip() if token else token)
    if duration is None:
        raise InvalidDurationError(
            f"invalid value passed to expires: {token!r} "
            f"(valid values: {', '.join(valid_tokens())})"
        )
    return duration


def resolve_duration_hours(token: str) -> str:
    """Return the ``duration_hours`` value for a token."""
    return resolve_duration(token).hours
