"""Secure password generation for auto-protected notes.

When the user does not choose a password, the note is protected by a short
random password that travels only in the fragment of the shareable link.
That password is the sole protection of the note, so every character is
drawn from the operating system's cryptographically secure byte source.
No seedable pseudo-random generator is involved at any point.
"""

import logging
import os

from privnote.domain.errors import EntropySourceError

logger = logging.getLogger(__name__)

DEFAULT_PASSWORD_LENGTH = 9
DEFAULT_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz1234567890"


def _read_entropy(size: int) -> bytes:
    try:
        return os.urandom(size)
    except (NotImplementedError, OSError) as e:
        logger.error(f"Secure random source unavailable: {e}")
        raise EntropySourceError(f"secure random source unavailable: {e}") from e


def next_uniform_index(bound: int) -> int:
    """Draw an integer uniformly from ``[0, bound)``.

    Bytes that would introduce modulo bias are rejected and redrawn.

    Args:
        bound (int): Exclusive upper bound, at least 1.

    Returns:
        int: Uniformly distributed index.

    Raises:
        ValueError: If bound is lower than 1.
        EntropySourceError: If the secure random source is unavailable.
    """
    if bound < 1:
        raise ValueError("bound must be a positive integer")
    if bound == 1:
        return 0

    size = ((bound - 1).bit_length() + 7) // 8
    limit = (256**size // bound) * bound
    while True:
        value = int.from_bytes(_read_entropy(size), "big")
        if value < limit:
            return value % bound


def generate_password(
    length: int = DEFAULT_PASSWORD_LENGTH, alphabet: str = DEFAULT_ALPHABET
) -> str:
    """Generate a random password.

    Args:
        length (int): Number of characters. Defaults to 9.
        alphabet (str): Characters to draw from. Defaults to the 62
            alphanumeric characters.

    Returns:
        str: The generated password.

    Raises:
        ValueError: If length is lower than 1 or the alphabet is empty.
        EntropySourceError: If the secure random source is unavailable.

    Example:
        >>> len(generate_password())
        9
    """
    if length < 1:
        raise ValueError("password length must be at least 1")
    if not alphabet:
        raise ValueError("password alphabet cannot be empty")

    password = "".join(
        alphabet[next_uniform_index(len(alphabet))] for _ in range(length)
    )
    logger.debug(f"Generated a {length} character password")
    return password
