"""Client-side note encryption.

The service decrypts notes in the reader's browser with CryptoJS, which
understands the OpenSSL "Salted__" envelope: AES-256-CBC with PKCS#7
padding, key and IV derived from the password and an 8-byte salt through
EVP_BytesToKey over MD5 with a single iteration. The ciphertext must match
what ``openssl enc -e -aes-256-cbc -a -md md5 -k <password>`` prints, so
this is a fixed wire format rather than a tunable choice.

Encryption runs in-process with the ``cryptography`` library; the plaintext
stays in process memory and never reaches a command line or a file.
"""

import base64
import binascii
import logging
import os
from typing import Optional, Tuple

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from privnote.domain.errors import (
    CipherError,
    CipherUnavailableError,
    EntropySourceError,
)

logger = logging.getLogger(__name__)

SALT_HEADER = b"Salted__"
SALT_SIZE = 8
KEY_SIZE = 32
IV_SIZE = 16
BLOCK_SIZE_BITS = 128
LINE_WIDTH = 64


def derive_key_and_iv(
    password: bytes, salt: bytes, key_size: int = KEY_SIZE, iv_size: int = IV_SIZE
) -> Tuple[bytes, bytes]:
    """Derive key and IV the way OpenSSL's EVP_BytesToKey does with MD5.

    Args:
        password (bytes): Password bytes.
        salt (bytes): 8-byte salt.
        key_size (int): Key length in bytes. Defaults to 32 (AES-256).
        iv_size (int): IV length in bytes. Defaults to 16.

    Returns:
        Tuple[bytes, bytes]: The key and the IV.
    """
    derived = b""
    block = b""
    while len(derived) < key_size + iv_size:
        digest = hashes.Hash(hashes.MD5(), backend=default_backend())
        digest.update(block + password + salt)
        block = digest.finalize()
        derived += block
    return derived[:key_size], derived[key_size : key_size + iv_size]


def _wrap(text: str) -> str:
    # openssl -a output: 64 columns, newline terminated
    lines = [text[i : i + LINE_WIDTH] for i in range(0, len(text), LINE_WIDTH)]
    return "\n".join(lines) + "\n"


class CipherService:
    """AES-256-CBC encryption compatible with the service's decryption routine."""

    def __init__(self, backend=None):
        self._backend = backend or default_backend()

    def ensure_available(self) -> None:
        """Check that AES-256-CBC and MD5 are usable before any work starts.

        Raises:
            CipherUnavailableError: If the cryptography backend lacks either.
        """
        try:
            supported = self._backend.cipher_supported(
                algorithms.AES(b"\x00" * KEY_SIZE), modes.CBC(b"\x00" * IV_SIZE)
            ) and self._backend.hash_supported(hashes.MD5())
        except (UnsupportedAlgorithm, AttributeError) as e:
            logger.error(f"Cipher capability check failed: {e}")
            raise CipherUnavailableError(
                f"AES-256-CBC encryption is not available: {e}"
            ) from e

        if not supported:
            logger.error("Cryptography backend lacks AES-256-CBC or MD5 support")
            raise CipherUnavailableError(
                "AES-256-CBC with MD5 key derivation is not supported by the "
                "installed cryptography backend"
            )

    def encrypt(
        self, plaintext: bytes, password: str, salt: Optional[bytes] = None
    ) -> str:
        """Encrypt plaintext into the base64 "Salted__" envelope.

        Args:
            plaintext (bytes): Note content.
            password (str): Password used as key material.
            salt (Optional[bytes]): 8-byte salt. A random salt is drawn when omitted.

        Returns:
            str: Base64 text wrapped at 64 columns with a trailing newline.

        Raises:
            ValueError: If the salt has the wrong size.
            EntropySourceError: If a salt is needed and no secure source exists.
            CipherError: If encryption fails.
        """
        if salt is None:
            try:
                salt = os.urandom(SALT_SIZE)
            except (NotImplementedError, OSError) as e:
                raise EntropySourceError(f"secure random source unavailable: {e}") from e
        if len(salt) != SALT_SIZE:
            raise ValueError(f"salt must be {SALT_SIZE} bytes")

        try:
            key, iv = derive_key_and_iv(password.encode("utf-8"), salt)
            padder = padding.PKCS7(BLOCK_SIZE_BITS).padder()
            padded = padder.update(plaintext) + padder.finalize()
            encryptor = Cipher(
                algorithms.AES(key), modes.CBC(iv), backend=self._backend
            ).encryptor()
            ciphertext = encryptor.update(padded) + encryptor.finalize()
        except (UnsupportedAlgorithm, ValueError) as e:
            logger.error(f"Encryption failed: {e}")
            raise CipherError(f"encryption failed: {e}") from e

        encoded = base64.b64encode(SALT_HEADER + salt + ciphertext).decode("ascii")
        logger.debug(
            f"Encrypted {len(plaintext)} bytes into {len(encoded)} base64 characters"
        )
        return _wrap(encoded)

    def decrypt(self, ciphertext: str, password: str) -> bytes:
        """Decrypt a base64 "Salted__" envelope.

        Args:
            ciphertext (str): Output of :meth:`encrypt` or ``openssl enc -a``.
            password (str): Password the envelope was encrypted with.

        Returns:
            bytes: The recovered plaintext.

        Raises:
            CipherError: If the envelope is malformed or the password is wrong.
        """
        try:
            raw = base64.b64decode("".join(ciphertext.split()), validate=True)
        except (binascii.Error, ValueError) as e:
            raise CipherError(f"ciphertext is not valid base64: {e}") from e

        body = raw[len(SALT_HEADER) + SALT_SIZE :]
        if not raw.startswith(SALT_HEADER) or not body or len(body) % 16:
            raise CipherError("ciphertext is not a salted AES-256-CBC envelope")

        salt = raw[len(SALT_HEADER) : len(SALT_HEADER) + SALT_SIZE]
        key, iv = derive_key_and_iv(password.encode("utf-8"), salt)
        decryptor = Cipher(
            algorithms.AES(key), modes.CBC(iv), backend=self._backend
        ).decryptor()
        padded = decryptor.update(body) + decryptor.finalize()

        try:
            unpadder = padding.PKCS7(BLOCK_SIZE_BITS).unpadder()
            return unpadder.update(padded) + unpadder.finalize()
        except ValueError as e:
            raise CipherError("decryption failed, wrong password or corrupt data") from e
