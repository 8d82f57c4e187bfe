"""Note content acquisition.

Piped standard input wins over a file given with ``--file``.
"""

import io
import logging
import os
import stat
import sys
from pathlib import Path
from typing import BinaryIO, Optional

from privnote.domain.errors import InputSourceError

logger = logging.getLogger(__name__)


def stdin_is_piped(stream=None) -> bool:
    """Return True when the stream is connected to a pipe.

    Args:
        stream: File object to check, defaults to ``sys.stdin``.
    """
    stream = sys.stdin if stream is None else stream
    try:
        mode = os.fstat(stream.fileno()).st_mode
    except (AttributeError, ValueError, OSError, io.UnsupportedOperation):
        return False
    return stat.S_ISFIFO(mode)


def _read_stream(stream) -> bytes:
    buffer: Optional[BinaryIO] = getattr(stream, "buffer", None)
    data = (buffer or stream).read()
    if isinstance(data, str):
        data = data.encode("utf-8")
    return data


def read_note_content(file_path: Optional[str] = None, stdin=None) -> bytes:
    """Read the full note content.

    Args:
        file_path (Optional[str]): File to read when nothing is piped.
        stdin: Stream to check for piped input, defaults to ``sys.stdin``.

    Returns:
        bytes: The note content.

    Raises:
        InputSourceError: If no source is available, the file cannot be
            read, or the content is empty.
    """
    stdin = sys.stdin if stdin is None else stdin

    if stdin_is_piped(stdin):
        if file_path:
            logger.info("Both piped input and a file were given, using piped input")
        content = _read_stream(stdin)
        source = "pipe"
    elif file_path:
        path = Path(file_path).expanduser()
        if not path.exists():
            raise InputSourceError(f"path passed to file does not exist: {file_path}")
        try:
            content = path.read_bytes()
        except OSError as e:
            raise InputSourceError(
                f"path passed to file cannot be read: {file_path} ({e.strerror})"
            ) from e
        source = str(path)
    else:
        raise InputSourceError(
            "you must specify something to encrypt via pipe or file flag"
        )

    if not content:
        raise InputSourceError(f"nothing to encrypt, {source} is empty")

    logger.debug(f"Read {len(content)} bytes from {source}")
    return content
