"""Command-line interface for the privnote client.

Usage:
    echo "secret" | privnote -e 24h
    privnote -f secret.txt -p --notify-email me@example.com

Options are resolved with the precedence flag > ``PRIVNOTE_<KEY>``
environment variable > config file (``~/.privnote`` or ``--config-file``)
> default. On success exactly one line, the shareable link, is written to
standard output. Any failure writes a single ``Error:`` line to standard
error and exits with status 1.
"""

import argparse
import asyncio
import getpass
import logging
import os
import sys
from typing import Callable, List, Mapping, Optional

import httpx

from privnote.application.input_source import read_note_content
from privnote.domain.entities.duration import DURATIONS, resolve_duration_hours
from privnote.domain.entities.note_request import NoteRequest
from privnote.domain.errors import ConfigurationError, PrivnoteError
from privnote.domain.services.cipher_service import CipherService
from privnote.utils.config import CLIENT_VERSION, LOG_LEVEL, resolve_settings
from privnote.utils.dependencies import get_note_service

logger = logging.getLogger(__name__)

EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    expires_help = ", ".join(
        f"{token} ({duration.usage})" for token, duration in DURATIONS.items()
    )
    parser = argparse.ArgumentParser(
        prog="privnote",
        description="Share secrets with third parties securely over "
        "questionable communication channels via privnote.com",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Options can also be set with PRIVNOTE_<OPTION> environment "
        "variables or in ~/.privnote as OPTION=value lines.",
    )
    parser.add_argument(
        "-e", "--expires", default=None,
        help=f"note destroyed automatically after specified period: {expires_help}",
    )
    parser.add_argument(
        "-f", "--file", default=None,
        help="file to encrypt and store in the privnote, piped input takes priority",
    )
    parser.add_argument(
        "-c", "--config-file", default=None,
        help="config file to override defaults, otherwise ~/.privnote is used if present",
    )
    parser.add_argument(
        "-p", "--password", action="store_true",
        help="specify a password that must be entered before someone can read your note",
    )
    parser.add_argument(
        "--do-not-prompt", action="store_const", const=True, default=None,
        help="do not prompt the receiver before they open the note that it is one time read",
    )
    parser.add_argument(
        "--notify-email", default=None,
        help="email to receive notification on note open",
    )
    parser.add_argument(
        "--notify-reference", default=None,
        help="reference included in notification on note open",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="verbose logging to stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {CLIENT_VERSION}")
    return parser


def prompt_password(
    ask: Callable[[str], str] = getpass.getpass, stream=None
) -> str:
    """Ask the user for a manual password without echoing it.

    Raises:
        ConfigurationError: If the entered password is empty.
    """
    stream = sys.stderr if stream is None else stream
    print("Please enter your desired password!", file=stream)
    password = ask("Password: ")
    if not password:
        raise ConfigurationError("password cannot be empty")
    return password


def configure_logging(verbose: bool, stream=None) -> None:
    level = logging.DEBUG if verbose else getattr(logging, LOG_LEVEL.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        stream=stream or sys.stderr,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def run(
    argv: Optional[List[str]] = None,
    stdin=None,
    stdout=None,
    stderr=None,
    environ: Optional[Mapping[str, str]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    cipher: Optional[CipherService] = None,
    ask: Callable[[str], str] = getpass.getpass,
) -> int:
    """Run the privnote command.

    Args:
        argv: Command-line arguments without the program name.
        stdin: Input stream, defaults to ``sys.stdin``.
        stdout: Output stream for the link, defaults to ``sys.stdout``.
        stderr: Stream for diagnostics, defaults to ``sys.stderr``.
        environ: Environment mapping, defaults to ``os.environ``.
        transport: HTTP transport override.
        cipher: Cipher override.
        ask: Hidden prompt used for ``--password``.

    Returns:
        int: Process exit status.
    """
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout
    stderr = sys.stderr if stderr is None else stderr
    environ = os.environ if environ is None else environ

    args = build_parser().parse_args(argv)
    configure_logging(args.verbose, stderr)

    try:
        settings = resolve_settings(
            {
                "expires": args.expires,
                "file": args.file,
                "notify_email": args.notify_email,
                "notify_reference": args.notify_reference,
                "do_not_prompt": args.do_not_prompt,
            },
            environ=environ,
            config_file=args.config_file,
        )
        expiry_hours = resolve_duration_hours(settings.expires)
        cipher = cipher or CipherService()
        cipher.ensure_available()
        content = read_note_content(settings.file, stdin)

        password = prompt_password(ask, stderr) if args.password else settings.password
        request = NoteRequest.create(
            content=content,
            expiry_hours=expiry_hours,
            password=password,
            notify_email=settings.notify_email,
            notify_reference=settings.notify_reference,
            suppress_confirm_prompt=settings.do_not_prompt,
        )

        service = get_note_service(settings, transport=transport, cipher=cipher)
        link = asyncio.run(service.share_note(request))
    except PrivnoteError as e:
        print(f"Error: {e}", file=stderr)
        return EXIT_FAILURE
    except ValueError as e:
        logger.error(f"Invalid note request: {e}")
        print(f"Error: {e}", file=stderr)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        print("Error: interrupted", file=stderr)
        return EXIT_INTERRUPTED

    print(link, file=stdout)
    return 0
