import sys

from privnote.application.cli import run


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
