# club/cli.py
"""
Command-line entry points.

    club-replay <file>   replay a club log and print the outcome
    club-serve           start the HTTP API
"""

import argparse
import sys

from club.config import settings
from club.exceptions import ClubError
from club.services.club_runner import run_log
from club.utils.logger import get_logger

logger = get_logger(__name__)


def _open_log(path: str):
    try:
        return open(path, encoding="utf-8")
    except FileNotFoundError:
        raise SystemExit(f"file does not exist: {path}")
    except PermissionError:
        raise SystemExit(f"not enough permissions to open file: {path}")
    except OSError as e:
        raise SystemExit(f"could not open file: {e}")


def main(argv=None) -> int:
    """
    Exit status: 0 on success, 1 for a bad log or an unreadable file, and
    argparse's 2 for a usage error.
    """
    parser = argparse.ArgumentParser(
        prog="club-replay",
        description="Replay a computer club event log and print the daily revenue",
    )
    parser.add_argument("log_file", help="path to the event log")
    args = parser.parse_args(argv)

    with _open_log(args.log_file) as f:
        try:
            result = run_log(f, settings)
        except ClubError as e:
            print(e, file=sys.stderr)
            return 1

    for line in result.output:
        print(line)
    return 0


def serve():
    import uvicorn
    logger.info(f"🌐 Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    uvicorn.run("club.main:app", host=settings.BACKEND_IP, port=settings.BACKEND_PORT)


if __name__ == "__main__":
    sys.exit(main())
