from __future__ import annotations

import argparse
import json
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from esi_isk.app import evict_window, ingest_transfers, show_character, update_standing
from esi_isk.config import configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid integer: {value}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError(f"Expected a positive integer, got {value}")
    return parsed


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Maintain the ISK donation ledger")
    subparsers = parser.add_subparsers(dest="command", required=True)

    ingest = subparsers.add_parser("ingest", help="Record donations and contracts from a file")
    ingest.add_argument(
        "file",
        type=str,
        help="JSON-lines file with one donation or contract per line",
    )

    evict = subparsers.add_parser("evict", help="Age old transfers out of the trailing window")
    evict.add_argument(
        "--window-days",
        type=_positive_int,
        default=None,
        help="Length of the trailing window in days (defaults to config)",
    )

    show = subparsers.add_parser("show", help="Print totals and history of a character")
    show.add_argument("character_id", type=_positive_int, help="Character id")

    standing = subparsers.add_parser("standing", help="Set the good standing flag")
    standing.add_argument("character_id", type=_positive_int, help="Character id")
    flag = standing.add_mutually_exclusive_group(required=True)
    flag.add_argument(
        "--good",
        dest="good_standing",
        action="store_true",
        help="Mark the character as in good standing",
    )
    flag.add_argument(
        "--bad",
        dest="good_standing",
        action="store_false",
        help="Clear the good standing flag",
    )

    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)

    try:
        if parsed_args.command == "ingest":
            result = ingest_transfers(path=parsed_args.file)
            log.info(
                "Ingest finished: donations=%s, contracts=%s, skipped=%s",
                result.donations,
                result.contracts,
                result.skipped,
            )
        elif parsed_args.command == "evict":
            eviction = evict_window(window_days=parsed_args.window_days)
            log.info(
                "Eviction finished: window_start=%s, donations=%s, contracts=%s",
                eviction.window_start.isoformat(),
                eviction.donations,
                eviction.contracts,
            )
        elif parsed_args.command == "show":
            details = show_character(parsed_args.character_id)
            sys.stdout.write(json.dumps(details.to_payload(), indent=2) + "\n")
        elif parsed_args.command == "standing":
            update_standing(
                parsed_args.character_id,
                good_standing=parsed_args.good_standing,
            )
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")

    except Exception:
        log.exception("Fatal error in %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
