#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from signal import SIGINT, signal
from threading import Event
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from addrsync.app import run_address_import
from addrsync.common.logging import configure_logging
from addrsync.config import CheckpointMode, ConfigurationError, get_import_config

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from addrsync.config import ImportConfig

cancel_requested = Event()


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Synchronise the local address register with the registry feed"
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        help="Entities stored per batch during a full import "
        "(default: ADDRSYNC_BATCH_SIZE or 5000)",
    )
    parser.add_argument(
        "--checkpoint-mode",
        choices=[mode.value for mode in CheckpointMode],
        help="Advance the checkpoint once per run (range) or per checkpoint (granular)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output",
    )
    return parser.parse_args(list(argv))


def _build_config(args: argparse.Namespace) -> ImportConfig:
    config = get_import_config()
    if args.batch_size is not None:
        config = replace(config, batch_size=args.batch_size)
    if args.checkpoint_mode is not None:
        config = replace(config, checkpoint_mode=CheckpointMode(args.checkpoint_mode))
    return config


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    try:
        parsed_args = _parse_args(sys.argv[1:] if argv is None else argv)
        configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
        config = _build_config(parsed_args)
    except (ValueError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)

    try:
        run_address_import(config=config, cancel=cancel_requested)
    except Exception as e:  # noqa: BLE001
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Ask the running import to stop at its next cancellation point."""
    print("\nStopping after the current step (Ctrl+C)")
    cancel_requested.set()


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
