"""Command line entry point: replay events against a race config."""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from racing_metrics.config import load_config
from racing_metrics.event_logger import EventLogger
from racing_metrics.runner import RaceError


def main(argv: Optional[List[str]] = None) -> int:
    """Run the events file against the config and print the table."""
    parser = argparse.ArgumentParser(
        prog="racing-metrics",
        description="Replay race events and print the resulting table.",
    )
    parser.add_argument("config", help="path to the JSON race config")
    parser.add_argument("events", help="path to the events file")
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except OSError as exc:
        print(f"Error reading JSON file: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"Error unmarshalling JSON: {exc}", file=sys.stderr)
        return 1

    logger = EventLogger(config)
    try:
        logger.run_file(args.events)
    except KeyboardInterrupt:
        print("context canceled", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"Error opening text file: {exc}", file=sys.stderr)
        return 1
    except RaceError as exc:
        print(f"Run error {exc}", file=sys.stderr)
        return 1

    logger.print_resulting_table()
    return 0


if __name__ == "__main__":
    sys.exit(main())