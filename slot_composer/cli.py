import argparse
import logging
import sys
from datetime import datetime

from pydantic import ValidationError

from slot_composer import run

# --- Logging Setup ---

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool):
    """Configures logging to stderr with local time."""
    import time

    level = logging.DEBUG if verbose else logging.INFO
    handler = logging.StreamHandler(sys.stderr)
    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s]: %(name)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    formatter.converter = time.localtime
    handler.setFormatter(formatter)

    logging.basicConfig(
        level=level,
        handlers=[handler],
    )


def parse_arguments():
    """Parses command line arguments."""
    parser = argparse.ArgumentParser(description="Replay picker actions and print the poll options they produce.")
    parser.add_argument("script", nargs="?", default="-", help="JSON action script. Reads stdin when omitted or '-'.")
    parser.add_argument("--today", type=str, help="Reference date in YYYY-MM-DD format. Defaults to today.")
    parser.add_argument("--json", action="store_true", help="Print emitted options as JSON.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging.")
    return parser.parse_args()


def main():
    args = parse_arguments()
    setup_logging(args.verbose)

    today = None
    if args.today:
        try:
            today = datetime.strptime(args.today, "%Y-%m-%d").date()
        except ValueError:
            logger.error("Error: --today must be in YYYY-MM-DD format.")
            sys.exit(1)

    try:
        run.run(args.script, today=today, as_json=args.json)
    except (OSError, ValueError, ValidationError) as e:
        logger.error(f"Failed to load script {args.script}: {e}")
        sys.exit(1)
