"""
Command-line interface for displayconfig-mutter.

Usage:
    displayconfig-mutter [options] command [command options]

Commands:
    list    List monitors, or the modes of one monitor
    set     Change resolution, refresh rate, VRR, scaling or HDR of a monitor
    init    Write a default config file
"""

import argparse
import logging
import math
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from .apply import Method
from .config import Config
from .exceptions import (
    DisplayConfigError,
    ConfigError,
    ConfigValidationError,
    ResolveError,
    ServiceUnavailableError,
    TransportError,
)
from .commands import (
    init_config,
    list_modes,
    list_monitors,
    set_config,
)
from .mutter import DisplayConfigClient
from .resolver import Intent

TRUE_VALUES = ("true", "yes", "on", "1")
FALSE_VALUES = ("false", "no", "off", "0")


def setup_logging(level: str = "WARNING") -> None:
    """Configure logging. Calling it again only changes the level."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    logging.getLogger().setLevel(getattr(logging, level.upper()))


def parse_resolution(value: str) -> Tuple[int, int]:
    """Parse "1920x1080" (or "1920X1080") into a (width, height) pair."""
    parts = value.lower().split("x")
    if len(parts) != 2:
        raise argparse.ArgumentTypeError(
            "could not parse resolution string, expected format is <width>x<height>, e.g. 1920x1080"
        )
    try:
        width, height = int(parts[0]), int(parts[1])
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"could not parse resolution {value!r}, width and height must be numbers"
        )
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError(f"resolution {value!r} must be positive")
    return width, height


def parse_refresh_rate(value: str) -> float:
    """Parse a refresh rate in Hz; must be a positive finite number."""
    try:
        rate = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"could not parse refresh rate {value!r}, expected a number")
    if not math.isfinite(rate) or rate <= 0:
        raise argparse.ArgumentTypeError(f"refresh rate {value!r} must be a positive number")
    return rate


def parse_bool(value: str) -> bool:
    """Parse a boolean option value such as "true", "off" or "1"."""
    lowered = value.lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise argparse.ArgumentTypeError(
        f"expected a boolean ({'/'.join(TRUE_VALUES)} or {'/'.join(FALSE_VALUES)}), got {value!r}"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="displayconfig-mutter",
        description="Inspect and change the monitor configuration of a GNOME session"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config file"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    list_parser = subparsers.add_parser("list", help="List monitors")
    list_parser.add_argument(
        "-c", "--connector",
        help="List all available modes of the monitor with this connector name"
    )
    list_parser.add_argument(
        "--format",
        choices=["table", "json"],
        default=None,
        help="Output format (default: from config, table)"
    )

    set_parser = subparsers.add_parser("set", help="Set monitor configuration")
    set_parser.add_argument(
        "-c", "--connector",
        required=True,
        help="Name of monitor connector, e.g. DP-1, HDMI-2"
    )
    set_parser.add_argument(
        "-p", "--persistent",
        action="store_true",
        help="Save the configuration after applying it; the session asks to confirm it"
    )
    set_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only verify the configuration, do not apply it"
    )
    resolution_group = set_parser.add_mutually_exclusive_group()
    resolution_group.add_argument(
        "-r", "--resolution",
        type=parse_resolution,
        help="New resolution, e.g. 1920x1080, 3840x2160"
    )
    resolution_group.add_argument(
        "--max-resolution",
        action="store_true",
        help="Select the highest available resolution"
    )
    refresh_group = set_parser.add_mutually_exclusive_group()
    refresh_group.add_argument(
        "--refresh-rate",
        type=parse_refresh_rate,
        help="Refresh rate in Hz; the closest available rate is used"
    )
    refresh_group.add_argument(
        "--max-refresh-rate",
        action="store_true",
        help="Select the highest refresh rate for the selected resolution"
    )
    set_parser.add_argument(
        "--vrr",
        type=parse_bool,
        help="Variable refresh rate (true/false)"
    )
    set_parser.add_argument(
        "--scaling",
        type=int,
        help="UI scaling as a percentage, e.g. 100, 125, 200"
    )
    set_parser.add_argument(
        "--hdr",
        type=parse_bool,
        help="High dynamic range color mode (true/false)"
    )

    subparsers.add_parser("init", help="Write a default config file")

    return parser


def intent_from_args(args: argparse.Namespace) -> Intent:
    """Build the requested change from parsed set arguments."""
    return Intent(
        resolution=args.resolution,
        max_resolution=args.max_resolution,
        refresh_rate=args.refresh_rate,
        max_refresh_rate=args.max_refresh_rate,
        vrr=args.vrr,
        scaling_percent=args.scaling,
        hdr=args.hdr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logger = logging.getLogger(__name__)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging("DEBUG" if args.verbose else "WARNING")

    try:
        config = Config.load(config_file=args.config)
        if not args.verbose:
            setup_logging(config.logging.level)

        if args.command == "init":
            init_config(config, args.config)
            return 0

        if args.command == "set":
            # Reject contradictory options before touching the bus
            intent = intent_from_args(args)
            method = Method.for_flags(persistent=args.persistent, dry_run=args.dry_run)
            client = DisplayConfigClient.connect(config.dbus)
            set_config(client, args.connector, intent, method)
        elif args.command == "list":
            format_output = args.format or config.output.format
            client = DisplayConfigClient.connect(config.dbus)
            state = client.fetch_state()
            if args.connector:
                list_modes(state, args.connector, format_output)
            else:
                list_monitors(state, format_output)
        else:
            parser.print_help()
            return 1

        return 0

    # Handle specific error types with appropriate exit codes and messages
    except KeyboardInterrupt:
        print("\nCancelled by user", file=sys.stderr)
        return 130

    except ConfigValidationError as e:
        print(f"Configuration Validation Error: {e}", file=sys.stderr)
        return 78  # EX_CONFIG

    except ConfigError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return 78  # EX_CONFIG

    except ResolveError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 65  # EX_DATAERR

    except ServiceUnavailableError as e:
        print(f"Display Service Unavailable: {e}", file=sys.stderr)
        return 69  # EX_UNAVAILABLE

    except TransportError as e:
        print(f"Display Service Error: {e}", file=sys.stderr)
        return 76  # EX_PROTOCOL

    except DisplayConfigError as e:
        # Catch-all for any other displayconfig errors
        print(f"Error: {e}", file=sys.stderr)
        logger.error(str(e))
        if args.verbose:
            raise
        return 1

    except Exception as e:
        # Unexpected errors (including broken resolver invariants)
        print(f"Unexpected Error: {type(e).__name__}: {e}", file=sys.stderr)
        logger.error(f"Unexpected error: {type(e).__name__}: {e}")
        if args.verbose:
            raise
        print("Run with -v/--verbose for full traceback.", file=sys.stderr)
        return 70  # EX_SOFTWARE


if __name__ == "__main__":
    sys.exit(main())
