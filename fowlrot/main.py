"""fowlrot — a fowl wrapper that connects with rotating codes.

This is the application entry point.  It samples the clock once, loads
the configuration, derives the code for the current window and hands
execution over to fowl with the code appended.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence

from fowlrot.config import load_settings
from fowlrot.core.derivation import CodeDeriver
from fowlrot.domain.errors import ConfigurationError, RotationError
from fowlrot.foundation.clock import utc_timestamp
from fowlrot.services.launcher import ConnectionLauncher

VERSION = "0.1.0"

HELP_TEXT = f"""\
fowlrot v{VERSION} - A wrapper around fowl for reliable connections with rotating codes

Usage: fowlrot [fowl arguments...] [-v|--version|-h|--help]

Description:
  fowlrot generates a time-based rotating code and appends it to the arguments
  passed to the 'fowl' command. Peers sharing the same secret and rotation
  interval derive the same code without exchanging any message.

Arguments:
  [fowl arguments...]    Arguments to pass directly to the fowl command.
                         The rotating code will be appended automatically.
  -v, --version          Show version information
  -h, --help             Show this help message

Examples:
  # Server side: Allow connections on port 7657
  fowlrot --allow-connect 7657

  # Client side: Connect to the server
  fowlrot --connect 7657

Environment variables:
  FOWLROT_MODULO        Time rotation interval in seconds (min: 20, default: 60)
  FOWLROT_SECRET        Secret string for code generation (required)
  FOWLROT_BIN           Command to run fowl (default: uvx --quiet fowl@latest or fowl if uvx not found)
  FOWLROT_HRS_BIN       Command to run HumanReadableSeed (default: uvx --quiet HumanReadableSeed@latest or HumanReadableSeed if uvx not found)
  FOWLROT_LOG_LEVEL     Logging level (default: INFO)
"""

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        stream=sys.stderr,
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)

    if args and args[0] in ("-h", "--help"):
        print(HELP_TEXT, end="")
        return 0
    if args and args[0] in ("-v", "--version"):
        print(f"fowlrot v{VERSION}")
        return 0
    if not args:
        print("Error: No arguments provided to fowl.", file=sys.stderr)
        print(HELP_TEXT, end="", file=sys.stderr)
        return 1

    # Sampled once; every derivation step below reuses it.
    now = utc_timestamp()

    try:
        settings = load_settings()
    except ConfigurationError as exc:
        configure_logging("INFO")
        logger.error("%s", exc)
        return 1
    configure_logging(settings.log_level)

    try:
        config = settings.to_rotation_config()
        rotation = CodeDeriver.from_config(config).derive(now)
        logger.info(
            "Using code: %s (rotates in %ds, at %s)",
            rotation.code,
            rotation.seconds_remaining(now),
            rotation.expires_at.isoformat(),
        )
        ConnectionLauncher(config.fowl_command).launch(args, rotation.code)
    except RotationError as exc:
        logger.error("%s", exc)
        logger.error("Aborting operation.")
        return 1
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
