"""Command-line helpers for configuring persons logging."""

from persons.logging import get_logger, reset_logger
from persons.logging.config import config_path, save_log_level
from persons.logging.logging import _resolve_log_file, get_configured_level

LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def register_subcommands(subparsers):
    """Register logging subcommands on the provided ``argparse`` object."""

    set_level_parser = subparsers.add_parser("set-level", help="Set and persist the logging level")
    set_level_parser.add_argument("level", type=str.upper, choices=LEVELS, help="Logging level to use")

    subparsers.add_parser("show-path", help="Show the log file location")
    subparsers.add_parser("show-level", help="Show the configured logging level")
    subparsers.add_parser("show-config", help="Show the logging config file location")


def dispatch(args):
    """Execute the logging command associated with ``args.subcommand``."""

    if args.subcommand == "set-level":
        path = save_log_level(args.level)
        reset_logger()
        get_logger().info("log level set to %s (saved to %s)", args.level, path)
    elif args.subcommand == "show-path":
        print(_resolve_log_file().resolve())
    elif args.subcommand == "show-level":
        get_logger()
        print(get_configured_level())
    elif args.subcommand == "show-config":
        print(config_path().resolve())
    else:
        get_logger(__file__).error("No handler for subcommand: %s", args.subcommand)
