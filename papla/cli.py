"""Command-line entry point for running Papla tools."""

from typing import Dict, List, Optional
import argparse
import json
import logging
import sys

from papla import PaplaClient, PaplaConfigurationError, load_config, create_tool_registry
from papla.tools import ToolArgumentError, ToolNotFoundError

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(console_level: str = 'INFO', log_file: Optional[str] = None, file_level: str = 'DEBUG') -> None:
    """
    Configure the root logger with a console handler and an optional file handler.

    The root logger is set to DEBUG so each handler filters on its own level.
    Console output goes to stderr, keeping stdout free for tool envelopes.

    Args:
        console_level: Level for console output (case-insensitive, e.g. 'info')
        log_file: Optional path of a log file
        file_level: Level for the log file
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(getattr(logging, console_level.upper(), logging.INFO))
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file)
        except OSError as e:
            logger.warning("Could not create log file %s: %s", log_file, e)
        else:
            file_handler.setLevel(getattr(logging, file_level.upper(), logging.DEBUG))
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)


def parse_tool_arguments(args_json: Optional[str], pairs: Optional[List[str]]) -> Dict[str, str]:
    """
    Merge --args JSON and repeated --arg KEY=VALUE options into one dict.

    Raises:
        ValueError: If the JSON is not an object or a pair has no '='
    """
    arguments = {}
    if args_json:
        parsed = json.loads(args_json)
        if not isinstance(parsed, dict):
            raise ValueError("--args must be a JSON object")
        arguments.update(parsed)

    for pair in pairs or []:
        key, sep, value = pair.partition('=')
        if not sep or not key:
            raise ValueError(f"--arg expects KEY=VALUE, got '{pair}'")
        arguments[key] = value

    return arguments


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="papla-tools",
        description="Run Papla Media text-to-speech tools and print their results"
    )

    parser.add_argument("tool", nargs="?", help="Tool name (see --list-tools)")
    parser.add_argument("--list-tools", action="store_true", help="Describe all available tools and exit")
    parser.add_argument("--args", metavar="<json>", help="Tool arguments as a JSON object")
    parser.add_argument("--arg", metavar="KEY=VALUE", action="append", help="Single tool argument (repeatable)")
    parser.add_argument("--config", metavar="<path>", help="YAML configuration file")
    parser.add_argument("--log-level", default="WARNING", help="Console log level (default: WARNING)")
    parser.add_argument("--log-file", metavar="<path>", help="Also write DEBUG logs to this file")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for command-line execution."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(console_level=args.log_level, log_file=args.log_file)

    if not args.list_tools and not args.tool:
        parser.print_usage(sys.stderr)
        print("Error: a tool name or --list-tools is required", file=sys.stderr)
        return 1

    try:
        config = load_config(config_file=args.config)
    except PaplaConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    client = PaplaClient(api_key=config.api_key, base_url=config.api_base_url)
    registry = create_tool_registry(client, config)

    if args.list_tools:
        print(json.dumps(registry.describe(), indent=2))
        return 0

    try:
        arguments = parse_tool_arguments(args.args, args.arg)
        envelope = registry.call(args.tool, arguments)
    except (ToolArgumentError, ToolNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for block in envelope["content"]:
        print(block["text"])

    return 1 if envelope.get("isError") else 0


def run() -> None:
    """Console entry point: exit with main()'s status, or 130 on Ctrl+C."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n\nExiting...")
        sys.exit(130)


if __name__ == '__main__':
    run()
