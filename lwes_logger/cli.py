"""
lwes-logger CLI - Main entry point.

Sends one-off log calls through an LwesLogger and prints events received
from a multicast group.

Usage:
    lwes-logger emit --address 224.1.1.11 --severity info "deploy finished"
    lwes-logger emit --config config/logger.yaml --data build=1234 "deploy finished"
    lwes-logger listen --address 224.1.1.11 --port 12345
"""

import argparse
import json
import sys
import time
from dataclasses import fields, replace
from typing import Any, Dict, List, Optional

from .config import LoggerConfig
from .emitters import TRANSPORTS
from .exceptions import ConfigError, LwesLoggerError
from .listener import MulticastListener
from .logger import LwesLogger
from .observability import DiagnosticEvent, create_logger


def parse_data(pairs: List[str]) -> Dict[str, str]:
    """
    Parse KEY=VALUE arguments.

    Raises:
        ValueError: If an item has no "="
    """
    data = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Invalid --data item (expected KEY=VALUE): {pair}")
        data[key] = value
    return data


def build_config(args: argparse.Namespace) -> LoggerConfig:
    """Merge --config file values with command-line overrides."""
    values: Dict[str, Any] = {}
    if args.config:
        config = LoggerConfig.from_yaml(args.config)
        values = {f.name: getattr(config, f.name) for f in fields(config)}
        create_logger("cli").info(
            event=DiagnosticEvent.CONFIG_LOADED,
            message="Loaded logger config",
            metadata={'path': args.config}
        )

    overrides = {
        'address': args.address,
        'port': args.port,
        'namespace': getattr(args, "namespace", None),
        'transport': getattr(args, "transport", None),
        'progname': getattr(args, "progname", None),
    }
    values.update({key: value for key, value in overrides.items() if value is not None})

    if getattr(args, "no_full", False):
        values['full_logs_event'] = None
    if getattr(args, "full_only", False):
        values['full_logs_only'] = True

    return LoggerConfig.from_dict(values)


def run_emit(args: argparse.Namespace) -> int:
    if args.severity == "any" and (args.data or args.progname):
        raise ConfigError("--data and --progname cannot be used with --severity any")

    config = build_config(args)
    data = parse_data(args.data)
    if args.echo:
        config = replace(config, log_device=sys.stdout)

    with LwesLogger.from_config(config) as logger:
        if args.severity == "any":
            logger.append(args.message)
        else:
            logger.add(args.severity, args.message, data=data)
    return 0


def run_listen(args: argparse.Namespace) -> int:
    def print_event(channel: str, fields: Dict[str, Any]) -> None:
        print(json.dumps({'channel': channel, 'fields': fields}), flush=True)

    listener = MulticastListener(args.address, port=args.port or 12345,
                                 on_event=print_event, iface=args.iface)
    listener.start()
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        listener.stop()
    return 0


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lwes-logger",
        description="Emit and inspect structured log events",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Emit one INFO event (LwesLogger::Full and LwesLogger::Info)
  lwes-logger emit --address 224.1.1.11 --severity info "deploy finished"

  # Use a YAML config and attach extra fields
  lwes-logger emit --config logger.yaml --data build=1234 "deploy finished"

  # Print every event seen on a multicast group
  lwes-logger listen --address 224.1.1.11 --port 12345
"""
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    emit = subparsers.add_parser("emit", help="Send one log call")
    emit.add_argument("message", help="Log message")
    emit.add_argument("--config", help="YAML logger config")
    emit.add_argument("--address", help="Transport address (overrides config)")
    emit.add_argument("--port", type=int, help="Transport port")
    emit.add_argument("--transport", choices=TRANSPORTS, help="Event transport")
    emit.add_argument("--namespace", help="Event namespace")
    emit.add_argument("--progname", help="Program name")
    emit.add_argument(
        "--severity",
        default="info",
        choices=["debug", "info", "warn", "error", "fatal", "unknown", "any"],
        help="Severity (any = raw append, message only) (default: info)"
    )
    emit.add_argument("--data", action="append", default=[], metavar="KEY=VALUE",
                      help="Extra event field (repeatable)")
    emit.add_argument("--no-full", action="store_true", help="Disable the full-logs channel")
    emit.add_argument("--full-only", action="store_true", help="Only emit to the full-logs channel")
    emit.add_argument("--echo", action="store_true", help="Also print the text line to stdout")
    emit.set_defaults(handler=run_emit)

    listen = subparsers.add_parser("listen", help="Print received events as JSON lines")
    listen.add_argument("--address", required=True, help="Multicast group or local address")
    listen.add_argument("--port", type=int, help="UDP port (default: 12345)")
    listen.add_argument("--iface", default="0.0.0.0", help="Interface to join on")
    listen.set_defaults(handler=run_listen)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        return args.handler(args)
    except (FileNotFoundError, ValueError, LwesLoggerError) as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
