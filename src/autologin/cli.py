"""Command-line interface for autologin."""

import argparse
import asyncio
import json
import sys
from typing import Dict, List, Optional

from autologin.config import Config, config_file_path
from autologin.errors import AutoLoginError
from autologin.login_executor import LoginExecutor
from autologin.logging_config import setup_logging
from autologin.models import Credentials
from autologin.session_store import SessionStore


def parse_field_overrides(pairs: Optional[List[str]]) -> Dict[str, str]:
    """Turn ``name=value`` arguments into a field mapping.

    Raises:
        ValueError: If an argument has no ``=``
    """
    overrides: Dict[str, str] = {}
    for pair in pairs or []:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise ValueError(f"Invalid field override '{pair}', expected name=value")
        overrides[name] = value
    return overrides


def load_config(args) -> Config:
    config = Config.from_file(args.config or config_file_path())
    if getattr(args, "host", None):
        config.host = args.host
    if getattr(args, "port", None):
        config.port = args.port
    if args.log_level:
        config.log_level = args.log_level
    if args.log_file:
        config.log_file = args.log_file
    return config


def serve_command(args, config: Config):
    """Run the HTTP API."""
    import uvicorn

    from autologin.api import create_app

    app = create_app(config=config, store=SessionStore())
    print(f"Auto Login Tool running on http://{config.host}:{config.port}")
    print("⚠️  WARNING: Only use on websites you own or have permission to test!")
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())


def login_command(args, config: Config):
    """Log into a site once and print the result as JSON."""
    try:
        overrides = parse_field_overrides(args.field)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    executor = LoginExecutor(SessionStore(), config=config)
    try:
        result = asyncio.run(
            executor.execute(
                args.url,
                Credentials(identifier=args.email, secret=args.password),
                overrides=overrides,
            )
        )
    except AutoLoginError as e:
        print(f"❌ {e.message}: {e.details}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(result.to_dict(), indent=2))


def main():
    defaults = Config.from_env()
    parser = argparse.ArgumentParser(
        description="Auto Login Tool - detect login forms, sign in and inspect protected pages"
    )

    # Global flags (before subcommands)
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help=f"Set logging verbosity (default: {defaults.log_level})",
    )
    parser.add_argument(
        "--log-file",
        help="Write logs to file in addition to console",
    )
    parser.add_argument(
        "--config",
        help=f"JSON configuration file (default: {config_file_path()})",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API.")
    serve_parser.add_argument("--host", help=f"Bind address (default: {defaults.host})")
    serve_parser.add_argument("--port", type=int, help=f"Port (default: {defaults.port})")
    serve_parser.set_defaults(func=serve_command)

    login_parser = subparsers.add_parser("login", help="Log into a site once.")
    login_parser.add_argument("url", help="Login page URL")
    login_parser.add_argument("--email", "-e", required=True, help="Login identifier")
    login_parser.add_argument("--password", "-p", required=True, help="Login secret")
    login_parser.add_argument(
        "--field",
        action="append",
        metavar="NAME=VALUE",
        help="Explicit form field; when given, replaces field detection (repeatable)",
    )
    login_parser.set_defaults(func=login_command)

    args = parser.parse_args()

    config = load_config(args)
    setup_logging(config)

    if hasattr(args, "func"):
        args.func(args, config)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
