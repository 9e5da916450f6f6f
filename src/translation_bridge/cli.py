"""
Command-line interface for the translation bridge.

Provides CLI commands for running and inspecting the bridge:
- run: Start the HTTP server
- show-config: Print the effective configuration

Usage:
    translation-bridge run [--host HOST] [--port PORT]
    translation-bridge show-config

Environment Variables:
    BRIDGE_HOST: Host to bind the server (default: 0.0.0.0)
    BRIDGE_PORT: Port to listen on (default: 8080; PORT is also honoured)
    BRIDGE_UPSTREAM_URL: Translation engine endpoint
    BRIDGE_DEFAULT_TARGET_LANGUAGE: Target language when none is requested
"""

import argparse
import sys


def cmd_run(args: argparse.Namespace) -> int:
    """
    Run the bridge server.

    Configuration Priority:
        1. CLI arguments (--host, --port)
        2. Environment variables (BRIDGE_HOST, BRIDGE_PORT)
        3. config/server.ini, then built-in defaults

    Returns:
        0 on clean shutdown (Ctrl+C), 1 on a startup error.
    """
    from translation_bridge.api.server import start_server

    try:
        start_server(host=getattr(args, "host", None), port=getattr(args, "port", None))
        return 0
    except KeyboardInterrupt:
        print("\nServer stopped.")
        return 0
    except Exception as e:
        print(f"Error starting server: {e}", file=sys.stderr)
        return 1


def cmd_show_config(args: argparse.Namespace) -> int:
    """Print the effective configuration summary."""
    from translation_bridge.config import print_config_summary

    print_config_summary()
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="translation-bridge",
        description="Translation Bridge - chat-completion front-end for a translation engine",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # run command
    run_parser = subparsers.add_parser(
        "run",
        help="Run the bridge server",
        description="Start the HTTP server on the configured host and port.",
    )
    run_parser.add_argument(
        "--port",
        "-p",
        type=int,
        help="Port to listen on (default: 8080, or BRIDGE_PORT env var)",
    )
    run_parser.add_argument(
        "--host",
        type=str,
        help="Host to bind to (default: 0.0.0.0, or BRIDGE_HOST env var)",
    )
    run_parser.set_defaults(func=cmd_run)

    # show-config command
    show_parser = subparsers.add_parser(
        "show-config",
        help="Show the effective configuration",
        description="Print where configuration was loaded from and the resulting values.",
    )
    show_parser.set_defaults(func=cmd_show_config)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
