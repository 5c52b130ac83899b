"""Delve CLI entry point.

Provides subcommands for running the Socket.IO server and for generating a
single dungeon pass in the terminal. Accepts configuration via flags and
environment variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import signal
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

# Disable colors if output is not a real terminal (e.g., during pytest capture)
_COLOR_ENABLED = sys.stdout.isatty()


def _load_version() -> str:
    try:
        with open(os.path.join(os.path.dirname(__file__), "VERSION"), "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return "0.1.0"


__version__ = _load_version()


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Delve dungeon generator

    Run the Flask-SocketIO server that serves generated dungeons, or generate
    a single pass and print it. Configuration can be provided via CLI flags or
    environment variables. If both are present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                    Bind address for the web server (default: 0.0.0.0)
          PORT                    Port for the web server (default: 5000)
          DUNGEON_WIDTH/HEIGHT    Grid size (default: 100x100)
          DUNGEON_MIN_LEAF_SIZE   Smallest splittable partition side (default: 10)
          DELVE_LOG_LEVEL         debug|info|warn|error (default: info)

        Examples:
          # Run the server on the default host and port
          python run.py server

          # Print a seeded boss map as ASCII
          python run.py generate --seed 42 --boss

          # Print the JSON summary and metrics of a 60x60 pass
          python run.py generate --seed 7 --width 60 --height 60 --json

          # Load variables from .env then run the server
          python run.py --env-file .env server
        """
    )

    parser = argparse.ArgumentParser(
        prog="Delve",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Delve {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # server subcommand
    server_parser = subparsers.add_parser(
        "server",
        help="Run the Socket.IO web server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the real-time Flask/Socket.IO server",
    )
    server_parser.add_argument(
        "--host",
        default=None,
        help="Host interface to bind (default: env HOST or 0.0.0.0)",
    )
    server_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: env PORT or 5000)",
    )
    server_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable Flask debug mode with verbose error pages",
    )
    server_parser.set_defaults(command="server")

    # generate subcommand
    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate one dungeon pass and print it",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Generate one pass and print an ASCII map ('@' start, '>' exit) or a JSON summary",
    )
    gen_parser.add_argument("--seed", type=int, default=None, help="Generation seed (default: random)")
    gen_parser.add_argument("--boss", action="store_true", help="Carve and connect the boss room")
    gen_parser.add_argument("--width", type=int, default=None, help="Grid width (default: env DUNGEON_WIDTH or 100)")
    gen_parser.add_argument("--height", type=int, default=None, help="Grid height (default: env DUNGEON_HEIGHT or 100)")
    gen_parser.add_argument("--json", dest="as_json", action="store_true", help="Print the JSON summary and metrics")
    gen_parser.set_defaults(command="generate")

    # If no subcommand provided, default to server
    if len(argv) == 0:
        argv = ["server"]

    args = parser.parse_args(argv)
    return args


def _generate(args: argparse.Namespace) -> int:
    from delve.dungeon import Dungeon, DungeonConfig

    overrides = {k: v for k, v in (("width", args.width), ("height", args.height)) if v is not None}
    try:
        config = DungeonConfig.from_env(**overrides).validate()
    except ValueError as exc:
        print(f"[ERROR] Invalid dungeon configuration: {exc}", file=sys.stderr)
        return 2
    dungeon = Dungeon(config=config, seed=args.seed, boss=args.boss)
    if args.as_json:
        data = dungeon.summary()
        data["metrics"] = dungeon.metrics
        print(json.dumps(data, indent=2))
    else:
        print(dungeon.to_ascii())
        print(f"seed={dungeon.seed} rooms={len(dungeon.get_rooms())} exit={dungeon.get_exit_location()}")
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    mode = (getattr(args, "command", None) or "server").lower()
    if mode == "generate":
        return _generate(args)

    # Resolve configuration from CLI flags or env vars
    host = getattr(args, "host", None) or os.getenv("HOST", "0.0.0.0")
    port = int(getattr(args, "port", None) or os.getenv("PORT", "5000"))

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    # Import server entrypoints only after environment is ready
    from delve.logging_utils import log
    from delve.server import start_server

    _color_init()
    title = (
        f"{Fore.CYAN}{Style.BRIGHT}Delve Dungeon Server{Style.RESET_ALL}" if _COLOR_ENABLED else "Delve Dungeon Server"
    )

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text

    def value(val: str | int) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if _COLOR_ENABLED else str(val)

    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if _COLOR_ENABLED else "=" * 40
    lines = [
        divider,
        f"  {title}",
        divider,
        f"  {label('Mode:'):12} {value(mode.upper())}",
        f"  {label('Host:'):12} {value(host)}",
        f"  {label('Port:'):12} {value(port)}",
        f"  {label('WebSockets:'):12} {value('enabled')}",
        divider,
        "",
    ]
    print("\n".join(lines))
    log.info(event="startup", mode=mode, host=host, port=port)

    start_server(host=host, port=port, debug=getattr(args, "debug", False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
