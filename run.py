"""Endless Dungeon CLI entry point.

Provides subcommands for running the Socket.IO server and for printing a
text preview of a freshly generated maze. Accepts configuration via flags and
environment variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import functools
import os
import signal
import sys
from textwrap import dedent

from dotenv import load_dotenv


def _load_version() -> str:
    try:
        with open(os.path.join(os.path.dirname(os.path.abspath(__file__)), "VERSION"), "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return "0.1.0"


__version__ = _load_version()


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Endless Dungeon

    Run the real-time Flask-SocketIO game server or print a text preview of a
    generated maze. Configuration can be provided via CLI flags or environment
    variables. If both are present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                     Bind address for the web server (default: 0.0.0.0)
          PORT                     Port for the web server (default: 5000)
          MAZE_SEED                Seed the maze sequence for reproducible play
          MAZE_GOAL_DELAY          Seconds between reaching the goal and the next maze (default: 1.0)
          MAZE_REBUILD_THRESHOLD   Tile size change (px) that rebuilds on resize (default: 4)

        Examples:
          # Run the server on the default host and port
          python run.py server

          # Bind to localhost only on a custom port
          python run.py server --host 127.0.0.1 --port 8080

          # Load variables from .env then run the server
          python run.py --env-file .env server

          # Print the maze a 1050x704 canvas would get
          python run.py preview --width 1050 --height 704 --seed 7
        """
    )

    parser = argparse.ArgumentParser(
        prog="endless-dungeon",
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
        version=f"Endless Dungeon {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

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

    preview_parser = subparsers.add_parser(
        "preview",
        help="Print an ASCII rendering of a generated maze",
        formatter_class=argparse.RawTextHelpFormatter,
        description=dedent(
            """
            Build one maze for the given canvas size and print it.

            Legend: # wall  . floor  + door  X goal  @ avatar start
            """
        ),
    )
    preview_parser.add_argument("--width", type=int, default=1050, help="Canvas width in pixels (default: 1050)")
    preview_parser.add_argument("--height", type=int, default=704, help="Canvas height in pixels (default: 704)")
    preview_parser.add_argument(
        "--layout",
        choices=("standard", "compact"),
        default="standard",
        help="Layout mode (default: standard)",
    )
    preview_parser.add_argument("--seed", type=int, default=None, help="Generator seed (default: random)")
    preview_parser.set_defaults(command="preview")

    # If no subcommand provided, default to server
    if len(argv) == 0:
        argv = ["server"]

    return parser.parse_args(argv)


def run_preview(width: int, height: int, layout: str, seed=None) -> int:
    from endless_dungeon.maze import MazeError, build, generate_maze, to_ascii

    try:
        session = build(width, height, layout, generator=functools.partial(generate_maze, seed=seed))
    except MazeError as exc:
        print(f"[ERROR] Maze generation failed: {exc}", file=sys.stderr)
        return 1
    print(
        f"{session.cols}x{session.rows} tiles @ {session.tile_size}px "
        f"start={session.start} goal={session.goal} seed={getattr(session.grid, 'seed', None)}"
    )
    print(to_ascii(session))
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    mode = (getattr(args, "command", None) or "server").lower()
    if mode == "preview":
        return run_preview(args.width, args.height, args.layout, args.seed)

    host = getattr(args, "host", None) or os.getenv("HOST", "0.0.0.0")
    port = int(getattr(args, "port", None) or os.getenv("PORT", "5000"))

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    # Import server entrypoints only after environment is ready
    from endless_dungeon.logging_utils import log
    from endless_dungeon.server import start_server

    divider = "=" * 40
    print(
        "\n".join(
            [
                divider,
                f"  Endless Dungeon {__version__}",
                divider,
                f"  {'Host:':12} {host}",
                f"  {'Port:':12} {port}",
                f"  {'WebSockets:':12} enabled",
                divider,
                "",
            ]
        )
    )
    log.info(event="startup", mode=mode, host=host, port=port)
    start_server(host=host, port=port, debug=bool(getattr(args, "debug", False)))
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main(sys.argv[1:]))
