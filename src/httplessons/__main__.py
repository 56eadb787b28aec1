"""
=============================================================================
HTTP LESSONS CLI ENTRY POINT
=============================================================================

    # Which lessons are there?
    python -m httplessons --list

    # Run one (port 5000 by default)
    python -m httplessons http-basics
    python -m httplessons route-params-explained --port 3000

    # Middleware attached per path instead of globally
    python -m httplessons middleware --scope path

    # Same thing through the installed console script
    http-lessons methods --log-level DEBUG

=============================================================================
CONFIGURATION ORDER
=============================================================================

    1. ServerConfig defaults
    2. HTTP_* environment variables      (ServerConfig.from_env)
    3. Command line flags                 (only the ones given)

The result is validated before anything binds a socket, so a bad port
or a missing assets directory exits with status 2 and a message instead
of a traceback.

=============================================================================
"""

import argparse
import sys
from functools import partial
from typing import Optional, Sequence

from . import __version__
from .config import ServerConfig
from .lessons import LESSONS, SCOPED_LESSONS, get_lesson
from .lessons.middleware_usage import SCOPES


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="http-lessons",
        description="Step-by-step HTTP server lessons, from a raw listener to a REST API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  http-lessons --list                          # Show all lessons
  http-lessons http-basics                     # Raw listener on :5000
  http-lessons route-params-explained -p 3000  # Custom port
  http-lessons middleware --scope route        # Route-level middleware
        """
    )

    parser.add_argument(
        "lesson",
        nargs="?",
        choices=list(LESSONS),
        metavar="LESSON",
        help="Lesson to run (see --list)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=None,
        help="Host to bind to (default: 127.0.0.1, use 0.0.0.0 for containers)"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help="Port to listen on (default: 5000)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # LESSON ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--assets", "-a",
        default=None,
        help="Directory with public/, navbar-app/ and methods-public/ (default: bundled)"
    )

    parser.add_argument(
        "--scope",
        choices=SCOPES,
        default=None,
        help="Where the middleware lessons attach their middleware (default: global)"
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # META ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--list",
        action="store_true",
        help="List the available lessons and exit"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"http-lessons {__version__}"
    )

    return parser


def build_config(args: argparse.Namespace) -> ServerConfig:
    """Environment first, then whatever flags were actually given."""
    config = ServerConfig.from_env()

    if args.host is not None:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.assets is not None:
        config.assets_dir = args.assets
    if args.log_level is not None:
        config.log_level = args.log_level

    config.validate()
    return config


def list_lessons() -> None:
    width = max(len(name) for name in LESSONS)
    for name, (_, description) in LESSONS.items():
        print(f"  {name:<{width}}  {description}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list:
        list_lessons()
        return 0

    if args.lesson is None:
        parser.error("a lesson name is required (see --list)")

    if args.scope is not None and args.lesson not in SCOPED_LESSONS:
        parser.error(f"--scope only applies to: {', '.join(SCOPED_LESSONS)}")

    try:
        config = build_config(args)
    except ValueError as e:
        parser.error(str(e))

    factory = get_lesson(args.lesson)
    if args.scope is not None:
        factory = partial(factory, scope=args.scope)

    try:
        app = factory(config)
        app.run()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
