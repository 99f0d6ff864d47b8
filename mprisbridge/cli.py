"""
Command-line interface for mprisbridge.
"""

import argparse
import sys

# Ensure logging subsystem is initialised immediately
import mprisbridge.core.log  # noqa: F401

from . import __version__


def parse_args(args=None):
    parser = argparse.ArgumentParser(
        description="mprisbridge - MPRIS D-Bus interface for Python media players"
    )
    parser.add_argument("--version", action="version", version=f"mprisbridge {__version__}")

    subparsers = parser.add_subparsers(dest="mode", help="Operation mode")

    demo_parser = subparsers.add_parser("demo", help="Run an example player")
    demo_parser.add_argument("kind", choices=["player", "playlists", "tracklist"], help="Which example to run")
    demo_parser.add_argument("--name", help="Bus name suffix (org.mpris.MediaPlayer2.<name>)")
    demo_parser.add_argument("--time", type=int, default=0, help="Run duration seconds, 0 runs until stopped")

    serve_parser = subparsers.add_parser("serve", help="Publish a player described by a YAML file")
    serve_parser.add_argument("--config", "-c", help="Player YAML file")
    serve_parser.add_argument("--time", type=int, default=0, help="Run duration seconds, 0 runs until stopped")

    return parser.parse_args(args)


def apply_log_level():
    """Honour MPRISBRIDGE_LOG_LEVEL; return the level applied, or None."""
    import logging as _logging, os as _os
    from mprisbridge.core.config import LOG_LEVEL_ENV

    _lvl = _os.getenv(LOG_LEVEL_ENV)
    if not _lvl:
        return None
    level = _logging.getLevelName(_lvl.upper())
    if not isinstance(level, int):
        print(f"Ignoring unknown {LOG_LEVEL_ENV} value: {_lvl}", file=sys.stderr)
        return None
    _logging.getLogger("mprisbridge").setLevel(level)
    return level


def main(args=None):
    """Main entry point for mprisbridge."""
    args = parse_args(args)

    apply_log_level()

    try:
        if args.mode == "demo":
            from mprisbridge.modes import demo as _demo

            argv = [args.kind, "--time", str(args.time)]
            if args.name:
                argv += ["--name", args.name]
            return _demo.main(argv)

        elif args.mode == "serve":
            from mprisbridge.modes import serve as _serve

            argv = ["--time", str(args.time)]
            if args.config:
                argv += ["--config", args.config]
            return _serve.main(argv)

        else:
            parse_args(["--help"])
            return 0

    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
