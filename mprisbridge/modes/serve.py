"""mprisbridge serve mode: publish a player described by a YAML file.

Every observer event is logged; the player state itself is never changed, so
this mode is mostly useful to watch what a client sends.
"""
from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from gi.repository import GLib

from mprisbridge.core import config
from mprisbridge.core.errors import MPRISError
from mprisbridge.core.events import PlayerEvent
from mprisbridge.core.log import print_and_log, LOG__GENERAL
from mprisbridge.dbuslayer.service import create_player
from mprisbridge.modes.demo import log_events, run


def _arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="mprisbridge-serve", add_help=False)
    p.add_argument("--config", "-c", dest="config", help=f"Player YAML file (default {config.DEFAULT_PLAYER_CONFIG})")
    p.add_argument("--time", type=int, default=0, help="Run duration (s), 0 runs until Ctrl+C or Quit")
    p.add_argument("--help", "-h", action="help")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    args = _arg_parser().parse_args(argv)

    try:
        options = config.load_player_config(args.config)
    except FileNotFoundError as e:
        print_and_log(f"[-] Player configuration not found: {e.filename}", LOG__GENERAL)
        return 1
    except MPRISError as e:
        print_and_log(f"[-] {e}", LOG__GENERAL)
        return 1

    loop = GLib.MainLoop()
    player, service = create_player(publish=False, **options)
    log_events(player, [e for e in PlayerEvent if e is not PlayerEvent.ERROR])
    player.on(PlayerEvent.QUIT, lambda: loop.quit())
    player.on(PlayerEvent.ERROR, lambda err: (print_and_log(f"[-] {err}", LOG__GENERAL), loop.quit()))

    if not service.publish():
        return 1

    print_and_log(f"[*] Serving {service.bus_name}… Ctrl+C to stop", LOG__GENERAL)
    run(loop, args.time)
    service.unpublish()
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
