"""mprisbridge demo mode: small example players that log every request they receive."""
from __future__ import annotations

import argparse
import signal
import sys
from typing import List, Optional

from gi.repository import GLib

from mprisbridge.core.events import PlayerEvent
from mprisbridge.core.log import print_and_log, LOG__GENERAL
from mprisbridge.dbuslayer.service import create_player
from mprisbridge.mpris_ref.constants import *

DEMO_OPTIONS = {
    "name": "mprisbridge_demo",
    "identity": "mprisbridge demo player",
    "supported_mime_types": ["audio/mpeg", "application/ogg"],
    "supported_uri_schemes": ["file"],
}

PLAYER_EVENTS = (
    PlayerEvent.RAISE,
    PlayerEvent.QUIT,
    PlayerEvent.NEXT,
    PlayerEvent.PREVIOUS,
    PlayerEvent.PAUSE,
    PlayerEvent.PLAY_PAUSE,
    PlayerEvent.STOP,
    PlayerEvent.PLAY,
    PlayerEvent.SEEK,
    PlayerEvent.POSITION,
    PlayerEvent.OPEN,
    PlayerEvent.VOLUME,
    PlayerEvent.LOOP_STATUS,
    PlayerEvent.SHUFFLE,
)
TRACKLIST_EVENTS = (PlayerEvent.ADD_TRACK, PlayerEvent.REMOVE_TRACK, PlayerEvent.GO_TO)


def log_events(player, events) -> None:
    """Print every occurrence of *events* on *player*."""
    for event in events:
        def _cb(*args, _event=event):
            print_and_log(f"[*] Event: {_event.value} {' '.join(repr(a) for a in args)}".rstrip(), LOG__GENERAL)
        player.on(event, _cb)


def setup_player_demo(player, schedule=GLib.timeout_add_seconds) -> None:
    log_events(player, PLAYER_EVENTS)

    def _publish_track():
        player.metadata = {
            METADATA_ART_URL: "file:///usr/share/pixmaps/example.png",
            METADATA_LENGTH: 60 * 1000 * 1000,
            METADATA_TRACKID: player.object_path("track/0"),
            METADATA_ALBUM: "Track album",
            METADATA_ARTIST: ["Artist name"],
            METADATA_TITLE: "Track title",
        }
        player.playback_status = PLAYBACK_STATUS_PLAYING
        return False

    def _seeked():
        player.seeked(0)
        return False

    schedule(1, _publish_track)
    schedule(2, _seeked)


def setup_playlists_demo(player) -> None:
    def _activate(playlist_id):
        print_and_log(f"[*] Activate playlist: {playlist_id}", LOG__GENERAL)
        player.set_active_playlist(playlist_id)

    player.on(PlayerEvent.ACTIVATE_PLAYLIST, _activate)
    player.set_playlists([
        {"Id": player.object_path("playlist/0"), "Name": "The best playlist", "Icon": ""},
        {"Id": player.object_path("playlist/1"), "Name": "The wonderful playlist", "Icon": ""},
        {"Id": player.object_path("playlist/2"), "Name": "The loudest playlist", "Icon": ""},
        {"Id": player.object_path("playlist/3"), "Name": "The coolest playlist", "Icon": ""},
    ])


def setup_tracklist_demo(player) -> None:
    log_events(player, TRACKLIST_EVENTS)
    player.tracks = [
        {
            METADATA_ART_URL: "http://example.org/image.jpg",
            METADATA_LENGTH: 60 * 1000 * 1000,
            METADATA_TRACKID: player.object_path(f"track/{i}"),
            METADATA_ALBUM: f"Track {i + 1} album name",
            METADATA_ARTIST: f"Track {i + 1} artist",
            METADATA_TITLE: f"Track {i + 1} title",
        }
        for i in range(2)
    ]


DEMOS = {
    "player": ((FACET_PLAYER,), setup_player_demo),
    "playlists": ((FACET_PLAYLISTS,), setup_playlists_demo),
    "tracklist": ((FACET_TRACKLIST,), setup_tracklist_demo),
}


def _arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="mprisbridge-demo", add_help=False)
    p.add_argument("kind", choices=sorted(DEMOS), help="Which example player to run")
    p.add_argument("--name", default=DEMO_OPTIONS["name"], help="Bus name suffix")
    p.add_argument("--time", type=int, default=0, help="Run duration (s), 0 runs until Ctrl+C or Quit")
    p.add_argument("--help", "-h", action="help")
    return p


def run(loop: GLib.MainLoop, duration: int) -> None:
    def _sigint(_s, _f):
        loop.quit()

    signal.signal(signal.SIGINT, _sigint)
    if duration > 0:
        GLib.timeout_add_seconds(duration, loop.quit)
    loop.run()


def main(argv: Optional[List[str]] = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    args = _arg_parser().parse_args(argv)

    facets, setup = DEMOS[args.kind]
    options = dict(DEMO_OPTIONS, name=args.name, supported_interfaces=list(facets))

    loop = GLib.MainLoop()
    player, service = create_player(publish=False, **options)
    player.on(PlayerEvent.QUIT, lambda: loop.quit())
    player.on(PlayerEvent.ERROR, lambda err: (print_and_log(f"[-] {err}", LOG__GENERAL), loop.quit()))

    if not service.publish():
        return 1
    setup(player)

    print_and_log(f"[*] {args.kind} demo running as {service.bus_name}… Ctrl+C to stop", LOG__GENERAL)
    run(loop, args.time)
    service.unpublish()
    print_and_log("[*] Done", LOG__GENERAL)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
