"""Run-modes for the mprisbridge CLI.

``demo`` ports the three example players, ``serve`` publishes a player
described by a YAML file.  Both run a GLib main loop until interrupted.
"""

__all__ = ["demo", "serve"]
