"""
Command-line interface for mprisctl.
"""

import argparse
import sys

from . import __version__
from mprisctl.core import log as _log
from mprisctl.core.config import load_settings
from mprisctl.core.errors import InvalidValueError, MPRISError
from mprisctl.core.log import print_and_log, LOG__USER
from mprisctl.core.metrics import log_metrics_summary
from mprisctl.dbuslayer.metadata import assemble, describe_track
from mprisctl.dbuslayer.names import (
    UNKNOWN,
    PropertyId,
    ValueKind,
    property_from_name,
    property_name,
    property_spec,
)
from mprisctl.dbuslayer.player import MprisMediaPlayer

# subcommand -> player method
_TRANSPORT = {
    "play": "play",
    "pause": "pause",
    "play-pause": "play_pause",
    "stop": "stop",
    "next": "next",
    "previous": "previous",
}

_PROPERTY_NAMES = [property_name(prop) for prop in PropertyId]


def parse_args(args=None):
    parser = argparse.ArgumentParser(
        description="mprisctl - control MPRIS2 media players on the session bus"
    )
    parser.add_argument("--version", action="version", version=f"mprisctl {__version__}")
    parser.add_argument("-p", "--player", help="Player bus name (e.g. org.mpris.MediaPlayer2.vlc)")
    parser.add_argument("--config", help="Path to config.yaml")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command")

    subparsers.add_parser("list", help="List running MPRIS2 players")
    subparsers.add_parser("status", help="Show capabilities, playback state and current track")
    subparsers.add_parser("metadata", help="Show the current track")
    for name in _TRANSPORT:
        subparsers.add_parser(name, help=f"Send {name} to the player")

    seek_parser = subparsers.add_parser("seek", help="Seek relative to the current position")
    seek_parser.add_argument("offset", type=int, help="Offset in microseconds (negative seeks back)")

    get_parser = subparsers.add_parser("get", help="Read a player property")
    get_parser.add_argument("property", choices=_PROPERTY_NAMES, help="Property name")

    set_parser = subparsers.add_parser("set", help="Write LoopStatus, Shuffle or Volume")
    set_parser.add_argument("property", choices=_PROPERTY_NAMES, help="Property name")
    set_parser.add_argument("value", help="New value (None|Track|Playlist, on|off, or a number)")

    subparsers.add_parser("menu", help="Interactive menu")

    return parser.parse_args(args)


def _parse_value(prop: PropertyId, text: str):
    spec = property_spec(prop)
    if spec.kind is ValueKind.BOOLEAN:
        lowered = text.lower()
        if lowered in {"on", "true", "1", "yes"}:
            return True
        if lowered in {"off", "false", "0", "no"}:
            return False
        raise InvalidValueError(spec.name, text, "expected on or off")
    if spec.kind is ValueKind.DOUBLE:
        try:
            return float(text)
        except ValueError:
            raise InvalidValueError(spec.name, text, "expected a number") from None
    return text


def _print_status(player: MprisMediaPlayer) -> None:
    print(f"Player:   {player.session_name}")
    print(f"Status:   {player.get_playback_status().value}")
    print(f"Loop:     {player.get_loop_status().value}")
    print(f"Shuffle:  {'on' if player.get_shuffle() else 'off'}")
    print(f"Volume:   {player.get_volume():.2f}")
    print(f"Position: {player.get_position() // 1_000_000}s")
    caps = {
        "control": player.can_control(),
        "next": player.can_go_next(),
        "previous": player.can_go_previous(),
        "pause": player.can_pause(),
        "play": player.can_play(),
        "seek": player.can_seek(),
    }
    print("Can:      " + ", ".join(name for name, ok in caps.items() if ok))
    print(describe_track(player.get_metadata()))


def run_command(args, player: MprisMediaPlayer) -> int:
    command = args.command or "status"

    if command == "list":
        players = player.list_players()
        if not players:
            print_and_log("[!] No MPRIS2 players found", LOG__USER)
        for name in players:
            print(name)
    elif command == "status":
        _print_status(player)
    elif command == "metadata":
        print(describe_track(player.get_metadata()))
    elif command in _TRANSPORT:
        getattr(player, _TRANSPORT[command])()
    elif command == "seek":
        player.seek(args.offset)
    elif command == "get":
        prop = property_from_name(args.property)
        value = player.get_property(prop)
        if prop is PropertyId.METADATA and value.kind is ValueKind.DICTIONARY:
            print(describe_track(assemble(value.value)))
        else:
            print(value.to_python())
    elif command == "set":
        prop = property_from_name(args.property)
        if prop is UNKNOWN:
            print(f"[-] Unknown property {args.property}", file=sys.stderr)
            return 1
        player.set_property(prop, _parse_value(prop, args.value))
    elif command == "menu":
        from mprisctl.modes.menu import run_menu

        return run_menu(player)
    return 0


def main(args=None):
    """Main entry point for mprisctl."""
    args = parse_args(args)

    try:
        settings = load_settings(args.config)
    except MPRISError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1

    _log.configure("DEBUG" if args.debug else settings.log_level, settings.log_to_file)

    player = MprisMediaPlayer(args.player or settings.player)
    try:
        return run_command(args, player)
    except MPRISError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130
    finally:
        if args.debug:
            log_metrics_summary()


if __name__ == "__main__":
    sys.exit(main())
