"""Numbered interactive menu over one MPRIS2 player.

Every facade operation gets a menu entry; results are printed as-is and any
``MPRISError`` is reported without leaving the menu.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from mprisctl.core.errors import MPRISError
from mprisctl.core.log import print_and_log, LOG__USER, LOG__DEBUG
from mprisctl.dbuslayer.metadata import describe_track
from mprisctl.dbuslayer.names import LoopStatus
from mprisctl.dbuslayer.player import MprisMediaPlayer

_PROMPT = "mprisctl> "


def _ask(prompt: str, input_func: Callable[[str], str]) -> str:
    return input_func(prompt).strip()


def _build_entries(input_func: Callable[[str], str]) -> List[Tuple[str, Callable[[MprisMediaPlayer], object]]]:
    def loop_status(player):
        text = _ask("Loop status [None|Track|Playlist]: ", input_func)
        player.set_loop_status(LoopStatus(text))
        return f"LoopStatus set to {text}"

    def shuffle(player):
        text = _ask("Shuffle [on|off]: ", input_func).lower()
        player.set_shuffle(text in {"on", "true", "1", "yes"})
        return f"Shuffle set to {text}"

    def volume(player):
        level = float(_ask("Volume [0.0-1.0]: ", input_func))
        player.set_volume(level)
        return f"Volume set to {level}"

    def seek(player):
        offset = int(_ask("Offset in microseconds: ", input_func))
        player.seek(offset)
        return f"Seeked {offset} us"

    def session(player):
        name = _ask("Player bus name: ", input_func)
        player.set_session_name(name)
        return f"Now controlling {name}"

    return [
        ("Can control", lambda p: p.can_control()),
        ("Can go next", lambda p: p.can_go_next()),
        ("Can go previous", lambda p: p.can_go_previous()),
        ("Can pause", lambda p: p.can_pause()),
        ("Can play", lambda p: p.can_play()),
        ("Can seek", lambda p: p.can_seek()),
        ("Get loop status", lambda p: p.get_loop_status().value),
        ("Set loop status", loop_status),
        ("Get maximum rate", lambda p: p.get_maximum_rate()),
        ("Get minimum rate", lambda p: p.get_minimum_rate()),
        ("Get metadata", lambda p: describe_track(p.get_metadata())),
        ("Get playback status", lambda p: p.get_playback_status().value),
        ("Get position", lambda p: p.get_position()),
        ("Get rate", lambda p: p.get_rate()),
        ("Get shuffle", lambda p: p.get_shuffle()),
        ("Set shuffle", shuffle),
        ("Get volume", lambda p: p.get_volume()),
        ("Set volume", volume),
        ("Next", lambda p: p.next()),
        ("Pause", lambda p: p.pause()),
        ("Play", lambda p: p.play()),
        ("Play/Pause", lambda p: p.play_pause()),
        ("Previous", lambda p: p.previous()),
        ("Seek", seek),
        ("Stop", lambda p: p.stop()),
        ("List players", lambda p: "\n".join(p.list_players()) or "No players found"),
        ("Change player", session),
    ]


def _print_menu(player: MprisMediaPlayer, entries) -> None:
    print(f"\n[*] Player: {player.session_name}")
    for index, (label, _) in enumerate(entries, start=1):
        print(f"  {index:2d}) {label}")
    print("   q) Quit")


def run_menu(player: MprisMediaPlayer, input_func: Optional[Callable[[str], str]] = None) -> int:
    """Run the menu until the user quits or input ends; returns 0."""
    input_func = input_func or input
    entries = _build_entries(input_func)
    while True:
        _print_menu(player, entries)
        try:
            choice = input_func(_PROMPT).strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return 0
        if not choice:
            continue
        if choice.lower() in {"q", "quit", "exit"}:
            return 0
        if not choice.isdigit() or not 1 <= int(choice) <= len(entries):
            print("Unknown choice")
            continue

        label, action = entries[int(choice) - 1]
        try:
            result = action(player)
        except MPRISError as exc:
            print_and_log(f"[-] {label} failed: {exc}", LOG__USER)
            continue
        except (EOFError, KeyboardInterrupt):
            print()
            return 0
        except ValueError as exc:
            print_and_log(f"[-] Invalid input for {label}: {exc}", LOG__USER)
            continue

        print_and_log(f"[*] {label}", LOG__DEBUG)
        if result is None:
            print(f"[+] {label} sent")
        else:
            print(result)
