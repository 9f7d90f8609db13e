from mprisctl.core.errors import RemoteError
from mprisctl.dbuslayer.metadata import TrackMetadata
from mprisctl.dbuslayer.names import LoopStatus
from mprisctl.modes.menu import run_menu


class FakePlayer:
    session_name = "org.mpris.MediaPlayer2.example"

    def __init__(self):
        self.calls = []

    def can_control(self):
        return True

    def get_metadata(self):
        return TrackMetadata(title="Song")

    def play(self):
        self.calls.append("play")

    def set_volume(self, level):
        self.calls.append(("volume", level))

    def set_loop_status(self, status):
        self.calls.append(("loop", status))

    def next(self):
        raise RemoteError("org.freedesktop.DBus.Error.ServiceUnknown", "gone")


def scripted(*answers):
    queue = list(answers)

    def input_func(prompt):
        if not queue:
            raise EOFError
        return queue.pop(0)

    return input_func


def _entry(output, label):
    for line in output.splitlines():
        if line.strip().endswith(f") {label}"):
            return line.split(")")[0].strip()
    raise AssertionError(label)


def test_quit(capsys):
    assert run_menu(FakePlayer(), scripted("q")) == 0


def test_end_of_input_exits(capsys):
    assert run_menu(FakePlayer(), scripted()) == 0


def test_query_and_command(capsys):
    player = FakePlayer()
    run_menu(player, scripted("q"))
    menu = capsys.readouterr().out

    run_menu(player, scripted(_entry(menu, "Can control"), _entry(menu, "Play"), "q"))

    out = capsys.readouterr().out
    assert "True" in out
    assert "[+] Play sent" in out
    assert player.calls == ["play"]


def test_prompts_for_values(capsys):
    player = FakePlayer()
    run_menu(player, scripted("q"))
    menu = capsys.readouterr().out

    run_menu(player, scripted(
        _entry(menu, "Set volume"), "0.5",
        _entry(menu, "Set loop status"), "Track",
        "q",
    ))

    assert player.calls == [("volume", 0.5), ("loop", LoopStatus.TRACK)]


def test_errors_keep_the_menu_running(capsys):
    player = FakePlayer()
    run_menu(player, scripted("q"))
    menu = capsys.readouterr().out

    run_menu(player, scripted(_entry(menu, "Next"), _entry(menu, "Set volume"), "loud",
                              "99", _entry(menu, "Get metadata"), "q"))

    out = capsys.readouterr().out
    assert "[-] Next failed" in out
    assert "[-] Invalid input for Set volume" in out
    assert "Unknown choice" in out
    assert "Title:   Song" in out
