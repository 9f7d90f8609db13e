import pytest

from mprisctl.core.config import DEFAULT_LOG_LEVEL, Settings, load_settings
from mprisctl.core.constants import DEFAULT_SESSION_NAME
from mprisctl.core.errors import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("MPRISCTL_PLAYER", raising=False)
    monkeypatch.delenv("MPRISCTL_LOG_LEVEL", raising=False)


def test_missing_file_gives_defaults(tmp_path):
    settings = load_settings(tmp_path / "absent.yaml")

    assert settings == Settings()
    assert settings.player == DEFAULT_SESSION_NAME
    assert settings.log_level == DEFAULT_LOG_LEVEL
    assert settings.log_to_file is True


def test_values_from_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("player: org.mpris.MediaPlayer2.vlc\nlog_level: debug\nlog_to_file: false\n")

    settings = load_settings(path)

    assert settings.player == "org.mpris.MediaPlayer2.vlc"
    assert settings.log_level == "DEBUG"
    assert settings.log_to_file is False


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_settings(str(path)) == Settings()


def test_environment_overrides_file(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("player: org.mpris.MediaPlayer2.vlc\n")
    monkeypatch.setenv("MPRISCTL_PLAYER", "org.mpris.MediaPlayer2.spotify")
    monkeypatch.setenv("MPRISCTL_LOG_LEVEL", "warning")

    settings = load_settings(path)

    assert settings.player == "org.mpris.MediaPlayer2.spotify"
    assert settings.log_level == "WARNING"


@pytest.mark.parametrize("content", [
    "player: [unterminated\n",
    "- just\n- a list\n",
    "player: 42\n",
    "player: ''\n",
    "log_level: 10\n",
    "log_level: chatty\n",
    "log_to_file: sometimes\n",
])
def test_invalid_files(tmp_path, content):
    path = tmp_path / "config.yaml"
    path.write_text(content)

    with pytest.raises(ConfigError) as excinfo:
        load_settings(path)

    assert excinfo.value.path == str(path)


def test_unknown_level_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("MPRISCTL_LOG_LEVEL", "loud")
    with pytest.raises(ConfigError) as excinfo:
        load_settings(tmp_path / "absent.yaml")
    assert excinfo.value.path == "MPRISCTL_LOG_LEVEL"
    assert "'loud'" in str(excinfo.value)
