import os

import pytest

from mprisbridge.core import config
from mprisbridge.core.errors import InvalidArgumentError
from mprisbridge.core.player import Player


def _write(tmp_path, text):
    path = tmp_path / "player.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_merges_over_defaults(tmp_path):
    path = _write(tmp_path, "name: jukebox\nsupported_interfaces: [player, playlists]\n")

    options = config.load_player_config(path)

    assert options["name"] == "jukebox"
    assert options["supported_interfaces"] == ["player", "playlists"]
    assert options["identity"] == config.DEFAULT_PLAYER_OPTIONS["identity"]
    assert options["supported_mime_types"] == []


def test_loaded_options_build_a_player(tmp_path):
    path = _write(tmp_path, (
        "name: jukebox\n"
        "identity: Jukebox\n"
        "desktop_entry: jukebox\n"
        "supported_interfaces: [player, trackList]\n"
        "supported_uri_schemes: [file, http]\n"
        "supported_mime_types: [audio/mpeg]\n"
    ))

    player = Player(**config.load_player_config(path))

    assert player.service_name == "org.mpris.MediaPlayer2.jukebox"
    assert player.identity == "Jukebox"
    assert player.supported_uri_schemes == ["file", "http"]
    assert player.has_track_list is True


def test_empty_file_gives_defaults(tmp_path):
    assert config.load_player_config(_write(tmp_path, "")) == config.DEFAULT_PLAYER_OPTIONS


def test_defaults_are_not_shared(tmp_path):
    options = config.load_player_config(_write(tmp_path, ""))
    options["supported_interfaces"].append("playlists")
    assert config.DEFAULT_PLAYER_OPTIONS["supported_interfaces"] == ["player"]


@pytest.mark.parametrize("text", [
    "- just\n- a list\n",
    "colour: blue\n",
    "name: [not, a, string]\n",
    "supported_mime_types: audio/mpeg\n",
    "supported_interfaces: [player, 3]\n",
])
def test_invalid_configuration(tmp_path, text):
    with pytest.raises(InvalidArgumentError):
        config.load_player_config(_write(tmp_path, text))


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        config.load_player_config(tmp_path / "absent.yaml")


def test_log_dir_follows_environment():
    assert str(config.LOG_DIR) == os.environ["MPRISBRIDGE_LOG_DIR"]
