import pytest

from mprisctl.core.errors import MetadataTypeMismatchError
from mprisctl.dbuslayer.metadata import TrackMetadata, assemble, describe_track
from mprisctl.dbuslayer.names import ValueKind
from mprisctl.dbuslayer.variant import DecodedValue


def text(value):
    return DecodedValue(ValueKind.TEXT, value)


def texts(*values):
    return DecodedValue(ValueKind.ARRAY, tuple(text(v) for v in values))


def test_title_only():
    track = assemble({"xesam:title": text("Song")})

    assert track.title == "Song"
    assert track.artists == []
    assert track.album == ""
    assert track.length == 0
    assert track.user_rating == 0.0


def test_full_record():
    track = assemble({
        "mpris:trackid": DecodedValue(ValueKind.OBJECT_PATH, "/org/mpris/MediaPlayer2/Track/7"),
        "mpris:length": DecodedValue(ValueKind.INT64, 215_000_000),
        "mpris:artUrl": text("file:///tmp/cover.jpg"),
        "xesam:url": text("file:///music/song.ogg"),
        "xesam:title": text("Song"),
        "xesam:album": text("Album"),
        "xesam:artist": texts("A", "B"),
        "xesam:albumArtist": texts("Various"),
        "xesam:discNumber": DecodedValue(ValueKind.INT32, 2),
        "xesam:trackNumber": DecodedValue(ValueKind.INT32, 9),
        "xesam:userRating": DecodedValue(ValueKind.DOUBLE, 0.8),
    })

    assert track == TrackMetadata(
        art_url="file:///tmp/cover.jpg",
        url="file:///music/song.ogg",
        track_id="/org/mpris/MediaPlayer2/Track/7",
        album_artists=["Various"],
        artists=["A", "B"],
        album="Album",
        title="Song",
        disc_number=2,
        track_number=9,
        length=215_000_000,
        user_rating=0.8,
    )


def test_unknown_keys_are_ignored():
    track = assemble({
        "xesam:genre": texts("Jazz"),
        "xesam:title": text("Song"),
        "vendor:whatever": DecodedValue(ValueKind.BOOLEAN, True),
    })
    assert track == TrackMetadata(title="Song")


def test_length_accepts_unsigned_integers():
    track = assemble({"mpris:length": DecodedValue(ValueKind.UINT64, 1_000_000)})
    assert track.length == 1_000_000


def test_length_as_text_is_a_mismatch():
    with pytest.raises(MetadataTypeMismatchError) as excinfo:
        assemble({"mpris:length": text("oops")})
    assert excinfo.value.key == "mpris:length"


def test_track_number_out_of_range():
    with pytest.raises(MetadataTypeMismatchError):
        assemble({"xesam:trackNumber": DecodedValue(ValueKind.INT64, 2 ** 40)})


def test_artist_list_with_non_text_element():
    bad = DecodedValue(ValueKind.ARRAY, (text("A"), DecodedValue(ValueKind.INT32, 1)))
    with pytest.raises(MetadataTypeMismatchError) as excinfo:
        assemble({"xesam:artist": bad})
    assert excinfo.value.key == "xesam:artist"


def test_artist_as_plain_text_is_a_mismatch():
    with pytest.raises(MetadataTypeMismatchError):
        assemble({"xesam:artist": text("A")})


def test_user_rating_must_be_double():
    with pytest.raises(MetadataTypeMismatchError):
        assemble({"xesam:userRating": DecodedValue(ValueKind.INT32, 1)})


def test_as_dict():
    track = TrackMetadata(title="Song", artists=["A"])
    data = track.as_dict()
    assert data["title"] == "Song"
    assert data["artists"] == ["A"]
    assert data["length"] == 0


def test_describe_track():
    track = TrackMetadata(title="Song", artists=["A", "B"], album="Album",
                          track_number=3, disc_number=1, length=185_000_000)

    description = describe_track(track)

    assert "Title:   Song" in description
    assert "Artist:  A, B" in description
    assert "Track:   1.3" in description
    assert "Length:  3:05" in description


def test_describe_empty_track():
    assert describe_track(TrackMetadata()).splitlines() == [
        "Title:   Unknown",
        "Artist:  Unknown",
        "Album:   Unknown",
    ]
