"""Track metadata assembled from the MPRIS ``Metadata`` dictionary.

Known keys are matched by their exact wire name.  Unknown keys are ignored;
a known key whose value has the wrong kind fails the whole assembly.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Tuple

from mprisctl.core.constants import (
    METADATA_ALBUM,
    METADATA_ALBUM_ARTIST,
    METADATA_ART_URL,
    METADATA_ARTIST,
    METADATA_DISC_NUMBER,
    METADATA_LENGTH,
    METADATA_TITLE,
    METADATA_TRACK_ID,
    METADATA_TRACK_NUMBER,
    METADATA_URL,
    METADATA_USER_RATING,
)
from mprisctl.core.errors import MetadataTypeMismatchError
from mprisctl.dbuslayer.names import ValueKind
from mprisctl.dbuslayer.variant import DecodedValue

__all__ = ["TrackMetadata", "assemble", "describe_track"]


@dataclass
class TrackMetadata:
    art_url: str = ""
    url: str = ""
    track_id: str = ""
    album_artists: List[str] = field(default_factory=list)
    artists: List[str] = field(default_factory=list)
    album: str = ""
    title: str = ""
    disc_number: int = 0
    track_number: int = 0
    length: int = 0          # microseconds
    user_rating: float = 0.0

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


_TEXT = frozenset({ValueKind.TEXT})
_PATH_OR_TEXT = frozenset({ValueKind.OBJECT_PATH, ValueKind.TEXT})
_INTEGER = frozenset({ValueKind.INT32, ValueKind.INT64, ValueKind.UINT32, ValueKind.UINT64})
_DOUBLE = frozenset({ValueKind.DOUBLE})

_INT32_MIN = -(2 ** 31)
_INT32_MAX = 2 ** 31 - 1
_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1


def _scalar(key: str, value: DecodedValue, kinds: FrozenSet[ValueKind], low=None, high=None):
    if value.kind not in kinds:
        raise MetadataTypeMismatchError(key, value.kind)
    if low is not None and not low <= value.value <= high:
        raise MetadataTypeMismatchError(key, value.kind)
    return value.value


def _text_list(key: str, value: DecodedValue) -> List[str]:
    if value.kind is not ValueKind.ARRAY:
        raise MetadataTypeMismatchError(key, value.kind)
    names = []
    for item in value.value:
        if item.kind is not ValueKind.TEXT:
            raise MetadataTypeMismatchError(key, item.kind)
        names.append(item.value)
    return names


# wire key -> (record field, extractor)
_FIELDS: Dict[str, Tuple[str, Callable[[str, DecodedValue], Any]]] = {
    METADATA_ART_URL: ("art_url", lambda k, v: _scalar(k, v, _TEXT)),
    METADATA_URL: ("url", lambda k, v: _scalar(k, v, _TEXT)),
    METADATA_TRACK_ID: ("track_id", lambda k, v: _scalar(k, v, _PATH_OR_TEXT)),
    METADATA_ALBUM_ARTIST: ("album_artists", _text_list),
    METADATA_ARTIST: ("artists", _text_list),
    METADATA_ALBUM: ("album", lambda k, v: _scalar(k, v, _TEXT)),
    METADATA_TITLE: ("title", lambda k, v: _scalar(k, v, _TEXT)),
    METADATA_DISC_NUMBER: ("disc_number", lambda k, v: _scalar(k, v, _INTEGER, _INT32_MIN, _INT32_MAX)),
    METADATA_TRACK_NUMBER: ("track_number", lambda k, v: _scalar(k, v, _INTEGER, _INT32_MIN, _INT32_MAX)),
    METADATA_LENGTH: ("length", lambda k, v: _scalar(k, v, _INTEGER, _INT64_MIN, _INT64_MAX)),
    METADATA_USER_RATING: ("user_rating", lambda k, v: _scalar(k, v, _DOUBLE)),
}


def assemble(dictionary: Mapping[str, DecodedValue]) -> TrackMetadata:
    """Build a :class:`TrackMetadata` from a decoded ``a{sv}`` dictionary.

    Integer fields accept any decoded integer kind that fits the field's
    width (players disagree on ``x`` versus ``t`` for ``mpris:length``).

    Raises
    ------
    MetadataTypeMismatchError
        If a well-known key holds a value of the wrong kind
    """
    track = TrackMetadata()
    for key, value in dictionary.items():
        entry = _FIELDS.get(key)
        if entry is None:
            continue
        attr, extract = entry
        setattr(track, attr, extract(key, value))
    return track


def _format_length(microseconds: int) -> str:
    seconds = max(microseconds, 0) // 1_000_000
    return f"{seconds // 60}:{seconds % 60:02d}"


def describe_track(track: TrackMetadata) -> str:
    """Return a short multi-line, human readable description of *track*."""
    lines = [
        f"Title:   {track.title or 'Unknown'}",
        f"Artist:  {', '.join(track.artists) or 'Unknown'}",
        f"Album:   {track.album or 'Unknown'}",
    ]
    if track.album_artists and track.album_artists != track.artists:
        lines.append(f"Album artist: {', '.join(track.album_artists)}")
    if track.track_number:
        number = f"{track.track_number}"
        if track.disc_number:
            number = f"{track.disc_number}.{number}"
        lines.append(f"Track:   {number}")
    if track.length:
        lines.append(f"Length:  {_format_length(track.length)}")
    if track.user_rating:
        lines.append(f"Rating:  {track.user_rating:.2f}")
    if track.url:
        lines.append(f"URL:     {track.url}")
    if track.art_url:
        lines.append(f"Art:     {track.art_url}")
    if track.track_id:
        lines.append(f"TrackID: {track.track_id}")
    return "\n".join(lines)
