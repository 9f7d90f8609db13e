"""
Core constants for mprisctl.

This module provides centralized constants for MPRIS2 operations, organized by
category.  Wire-level names live here so the registry, the message builder and
the decoder all agree on one spelling.
"""

# D-Bus Core Constants
DBUS_PROPERTIES = "org.freedesktop.DBus.Properties"
DBUS_SERVICE_NAME = "org.freedesktop.DBus"
DBUS_OBJECT_PATH = "/org/freedesktop/DBus"
DBUS_INTERFACE = "org.freedesktop.DBus"
DBUS_LIST_NAMES = "ListNames"
DBUS_PROPERTY_GET = "Get"
DBUS_PROPERTY_SET = "Set"

# MPRIS2 Core Constants
MPRIS_BUS_PREFIX = "org.mpris.MediaPlayer2."
MPRIS_OBJECT_PATH = "/org/mpris/MediaPlayer2"
MPRIS_ROOT_INTERFACE = "org.mpris.MediaPlayer2"
MPRIS_PLAYER_INTERFACE = MPRIS_ROOT_INTERFACE + ".Player"

# Default player used when nothing else is configured
DEFAULT_SESSION_NAME = MPRIS_BUS_PREFIX + "ncspot"

# Loop status literals
LOOP_STATUS_NONE = "None"
LOOP_STATUS_TRACK = "Track"
LOOP_STATUS_PLAYLIST = "Playlist"

# Playback status literals
PLAYBACK_STATUS_PLAYING = "Playing"
PLAYBACK_STATUS_PAUSED = "Paused"
PLAYBACK_STATUS_STOPPED = "Stopped"

# Well-known metadata keys
METADATA_ART_URL = "mpris:artUrl"
METADATA_TRACK_ID = "mpris:trackid"
METADATA_LENGTH = "mpris:length"
METADATA_URL = "xesam:url"
METADATA_ALBUM_ARTIST = "xesam:albumArtist"
METADATA_ARTIST = "xesam:artist"
METADATA_ALBUM = "xesam:album"
METADATA_TITLE = "xesam:title"
METADATA_DISC_NUMBER = "xesam:discNumber"
METADATA_TRACK_NUMBER = "xesam:trackNumber"
METADATA_USER_RATING = "xesam:userRating"

# D-Bus type codes
TYPE_INVALID = ""
TYPE_BOOLEAN = "b"
TYPE_BYTE = "y"
TYPE_INT16 = "n"
TYPE_UINT16 = "q"
TYPE_INT32 = "i"
TYPE_UINT32 = "u"
TYPE_INT64 = "x"
TYPE_UINT64 = "t"
TYPE_DOUBLE = "d"
TYPE_STRING = "s"
TYPE_OBJECT_PATH = "o"
TYPE_SIGNATURE = "g"
TYPE_UNIX_FD = "h"
TYPE_ARRAY = "a"
TYPE_VARIANT = "v"
TYPE_STRUCT = "("
TYPE_DICT_ENTRY = "{"

# Result/Error Codes
RESULT_OK = 0
RESULT_ERR = 1
RESULT_ERR_NOT_CONNECTED = 2
RESULT_ERR_NOT_SUPPORTED = 3
RESULT_ERR_BUS_UNAVAILABLE = 4
RESULT_ERR_NULL_HANDLE = 5
RESULT_ERR_BAD_ARGS = 6
RESULT_ERR_UNKNOWN_IDENTIFIER = 7
RESULT_ERR_MESSAGE_CONSTRUCTION = 8
RESULT_ERR_OUT_OF_RESOURCES = 9
RESULT_ERR_REMOTE = 10
RESULT_ERR_NO_REPLY = 11
RESULT_ERR_EMPTY_REPLY = 12
RESULT_ERR_NOT_VARIANT = 13
RESULT_ERR_UNKNOWN_TYPE = 14
RESULT_ERR_TYPE_MISMATCH = 15
RESULT_ERR_CONFIG = 16
