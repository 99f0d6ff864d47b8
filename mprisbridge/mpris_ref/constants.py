"""
Core constants for mprisbridge.

This module provides centralized constants for the MPRIS D-Bus interface, organized by category.
"""

# D-Bus Core Constants
DBUS_PROPERTIES = "org.freedesktop.DBus.Properties"
INTROSPECT_INTERFACE = "org.freedesktop.DBus.Introspectable"

# MPRIS Core Constants
MPRIS_BUS_NAME_PREFIX = "org.mpris.MediaPlayer2"
MPRIS_PATH = "/org/mpris/MediaPlayer2"
MPRIS_INSTANCE_SUFFIX = "instance"

# MPRIS Interface Constants
ROOT_INTERFACE = "org.mpris.MediaPlayer2"
PLAYER_INTERFACE = ROOT_INTERFACE + ".Player"
TRACKLIST_INTERFACE = ROOT_INTERFACE + ".TrackList"
PLAYLISTS_INTERFACE = ROOT_INTERFACE + ".Playlists"

# Facet keys accepted in ``supported_interfaces``
FACET_ROOT = "root"
FACET_PLAYER = "player"
FACET_TRACKLIST = "trackList"
FACET_PLAYLISTS = "playlists"
FACET_ORDER = (FACET_ROOT, FACET_PLAYER, FACET_TRACKLIST, FACET_PLAYLISTS)

# Identifier root used by the object-path construction helper
OBJECT_PATH_ROOT = "/org/mprisbridge"

# Sentinels
NO_TRACK = "/org/mpris/MediaPlayer2/TrackList/NoTrack"
EMPTY_PLAYLIST = ("/", "", "")

# Canonical metadata keys
METADATA_TRACKID = "mpris:trackid"
METADATA_LENGTH = "mpris:length"
METADATA_ART_URL = "mpris:artUrl"
METADATA_TITLE = "xesam:title"
METADATA_ALBUM = "xesam:album"
METADATA_ARTIST = "xesam:artist"

# Property access
ACCESS_READ = "read"
ACCESS_READWRITE = "readwrite"

# Playback / loop status
PLAYBACK_STATUS_PLAYING = "Playing"
PLAYBACK_STATUS_PAUSED = "Paused"
PLAYBACK_STATUS_STOPPED = "Stopped"
PLAYBACK_STATUSES = frozenset(
    [PLAYBACK_STATUS_PLAYING, PLAYBACK_STATUS_PAUSED, PLAYBACK_STATUS_STOPPED]
)

LOOP_STATUS_NONE = "None"
LOOP_STATUS_TRACK = "Track"
LOOP_STATUS_PLAYLIST = "Playlist"
LOOP_STATUSES = frozenset([LOOP_STATUS_NONE, LOOP_STATUS_TRACK, LOOP_STATUS_PLAYLIST])

# Playlist orderings
ORDERING_ALPHABETICAL = "Alphabetical"
ORDERING_USER_DEFINED = "UserDefined"
ORDERINGS = [ORDERING_ALPHABETICAL, ORDERING_USER_DEFINED]

# Annotations
EMITS_CHANGED_SIGNAL_ANNOTATION = "org.freedesktop.DBus.Property.EmitsChangedSignal"

# Error Names
ERROR_NAMESPACE = "org.mprisbridge.Error"
ERROR_INVALID_LOOP_STATUS = ERROR_NAMESPACE + ".InvalidLoopStatus"
ERROR_INVALID_PLAYBACK_STATUS = ERROR_NAMESPACE + ".InvalidPlaybackStatus"
ERROR_INVALID_POSITION = ERROR_NAMESPACE + ".InvalidPosition"
ERROR_INVALID_OBJECT_PATH = ERROR_NAMESPACE + ".InvalidObjectPath"
ERROR_NOT_SUPPORTED = ERROR_NAMESPACE + ".NotSupported"
ERROR_BUS_REGISTRATION = ERROR_NAMESPACE + ".BusRegistration"
ERROR_FAILED = ERROR_NAMESPACE + ".Failed"
DBUS_ERROR_INVALID_ARGS = "org.freedesktop.DBus.Error.InvalidArgs"
DBUS_ERROR_UNKNOWN_INTERFACE = "org.freedesktop.DBus.Error.UnknownInterface"
DBUS_ERROR_UNKNOWN_PROPERTY = "org.freedesktop.DBus.Error.UnknownProperty"
DBUS_ERROR_PROPERTY_READ_ONLY = "org.freedesktop.DBus.Error.PropertyReadOnly"

# Result/Error Codes
RESULT_OK = 0
RESULT_ERR = 1
RESULT_ERR_NOT_CONNECTED = 2
RESULT_ERR_NOT_SUPPORTED = 3
RESULT_ERR_WRONG_STATE = 5
RESULT_ERR_ACCESS_DENIED = 6
RESULT_ERR_BAD_ARGS = 8
RESULT_ERR_NOT_FOUND = 9
