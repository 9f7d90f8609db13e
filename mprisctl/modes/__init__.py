"""Interactive front-ends built on :class:`mprisctl.dbuslayer.MprisMediaPlayer`."""
