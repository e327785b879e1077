from __future__ import annotations

APP_NAME = "TubeIntake"
APP_VERSION = "1.0.0"

OEMBED_ENDPOINT = "https://www.youtube.com/oembed"
WATCH_URL_TEMPLATE = "https://www.youtube.com/watch?v={token}"
PLAYLIST_URL_TEMPLATE = "https://www.youtube.com/playlist?list={token}"
