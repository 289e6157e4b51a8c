"""
captrack - YouTube Caption Track Client

A library for listing, selecting, translating, fetching and formatting the
caption tracks of YouTube videos.

Features:
- List manual and auto-generated caption tracks (innertube or yt-dlp)
- Select tracks by language preference, manual or generated
- Translate tracks through YouTube's own translation
- Fetch timed text fragments (legacy XML, srv3 and json3 payloads)
- Render as plain text, JSON, SRT or WebVTT

Example usage:
    >>> from captrack import CaptionClient
    >>>
    >>> client = CaptionClient()
    >>> tracks = client.list_tracks("dQw4w9WgXcQ")
    >>> track = tracks.select(["de", "en"])
    >>>
    >>> # Translate and fetch
    >>> if "ja" in track.translation_targets:
    ...     track = client.translate(track, "ja")
    >>> fragments = client.fetch(track)
    >>> print(client.format(fragments, "srt"))
"""

import logging

__version__ = "0.1.0"
__author__ = "captrack Contributors"
__license__ = "MIT"

# Add NullHandler to prevent "No handler found" warnings
# Users should configure logging in their application if they want to see logs
logging.getLogger(__name__).addHandler(logging.NullHandler())

# Errors
from .errors import (
    CaptionTrackError,
    NotFoundError,
    VideoUnavailableError,
    TranscriptsDisabledError,
    NetworkError,
    RequestBlockedError,
    NoMatchError,
    FetchError,
    ParseError,
    NotTranslatableError,
    UnsupportedLanguageError,
    InvalidFragmentError,
)

# Data models
from .models import (
    CaptionTrack,
    TrackList,
    TranslationLanguage,
    Fragment,
    FragmentSequence,
    FetchConfig,
)

# Core utility functions
from .utils import seconds_to_timestamp, seconds_to_srt_timestamp

# Transport
from .transport import HttpTransport

# Track sources
from .youtube import (
    YouTubeClient,
    YtDlpTrackSource,
    is_youtube_url,
    extract_youtube_id,
    build_track_list,
    tracks_from_info,
)

# Fetching and translation
from .fetcher import TrackFetcher, parse_timed_text
from .translator import translate

# Formatters
from .formatters import (
    FormatKind,
    FORMATTERS,
    format_fragments,
    format_text,
    format_json,
    parse_json,
    format_srt,
    format_webvtt,
)

# Main API
from .api import CaptionClient, fetch_from_config

__all__ = [
    # Version info
    "__version__",
    "__author__",
    "__license__",

    # Main API
    "CaptionClient",
    "fetch_from_config",

    # Errors
    "CaptionTrackError",
    "NotFoundError",
    "VideoUnavailableError",
    "TranscriptsDisabledError",
    "NetworkError",
    "RequestBlockedError",
    "NoMatchError",
    "FetchError",
    "ParseError",
    "NotTranslatableError",
    "UnsupportedLanguageError",
    "InvalidFragmentError",

    # Models
    "CaptionTrack",
    "TrackList",
    "TranslationLanguage",
    "Fragment",
    "FragmentSequence",
    "FetchConfig",

    # Transport and sources
    "HttpTransport",
    "YouTubeClient",
    "YtDlpTrackSource",
    "is_youtube_url",
    "extract_youtube_id",
    "build_track_list",
    "tracks_from_info",

    # Fetching and translation
    "TrackFetcher",
    "parse_timed_text",
    "translate",

    # Formatters
    "FormatKind",
    "FORMATTERS",
    "format_fragments",
    "format_text",
    "format_json",
    "parse_json",
    "format_srt",
    "format_webvtt",

    # Utilities
    "seconds_to_timestamp",
    "seconds_to_srt_timestamp",
]
