"""
YouTube module for captrack.

Provides the track sources: the innertube client (default) and the
yt-dlp backed alternative.
"""

from .client import (
    YouTubeClient,
    is_youtube_url,
    extract_youtube_id,
    normalize_video_id,
    build_track_list,
    list_youtube_tracks,
)

from .ytdlp_source import YtDlpTrackSource, tracks_from_info

__all__ = [
    'YouTubeClient',
    'YtDlpTrackSource',
    'is_youtube_url',
    'extract_youtube_id',
    'normalize_video_id',
    'build_track_list',
    'tracks_from_info',
    'list_youtube_tracks',
]
