"""
yt-dlp backed track source for captrack.

Alternative to the innertube client for environments where yt-dlp's own
extraction (cookies, client rotation, signature handling) works better.
Tracks are built from the ``subtitles`` and ``automatic_captions`` sections
of the info dictionary.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import parse_qs, urlparse

import yt_dlp
from yt_dlp.utils import DownloadError

from ..errors import NetworkError, TranscriptsDisabledError, VideoUnavailableError
from ..models import CaptionTrack, TrackList, TranslationLanguage
from .client import WATCH_URL, normalize_video_id

logger = logging.getLogger(__name__)

# Preferred timed-text formats, in order. All of them are understood by the fetcher.
PREFERRED_FORMATS = ("srv1", "srv3", "json3")
_UNAVAILABLE_MARKERS = ("video unavailable", "private video", "removed", "does not exist")


def _pick_format(formats: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    by_ext = {fmt.get("ext"): fmt for fmt in formats if fmt.get("url")}
    for ext in PREFERRED_FORMATS:
        if ext in by_ext:
            return by_ext[ext]
    return None


def _is_translation(url: str) -> bool:
    return "tlang" in parse_qs(urlparse(url).query)


def tracks_from_info(video_id: str, info: Dict[str, Any]) -> TrackList:
    """
    Build a TrackList from a yt-dlp info dictionary.

    Manual tracks come from ``subtitles``. In ``automatic_captions`` yt-dlp
    mixes the generated track itself with every language it can be
    translated into; the latter carry a ``tlang`` parameter and become the
    translation languages of all tracks instead of tracks of their own.

    Raises:
        TranscriptsDisabledError: If the info lists no usable tracks
    """
    entries: List[Tuple[str, Dict[str, Any], bool]] = []
    translation_languages: Dict[str, TranslationLanguage] = {}

    for lang, formats in (info.get("subtitles") or {}).items():
        if lang == "live_chat":
            continue
        fmt = _pick_format(formats)
        if fmt:
            entries.append((lang, fmt, False))

    for lang, formats in (info.get("automatic_captions") or {}).items():
        fmt = _pick_format(formats)
        if not fmt:
            continue
        if _is_translation(fmt["url"]):
            translation_languages.setdefault(
                lang, TranslationLanguage(lang, fmt.get("name") or lang)
            )
        else:
            entries.append((lang, fmt, True))

    languages = tuple(translation_languages.values())
    tracks = []
    seen = set()
    for lang, fmt, is_generated in entries:
        if lang.endswith("-orig"):
            lang = lang[: -len("-orig")]
        key = (lang, is_generated)
        if key in seen:
            logger.warning(f"Dropping duplicate caption track {key} for {video_id}")
            continue
        seen.add(key)
        tracks.append(CaptionTrack(
            video_id=video_id,
            language_name=fmt.get("name") or lang,
            language_code=lang,
            is_generated=is_generated,
            is_translatable=bool(languages),
            source_locator=fmt["url"],
            translation_languages=languages,
        ))

    if not tracks:
        raise TranscriptsDisabledError(video_id)
    return TrackList(video_id, tracks)


class YtDlpTrackSource:
    """Lists caption tracks with yt-dlp's extractor."""

    def __init__(
        self,
        cookies_path: Optional[str] = None,
        proxy: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.cookies_path = cookies_path
        self.proxy = proxy
        self.timeout = timeout

    def _get_ydl_opts(self, **overrides) -> Dict:
        opts = {
            'quiet': True,
            'no_warnings': True,
            'skip_download': True,
            'writesubtitles': True,
            'writeautomaticsub': True,
        }

        if self.cookies_path:
            opts['cookiefile'] = self.cookies_path
        if self.proxy:
            opts['proxy'] = self.proxy
        if self.timeout:
            opts['socket_timeout'] = self.timeout

        opts.update(overrides)
        return opts

    def list_tracks(self, video_id: str) -> TrackList:
        """
        List the caption tracks available for a video.

        Raises:
            VideoUnavailableError: If yt-dlp reports the video as unavailable
            TranscriptsDisabledError: If the video has no captions
            NetworkError: For any other extraction failure
        """
        video_id = normalize_video_id(video_id)
        logger.info(f"Listing caption tracks with yt-dlp for: {video_id}")

        try:
            with yt_dlp.YoutubeDL(self._get_ydl_opts()) as ydl:
                info = ydl.extract_info(WATCH_URL.format(video_id=video_id), download=False)
        except DownloadError as e:
            message = str(e)
            if any(marker in message.lower() for marker in _UNAVAILABLE_MARKERS):
                raise VideoUnavailableError(video_id, message) from e
            raise NetworkError(f"yt-dlp extraction failed: {message}", video_id=video_id) from e

        track_list = tracks_from_info(video_id, info or {})
        logger.info(f"Found {len(track_list)} caption tracks for {video_id}")
        return track_list
