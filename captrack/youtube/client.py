"""
YouTube client for captrack.

Lists the caption tracks of a video through YouTube's innertube player API:
the watch page provides the API key, the player endpoint describes the
caption tracks and the languages they can be translated into.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from ..errors import (
    ParseError,
    RequestBlockedError,
    TranscriptsDisabledError,
    VideoUnavailableError,
)
from ..models import CaptionTrack, TrackList, TranslationLanguage
from ..transport import HttpTransport

logger = logging.getLogger(__name__)

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
INNERTUBE_API_URL = "https://www.youtube.com/youtubei/v1/player"
INNERTUBE_CONTEXT = {"client": {"clientName": "ANDROID", "clientVersion": "20.10.38"}}

_YOUTUBE_URL_PATTERN = re.compile(
    r'^(https?://)?(www\.|m\.)?'
    r'(youtube\.com/(watch\?(.*&)?v=|shorts/|embed/|live/)|youtu\.be/)'
    r'([A-Za-z0-9_-]+)'
)
_API_KEY_PATTERN = re.compile(r'"INNERTUBE_API_KEY":\s*"([a-zA-Z0-9_-]+)"')
_CONSENT_VALUE_PATTERN = re.compile(r'name="v" value="(.*?)"')
_CONSENT_ACTION = 'action="https://consent.youtube.com/s"'
_RECAPTCHA_MARKER = 'class="g-recaptcha"'


def is_youtube_url(url: str) -> bool:
    """
    Check if the provided URL is a YouTube video URL.

    Example:
        >>> is_youtube_url("https://www.youtube.com/watch?v=dQw4w9WgXcQ")
        True
        >>> is_youtube_url("https://example.com/video")
        False
    """
    return bool(_YOUTUBE_URL_PATTERN.match(url))


def extract_youtube_id(url: str) -> Optional[str]:
    """
    Extract YouTube video ID from a URL.

    Handles watch, youtu.be, shorts, embed and live URLs.

    Example:
        >>> extract_youtube_id("https://youtu.be/dQw4w9WgXcQ")
        'dQw4w9WgXcQ'
    """
    match = _YOUTUBE_URL_PATTERN.match(url)
    return match.group(6) if match else None


def normalize_video_id(video_id: str) -> str:
    """
    Return the bare video id for a video id or a YouTube URL.

    Raises:
        ValueError: If video_id is empty
    """
    if not video_id or not video_id.strip():
        raise ValueError("video_id must be a non-empty string")
    video_id = video_id.strip()
    if is_youtube_url(video_id):
        return extract_youtube_id(video_id)
    return video_id


def _text_of(node: Optional[Dict[str, Any]]) -> str:
    # innertube renders labels either as simpleText or as a list of runs
    if not node:
        return ""
    if "simpleText" in node:
        return node["simpleText"]
    return "".join(run.get("text", "") for run in node.get("runs", []))


def build_track_list(video_id: str, captions_json: Dict[str, Any]) -> TrackList:
    """
    Build a TrackList from a ``playerCaptionsTracklistRenderer`` object.

    Tracks keep the order of ``captionTracks``. When the service reports the
    same (language, kind) pair twice, the first one is kept.

    Args:
        video_id: Video the captions belong to
        captions_json: The renderer dictionary from the player response

    Returns:
        TrackList for the video

    Raises:
        TranscriptsDisabledError: If the renderer lists no caption tracks
    """
    caption_tracks = captions_json.get("captionTracks") or []
    if not caption_tracks:
        raise TranscriptsDisabledError(video_id)

    translation_languages = tuple(
        TranslationLanguage(
            language_code=lang["languageCode"],
            language_name=_text_of(lang.get("languageName")),
        )
        for lang in captions_json.get("translationLanguages", [])
        if lang.get("languageCode")
    )

    tracks: List[CaptionTrack] = []
    seen = set()
    for caption in caption_tracks:
        language_code = caption.get("languageCode")
        base_url = caption.get("baseUrl")
        if not language_code or not base_url:
            logger.debug(f"Skipping incomplete caption track entry: {caption}")
            continue

        is_generated = caption.get("kind", "") == "asr"
        key = (language_code, is_generated)
        if key in seen:
            logger.warning(f"Dropping duplicate caption track {key} for {video_id}")
            continue
        seen.add(key)

        is_translatable = bool(caption.get("isTranslatable", False))
        tracks.append(CaptionTrack(
            video_id=video_id,
            language_name=_text_of(caption.get("name")) or language_code,
            language_code=language_code,
            is_generated=is_generated,
            is_translatable=is_translatable,
            source_locator=base_url.replace("&fmt=srv3", ""),
            translation_languages=translation_languages if is_translatable else (),
        ))

    if not tracks:
        raise TranscriptsDisabledError(video_id)

    return TrackList(video_id, tracks)


class YouTubeClient:
    """
    Client for listing the caption tracks of YouTube videos.

    Talks to the watch page and the innertube player endpoint through an
    HttpTransport.
    """

    def __init__(
        self,
        transport: Optional[HttpTransport] = None,
        cookies_path: Optional[str] = None,
    ):
        """
        Initialize YouTube client.

        Args:
            transport: Transport to use (a default HttpTransport if omitted)
            cookies_path: Optional path to cookies file for authentication
        """
        self.transport = transport or HttpTransport(cookies_path=cookies_path)

    def list_tracks(self, video_id: str) -> TrackList:
        """
        List the caption tracks available for a video.

        Args:
            video_id: YouTube video id (a watch URL is accepted too)

        Returns:
            TrackList in the order the service reports the tracks

        Raises:
            ValueError: If video_id is empty
            VideoUnavailableError: If the video cannot be played
            TranscriptsDisabledError: If the video has no captions
            RequestBlockedError: If YouTube blocks the request
            NetworkError: On other transport failures
            ParseError: If the watch page or player response is unreadable
        """
        video_id = normalize_video_id(video_id)
        logger.info(f"Listing caption tracks for YouTube video: {video_id}")

        api_key = self._fetch_api_key(video_id)
        try:
            player = self.transport.post_json(
                INNERTUBE_API_URL,
                {"context": INNERTUBE_CONTEXT, "videoId": video_id},
                params={"key": api_key},
            )
        except ParseError as e:
            raise ParseError(f"Unreadable player response: {e}", video_id=video_id) from e
        captions_json = self._extract_captions_json(video_id, player)
        track_list = build_track_list(video_id, captions_json)

        logger.info(
            f"Found {len(track_list)} caption tracks for {video_id}: "
            f"{len(track_list.manual_tracks)} manual, "
            f"{len(track_list.generated_tracks)} generated"
        )
        return track_list

    def _fetch_watch_html(self, video_id: str) -> str:
        url = WATCH_URL.format(video_id=video_id)
        html = self.transport.get_text(url)

        if _CONSENT_ACTION in html:
            self._accept_consent(video_id, html)
            html = self.transport.get_text(url)
            if _CONSENT_ACTION in html:
                raise RequestBlockedError("Could not get past the cookie consent page", video_id=video_id)

        if _RECAPTCHA_MARKER in html:
            raise RequestBlockedError("YouTube is asking for a captcha", video_id=video_id)

        return html

    def _accept_consent(self, video_id: str, html: str) -> None:
        match = _CONSENT_VALUE_PATTERN.search(html)
        if not match:
            raise RequestBlockedError("Could not create a consent cookie", video_id=video_id)
        logger.debug("Answering cookie consent page")
        self.transport.set_cookie("CONSENT", "YES+" + match.group(1), domain=".youtube.com")

    def _fetch_api_key(self, video_id: str) -> str:
        html = self._fetch_watch_html(video_id)
        match = _API_KEY_PATTERN.search(html)
        if not match:
            raise ParseError("Could not find the innertube API key on the watch page", video_id=video_id)
        return match.group(1)

    def _extract_captions_json(self, video_id: str, player: Dict[str, Any]) -> Dict[str, Any]:
        status_info = player.get("playabilityStatus") or {}
        status = status_info.get("status", "OK")
        reason = status_info.get("reason")

        if status != "OK":
            if status == "LOGIN_REQUIRED" and reason and "bot" in reason.lower():
                raise RequestBlockedError(f"YouTube flagged this client: {reason}", video_id=video_id)
            raise VideoUnavailableError(video_id, reason or status)

        captions_json = (player.get("captions") or {}).get("playerCaptionsTracklistRenderer")
        if not captions_json or "captionTracks" not in captions_json:
            raise TranscriptsDisabledError(video_id)
        return captions_json


def list_youtube_tracks(video_id: str, cookies_path: Optional[str] = None) -> TrackList:
    """List caption tracks. Convenience function wrapping YouTubeClient."""
    client = YouTubeClient(cookies_path=cookies_path)
    return client.list_tracks(video_id)
