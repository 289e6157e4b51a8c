"""
High level API for captrack.

CaptionClient ties the track sources, the fetcher, the translator and the
formatters together, and ``fetch_from_config`` runs a whole retrieval from a
FetchConfig.
"""

import logging
import os
from typing import Any, Dict, Optional, Sequence, Union

from .errors import NoMatchError
from .fetcher import TrackFetcher
from .formatters import FormatKind, format_fragments
from .models import CaptionTrack, FetchConfig, FragmentSequence, TrackList
from .translator import translate
from .transport import DEFAULT_TIMEOUT, HttpTransport
from .youtube import YouTubeClient, YtDlpTrackSource

logger = logging.getLogger(__name__)

SOURCES = ("innertube", "yt-dlp")


def _get_source(
    source: str,
    transport: HttpTransport,
    cookies_path: Optional[str],
    proxies: Optional[Dict[str, str]],
    timeout: Optional[float] = None,
) -> Any:
    if source == "innertube":
        return YouTubeClient(transport=transport)
    if source == "yt-dlp":
        proxy = (proxies or {}).get("https") or (proxies or {}).get("http")
        return YtDlpTrackSource(cookies_path=cookies_path, proxy=proxy, timeout=timeout)
    raise ValueError(f"Unsupported track source: {source} (choose from {', '.join(SOURCES)})")


class CaptionClient:
    """
    Entry point for listing, translating, fetching and formatting captions.

    Example:
        >>> client = CaptionClient()
        >>> tracks = client.list_tracks("dQw4w9WgXcQ")
        >>> english = tracks.select(["en"])
        >>> print(client.format(client.fetch(english), "srt"))
    """

    def __init__(
        self,
        source: str = "innertube",
        transport: Optional[HttpTransport] = None,
        cookies_path: Optional[str] = None,
        proxies: Optional[Dict[str, str]] = None,
        timeout: float = DEFAULT_TIMEOUT,
        preserve_formatting: bool = False,
    ):
        """
        Initialize client.

        Args:
            source: Track source backend, "innertube" or "yt-dlp"
            transport: Transport for all HTTP traffic (built from the
                remaining arguments if omitted)
            cookies_path: Optional Netscape cookies file
            proxies: Optional requests-style proxies mapping
            timeout: Request timeout in seconds
            preserve_formatting: Keep inline formatting tags in fetched text
        """
        self.transport = transport or HttpTransport(
            timeout=timeout, proxies=proxies, cookies_path=cookies_path
        )
        self.source = _get_source(source, self.transport, cookies_path, proxies, timeout)
        self.fetcher = TrackFetcher(self.transport, preserve_formatting=preserve_formatting)

    def list_tracks(self, video_id: str) -> TrackList:
        """List the caption tracks of a video. See YouTubeClient.list_tracks."""
        return self.source.list_tracks(video_id)

    def fetch(self, track: CaptionTrack, preserve_formatting: Optional[bool] = None) -> FragmentSequence:
        """Fetch the fragments of a track. See TrackFetcher.fetch."""
        return self.fetcher.fetch(track, preserve_formatting=preserve_formatting)

    def translate(self, track: CaptionTrack, target_code: str) -> CaptionTrack:
        """Derive a translated track. See translator.translate."""
        return translate(track, target_code)

    def format(self, fragments: FragmentSequence, kind: Union[FormatKind, str] = FormatKind.TEXT) -> str:
        return format_fragments(fragments, kind)

    def get_transcript(
        self,
        video_id: str,
        languages: Sequence[str] = (),
        preserve_formatting: Optional[bool] = None,
    ) -> FragmentSequence:
        """
        List, select and fetch in one call.

        Args:
            video_id: YouTube video id
            languages: Language codes in order of preference (first track
                if empty)
            preserve_formatting: Override the client default

        Returns:
            FragmentSequence of the selected track

        Raises:
            NotFoundError, NetworkError, NoMatchError, FetchError, ParseError
        """
        track = self.list_tracks(video_id).select(languages)
        return self.fetch(track, preserve_formatting=preserve_formatting)


def _select_track(track_list: TrackList, languages: Sequence[str], prefer: Optional[str]) -> CaptionTrack:
    if prefer is None:
        return track_list.select(languages)
    if prefer not in ("manual", "generated"):
        raise ValueError(f"prefer must be 'manual', 'generated' or None, got {prefer!r}")
    select_one = track_list.select_manual if prefer == "manual" else track_list.select_generated
    if not languages:
        candidates = track_list.manual_tracks if prefer == "manual" else track_list.generated_tracks
        if not candidates:
            raise NoMatchError(track_list.video_id, (), kind=prefer)
        return candidates[0]

    for code in languages:
        try:
            return select_one(code)
        except NoMatchError:
            logger.debug(f"No {prefer} track for '{code}', trying next preference")
    raise NoMatchError(track_list.video_id, languages, kind=prefer)


def fetch_from_config(config: FetchConfig, transport: Optional[HttpTransport] = None) -> Dict[str, Any]:
    """
    Run a complete retrieval described by a FetchConfig.

    Lists the tracks, selects one, translates it when requested, fetches and
    formats it, and writes the result to ``config.output_file`` if set.

    Returns:
        Dictionary with result metadata:
            - video_id: Video the transcript belongs to
            - language_code: Language of the rendered transcript
            - is_generated: Whether the source track is auto-generated
            - fragments_count: Number of fragments fetched
            - output: The formatted transcript
            - output_path: Path written to, or None
    """
    client = CaptionClient(
        source=config.source,
        transport=transport,
        cookies_path=config.cookies_path,
        proxies=config.proxies,
        timeout=config.timeout,
        preserve_formatting=config.preserve_formatting,
    )

    track = _select_track(client.list_tracks(config.video_id), config.languages, config.prefer)
    if config.translate_to:
        track = client.translate(track, config.translate_to)

    fragments = client.fetch(track)
    output = client.format(fragments, config.output_format)

    if config.output_file:
        os.makedirs(os.path.dirname(config.output_file) or ".", exist_ok=True)
        with open(config.output_file, "w", encoding="utf-8") as f:
            f.write(output)
        logger.info(f"Transcript saved to: {config.output_file}")

    return {
        "video_id": track.video_id,
        "language_code": track.language_code,
        "is_generated": track.is_generated,
        "fragments_count": len(fragments),
        "output": output,
        "output_path": config.output_file,
    }
