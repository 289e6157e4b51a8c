"""
Exception hierarchy for captrack.

Every error raised by the library derives from CaptionTrackError, so callers
can catch the whole family at once or pick the specific failure they care
about.
"""

from typing import Iterable, Optional


class CaptionTrackError(Exception):
    """Base class for all captrack errors."""

    def __init__(self, message: str, video_id: Optional[str] = None):
        self.video_id = video_id
        if video_id:
            message = f"{message} (video_id={video_id})"
        super().__init__(message)


class NotFoundError(CaptionTrackError):
    """The video has no caption tracks at all."""


class VideoUnavailableError(NotFoundError):
    """The video does not exist, is private or otherwise unplayable."""

    def __init__(self, video_id: str, reason: Optional[str] = None):
        self.reason = reason
        message = "Video is unavailable"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, video_id=video_id)


class TranscriptsDisabledError(NotFoundError):
    """The video is playable but publishes no captions."""

    def __init__(self, video_id: str):
        super().__init__("Subtitles are disabled for this video", video_id=video_id)


class NetworkError(CaptionTrackError):
    """Transport level failure while talking to the captions service."""


class RequestBlockedError(NetworkError):
    """The service refused the request (rate limit, bot check, IP block)."""


class NoMatchError(CaptionTrackError):
    """No caption track satisfies the selection criteria."""

    def __init__(
        self,
        video_id: Optional[str],
        requested: Iterable[str],
        kind: Optional[str] = None,
    ):
        self.requested = tuple(requested)
        what = f"{kind} caption track" if kind else "caption track"
        if self.requested:
            message = f"No {what} found for language codes {list(self.requested)}"
        else:
            message = f"No {what} available"
        super().__init__(message, video_id=video_id)


class FetchError(CaptionTrackError):
    """Retrieving the timed text payload of a track failed."""


class ParseError(CaptionTrackError):
    """A payload received from the service could not be decoded."""


class NotTranslatableError(CaptionTrackError):
    """Translation was requested for a track that cannot be translated."""

    def __init__(self, video_id: str, language_code: str):
        self.language_code = language_code
        super().__init__(
            f"Caption track '{language_code}' is not translatable", video_id=video_id
        )


class UnsupportedLanguageError(CaptionTrackError):
    """The requested translation target is not offered for the track."""

    def __init__(self, video_id: str, target_code: str):
        self.target_code = target_code
        super().__init__(
            f"Translation language '{target_code}' is not available", video_id=video_id
        )


class InvalidFragmentError(CaptionTrackError, ValueError):
    """A fragment has non-string text or non-finite, non-numeric timing."""
