"""
Track translation for captrack.

The remote service translates a track when its timed text URL carries a
``tlang`` parameter, so translating is a pure transformation of the track:
no request is made until the translated track is fetched.
"""

import dataclasses
import logging
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

from .errors import NotTranslatableError, UnsupportedLanguageError
from .models import CaptionTrack

logger = logging.getLogger(__name__)


def with_translation_language(locator: str, target_code: str) -> str:
    """
    Set the ``tlang`` query parameter of a timed text URL.

    An existing ``tlang`` is replaced; all other parameters keep their order.

    Example:
        >>> with_translation_language("https://host/api/timedtext?v=x&lang=en", "ja")
        'https://host/api/timedtext?v=x&lang=en&tlang=ja'
    """
    parts = urlparse(locator)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != "tlang"]
    query.append(("tlang", target_code))
    return urlunparse(parts._replace(query=urlencode(query)))


def translate(track: CaptionTrack, target_code: str) -> CaptionTrack:
    """
    Derive the translated variant of a caption track.

    The translated track keeps the video and the generation flag of the
    source, is not translatable itself and points at the translated payload.
    Fetch it like any other track.

    Args:
        track: Source track
        target_code: Language code to translate into

    Returns:
        New CaptionTrack for the translation

    Raises:
        NotTranslatableError: If the track cannot be translated
        UnsupportedLanguageError: If target_code is not a translation target

    Example:
        >>> japanese = translate(english, "ja")
        >>> japanese.language_code, japanese.is_translatable
        ('ja', False)
    """
    if not track.is_translatable:
        raise NotTranslatableError(track.video_id, track.language_code)

    language = track.translation_language(target_code)
    if language is None:
        raise UnsupportedLanguageError(track.video_id, target_code)

    logger.info(
        f"Translating '{track.language_code}' caption track of {track.video_id} "
        f"to '{target_code}'"
    )
    return dataclasses.replace(
        track,
        language_code=language.language_code,
        language_name=language.language_name,
        is_translatable=False,
        translation_languages=(),
        source_locator=with_translation_language(track.source_locator, target_code),
    )
