"""
Timed text fetcher for captrack.

Downloads the payload behind a caption track and decodes it into a
FragmentSequence. Three payload shapes are understood:

- legacy timed text XML: ``<transcript><text start="1.2" dur="3.4">``
- srv3 XML: ``<timedtext><body><p t="1200" d="3400">`` (milliseconds)
- json3: ``{"events": [{"tStartMs": 1200, "dDurationMs": 3400, "segs": [...]}]}``
"""

import html
import json
import logging
import re
import xml.etree.ElementTree as ElementTree
from typing import Any, List, Optional

from .errors import FetchError, NetworkError, ParseError
from .models import CaptionTrack, Fragment, FragmentSequence
from .utils import millis_to_seconds, parse_seconds

logger = logging.getLogger(__name__)

FORMATTING_TAGS = (
    "strong",  # important
    "em",      # emphasized
    "b",       # bold
    "i",       # italic
    "mark",    # marked
    "small",   # smaller
    "del",     # deleted
    "ins",     # inserted
    "sub",     # subscript
    "sup",     # superscript
)

_ALL_TAGS_PATTERN = re.compile(r"<[^>]*>", re.IGNORECASE)
_NON_FORMATTING_TAGS_PATTERN = re.compile(
    r"</?(?!/?(" + "|".join(FORMATTING_TAGS) + r")\b)[^>]*>", re.IGNORECASE
)


def _clean_text(raw: Optional[str], preserve_formatting: bool) -> str:
    if not raw:
        return ""
    # entities arrive escaped twice: once for XML, once for HTML
    text = html.unescape(raw)
    pattern = _NON_FORMATTING_TAGS_PATTERN if preserve_formatting else _ALL_TAGS_PATTERN
    return pattern.sub("", text)


def _parse_legacy_xml(root: ElementTree.Element, preserve_formatting: bool) -> List[Fragment]:
    fragments = []
    for element in root.iter("text"):
        start = parse_seconds(element.get("start"))
        if start is None:
            raise ParseError("Timed text element without a start attribute")
        fragments.append(Fragment(
            text=_clean_text(element.text, preserve_formatting),
            start=start,
            duration=parse_seconds(element.get("dur")),
        ))
    return fragments


def _parse_srv3_xml(root: ElementTree.Element, preserve_formatting: bool) -> List[Fragment]:
    fragments = []
    for element in root.iter("p"):
        start = millis_to_seconds(element.get("t"))
        if start is None:
            raise ParseError("srv3 paragraph without a t attribute")
        fragments.append(Fragment(
            text=_clean_text("".join(element.itertext()), preserve_formatting),
            start=start,
            duration=millis_to_seconds(element.get("d")),
        ))
    return fragments


def _parse_json3(data: Any, preserve_formatting: bool) -> List[Fragment]:
    if not isinstance(data, dict) or not isinstance(data.get("events"), list):
        raise ParseError("json3 payload has no events list")

    fragments = []
    for event in data["events"]:
        segs = event.get("segs")
        # events without segments only carry window/pen styling
        if not segs:
            continue
        text = "".join(seg.get("utf8", "") for seg in segs)
        if text == "\n":
            continue
        fragments.append(Fragment(
            text=_clean_text(text, preserve_formatting),
            start=millis_to_seconds(event.get("tStartMs", 0)),
            duration=millis_to_seconds(event.get("dDurationMs")),
        ))
    return fragments


def parse_timed_text(payload: bytes, preserve_formatting: bool = False) -> FragmentSequence:
    """
    Decode a timed text payload into a FragmentSequence.

    Args:
        payload: Raw response body
        preserve_formatting: Keep basic inline formatting tags such as
            ``<i>`` and ``<b>`` instead of stripping all markup

    Returns:
        FragmentSequence sorted by start time

    Raises:
        ParseError: If the payload is empty or structurally invalid

    Example:
        >>> seq = parse_timed_text(b'<transcript><text start="0" dur="1.5">Hi</text></transcript>')
        >>> seq[0].text
        'Hi'
    """
    if not payload or not payload.strip():
        raise ParseError("Empty timed text payload")

    try:
        if payload.lstrip()[:1] in (b"{", b"["):
            fragments = _parse_json3(json.loads(payload), preserve_formatting)
        else:
            root = ElementTree.fromstring(payload)
            if root.tag == "timedtext":
                fragments = _parse_srv3_xml(root, preserve_formatting)
            elif root.tag == "transcript":
                fragments = _parse_legacy_xml(root, preserve_formatting)
            else:
                raise ParseError(f"Unexpected timed text root element <{root.tag}>")
        return FragmentSequence(tuple(fragments))
    except ElementTree.ParseError as e:
        raise ParseError(f"Malformed timed text XML: {e}") from e
    except (ValueError, TypeError, AttributeError) as e:
        # json.JSONDecodeError and bad numeric attributes
        raise ParseError(f"Invalid timed text payload: {e}") from e


class TrackFetcher:
    """Fetches and decodes the fragments of caption tracks."""

    def __init__(self, transport, preserve_formatting: bool = False):
        """
        Initialize fetcher.

        Args:
            transport: Object providing ``request(locator) -> bytes``
            preserve_formatting: Default for keeping inline formatting tags
        """
        self.transport = transport
        self.preserve_formatting = preserve_formatting

    def fetch(self, track: CaptionTrack, preserve_formatting: Optional[bool] = None) -> FragmentSequence:
        """
        Retrieve the fragments of a caption track.

        Args:
            track: Track to fetch (translated tracks included)
            preserve_formatting: Override the fetcher default

        Returns:
            FragmentSequence sorted by start time

        Raises:
            FetchError: If the payload cannot be retrieved
            ParseError: If the payload cannot be decoded
        """
        if preserve_formatting is None:
            preserve_formatting = self.preserve_formatting

        logger.info(
            f"Fetching '{track.language_code}' caption track for {track.video_id}"
        )
        try:
            payload = self.transport.request(track.source_locator)
        except NetworkError as e:
            raise FetchError(
                f"Could not retrieve '{track.language_code}' caption track: {e}",
                video_id=track.video_id,
            ) from e

        try:
            fragments = parse_timed_text(payload, preserve_formatting=preserve_formatting)
        except ParseError as e:
            raise ParseError(
                f"Could not decode '{track.language_code}' caption track: {e}",
                video_id=track.video_id,
            ) from e

        logger.debug(f"Decoded {len(fragments)} fragments for {track.video_id}")
        return fragments
