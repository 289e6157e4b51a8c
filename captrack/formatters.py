"""
Output formatters for captrack.

Each formatter is a plain function turning a FragmentSequence into a string.
They share no state and do no I/O. ``FORMATTERS`` maps every FormatKind to
its function and ``format_fragments`` dispatches on it.
"""

import json
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from .errors import InvalidFragmentError, ParseError
from .models import Fragment, FragmentSequence, check_fragment
from .utils import seconds_to_srt_timestamp, seconds_to_timestamp


class FormatKind(str, Enum):
    TEXT = "text"
    JSON = "json"
    SRT = "srt"
    WEBVTT = "webvtt"


def _check_fragments(fragments: Iterable[Fragment]) -> List[Fragment]:
    return [check_fragment(fragment, index) for index, fragment in enumerate(fragments)]


def _end_times(fragments: List[Fragment]) -> List[float]:
    """
    End of every fragment: start + duration, or the next fragment's start
    when the duration is unknown. Never earlier than the fragment's start.
    """
    ends = []
    for i, fragment in enumerate(fragments):
        if fragment.duration is not None:
            end = fragment.start + fragment.duration
        elif i + 1 < len(fragments):
            end = fragments[i + 1].start
        else:
            end = fragment.start
        ends.append(max(end, fragment.start))
    return ends


def format_text(fragments: FragmentSequence) -> str:
    """
    Plain text: one line per fragment, empty fragments skipped.

    Example:
        >>> format_text(seq)
        'Hello\\nworld'
    """
    return "\n".join(f.text for f in _check_fragments(fragments) if f.text)


def fragment_to_dict(fragment: Fragment) -> Dict[str, Any]:
    data: Dict[str, Any] = {"text": fragment.text, "start": fragment.start}
    if fragment.duration is not None:
        data["duration"] = fragment.duration
    return data


def format_json(fragments: FragmentSequence, indent: Optional[int] = None) -> str:
    """
    JSON array of ``{"text", "start", "duration"}`` objects.

    ``duration`` is left out for fragments whose duration is unknown.
    ``parse_json`` reads the output back into an equal FragmentSequence.
    """
    data = [fragment_to_dict(f) for f in _check_fragments(fragments)]
    return json.dumps(data, indent=indent, ensure_ascii=False)


def parse_json(payload: Union[str, bytes]) -> FragmentSequence:
    """
    Read the output of ``format_json`` back into a FragmentSequence.

    Raises:
        ParseError: If the payload is not an array of fragment objects
    """
    try:
        data = json.loads(payload)
    except ValueError as e:
        raise ParseError(f"Invalid fragment JSON: {e}") from e

    if not isinstance(data, list):
        raise ParseError("Fragment JSON must be an array")

    fragments = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise ParseError(f"Fragment {index} is not an object")
        text = item.get("text")
        start = item.get("start")
        duration = item.get("duration")
        if not isinstance(text, str):
            raise ParseError(f"Fragment {index} has no text")
        if isinstance(start, bool) or not isinstance(start, (int, float)):
            raise ParseError(f"Fragment {index} has no numeric start")
        if duration is not None and (isinstance(duration, bool) or not isinstance(duration, (int, float))):
            raise ParseError(f"Fragment {index} has a non-numeric duration")
        fragments.append(Fragment(text=text, start=start, duration=duration))

    try:
        return FragmentSequence(tuple(fragments))
    except InvalidFragmentError as e:
        # NaN and Infinity literals get past json.loads
        raise ParseError(f"Invalid fragment JSON: {e}") from e


def _cue_text(text: str) -> str:
    # a blank line would end the cue block early
    return "\n".join(line for line in text.split("\n") if line.strip())


def _format_cues(fragments: FragmentSequence, timestamp: Callable[[float], str], numbered: bool) -> List[str]:
    checked = _check_fragments(fragments)
    blocks = []
    for index, (fragment, end) in enumerate(zip(checked, _end_times(checked)), start=1):
        lines = []
        if numbered:
            lines.append(str(index))
        lines.append(f"{timestamp(fragment.start)} --> {timestamp(end)}")
        text = _cue_text(fragment.text)
        if text:
            lines.append(text)
        blocks.append("\n".join(lines) + "\n\n")
    return blocks


def format_srt(fragments: FragmentSequence) -> str:
    """
    SRT subtitles: numbered blocks, each followed by a blank line.

    Example:
        >>> print(format_srt(seq))
        1
        00:00:00,000 --> 00:00:01,500
        Hello
        <BLANKLINE>
        2
        00:00:01,500 --> 00:00:02,500
        world
        <BLANKLINE>
        <BLANKLINE>
    """
    return "".join(_format_cues(fragments, seconds_to_srt_timestamp, numbered=True))


def format_webvtt(fragments: FragmentSequence) -> str:
    """WebVTT subtitles: ``WEBVTT`` header followed by unnumbered cues."""
    return "".join(["WEBVTT\n\n"] + _format_cues(fragments, seconds_to_timestamp, numbered=False))


FORMATTERS: Dict[FormatKind, Callable[[FragmentSequence], str]] = {
    FormatKind.TEXT: format_text,
    FormatKind.JSON: format_json,
    FormatKind.SRT: format_srt,
    FormatKind.WEBVTT: format_webvtt,
}

FILE_EXTENSIONS: Dict[FormatKind, str] = {
    FormatKind.TEXT: "txt",
    FormatKind.JSON: "json",
    FormatKind.SRT: "srt",
    FormatKind.WEBVTT: "vtt",
}


def format_fragments(fragments: FragmentSequence, kind: Union[FormatKind, str] = FormatKind.TEXT) -> str:
    """
    Render fragments in the requested format.

    Args:
        fragments: Fragments to render
        kind: FormatKind or its value ("text", "json", "srt", "webvtt")

    Raises:
        ValueError: If kind is not a known format
        InvalidFragmentError: If a fragment has non-finite timing
    """
    try:
        kind = FormatKind(kind)
    except ValueError:
        raise ValueError(
            f"Unsupported output format: {kind} "
            f"(choose from {', '.join(k.value for k in FormatKind)})"
        ) from None
    return FORMATTERS[kind](fragments)
