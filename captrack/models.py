"""
Data models for captrack.

Defines the core data structures used throughout the package. All track and
fragment types are immutable once built, so they can be shared freely between
threads.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Sequence, Tuple

from .errors import InvalidFragmentError, NoMatchError


@dataclass(frozen=True)
class TranslationLanguage:
    """A language the remote service can translate a track into."""
    language_code: str
    language_name: str


@dataclass(frozen=True)
class CaptionTrack:
    """One available transcript for a video."""
    video_id: str
    language_name: str
    language_code: str
    is_generated: bool
    is_translatable: bool
    source_locator: str
    translation_languages: Tuple[TranslationLanguage, ...] = ()

    def __post_init__(self):
        if not self.video_id:
            raise ValueError("CaptionTrack requires a video_id")
        object.__setattr__(self, "translation_languages", tuple(self.translation_languages))
        if self.translation_languages and not self.is_translatable:
            raise ValueError(
                f"Track '{self.language_code}' lists translation languages "
                f"but is not translatable"
            )

    @property
    def translation_targets(self) -> FrozenSet[str]:
        """Language codes this track can be translated into."""
        return frozenset(lang.language_code for lang in self.translation_languages)

    def translation_language(self, code: str) -> Optional[TranslationLanguage]:
        for lang in self.translation_languages:
            if lang.language_code == code:
                return lang
        return None

    def __str__(self) -> str:
        kind = "generated" if self.is_generated else "manual"
        suffix = "[TRANSLATABLE]" if self.is_translatable else ""
        return f'{self.language_code} ("{self.language_name}") {kind} {suffix}'.rstrip()


class TrackList:
    """
    Ordered, read-only collection of the caption tracks of one video.

    Tracks keep the order the service reported them in. A list never holds
    two tracks with the same (language_code, is_generated) pair.
    """

    def __init__(self, video_id: str, tracks: Iterable[CaptionTrack] = ()):
        self.video_id = video_id
        self._tracks: Tuple[CaptionTrack, ...] = tuple(tracks)

        seen = set()
        for track in self._tracks:
            key = (track.language_code, track.is_generated)
            if key in seen:
                raise ValueError(
                    f"Duplicate caption track {key} in track list for {video_id}"
                )
            seen.add(key)

    def __iter__(self) -> Iterator[CaptionTrack]:
        return iter(self._tracks)

    def __len__(self) -> int:
        return len(self._tracks)

    def __getitem__(self, index: int) -> CaptionTrack:
        return self._tracks[index]

    def __bool__(self) -> bool:
        return bool(self._tracks)

    @property
    def manual_tracks(self) -> List[CaptionTrack]:
        return [t for t in self._tracks if not t.is_generated]

    @property
    def generated_tracks(self) -> List[CaptionTrack]:
        return [t for t in self._tracks if t.is_generated]

    @property
    def translation_languages(self) -> List[TranslationLanguage]:
        """Union of the translation targets of all tracks, first seen first."""
        languages: Dict[str, TranslationLanguage] = {}
        for track in self._tracks:
            for lang in track.translation_languages:
                languages.setdefault(lang.language_code, lang)
        return list(languages.values())

    def select(self, preferred_codes: Sequence[str] = ()) -> CaptionTrack:
        """
        Select a track by language preference.

        Codes are tried in order and the first track whose language code
        matches exactly wins. With no preference the first track is returned.
        A missing language is never substituted by another one.

        Args:
            preferred_codes: Language codes in order of preference

        Returns:
            The selected CaptionTrack

        Raises:
            NoMatchError: If no track matches (or the list is empty)

        Example:
            >>> track = track_list.select(["de", "en"])
        """
        return self._select(self._tracks, preferred_codes)

    def select_manual(self, code: str) -> CaptionTrack:
        """Select a human-authored track for ``code``."""
        return self._select(self.manual_tracks, [code], kind="manual")

    def select_generated(self, code: str) -> CaptionTrack:
        """Select an auto-generated track for ``code``."""
        return self._select(self.generated_tracks, [code], kind="generated")

    def _select(
        self,
        candidates: Sequence[CaptionTrack],
        preferred_codes: Sequence[str],
        kind: Optional[str] = None,
    ) -> CaptionTrack:
        if isinstance(preferred_codes, str):
            preferred_codes = [preferred_codes]
        preferred_codes = list(preferred_codes)

        if not preferred_codes:
            if candidates:
                return candidates[0]
            raise NoMatchError(self.video_id, (), kind=kind)

        for code in preferred_codes:
            for track in candidates:
                if track.language_code == code:
                    return track

        raise NoMatchError(self.video_id, preferred_codes, kind=kind)

    def __str__(self) -> str:
        def describe(tracks: Sequence[object]) -> str:
            lines = [f" - {t}" for t in tracks]
            return "\n".join(lines) if lines else "None"

        translations = [
            f'{lang.language_code} ("{lang.language_name}")'
            for lang in self.translation_languages
        ]
        return (
            f"For this video ({self.video_id}) transcripts are available in the following languages:\n\n"
            f"(MANUALLY CREATED)\n{describe(self.manual_tracks)}\n\n"
            f"(GENERATED)\n{describe(self.generated_tracks)}\n\n"
            f"(TRANSLATION LANGUAGES)\n{describe(translations)}"
        )

    def __repr__(self) -> str:
        return f"TrackList(video_id={self.video_id!r}, tracks={list(self._tracks)!r})"


@dataclass(frozen=True)
class Fragment:
    """One timed unit of text. ``duration`` is None when unknown."""
    text: str
    start: float
    duration: Optional[float] = None

    @property
    def end(self) -> Optional[float]:
        if self.duration is None:
            return None
        return self.start + self.duration


def _is_real_number(value) -> bool:
    # bool is an int subclass but never a valid timing
    return not isinstance(value, bool) and isinstance(value, (int, float)) and math.isfinite(value)


def check_fragment(fragment: Fragment, index: int = 0) -> Fragment:
    """
    Ensure a fragment has string text and finite numeric timing.

    Raises:
        InvalidFragmentError: If text is not a str, or start/duration is
            not a finite int or float
    """
    if not isinstance(fragment.text, str):
        raise InvalidFragmentError(f"Fragment {index} has non-string text: {fragment.text!r}")
    if not _is_real_number(fragment.start):
        raise InvalidFragmentError(f"Fragment {index} has invalid start: {fragment.start!r}")
    if fragment.duration is not None and not _is_real_number(fragment.duration):
        raise InvalidFragmentError(f"Fragment {index} has invalid duration: {fragment.duration!r}")
    return fragment


@dataclass(frozen=True)
class FragmentSequence:
    """
    Immutable sequence of fragments, always sorted by start time.

    The sort is stable, so fragments starting together keep the order
    they were given in. Every fragment is checked before sorting, so a
    malformed one raises InvalidFragmentError.
    """
    fragments: Tuple[Fragment, ...] = ()

    def __post_init__(self):
        checked = [check_fragment(f, i) for i, f in enumerate(self.fragments)]
        ordered = sorted(checked, key=lambda f: f.start)
        object.__setattr__(self, "fragments", tuple(ordered))

    def __iter__(self) -> Iterator[Fragment]:
        return iter(self.fragments)

    def __len__(self) -> int:
        return len(self.fragments)

    def __getitem__(self, index: int) -> Fragment:
        return self.fragments[index]


@dataclass
class FetchConfig:
    """Configuration for a complete list/select/fetch/format run."""
    video_id: str
    languages: List[str] = field(default_factory=list)
    prefer: Optional[str] = None  # "manual", "generated" or None for any
    translate_to: Optional[str] = None
    output_format: str = "text"
    output_file: Optional[str] = None
    source: str = "innertube"  # or "yt-dlp"
    preserve_formatting: bool = False
    cookies_path: Optional[str] = None
    proxies: Optional[Dict[str, str]] = None
    timeout: float = 30.0
