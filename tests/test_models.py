import pytest

from captrack.errors import InvalidFragmentError, NoMatchError
from captrack.models import CaptionTrack, Fragment, FragmentSequence, TrackList, TranslationLanguage


def _track(code, generated=False, video_id="abc"):
    return CaptionTrack(
        video_id=video_id,
        language_name=code.upper(),
        language_code=code,
        is_generated=generated,
        is_translatable=False,
        source_locator=f"https://example.com/{code}/{int(generated)}",
    )


def test_select_without_preference_returns_first_track():
    for n in range(1, 5):
        tracks = [_track(f"l{i}") for i in range(n)]
        track_list = TrackList("abc", tracks)
        assert track_list.select([]) == list(track_list)[0]
        assert track_list.select() is tracks[0]


def test_select_on_empty_list_fails():
    with pytest.raises(NoMatchError):
        TrackList("abc", []).select([])
    with pytest.raises(NoMatchError):
        TrackList("abc", []).select(["en"])


def test_select_respects_preference_order():
    track_list = TrackList("abc", [_track("fr"), _track("de"), _track("en")])
    assert track_list.select(["en", "de"]).language_code == "en"
    assert track_list.select(["xx", "de"]).language_code == "de"

    with pytest.raises(NoMatchError) as exc_info:
        track_list.select(["xx", "yy"])
    assert exc_info.value.requested == ("xx", "yy")
    assert exc_info.value.video_id == "abc"


def test_select_never_substitutes_similar_language():
    track_list = TrackList("abc", [_track("en-GB")])
    with pytest.raises(NoMatchError):
        track_list.select(["en"])


def test_select_manual_and_generated(track_list, english_manual, english_generated):
    assert track_list.select_manual("en") is english_manual
    assert track_list.select_generated("en") is english_generated
    assert track_list.select(["en"]) is english_manual

    with pytest.raises(NoMatchError):
        track_list.select_manual("de")
    with pytest.raises(NoMatchError):
        TrackList("abc", [english_manual]).select_generated("en")


def test_track_list_rejects_duplicates():
    with pytest.raises(ValueError):
        TrackList("abc", [_track("en"), _track("en")])
    # same language, different kind is fine
    assert len(TrackList("abc", [_track("en"), _track("en", generated=True)])) == 2


def test_track_list_groups_and_translation_languages(track_list, english_manual):
    assert track_list.manual_tracks == [english_manual]
    assert len(track_list.generated_tracks) == 1
    assert [l.language_code for l in track_list.translation_languages] == ["ja", "de"]

    text = str(track_list)
    assert "(MANUALLY CREATED)" in text
    assert 'ja ("Japanese")' in text


def test_caption_track_translation_invariant():
    with pytest.raises(ValueError):
        CaptionTrack(
            video_id="abc",
            language_name="English",
            language_code="en",
            is_generated=False,
            is_translatable=False,
            source_locator="https://example.com",
            translation_languages=(TranslationLanguage("ja", "Japanese"),),
        )


def test_caption_track_requires_video_id():
    with pytest.raises(ValueError):
        _track("en", video_id="")


def test_caption_track_is_immutable(english_manual):
    with pytest.raises(AttributeError):
        english_manual.language_code = "fr"
    assert english_manual.translation_targets == frozenset({"ja", "de"})


def test_fragment_sequence_sorts_by_start():
    seq = FragmentSequence((
        Fragment("b", 2.0, 1.0),
        Fragment("a", 0.0, 1.0),
        Fragment("a2", 0.0),
    ))
    assert [f.text for f in seq] == ["a", "a2", "b"]
    assert len(seq) == 3
    assert seq[2].end == 3.0
    assert seq[1].end is None


def test_fragment_sequence_equality():
    first = FragmentSequence((Fragment("x", 1.0, 0.5),))
    second = FragmentSequence([Fragment("x", 1.0, 0.5)])
    assert first == second


@pytest.mark.parametrize("fragments", [
    (Fragment("a", None), Fragment("b", 1.0)),
    (Fragment("a", "0.5"), Fragment("b", 1.0)),
    (Fragment("a", 0.0, 1.0), Fragment("b", True, 1.0)),
    (Fragment("a", 0.0, "1"), Fragment("b", 1.0)),
])
def test_fragment_sequence_rejects_malformed_timing(fragments):
    with pytest.raises(InvalidFragmentError):
        FragmentSequence(fragments)
