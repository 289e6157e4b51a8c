import json
import math

import pytest

from captrack.errors import InvalidFragmentError, ParseError
from captrack.formatters import (
    FORMATTERS,
    FormatKind,
    format_fragments,
    format_json,
    format_srt,
    format_text,
    format_webvtt,
    parse_json,
)
from captrack.models import Fragment, FragmentSequence


@pytest.fixture
def hello_world():
    return FragmentSequence((Fragment("Hello", 0.0, 1.5), Fragment("world", 1.5, 1.0)))


def test_format_text(hello_world):
    assert format_text(hello_world) == "Hello\nworld"


def test_format_text_skips_empty_fragments():
    seq = FragmentSequence((Fragment("a", 0.0, 1.0), Fragment("", 1.0, 1.0), Fragment("b", 2.0, 1.0)))
    assert format_text(seq) == "a\nb"
    assert format_text(FragmentSequence()) == ""


def test_format_srt(hello_world):
    assert format_srt(hello_world) == (
        "1\n00:00:00,000 --> 00:00:01,500\nHello\n"
        "\n"
        "2\n00:00:01,500 --> 00:00:02,500\nworld\n"
        "\n"
    )


def test_format_srt_collapses_blank_lines_in_text():
    seq = FragmentSequence((Fragment("a\n\nb", 0.0, 1.0), Fragment("c", 1.0, 1.0)))
    assert format_srt(seq) == (
        "1\n00:00:00,000 --> 00:00:01,000\na\nb\n"
        "\n"
        "2\n00:00:01,000 --> 00:00:02,000\nc\n"
        "\n"
    )
    assert "a\nb\n\n00:00:01.000" in format_webvtt(seq)


def test_format_srt_end_time_without_duration():
    seq = FragmentSequence((Fragment("a", 1.0), Fragment("b", 4.25), Fragment("c", 3725.5)))
    lines = format_srt(seq).split("\n")
    assert lines[1] == "00:00:01,000 --> 00:00:04,250"
    assert lines[5] == "00:00:04,250 --> 01:02:05,500"
    # last fragment without duration ends where it starts
    assert lines[9] == "01:02:05,500 --> 01:02:05,500"


def test_format_srt_clamps_negative_values():
    seq = FragmentSequence((Fragment("early", -2.0, 1.0), Fragment("backwards", 5.0, -3.0)))
    lines = format_srt(seq).split("\n")
    assert lines[1] == "00:00:00,000 --> 00:00:00,000"
    assert lines[5] == "00:00:05,000 --> 00:00:05,000"


def test_format_srt_rounds_milliseconds():
    seq = FragmentSequence((Fragment("x", 0.29, 0.001),))
    assert format_srt(seq).split("\n")[1] == "00:00:00,290 --> 00:00:00,291"


def test_format_webvtt(hello_world):
    assert format_webvtt(hello_world) == (
        "WEBVTT\n"
        "\n"
        "00:00:00.000 --> 00:00:01.500\nHello\n"
        "\n"
        "00:00:01.500 --> 00:00:02.500\nworld\n"
        "\n"
    )


def test_format_json(hello_world):
    data = json.loads(format_json(hello_world))
    assert data == [
        {"text": "Hello", "start": 0.0, "duration": 1.5},
        {"text": "world", "start": 1.5, "duration": 1.0},
    ]


def test_format_json_omits_unknown_duration():
    data = json.loads(format_json(FragmentSequence((Fragment("x", 2.0),))))
    assert data == [{"text": "x", "start": 2.0}]


def test_json_round_trip():
    seq = FragmentSequence((
        Fragment("Hello", 0.0, 1.5),
        Fragment("", 1.5, 0.1),
        Fragment("café \"quoted\"\nnext", 1.6),
        Fragment("late", 12345.678, 0.333),
    ))
    assert parse_json(format_json(seq)) == seq
    assert parse_json(format_json(seq, indent=2)) == seq


@pytest.mark.parametrize("payload", [
    "not json",
    '{"text": "x"}',
    '[1, 2]',
    '[{"start": 1.0}]',
    '[{"text": "x", "start": "1.0"}]',
    '[{"text": "x", "start": 1.0, "duration": "long"}]',
])
def test_parse_json_rejects_malformed_input(payload):
    with pytest.raises(ParseError):
        parse_json(payload)


@pytest.mark.parametrize("fragment", [
    Fragment("x", math.nan, 1.0),
    Fragment("x", 1.0, math.inf),
    Fragment(None, 1.0, 1.0),
    Fragment("x", True, 1.0),
    Fragment("x", 1.0, False),
])
def test_formatters_reject_invalid_fragments(fragment):
    for formatter in FORMATTERS.values():
        with pytest.raises(InvalidFragmentError):
            formatter((fragment,))
    with pytest.raises(InvalidFragmentError):
        FragmentSequence((fragment,))


def test_parse_json_rejects_non_finite_numbers():
    with pytest.raises(ParseError):
        parse_json('[{"text": "x", "start": NaN}]')
    with pytest.raises(ParseError):
        parse_json('[{"text": "x", "start": 1.0, "duration": Infinity}]')


def test_format_fragments_dispatch(hello_world):
    assert format_fragments(hello_world, "text") == format_text(hello_world)
    assert format_fragments(hello_world, FormatKind.SRT) == format_srt(hello_world)
    assert set(FORMATTERS) == set(FormatKind)

    with pytest.raises(ValueError):
        format_fragments(hello_world, "docx")
