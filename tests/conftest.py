import json

import pytest
import requests

from captrack.models import CaptionTrack, TrackList, TranslationLanguage


def make_response(status_code=200, body=b"", url="https://www.youtube.com/"):
    response = requests.Response()
    response.status_code = status_code
    response._content = body if isinstance(body, bytes) else body.encode("utf-8")
    response.url = url
    response.encoding = "utf-8"
    return response


class FakeSession(requests.Session):
    """requests.Session that answers from a list of canned responses."""

    def __init__(self, responses):
        super().__init__()
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class FakeTransport:
    """Transport double keyed by URL prefix."""

    def __init__(self, pages=None, player=None, payloads=None):
        self.pages = list(pages or [])
        self.player = player
        self.payloads = payloads or {}
        self.cookies = {}
        self.requested = []
        self.posted = []

    def get_text(self, url, **kwargs):
        self.requested.append(url)
        return self.pages.pop(0)

    def post_json(self, url, payload, params=None):
        self.posted.append((url, payload, params))
        if isinstance(self.player, Exception):
            raise self.player
        return self.player

    def set_cookie(self, name, value, domain):
        self.cookies[name] = value

    def request(self, locator):
        self.requested.append(locator)
        result = self.payloads[locator]
        if isinstance(result, Exception):
            raise result
        return result


WATCH_HTML = '<html><script>ytcfg.set({"INNERTUBE_API_KEY": "test-key"});</script></html>'

CAPTIONS_JSON = {
    "captionTracks": [
        {
            "baseUrl": "https://www.youtube.com/api/timedtext?v=abc&lang=en&fmt=srv3",
            "name": {"runs": [{"text": "English"}]},
            "languageCode": "en",
            "isTranslatable": True,
        },
        {
            "baseUrl": "https://www.youtube.com/api/timedtext?v=abc&lang=en&kind=asr&fmt=srv3",
            "name": {"runs": [{"text": "English (auto-generated)"}]},
            "languageCode": "en",
            "kind": "asr",
            "isTranslatable": True,
        },
        {
            "baseUrl": "https://www.youtube.com/api/timedtext?v=abc&lang=de",
            "name": {"simpleText": "German"},
            "languageCode": "de",
        },
    ],
    "translationLanguages": [
        {"languageCode": "ja", "languageName": {"runs": [{"text": "Japanese"}]}},
        {"languageCode": "de", "languageName": {"simpleText": "German"}},
    ],
}


def player_response(captions=CAPTIONS_JSON, status="OK", reason=None):
    playability = {"status": status}
    if reason:
        playability["reason"] = reason
    data = {"playabilityStatus": playability}
    if captions is not None:
        data["captions"] = {"playerCaptionsTracklistRenderer": captions}
    return data


@pytest.fixture
def english_manual():
    return CaptionTrack(
        video_id="abc",
        language_name="English",
        language_code="en",
        is_generated=False,
        is_translatable=True,
        source_locator="https://www.youtube.com/api/timedtext?v=abc&lang=en",
        translation_languages=(
            TranslationLanguage("ja", "Japanese"),
            TranslationLanguage("de", "German"),
        ),
    )


@pytest.fixture
def english_generated():
    return CaptionTrack(
        video_id="abc",
        language_name="English (auto-generated)",
        language_code="en",
        is_generated=True,
        is_translatable=False,
        source_locator="https://www.youtube.com/api/timedtext?v=abc&lang=en&kind=asr",
    )


@pytest.fixture
def track_list(english_manual, english_generated):
    return TrackList("abc", [english_manual, english_generated])


@pytest.fixture
def legacy_payload():
    return (
        b'<?xml version="1.0" encoding="utf-8" ?><transcript>'
        b'<text start="1.5" dur="1.0">world</text>'
        b'<text start="0.0" dur="1.5">Hello</text>'
        b'</transcript>'
    )


@pytest.fixture
def json3_payload():
    return json.dumps({
        "events": [
            {"tStartMs": 0, "dDurationMs": 1500, "segs": [{"utf8": "Hello"}]},
            {"tStartMs": 1400, "dDurationMs": 10, "segs": [{"utf8": "\n"}]},
            {"tStartMs": 1500, "dDurationMs": 1000, "segs": [{"utf8": "wor"}, {"utf8": "ld"}]},
            {"tStartMs": 2500, "wWinId": 1},
        ]
    }).encode("utf-8")
