"""Tests for the Perspective API adapter."""

import json

import httpx

from app.services.toxicity import ScoreSet, ToxicityClassifier, should_skip
from tests.conftest import mock_client, perspective_payload

URL = "https://toxicity.test/v1alpha1/comments:analyze"
TEXT = "They told me my account was locked and I had to pay a fee"


def _classifier(handler, api_key="test-key"):
    return ToxicityClassifier(api_key=api_key, url=URL, timeout=1.0, client=mock_client(handler))


def test_should_skip():
    assert should_skip("")
    assert should_skip(None)
    assert should_skip("hey")
    assert should_skip("this is sooooooo bad")
    assert should_skip("!!!!! what")
    assert not should_skip("this is so bad")


async def test_classify_returns_scores():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["key"] = request.url.params["key"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=perspective_payload(toxicity=0.7, threat=0.2))

    result = await _classifier(handler).classify(TEXT)

    assert result == ScoreSet(toxicity=0.7, insult=0.1, profanity=0.1, threat=0.2)
    assert result.max_score == 0.7
    assert seen["key"] == "test-key"
    assert seen["body"]["comment"]["text"] == TEXT
    assert set(seen["body"]["requestedAttributes"]) == {"TOXICITY", "INSULT", "PROFANITY", "THREAT"}


async def test_skipped_text_makes_no_call():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json=perspective_payload())

    classifier = _classifier(handler)
    assert await classifier.classify("hi") is None
    assert await classifier.classify("aaaaaaaaaa bbb") is None
    assert calls == []


async def test_no_api_key_disables_check():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json=perspective_payload())

    classifier = _classifier(handler, api_key=None)
    assert not classifier.enabled
    assert await classifier.classify(TEXT) is None
    assert calls == []


async def test_http_error_status_returns_none():
    classifier = _classifier(lambda request: httpx.Response(429, json={"error": "quota"}))
    assert await classifier.classify(TEXT) is None
    assert classifier.failure_count == 1


async def test_transport_error_returns_none():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    classifier = _classifier(handler)
    assert await classifier.classify(TEXT) is None
    assert classifier.failure_count == 1


async def test_timeout_returns_none():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    classifier = _classifier(handler)
    assert await classifier.classify(TEXT) is None
    assert classifier.failure_count == 1


async def test_unexpected_payload_returns_none():
    classifier = _classifier(lambda request: httpx.Response(200, json={"attributeScores": {}}))
    assert await classifier.classify(TEXT) is None

    classifier = _classifier(lambda request: httpx.Response(200, content=b"not json"))
    assert await classifier.classify(TEXT) is None
    assert classifier.failure_count == 1
