"""Tests for the moderation decision procedure."""

import httpx
import pytest

from app.services.moderation import (
    ACTION_ALLOW,
    ACTION_REJECT,
    ModerationEngine,
    detect_contact_details,
    guess_category,
    normalize,
)
from app.services.lexicon import LexicalValidator
from app.services.toxicity import ToxicityClassifier
from tests.conftest import StubClassifier, mock_client, perspective_payload, scores

PROSE = "I got a text message saying my bank account was locked"


def test_normalize_collapses_whitespace_and_quotes():
    assert normalize("  they  said\n\t“pay now”   ‘today’ ") == "they said \"pay now\" 'today'"
    assert normalize(None) == ""


@pytest.mark.parametrize(
    "text",
    ["buy now", "scam!!", "", "   ", "kill kill", "asdkj qwpeoi zxmnb lkjhg poiuy"],
)
async def test_non_prose_rejected_without_classifier_call(validator, text):
    classifier = StubClassifier(scores(toxicity=0.99))
    engine = ModerationEngine(validator, classifier)

    verdict = await engine.moderate(text)

    assert verdict.action == ACTION_REJECT
    assert verdict.reasons == ["not_sentence"]
    assert verdict.score == 0
    assert classifier.calls == []


async def test_toxic_text_rejected(validator):
    classifier = StubClassifier(scores(toxicity=0.9, insult=0.1, profanity=0.1, threat=0.1))
    verdict = await ModerationEngine(validator, classifier).moderate("you stupid idiot scammers I hate you all")

    assert verdict.action == ACTION_REJECT
    assert verdict.reasons == ["toxic_content"]
    assert verdict.score == 0.9


async def test_any_single_score_over_threshold_rejects(validator):
    classifier = StubClassifier(scores(toxicity=0.2, threat=0.85))
    verdict = await ModerationEngine(validator, classifier).moderate(PROSE)
    assert verdict.action == ACTION_REJECT
    assert verdict.score == 0.85


async def test_score_at_threshold_allowed(validator):
    classifier = StubClassifier(scores(toxicity=0.8))
    verdict = await ModerationEngine(validator, classifier).moderate(PROSE)

    assert verdict.action == ACTION_ALLOW
    assert verdict.reasons == []
    assert verdict.score == 0.8


async def test_no_signal_allows(validator, stub_classifier):
    verdict = await ModerationEngine(validator, stub_classifier).moderate(PROSE)

    assert verdict.action == ACTION_ALLOW
    assert verdict.score == 0
    assert stub_classifier.calls == [PROSE]


async def test_no_classifier_allows(validator):
    verdict = await ModerationEngine(validator, None).moderate(PROSE)
    assert verdict.action == ACTION_ALLOW


async def test_classifier_outage_fails_open(validator):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    classifier = ToxicityClassifier("key", "https://toxicity.test/analyze", client=mock_client(handler))
    verdict = await ModerationEngine(validator, classifier).moderate(PROSE)

    assert verdict.action == ACTION_ALLOW
    assert verdict.reasons == []
    assert classifier.failure_count == 1


async def test_classifier_through_http(validator):
    classifier = ToxicityClassifier(
        "key",
        "https://toxicity.test/analyze",
        client=mock_client(lambda request: httpx.Response(200, json=perspective_payload(profanity=0.95))),
    )
    verdict = await ModerationEngine(validator, classifier).moderate(PROSE)
    assert verdict.reasons == ["toxic_content"]
    assert verdict.score == 0.95


async def test_missing_dictionary_still_moderates(stub_classifier):
    engine = ModerationEngine(LexicalValidator(None), stub_classifier)
    assert (await engine.moderate("zzqx wwpt rrkv blorp")).action == ACTION_ALLOW
    assert (await engine.moderate("buy now")).reasons == ["not_sentence"]


async def test_clean_text_is_trimmed_and_collapsed(moderation_engine):
    verdict = await moderation_engine.moderate("   I got a   text message\n saying my bank account was locked  ")
    assert verdict.clean_text == PROSE


async def test_verdict_carries_category_and_contacts(moderation_engine):
    verdict = await moderation_engine.moderate(
        "They called me from 0412 345 678 pretending to be customer service"
    )
    assert verdict.action == ACTION_ALLOW
    assert verdict.reasons == []
    assert verdict.category_guess == "phone"
    assert verdict.contact_details.phones == ["0412 345 678"]


@pytest.mark.parametrize(
    "text,expected",
    [
        ("They called me pretending to be from customer service", "phone"),
        ("I got an SMS asking for the verification code", "sms"),
        ("Someone on Facebook offered an investment in crypto with huge returns", "investment"),
        ("I met him on a dating app and on WhatsApp", "social"),
        ("The parcel never arrived and the online store refused a refund", "shopping"),
        ("Opened an email attachment from a stranger", "email"),
        ("Write back to billing@example.com today", "email"),
        ("Nothing about the channel here at all", "other"),
    ],
)
def test_guess_category(text, expected):
    assert guess_category(text) == expected


def test_detect_contact_details():
    contact = detect_contact_details("Go to https://bank-verify.example/login or mail help@bank-verify.example")
    assert contact.urls == ["https://bank-verify.example/login"]
    assert contact.emails == ["help@bank-verify.example"]
    assert contact.reasons() == ["links_detected", "email_detected"]
    assert not detect_contact_details("nothing to see")
