"""Perspective API adapter: toxicity, insult, profanity and threat scores.

``classify`` never raises for transport, auth, quota or payload problems; it
returns None, which the moderation engine treats as "no signal".
"""
import logging
import re
from dataclasses import dataclass

import httpx

logger = logging.getLogger(__name__)

MIN_CLASSIFY_LENGTH = 5
# same character 5+ times in a row, e.g. "aaaaa" or "!!!!!"
DEGENERATE_REPEAT_RE = re.compile(r"(.)\1{4,}", re.DOTALL)

ATTRIBUTES = {
    "TOXICITY": "toxicity",
    "INSULT": "insult",
    "PROFANITY": "profanity",
    "THREAT": "threat",
}


@dataclass(frozen=True)
class ScoreSet:
    toxicity: float
    insult: float
    profanity: float
    threat: float

    @property
    def max_score(self) -> float:
        return max(self.toxicity, self.insult, self.profanity, self.threat)


def should_skip(text: str | None) -> bool:
    """Not worth an external call: empty, too short, or degenerate repetition."""
    if not text or len(text) < MIN_CLASSIFY_LENGTH:
        return True
    return DEGENERATE_REPEAT_RE.search(text) is not None


def parse_scores(payload: dict) -> ScoreSet:
    attribute_scores = payload["attributeScores"]
    values = {}
    for attr, field_name in ATTRIBUTES.items():
        value = float(attribute_scores[attr]["summaryScore"]["value"])
        values[field_name] = min(1.0, max(0.0, value))
    return ScoreSet(**values)


class ToxicityClassifier:
    """Single-attempt classifier call bounded by a timeout.

    Pass a shared ``httpx.AsyncClient`` to reuse connections; without one a
    short-lived client is opened per call.
    """

    def __init__(
        self,
        api_key: str | None,
        url: str,
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key
        self.url = url
        self.timeout = timeout
        self._client = client
        self.failure_count = 0
        if not api_key:
            logger.info("No Perspective API key configured, toxicity check disabled")

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def _request_body(self, text: str) -> dict:
        return {
            "comment": {"text": text},
            "languages": ["en"],
            "requestedAttributes": {attr: {} for attr in ATTRIBUTES},
            "doNotStore": True,
        }

    async def _post(self, client: httpx.AsyncClient, text: str) -> httpx.Response:
        return await client.post(
            self.url,
            params={"key": self.api_key},
            json=self._request_body(text),
            timeout=self.timeout,
        )

    async def classify(self, text: str | None) -> ScoreSet | None:
        if not self.enabled or should_skip(text):
            return None
        try:
            if self._client is not None:
                resp = await self._post(self._client, text)
            else:
                async with httpx.AsyncClient() as client:
                    resp = await self._post(client, text)
            resp.raise_for_status()
            return parse_scores(resp.json())
        except httpx.HTTPError as exc:
            self._record_failure(exc)
        except (ValueError, KeyError, TypeError) as exc:
            # malformed JSON or unexpected response shape
            self._record_failure(exc)
        return None

    def _record_failure(self, exc: Exception) -> None:
        self.failure_count += 1
        logger.warning(
            "Toxicity classifier failed (%s: %s), skipping check; failures so far: %d",
            type(exc).__name__,
            exc,
            self.failure_count,
        )
