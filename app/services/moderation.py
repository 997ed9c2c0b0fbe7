"""Story moderation: lexical gate first, then the toxicity classifier.

The engine only ever answers ``allow`` or ``reject``. Mapping a verdict onto
a stored moderation status (including the ``pending`` review queue) is done
by ``app.services.stories``.
"""
import logging
import re
from dataclasses import dataclass, field

from app.services.lexicon import LexicalValidator
from app.services.toxicity import ToxicityClassifier

logger = logging.getLogger(__name__)

ACTION_ALLOW = "allow"
ACTION_REJECT = "reject"

REASON_NOT_SENTENCE = "not_sentence"
REASON_TOXIC = "toxic_content"

DEFAULT_TOXICITY_THRESHOLD = 0.8

WHITESPACE_RUN_RE = re.compile(r"\s+")
URL_RE = re.compile(r"https?://[^\s)]+", re.IGNORECASE)
PHONE_RE = re.compile(r"(?:\+?\d[\s-]?){6,}")
EMAIL_RE = re.compile(r"\b[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}\b", re.IGNORECASE)

# Keyword hints per story type; order breaks ties.
CATEGORY_KEYWORDS = {
    "sms": ["sms", "text message", "texted", "otp", "verification code", "verify code"],
    "phone": ["call", "called", "phone call", "voicemail", "customer service", "caller id", "rang"],
    "email": ["email", "e-mail", "inbox", "attachment", "phishing"],
    "investment": ["crypto", "bitcoin", "investment", "invest", "trading", "forex", "returns", "shares"],
    "social": ["facebook", "instagram", "tiktok", "whatsapp", "social media", "dating", "friend request", "romance"],
    "shopping": ["online store", "order", "parcel", "delivery", "marketplace", "refund", "gift card", "website"],
}
CONTACT_BOOST = 2

_CATEGORY_PATTERNS = {
    category: [re.compile(rf"\b{re.escape(k)}\b", re.IGNORECASE) for k in keywords]
    for category, keywords in CATEGORY_KEYWORDS.items()
}


@dataclass
class ContactDetails:
    urls: list[str] = field(default_factory=list)
    phones: list[str] = field(default_factory=list)
    emails: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.urls or self.phones or self.emails)

    def reasons(self) -> list[str]:
        reasons = []
        if self.urls:
            reasons.append("links_detected")
        if self.phones:
            reasons.append("phone_detected")
        if self.emails:
            reasons.append("email_detected")
        return reasons


@dataclass
class Verdict:
    action: str
    reasons: list[str]
    score: float
    clean_text: str
    category_guess: str = "other"
    contact_details: ContactDetails = field(default_factory=ContactDetails)

    @property
    def rejected(self) -> bool:
        return self.action == ACTION_REJECT


def normalize(text: str | None) -> str:
    """Collapse whitespace runs, unify curly quotes, trim."""
    text = WHITESPACE_RUN_RE.sub(" ", text or "")
    text = text.replace("“", '"').replace("”", '"')
    text = text.replace("‘", "'").replace("’", "'")
    return text.strip()


def detect_contact_details(text: str) -> ContactDetails:
    return ContactDetails(
        urls=URL_RE.findall(text),
        phones=[m.strip() for m in PHONE_RE.findall(text)],
        emails=EMAIL_RE.findall(text),
    )


def guess_category(text: str, contact: ContactDetails | None = None) -> str:
    """Best-scoring story type by keyword hits; "other" when nothing matches."""
    if contact is None:
        contact = detect_contact_details(text)
    counts = {
        category: sum(1 for p in patterns if p.search(text))
        for category, patterns in _CATEGORY_PATTERNS.items()
    }
    if contact.emails:
        counts["email"] += CONTACT_BOOST
    if contact.phones:
        counts["phone"] += CONTACT_BOOST
    best = max(counts, key=lambda c: counts[c])  # first max wins ties
    return best if counts[best] > 0 else "other"


class ModerationEngine:
    """Stateless apart from its injected collaborators; safe to share across requests."""

    def __init__(
        self,
        validator: LexicalValidator,
        classifier: ToxicityClassifier | None = None,
        toxicity_threshold: float = DEFAULT_TOXICITY_THRESHOLD,
    ):
        self.validator = validator
        self.classifier = classifier
        self.toxicity_threshold = toxicity_threshold

    async def moderate(self, raw_text: str | None) -> Verdict:
        clean_text = normalize(raw_text)

        if not self.validator.is_plausible_sentence(clean_text):
            verdict = Verdict(ACTION_REJECT, [REASON_NOT_SENTENCE], 0.0, clean_text)
            logger.info("Moderation reject: not_sentence (%d chars)", len(clean_text))
            return verdict

        contact = detect_contact_details(clean_text)
        category = guess_category(clean_text, contact)

        score = 0.0
        scores = await self.classifier.classify(clean_text) if self.classifier else None
        if scores is not None:
            score = scores.max_score
            if score > self.toxicity_threshold:
                logger.info("Moderation reject: toxic_content (score=%.3f)", score)
                return Verdict(ACTION_REJECT, [REASON_TOXIC], score, clean_text, category, contact)

        logger.info("Moderation allow (score=%.3f, category=%s)", score, category)
        return Verdict(ACTION_ALLOW, [], score, clean_text, category, contact)
