"""Lexical gate: is this submission plausibly English prose?

The check is a dictionary word-validity ratio over the alphabetic runs of the
text. The dictionary comes from a plain wordlist file when one is configured,
otherwise from the nltk ``words`` and ``stopwords`` corpora. When neither can
be loaded the validator accepts everything that passes the structural
pre-check, so a missing lexicon never blocks submissions.

Known limitation: stories mostly written in a language other than English get
a low ratio and are rejected as ``not_sentence``.
"""
import logging
import re
from pathlib import Path

import nltk
from nltk.corpus import stopwords, words
from nltk.stem import PorterStemmer

logger = logging.getLogger(__name__)

_stemmer = PorterStemmer()

WORD_RE = re.compile(r"[A-Za-z]{2,}")
WHITESPACE_RE = re.compile(r"\s")

MIN_TEXT_LENGTH = 10
MIN_WORD_COUNT = 3
DEFAULT_VALIDITY_THRESHOLD = 0.6


class WordList:
    """Read-only, case-insensitive set of known words.

    Inflected forms ("calls", "claimed", "scammers") match through their Porter
    stem, so a dictionary of base forms still covers ordinary English.
    """

    def __init__(self, entries):
        self._words = frozenset(w.strip().lower() for w in entries if w and w.strip())
        self._stems = frozenset(_stemmer.stem(w) for w in self._words)

    def __len__(self) -> int:
        return len(self._words)

    def is_word_valid(self, word: str) -> bool:
        word = word.lower()
        return word in self._words or _stemmer.stem(word) in self._stems


def _load_wordlist_file(path: str) -> WordList:
    with open(Path(path), encoding="utf-8") as fh:
        return WordList(line for line in fh if not line.startswith("#"))


def _load_nltk_corpus(auto_download: bool) -> WordList:
    try:
        vocabulary = list(words.words()) + list(stopwords.words("english"))
    except LookupError:
        if not auto_download:
            raise
        nltk.download("words", quiet=True)
        nltk.download("stopwords", quiet=True)
        vocabulary = list(words.words()) + list(stopwords.words("english"))
    return WordList(vocabulary)


def load_dictionary(path: str | None = None, auto_download: bool = False) -> WordList | None:
    """Load the dictionary once at startup; None means the gate runs fail-open."""
    try:
        if path:
            wordlist = _load_wordlist_file(path)
        else:
            wordlist = _load_nltk_corpus(auto_download)
    except (OSError, LookupError, UnicodeDecodeError) as exc:
        logger.warning("Dictionary unavailable, lexical gate will accept all prose-shaped text: %s", exc)
        return None
    if not len(wordlist):
        logger.warning("Dictionary is empty, lexical gate will accept all prose-shaped text")
        return None
    logger.info("Dictionary loaded: %d words", len(wordlist))
    return wordlist


def extract_words(text: str) -> list[str]:
    """Alphabetic runs of length >= 2."""
    return WORD_RE.findall(text or "")


class LexicalValidator:
    def __init__(self, dictionary: WordList | None, threshold: float = DEFAULT_VALIDITY_THRESHOLD):
        self.dictionary = dictionary
        self.threshold = threshold

    @property
    def degraded(self) -> bool:
        return self.dictionary is None

    def validity_ratio(self, tokens: list[str]) -> float:
        if not tokens or self.dictionary is None:
            return 0.0
        known = sum(1 for t in tokens if self.dictionary.is_word_valid(t))
        return known / len(tokens)

    def is_plausible_sentence(self, text: str | None) -> bool:
        trimmed = (text or "").strip()
        if len(trimmed) < MIN_TEXT_LENGTH:
            return False
        if not WHITESPACE_RE.search(trimmed):
            return False
        tokens = extract_words(trimmed)
        if len(tokens) < MIN_WORD_COUNT:
            return False
        if self.dictionary is None:
            return True
        return self.validity_ratio(tokens) >= self.threshold
