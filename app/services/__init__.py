from app.services.lexicon import LexicalValidator, WordList, load_dictionary
from app.services.moderation import ModerationEngine, Verdict
from app.services.toxicity import ScoreSet, ToxicityClassifier

__all__ = [
    "LexicalValidator",
    "ModerationEngine",
    "ScoreSet",
    "ToxicityClassifier",
    "Verdict",
    "WordList",
    "load_dictionary",
]
