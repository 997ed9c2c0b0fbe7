import httpx
import pytest

from app.db.base import Base
from app.db.session import make_engine, make_sessionmaker
from app.services.lexicon import LexicalValidator, WordList
from app.services.moderation import ModerationEngine
from app.services.toxicity import ScoreSet

ENGLISH_WORDS = """
a an the and or but to of in on at for from with by me my we our you your they them their it its are am he she his her
this that these those is was were be been have has had do did not no so then than there here when
what who how as up out about after before just very too over into all some any one two three
i got get text message messages sms saying said says bank account locked click link call called
number phone asked ask for code sent send money gone lost please careful like someone somebody
offered offer investment crypto returns huge email attachment website order parcel delivery
pay paid payment fee card details scam scammer scammers pretending pretend police tax office
fine arrest today week month year friend family mum dad told tell warn warning people new
customer service refund store online bought buy never arrived stupid idiot hate hurt kill
""".split()


@pytest.fixture
def wordlist():
    return WordList(ENGLISH_WORDS)


@pytest.fixture
def validator(wordlist):
    return LexicalValidator(wordlist)


class StubClassifier:
    """Returns a fixed ScoreSet (or None) and records what it was asked."""

    def __init__(self, scores: ScoreSet | None = None):
        self.scores = scores
        self.calls = []
        self.enabled = True
        self.failure_count = 0

    async def classify(self, text):
        self.calls.append(text)
        return self.scores


def scores(toxicity=0.0, insult=0.0, profanity=0.0, threat=0.0) -> ScoreSet:
    return ScoreSet(toxicity=toxicity, insult=insult, profanity=profanity, threat=threat)


def perspective_payload(toxicity=0.1, insult=0.1, profanity=0.1, threat=0.1) -> dict:
    values = {"TOXICITY": toxicity, "INSULT": insult, "PROFANITY": profanity, "THREAT": threat}
    return {
        "attributeScores": {
            attr: {"summaryScore": {"value": value, "type": "PROBABILITY"}}
            for attr, value in values.items()
        },
        "languages": ["en"],
    }


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def stub_classifier():
    return StubClassifier()


@pytest.fixture
def moderation_engine(validator, stub_classifier):
    return ModerationEngine(validator, stub_classifier)


@pytest.fixture
async def db_engine(tmp_path):
    engine = make_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return make_sessionmaker(db_engine)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session
