"""ScamSafe story wall - FastAPI app entry point."""
import logging
from contextlib import asynccontextmanager
from typing import Annotated

import httpx
from fastapi import Depends, FastAPI
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings, get_settings
from app.db.base import Base
from app.db.session import engine, get_db
from app.routers import admin, stories
from app.services.lexicon import LexicalValidator, load_dictionary
from app.services.moderation import ModerationEngine
from app.services.toxicity import ToxicityClassifier

logger = logging.getLogger(__name__)


def build_moderation_engine(settings: Settings, client: httpx.AsyncClient | None = None) -> ModerationEngine:
    dictionary = load_dictionary(settings.dictionary_path, settings.dictionary_auto_download)
    validator = LexicalValidator(dictionary, threshold=settings.word_validity_threshold)
    classifier = ToxicityClassifier(
        api_key=settings.perspective_api_key,
        url=settings.perspective_api_url,
        timeout=settings.toxicity_timeout_seconds,
        client=client,
    )
    return ModerationEngine(validator, classifier, toxicity_threshold=settings.toxicity_threshold)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with httpx.AsyncClient() as client:
        app.state.moderation_engine = build_moderation_engine(settings, client)
        logger.info("%s started", settings.app_name)
        yield

    await engine.dispose()


app = FastAPI(
    title="ScamSafe",
    description="Scam story wall with moderation",
    lifespan=lifespan,
)

app.include_router(stories.router)
app.include_router(admin.router)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/api/health/db")
async def health_db(db: Annotated[AsyncSession, Depends(get_db)]):
    await db.execute(text("SELECT 1"))
    return {"status": "ok"}
