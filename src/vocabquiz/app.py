import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .api import router as api_router
from .config import settings as default_settings
from .errors import QuizError, VocabularyUnavailable
from .globals import STATIC_DIR
from .log_handler import SQLiteHandler
from .router import router
from .scores import CsvScoreRepository
from .sessions import SessionStore
from .timers import AsyncioScheduler
from .vocabulary import CsvVocabularyRepository

logger = logging.getLogger("vocabquiz")


# --- Logging Setup ---
def setup_logging(settings=None):
    settings = settings or default_settings
    logger.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if not os.path.exists(settings.LOG_DIR):
        os.makedirs(settings.LOG_DIR, exist_ok=True)
    log_path = os.path.join(settings.LOG_DIR, settings.LOG_FILE)
    file_handler = RotatingFileHandler(
        log_path, maxBytes=5_000_000, backupCount=3, encoding="utf-8"
    )
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s")
    )
    logger.addHandler(file_handler)

    if settings.LOG_TO_DB:
        db_handler = SQLiteHandler(os.path.join(settings.DB_DIR, settings.DB_FILE))
        db_handler.setLevel(logging.WARNING)
        logger.addHandler(db_handler)
    # Also configure root logger to see logs from other libraries
    logging.basicConfig(level=logging.INFO)


# --- Lifecycle ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        app.state.vocab_repository.reload()
    except VocabularyUnavailable as e:
        logger.error(f"Vocabulary not loaded at startup: {e.message}")
    try:
        app.state.score_repository.ensure_file()
    except OSError as e:
        logger.error(f"Score file not initialized at startup: {e}")
    yield
    for session_id in list(app.state.session_store.sessions):
        app.state.session_store.discard(session_id)


async def quiz_error_handler(request: Request, exc: QuizError):
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


# --- App Factory ---
def create_app(
    settings=None,
    vocab_repository=None,
    score_repository=None,
    scheduler=None,
    generator_factory=None,
) -> FastAPI:
    settings = settings or default_settings
    setup_logging(settings)
    app = FastAPI(
        title=settings.PROJECT_NAME,
        debug=settings.DEBUG,
        lifespan=lifespan,
        root_path=settings.ROOT_PATH,
    )

    app.state.settings = settings
    app.state.vocab_repository = vocab_repository or CsvVocabularyRepository(
        settings.VOCAB_FILE
    )
    app.state.score_repository = score_repository or CsvScoreRepository(
        settings.SCORES_FILE
    )
    app.state.session_store = SessionStore(
        app.state.vocab_repository,
        app.state.score_repository,
        scheduler or AsyncioScheduler(),
        settings,
        generator_factory=generator_factory,
    )

    app.add_exception_handler(QuizError, quiz_error_handler)
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    app.include_router(api_router)
    app.include_router(router)

    return app
