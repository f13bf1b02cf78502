from typing import Optional

from fastapi import Depends, Request

from .errors import SessionNotFound
from .scores import ScoreRepository
from .session import QuizSession
from .sessions import SessionStore
from .vocabulary import VocabularyRepository


def get_vocab_repository(request: Request) -> VocabularyRepository:
    return request.app.state.vocab_repository


def get_score_repository(request: Request) -> ScoreRepository:
    return request.app.state.score_repository


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_session_id(request: Request) -> Optional[str]:
    return request.cookies.get(request.app.state.settings.SESSION_COOKIE_NAME)


def get_active_session(
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
) -> QuizSession:
    session = store.get(session_id)
    if session is None:
        raise SessionNotFound("Session invalid")
    return session
