import logging
import uuid
from datetime import datetime, timedelta
from typing import Dict, Optional, Tuple

from .scores import ScoreRepository
from .session import QuizSession
from .timers import Scheduler
from .vocabulary import VocabularyRepository

logger = logging.getLogger(__name__)


class SessionStore:
    """In-memory quiz sessions keyed by the id stored in the session cookie."""

    def __init__(
        self,
        vocab_repository: VocabularyRepository,
        score_repository: ScoreRepository,
        scheduler: Scheduler,
        settings,
        generator_factory=None,
    ):
        self.vocab_repository = vocab_repository
        self.score_repository = score_repository
        self.scheduler = scheduler
        self.settings = settings
        self.generator_factory = generator_factory
        self.sessions: Dict[str, Tuple[QuizSession, datetime]] = {}

    def create(self) -> Tuple[str, QuizSession]:
        # Vocabulary is loaded once per session; VocabularyUnavailable propagates.
        vocabulary = self.vocab_repository.get_vocabulary()
        generator = self.generator_factory() if self.generator_factory else None
        session = QuizSession(
            vocabulary,
            self.score_repository,
            self.scheduler,
            generator=generator,
            settings=self.settings,
        )
        new_id = str(uuid.uuid4())
        self.sessions[new_id] = (session, datetime.now())
        logger.info(f"New session: {new_id} [{len(vocabulary)} words]")
        return new_id, session

    def get(self, session_id: Optional[str]) -> Optional[QuizSession]:
        self.expire_idle()
        if not session_id or session_id not in self.sessions:
            return None
        session, _ = self.sessions[session_id]
        self.sessions[session_id] = (session, datetime.now())
        return session

    def discard(self, session_id: Optional[str]):
        entry = self.sessions.pop(session_id, None) if session_id else None
        if entry:
            entry[0].close()

    def expire_idle(self):
        timeout = timedelta(minutes=self.settings.SESSION_TIMEOUT_MINUTES)
        now = datetime.now()
        for session_id, (session, last_seen) in list(self.sessions.items()):
            if now - last_seen > timeout:
                logger.info(f"Session expired: {session_id}")
                self.discard(session_id)
