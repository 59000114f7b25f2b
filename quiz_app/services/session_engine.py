# quiz_app/services/session_engine.py
import time
from typing import Dict, List

from quiz_app.models.enums import Difficulty
from quiz_app.models.topic import SUPPORTED_TOPICS, Topic
from quiz_app.services.errors import QuizError
from quiz_app.services.question_repository import QuestionRepository
from quiz_app.services.quiz_session import QuizSession, SessionTiming
from quiz_app.utils.config import settings
from quiz_app.utils.logger import logger


class SessionNotFound(KeyError):
    pass


class SessionEngine:
    """
    Entry point for the surrounding application: starts quiz sessions and
    keeps track of them. The question repository (and its cache) is injected
    and lives as long as the engine.
    """

    def __init__(self, repository: QuestionRepository, timing: SessionTiming | None = None,
                 retention_s: float = settings.session_retention_s):
        self.repository = repository
        self.timing = timing or SessionTiming.from_settings()
        self.retention_s = retention_s
        self.sessions: Dict[str, QuizSession] = {}
        logger.info("SessionEngine initialized.")

    def list_topics(self) -> List[Topic]:
        return list(SUPPORTED_TOPICS.values())

    def list_difficulties(self) -> List[Difficulty]:
        return list(Difficulty)

    async def start_session(self, topic: str, difficulty: Difficulty | str) -> QuizSession:
        """
        Creates a session and loads its questions.
        On failure the session is kept in the errored phase and the QuizError is re-raised.
        """
        self.prune_ended()
        session = QuizSession(topic, difficulty, timing=self.timing)
        self.sessions[session.session_id] = session
        logger.info(f"Starting session {session.session_id} for topic '{topic}' ({session.difficulty}).")
        await self._load(session)
        return session

    def get_session(self, session_id: str) -> QuizSession:
        session = self.sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    async def retry_session(self, session_id: str) -> QuizSession:
        """Resets a session and starts it again with the same topic and difficulty."""
        session = self.get_session(session_id)
        session.reset()
        await self._load(session)
        return session

    def close_session(self, session_id: str) -> None:
        session = self.sessions.pop(session_id, None)
        if session is None:
            raise SessionNotFound(session_id)
        session.close()
        logger.info(f"Session {session_id} closed.")

    def prune_ended(self) -> int:
        """Drops finished or errored sessions older than the retention window. Returns how many were dropped."""
        now = time.monotonic()
        expired = [
            session_id for session_id, session in self.sessions.items()
            if session.ended_at is not None and now - session.ended_at >= self.retention_s
        ]
        for session_id in expired:
            self.sessions.pop(session_id).close()
        if expired:
            logger.info(f"Pruned {len(expired)} ended sessions.")
        return len(expired)

    def close_all(self) -> None:
        for session in self.sessions.values():
            session.close()
        self.sessions.clear()

    async def _load(self, session: QuizSession) -> None:
        try:
            question_set = await self.repository.get_question_set(session.topic, session.difficulty)
        except QuizError as e:
            session.fail(e)
            raise
        session.initialize(question_set)
