# State machine for one quiz run: current question, selection, score, countdown and phase
# quiz_app/services/quiz_session.py
import asyncio
import time
import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict

from quiz_app.models.enums import Difficulty, SessionPhase
from quiz_app.models.question import Question, QuestionSet
from quiz_app.models.session import ErrorDetail, QuestionView, SessionSummary, SessionView
from quiz_app.services import reporter
from quiz_app.services.errors import InvalidTransition, QuizError
from quiz_app.services.timer import CountdownTimer
from quiz_app.utils.config import settings
from quiz_app.utils.logger import logger


class SessionTiming(BaseModel):
    model_config = ConfigDict(frozen=True)

    question_seconds: int = 30
    tick_interval_s: float = 1.0
    correct_advance_delay_s: float = 2.0
    incorrect_advance_delay_s: float = 3.0

    @classmethod
    def from_settings(cls) -> "SessionTiming":
        return cls(
            question_seconds=settings.question_time_limit_s,
            tick_interval_s=settings.tick_interval_ms / 1000,
            correct_advance_delay_s=settings.correct_advance_delay_ms / 1000,
            incorrect_advance_delay_s=settings.incorrect_advance_delay_ms / 1000,
        )


class QuizSession:
    """
    Drives a single quiz run.

    Phases: loading -> active -> revealed -> active (next question) | finished,
    and loading -> errored when the question set could not be fetched.
    All transitions must be called from the event loop thread; the countdown
    and the delayed advancement after a reveal are scheduled on that loop and
    are tied to the question index they were created for.
    """

    def __init__(self, topic: str, difficulty: Difficulty | str,
                 timing: SessionTiming | None = None, session_id: str | None = None):
        self.session_id = session_id or uuid.uuid4().hex
        self.topic = topic
        self.difficulty = difficulty.value if isinstance(difficulty, Difficulty) else difficulty
        self.timing = timing or SessionTiming.from_settings()
        self._timer = CountdownTimer(self._on_tick, self.timing.tick_interval_s)
        self._pending_advance: asyncio.TimerHandle | None = None
        self._clear_state()

    def _clear_state(self) -> None:
        self.question_set: QuestionSet | None = None
        self.current_index = 0
        self.selected_answer: str | None = None
        self.score = 0
        self.answered = 0
        self.remaining_seconds = self.timing.question_seconds
        self.phase = SessionPhase.LOADING
        self.error: QuizError | None = None
        self.last_answer_correct: bool | None = None
        self.advance_delay_s: float | None = None
        self.ended_at: float | None = None  # time.monotonic() when finished or errored

    # --- Read access ---
    @property
    def total(self) -> int:
        return len(self.question_set) if self.question_set is not None else 0

    @property
    def timer_running(self) -> bool:
        return self._timer.running

    @property
    def advance_pending(self) -> bool:
        return self._pending_advance is not None

    def current_question(self) -> Optional[Question]:
        if self.question_set is None or self.phase in (SessionPhase.LOADING, SessionPhase.ERRORED):
            return None
        return self.question_set.questions[self.current_index]

    def current_question_view(self) -> Optional[QuestionView]:
        question = self.current_question()
        if question is None:
            return None
        return QuestionView(
            index=self.current_index,
            total=self.total,
            prompt=question.prompt,
            answer_options=list(question.answer_options),
        )

    def summary(self) -> SessionSummary:
        return reporter.build_summary(self)

    def view(self) -> SessionView:
        question = self.current_question()
        show_answer = question is not None and self.phase in (SessionPhase.REVEALED, SessionPhase.FINISHED)
        return SessionView(
            session_id=self.session_id,
            topic=self.topic,
            difficulty=self.difficulty,
            phase=self.phase,
            score=self.score,
            remaining_seconds=self.remaining_seconds,
            selected_answer=self.selected_answer,
            question=self.current_question_view(),
            correct_answer=question.correct_answer if show_answer else None,
            is_correct=self.last_answer_correct if self.phase == SessionPhase.REVEALED else None,
            error=ErrorDetail(kind=self.error.kind, message=self.error.message) if self.error else None,
        )

    # --- Transitions ---
    def initialize(self, question_set: QuestionSet) -> None:
        if self.phase != SessionPhase.LOADING:
            raise InvalidTransition("initialize", self.phase)
        if len(question_set) == 0:
            raise ValueError("Cannot start a session with an empty question set.")
        self.question_set = question_set
        self.current_index = 0
        self.score = 0
        self.answered = 0
        logger.info(f"Session {self.session_id} started: {len(question_set)} questions on '{self.topic}'.")
        self._start_question()

    def fail(self, error: QuizError) -> None:
        if self.phase != SessionPhase.LOADING:
            raise InvalidTransition("fail", self.phase)
        self._cancel_scheduled()
        self.error = error
        self.phase = SessionPhase.ERRORED
        self.ended_at = time.monotonic()
        logger.error(f"Session {self.session_id} could not start: [{error.kind}] {error.message}")

    def select_answer(self, answer: str) -> bool:
        """Records the learner's choice. Returns False when the choice is no longer allowed."""
        if self.phase != SessionPhase.ACTIVE:
            logger.warning(f"Session {self.session_id}: ignored selection while {self.phase.value}.")
            return False
        if answer not in self.current_question().answer_options:
            raise ValueError(f"'{answer}' is not an option for question {self.current_index}.")
        self.selected_answer = answer
        return True

    def submit_answer(self) -> bool:
        """Reveals the current question. Returns whether the selected answer was correct."""
        if self.phase != SessionPhase.ACTIVE:
            raise InvalidTransition("submit an answer", self.phase)
        if self.selected_answer is None:
            raise InvalidTransition("submit without a selected answer", self.phase)
        return self._reveal()

    def expire_timer(self) -> None:
        """Forced submission when the countdown runs out; never raises."""
        if self.phase != SessionPhase.ACTIVE:
            logger.debug(f"Session {self.session_id}: expiry ignored while {self.phase.value}.")
            return
        self.remaining_seconds = 0
        logger.info(f"Session {self.session_id}: time ran out on question {self.current_index}.")
        self._reveal()

    def advance(self) -> bool:
        """Moves past a revealed question. Calling it outside the revealed phase is a no-op."""
        if self.phase != SessionPhase.REVEALED:
            logger.debug(f"Session {self.session_id}: advance ignored while {self.phase.value}.")
            return False
        self._cancel_scheduled()
        if self.current_index >= self.total - 1:
            self.phase = SessionPhase.FINISHED
            self.ended_at = time.monotonic()
            logger.info(f"Session {self.session_id} finished with {self.score}/{self.total}.")
            return True
        self.current_index += 1
        self.selected_answer = None
        self.last_answer_correct = None
        self._start_question()
        return True

    def reset(self) -> None:
        """Returns to the uninitialized state so the session can be started again."""
        self._cancel_scheduled()
        self._clear_state()
        logger.info(f"Session {self.session_id} reset.")

    def close(self) -> None:
        self._cancel_scheduled()

    # --- Internals ---
    def _start_question(self) -> None:
        self.remaining_seconds = self.timing.question_seconds
        self.phase = SessionPhase.ACTIVE
        self._timer.start(self.current_index)

    def _reveal(self) -> bool:
        self._timer.stop()
        self.phase = SessionPhase.REVEALED
        is_correct = self.selected_answer == self.current_question().correct_answer
        if self.selected_answer is not None:
            self.answered += 1
        if is_correct:
            self.score += 1
        self.last_answer_correct = is_correct

        self.advance_delay_s = (self.timing.correct_advance_delay_s if is_correct
                                else self.timing.incorrect_advance_delay_s)
        self._pending_advance = asyncio.get_running_loop().call_later(
            self.advance_delay_s, self._deferred_advance, self.current_index
        )
        logger.debug(f"Session {self.session_id}: question {self.current_index} revealed (correct={is_correct}), advancing in {self.advance_delay_s}s.")
        return is_correct

    def _deferred_advance(self, question_index: int) -> None:
        if self.phase != SessionPhase.REVEALED or question_index != self.current_index:
            logger.debug(f"Session {self.session_id}: discarded stale advance for question {question_index}.")
            return
        self.advance()

    def _on_tick(self, question_index: int) -> bool:
        if self.phase != SessionPhase.ACTIVE or question_index != self.current_index:
            logger.debug(f"Session {self.session_id}: discarded stale tick for question {question_index}.")
            return False
        self.remaining_seconds = max(0, self.remaining_seconds - 1)
        if self.remaining_seconds == 0:
            self.expire_timer()
            return False
        return True

    def _cancel_scheduled(self) -> None:
        self._timer.stop()
        if self._pending_advance is not None:
            self._pending_advance.cancel()
            self._pending_advance = None
