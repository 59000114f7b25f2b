# tests/conftest.py
import pytest
import httpx
import os
import sys
import logging

# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from quiz_app.models.enums import Difficulty
from quiz_app.models.question import Question, QuestionSet
from quiz_app.services.question_repository import QuestionRepository
from quiz_app.services.quiz_session import SessionTiming

QUESTION_COUNT = 10

# Timing that never fires on its own during a test; transitions are driven by hand.
MANUAL_TIMING = SessionTiming(
    question_seconds=30,
    tick_interval_s=3600,
    correct_advance_delay_s=3600,
    incorrect_advance_delay_s=3600,
)


def make_raw_question(i: int) -> dict:
    """A provider record with the HTML entities Open Trivia DB sends."""
    return {
        "type": "multiple",
        "difficulty": "easy",
        "category": "General Knowledge",
        "question": f"Which one is &quot;item {i}&quot;?",
        "correct_answer": f"Right &amp; {i}",
        "incorrect_answers": [f"Wrong {i}-a", f"Wrong {i}-b", f"Wrong&#039;s {i}-c"],
    }


def make_payload(count: int = QUESTION_COUNT, response_code: int = 0) -> dict:
    return {"response_code": response_code, "results": [make_raw_question(i) for i in range(count)]}


class FakeTriviaProvider:
    """
    Stands in for Open Trivia DB through httpx.MockTransport.
    Queued items are served in order (httpx.Response or an exception to raise);
    once the queue is empty every request gets a full successful payload.
    """

    def __init__(self):
        self.responses = []
        self.requests = []

    def queue(self, *responses):
        self.responses.extend(responses)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.responses:
            item = self.responses.pop(0)
            if isinstance(item, Exception):
                raise item
            return item
        return httpx.Response(200, json=make_payload())

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


class RecordingSleep:
    """Replaces asyncio.sleep in the repository so backoff delays are recorded, not waited."""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def provider():
    return FakeTriviaProvider()


@pytest.fixture
def sleeper():
    return RecordingSleep()


@pytest.fixture
def repository(provider, sleeper):
    return QuestionRepository(
        provider.client(),
        base_url="https://trivia.test/api.php",
        sleep=sleeper,
    )


@pytest.fixture
def manual_timing():
    return MANUAL_TIMING


@pytest.fixture
def question_set():
    """A ten-question set built directly, without the provider."""
    questions = tuple(
        Question(
            prompt=f"Question {i}?",
            correct_answer=f"right-{i}",
            distractors=(f"wrong-{i}-a", f"wrong-{i}-b", f"wrong-{i}-c"),
            answer_options=(f"wrong-{i}-a", f"right-{i}", f"wrong-{i}-b", f"wrong-{i}-c"),
        )
        for i in range(QUESTION_COUNT)
    )
    return QuestionSet(topic="general-knowledge", difficulty=Difficulty.EASY, questions=questions)
