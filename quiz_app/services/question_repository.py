# Fetches question sets from Open Trivia DB with rate-limit retries; caches them per (topic, difficulty)
# quiz_app/services/question_repository.py
import asyncio
import random
from typing import Any, Awaitable, Callable, Dict, List, Tuple

import httpx
from pydantic import ValidationError

from quiz_app.models.enums import Difficulty
from quiz_app.models.question import Question, QuestionSet
from quiz_app.models.topic import SUPPORTED_TOPICS, Topic
from quiz_app.services.errors import (
    HttpError,
    InvalidCategory,
    InvalidDifficulty,
    MalformedResponse,
    NoQuestionsAvailable,
    RateLimitExhausted,
    TransportError,
)
from quiz_app.services.shuffler import shuffle_answers
from quiz_app.services.text import decode_entities
from quiz_app.utils.config import settings
from quiz_app.utils.logger import logger

CacheKey = Tuple[str, str]

RATE_LIMITED = 429


class QuestionRepository:
    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str = settings.trivia_api_url,
        amount: int = settings.questions_per_quiz,
        question_type: str = settings.question_type,
        max_retries: int = settings.max_retries,
        initial_backoff_ms: int = settings.initial_backoff_ms,
        request_timeout_s: float = settings.request_timeout_s,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        rng: random.Random | None = None,
    ):
        self._client = client
        self.base_url = base_url
        self.amount = amount
        self.question_type = question_type
        self.max_retries = max_retries
        self.initial_backoff_ms = initial_backoff_ms
        self.request_timeout_s = request_timeout_s
        self._sleep = sleep
        self._rng = rng
        self._cache: Dict[CacheKey, QuestionSet] = {}
        self._in_flight: Dict[CacheKey, asyncio.Task] = {}
        logger.info(f"QuestionRepository initialized for {base_url} (max_retries={max_retries}, backoff={initial_backoff_ms}ms).")

    def is_cached(self, topic: str, difficulty: Difficulty | str) -> bool:
        return (topic, _difficulty_value(difficulty)) in self._cache

    async def get_question_set(self, topic: str, difficulty: Difficulty | str) -> QuestionSet:
        """
        Returns the question set for (topic, difficulty).
        Cached sets are returned without touching the network; concurrent
        requests for a key that is still being fetched share the same fetch.
        """
        key = (topic, _difficulty_value(difficulty))
        cached = self._cache.get(key)
        if cached is not None:
            logger.info(f"Cache hit for topic '{topic}' ({key[1]}).")
            return cached

        topic_entry = SUPPORTED_TOPICS.get(topic)
        if topic_entry is None:
            logger.warning(f"Rejected unsupported topic '{topic}'.")
            raise InvalidCategory(topic)
        try:
            level = Difficulty(key[1])
        except ValueError:
            logger.warning(f"Rejected unsupported difficulty '{key[1]}'.")
            raise InvalidDifficulty(key[1]) from None

        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.create_task(self._fetch_and_cache(key, topic_entry, level))
            task.add_done_callback(_retrieve_exception)
            self._in_flight[key] = task
        else:
            logger.info(f"Joining in-flight fetch for topic '{topic}' ({key[1]}).")
        # A cancelled caller must not cancel the fetch other callers are waiting on.
        return await asyncio.shield(task)

    async def _fetch_and_cache(self, key: CacheKey, topic: Topic, difficulty: Difficulty) -> QuestionSet:
        try:
            response = await self._request(topic, difficulty)
            question_set = self._parse(response, topic, difficulty)
            self._cache[key] = question_set
            logger.info(f"Cached {len(question_set)} questions for topic '{topic.id}' ({difficulty.value}).")
            return question_set
        except Exception as e:
            logger.error(f"Fetching questions for topic '{topic.id}' ({difficulty.value}) failed: {e}")
            raise
        finally:
            self._in_flight.pop(key, None)

    async def _request(self, topic: Topic, difficulty: Difficulty) -> httpx.Response:
        """Issues the provider GET, retrying HTTP 429 with exponential backoff."""
        params = {
            "amount": self.amount,
            "category": topic.category_id,
            "difficulty": difficulty.value,
            "type": self.question_type,
        }
        delay_ms = self.initial_backoff_ms
        attempt = 0
        while True:
            attempt += 1
            try:
                response = await self._client.get(self.base_url, params=params, timeout=self.request_timeout_s)
            except httpx.RequestError as e:
                raise TransportError(str(e) or e.__class__.__name__) from e

            if response.status_code != RATE_LIMITED:
                break
            retries_used = attempt - 1
            if retries_used >= self.max_retries:
                raise RateLimitExhausted(attempts=attempt)
            logger.warning(f"Rate limit hit. Retrying in {delay_ms}ms... (retry {retries_used + 1}/{self.max_retries})")
            await self._sleep(delay_ms / 1000)
            delay_ms *= 2

        if not response.is_success:
            raise HttpError(response.status_code)
        return response

    def _parse(self, response: httpx.Response, topic: Topic, difficulty: Difficulty) -> QuestionSet:
        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponse(f"invalid JSON ({e})") from e
        if not isinstance(data, dict):
            raise MalformedResponse("expected a JSON object")

        response_code = data.get("response_code")
        results = data.get("results") or []
        if response_code != 0 or len(results) < self.amount:
            logger.warning(f"Provider returned response_code={response_code} with {len(results)} results for '{topic.id}' ({difficulty.value}).")
            raise NoQuestionsAvailable(response_code if isinstance(response_code, int) else -1)

        questions: List[Question] = []
        for raw in results[:self.amount]:
            try:
                questions.append(self._build_question(raw))
            except (KeyError, TypeError) as e:
                raise MalformedResponse(f"question record missing field {e}") from e
            except ValidationError as e:
                raise MalformedResponse(f"question record has invalid fields ({e.error_count()} errors)") from e
        return QuestionSet(topic=topic.id, difficulty=difficulty, questions=tuple(questions))

    def _build_question(self, raw: Dict[str, Any]) -> Question:
        correct_answer = decode_entities(raw["correct_answer"])
        distractors = tuple(decode_entities(answer) for answer in raw["incorrect_answers"])
        return Question(
            prompt=decode_entities(raw["question"]),
            correct_answer=correct_answer,
            distractors=distractors,
            answer_options=shuffle_answers(correct_answer, distractors, self._rng),
            category=decode_entities(raw.get("category", "")),
            difficulty=raw.get("difficulty", ""),
        )


def _difficulty_value(difficulty: Difficulty | str) -> str:
    return difficulty.value if isinstance(difficulty, Difficulty) else str(difficulty)


def _retrieve_exception(task: asyncio.Task) -> None:
    # Marks a failed fetch as handled even when every waiting caller was cancelled.
    if not task.cancelled():
        task.exception()
