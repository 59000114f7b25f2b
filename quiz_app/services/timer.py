# Periodic countdown tick source for the active question (uses asyncio for scheduling)
# quiz_app/services/timer.py
import asyncio
from typing import Callable

from quiz_app.utils.logger import logger


class CountdownTimer:
    """
    Runs one repeating tick per interval for a single question.

    `on_tick(question_index)` is called on every tick and returns True while
    the countdown should keep going. Only one tick task exists at a time;
    starting a new question or calling stop() cancels the previous one.
    """

    def __init__(self, on_tick: Callable[[int], bool], interval_s: float = 1.0):
        self._on_tick = on_tick
        self.interval_s = interval_s
        self._task: asyncio.Task | None = None
        self._question_index: int | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, question_index: int) -> None:
        self.stop()
        self._question_index = question_index
        self._task = asyncio.get_running_loop().create_task(self._run(question_index))
        logger.debug(f"Timer started for question {question_index}.")

    def stop(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            logger.debug(f"Timer stopped for question {self._question_index}.")

    async def _run(self, question_index: int) -> None:
        try:
            while True:
                await asyncio.sleep(self.interval_s)
                if not self._on_tick(question_index):
                    break
        finally:
            # Release the slot if this task still owns it.
            if self._task is asyncio.current_task():
                self._task = None
