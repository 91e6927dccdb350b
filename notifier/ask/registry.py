"""
Registry of questions waiting for an answer.

Every question settles exactly once: answered through the web form, or
expired by its timer. The registry entry is removed in the same synchronous
step that settles the future, so whichever of the two comes second finds
nothing and does nothing.

All methods must be called from the event loop that owns the registry; no
lock is needed because nothing here awaits between lookup and removal.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from notifier.exceptions import AnswerNotFound, AnswerTimeout

logger = logging.getLogger(__name__)


@dataclass
class PendingQuestion:
    id: str
    question: str
    title: Optional[str]
    timeout_seconds: float
    future: asyncio.Future
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    timer: Optional[asyncio.TimerHandle] = None

    def remaining_seconds(self) -> float:
        elapsed = (datetime.now(timezone.utc) - self.created_at).total_seconds()
        return max(0.0, self.timeout_seconds - elapsed)


class QuestionRegistry:
    def __init__(self) -> None:
        self._pending: dict[str, PendingQuestion] = {}

    def __contains__(self, question_id: str) -> bool:
        return question_id in self._pending

    def __len__(self) -> int:
        return len(self._pending)

    def register(self, question: str, title: Optional[str], timeout_seconds: float) -> PendingQuestion:
        """Create a pending question and start its expiry timer."""
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        loop = asyncio.get_running_loop()
        pending = PendingQuestion(
            id=str(uuid.uuid4()),
            question=question,
            title=title,
            timeout_seconds=timeout_seconds,
            future=loop.create_future(),
        )
        self._pending[pending.id] = pending
        pending.timer = loop.call_later(timeout_seconds, self.expire, pending.id)
        logger.info("Question registered with ID: %s", pending.id)
        return pending

    def get(self, question_id: str) -> Optional[PendingQuestion]:
        return self._pending.get(question_id)

    def pending(self) -> list[PendingQuestion]:
        return list(self._pending.values())

    def answer(self, question_id: str, answer: str) -> None:
        """
        Settle a pending question with ``answer``.

        Raises:
            AnswerNotFound: the question was already answered, expired, or never existed.
        """
        pending = self._pending.pop(question_id, None)
        if pending is None:
            raise AnswerNotFound(question_id)
        if pending.timer is not None:
            pending.timer.cancel()
        if not pending.future.done():
            pending.future.set_result(answer)
        logger.info("Question %s answered", question_id)

    def expire(self, question_id: str) -> None:
        """Timer callback: reject the question if it is still pending."""
        pending = self._pending.pop(question_id, None)
        if pending is None:
            return
        if not pending.future.done():
            pending.future.set_exception(AnswerTimeout(question_id, pending.timeout_seconds))
        logger.info("Question %s expired after %g seconds", question_id, pending.timeout_seconds)

    def discard(self, question_id: str) -> None:
        """Forget a question whose waiter went away, without settling it."""
        pending = self._pending.pop(question_id, None)
        if pending is None:
            return
        if pending.timer is not None:
            pending.timer.cancel()
        if not pending.future.done():
            pending.future.cancel()

    def clear(self) -> None:
        for question_id in list(self._pending):
            self.discard(question_id)
