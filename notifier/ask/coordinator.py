"""Ask/answer workflow: post a question, serve the form, wait for the answer."""

import asyncio
import logging
from typing import Optional

import uvicorn

from notifier.ask.registry import PendingQuestion, QuestionRegistry
from notifier.channels.dispatcher import Dispatcher
from notifier.exceptions import ConfigurationError
from notifier.main import create_app
from notifier.schemas.notification import AskConfig, NotificationAction, NotificationMessage

logger = logging.getLogger(__name__)

MIN_TIMEOUT_SECONDS = 10
MAX_TIMEOUT_SECONDS = 3600


def validate_timeout(timeout_seconds: float) -> None:
    if not MIN_TIMEOUT_SECONDS <= timeout_seconds <= MAX_TIMEOUT_SECONDS:
        raise ValueError(
            f"timeout_seconds must be between {MIN_TIMEOUT_SECONDS} and {MAX_TIMEOUT_SECONDS}"
        )


class AskServer:
    """Runs the answer-form app with uvicorn inside the current event loop."""

    def __init__(self, registry: QuestionRegistry, host: str, port: int, log_level: str = "warning"):
        self.host = host
        self.port = port
        self._server = uvicorn.Server(
            uvicorn.Config(
                create_app(registry),
                host=host,
                port=port,
                log_level=log_level,
                lifespan="off",
            )
        )
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._server.serve())
        while not self._server.started:
            if self._task.done():
                try:
                    await self._task
                except SystemExit as e:
                    # uvicorn exits the process when it cannot bind
                    raise ConfigurationError(f"Ask server could not listen on {self.host}:{self.port}") from e
                raise ConfigurationError(f"Ask server stopped during startup on {self.host}:{self.port}")
            await asyncio.sleep(0.05)
        logger.info("Ask server running on %s:%d", self.host, self.port)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._server.should_exit = True
        await self._task
        self._task = None


class AskCoordinator:
    """
    Owns the pending-question registry and the server that answers into it.

    When a dispatcher is given, every question is also announced through the
    configured webhook with a link to its answer form.
    """

    def __init__(
        self,
        config: AskConfig,
        registry: Optional[QuestionRegistry] = None,
        dispatcher: Optional[Dispatcher] = None,
    ):
        self.config = config
        self.registry = registry if registry is not None else QuestionRegistry()
        self.dispatcher = dispatcher
        self._server: Optional[AskServer] = None

    def question_url(self, question_id: str) -> str:
        return f"{self.config.server_url.rstrip('/')}:{self.config.port}/{question_id}"

    async def start(self) -> None:
        if self._server is None:
            self._server = AskServer(self.registry, self.config.host, self.config.port)
        await self._server.start()

    async def stop(self) -> None:
        self.registry.clear()
        if self._server is not None:
            await self._server.stop()

    def post_question(self, question: str, title: Optional[str], timeout_seconds: float) -> PendingQuestion:
        """Register a question; raises ValueError for a timeout outside 10..3600 seconds."""
        validate_timeout(timeout_seconds)
        return self.registry.register(question, title, timeout_seconds)

    async def ask(self, question: str, title: Optional[str] = None, timeout_seconds: float = 300) -> str:
        """
        Post a question and wait for its answer.

        Raises:
            AnswerTimeout: nobody answered within ``timeout_seconds``.
        """
        pending = self.post_question(question, title, timeout_seconds)
        url = self.question_url(pending.id)
        logger.info("Question %s waiting for an answer at %s", pending.id, url)
        if self.dispatcher is not None:
            await self._announce(pending, url)
        try:
            return await pending.future
        except asyncio.CancelledError:
            self.registry.discard(pending.id)
            raise

    async def _announce(self, pending: PendingQuestion, url: str) -> None:
        message = NotificationMessage(
            title=pending.title or "Question",
            body=f"{pending.question}\n\nAnswer within {pending.timeout_seconds:g} seconds: {url}",
            link=url,
            priority=4,
            actions=[NotificationAction(action="view", label="Answer", url=url)],
        )
        result = await self.dispatcher.send(message)
        if not result.delivered:
            logger.warning("Question %s was not announced: %s", pending.id, result.describe())
