"""
Tool handlers exposed to the tool-invocation transport.

Every handler returns a short human-readable string and never raises: the
transport only carries text results.
"""

import logging
from typing import Any, Optional

from pydantic import ValidationError

from notifier.ask.coordinator import AskCoordinator
from notifier.channels.dispatcher import Dispatcher
from notifier.exceptions import AnswerTimeout
from notifier.schemas.notification import NotificationMessage, NotifierConfig
from notifier.templates import list_template_names

logger = logging.getLogger(__name__)


def _describe_validation(exc: ValidationError) -> str:
    problems = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()]
    return "Invalid notification: " + "; ".join(problems)


class NotifierTools:
    def __init__(self, dispatcher: Dispatcher, coordinator: Optional[AskCoordinator] = None):
        self.dispatcher = dispatcher
        self.coordinator = coordinator

    @classmethod
    def from_config(cls, config: NotifierConfig) -> "NotifierTools":
        dispatcher = Dispatcher.from_config(config)
        coordinator = None
        if config.ask.enabled:
            coordinator = AskCoordinator(config.ask, dispatcher=dispatcher)
        return cls(dispatcher, coordinator)

    async def start(self) -> None:
        if self.coordinator is not None:
            await self.coordinator.start()

    async def stop(self) -> None:
        if self.coordinator is not None:
            await self.coordinator.stop()

    async def notify(
        self,
        body: str,
        title: Optional[str] = None,
        template: Optional[str] = None,
        template_data: Optional[dict[str, Any]] = None,
    ) -> str:
        return await self.full_notify(body, title=title, template=template, template_data=template_data)

    async def full_notify(
        self,
        body: str,
        title: Optional[str] = None,
        link: Optional[str] = None,
        image_url: Optional[str] = None,
        image: Optional[str] = None,
        priority: Optional[int] = None,
        attachments: Optional[list[str]] = None,
        actions: Optional[list[dict[str, Any]]] = None,
        template: Optional[str] = None,
        template_data: Optional[dict[str, Any]] = None,
    ) -> str:
        try:
            message = NotificationMessage(
                title=title,
                body=body,
                link=link,
                image_url=image_url,
                image=image,
                priority=priority,
                attachments=attachments or [],
                actions=actions or [],
                template=template,
                template_data=template_data or {},
            )
        except ValidationError as e:
            return _describe_validation(e)
        result = await self.dispatcher.send(message)
        return result.describe()

    async def ask_question(
        self,
        question: str,
        title: Optional[str] = None,
        timeout_seconds: float = 300,
    ) -> str:
        if self.coordinator is None:
            return "Ask feature is not enabled. Set ASK_ENABLED=true to use ask_question."
        try:
            answer = await self.coordinator.ask(question, title, timeout_seconds)
        except ValueError as e:
            return f"Invalid question: {e}"
        except AnswerTimeout as e:
            logger.info("Question %s expired unanswered", e.question_id)
            return f"No answer received: {e}"
        return f"Answer received: {answer}"

    @staticmethod
    def templates() -> str:
        return "Available templates: " + ", ".join(list_template_names())
