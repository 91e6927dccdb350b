"""Tests for the ask coordinator: timeout bounds, announcements, answers."""

import asyncio
import json

import httpx
import pytest

from notifier.ask.coordinator import AskCoordinator, validate_timeout
from notifier.channels.dispatcher import Dispatcher
from notifier.schemas.notification import AskConfig, WebhookConfig


async def _wait_for_pending(coordinator: AskCoordinator):
    for _ in range(100):
        pending = coordinator.registry.pending()
        if pending:
            return pending[0]
        await asyncio.sleep(0.01)
    raise AssertionError("question was never registered")


class TestTimeoutBounds:
    @pytest.mark.parametrize("value", [10, 300, 3600])
    def test_accepted(self, value):
        validate_timeout(value)

    @pytest.mark.parametrize("value", [0, 9.9, 3601, -5])
    def test_rejected(self, value):
        with pytest.raises(ValueError, match="between 10 and 3600"):
            validate_timeout(value)

    @pytest.mark.asyncio
    async def test_post_question_validates(self):
        coordinator = AskCoordinator(AskConfig())
        with pytest.raises(ValueError):
            coordinator.post_question("q", None, 5)
        assert len(coordinator.registry) == 0


class TestAskCoordinator:
    def test_question_url(self):
        coordinator = AskCoordinator(AskConfig(server_url="https://box.example.com/", port=8080))
        assert coordinator.question_url("abc") == "https://box.example.com:8080/abc"

    def test_question_url_default(self):
        assert AskCoordinator(AskConfig()).question_url("abc") == "http://localhost:4591/abc"

    @pytest.mark.asyncio
    async def test_ask_returns_answer(self):
        coordinator = AskCoordinator(AskConfig())
        task = asyncio.create_task(coordinator.ask("Proceed?", "Gate", 10))
        pending = await _wait_for_pending(coordinator)
        assert pending.question == "Proceed?"
        assert pending.title == "Gate"
        coordinator.registry.answer(pending.id, "yes")
        assert await task == "yes"
        assert len(coordinator.registry) == 0

    @pytest.mark.asyncio
    async def test_ask_announces_question(self):
        announced = asyncio.Event()
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            announced.set()
            return httpx.Response(200, text="ok")

        dispatcher = Dispatcher(
            WebhookConfig(url="https://hooks.example.com/notify", type="generic"),
            transport=httpx.MockTransport(handler),
        )
        coordinator = AskCoordinator(AskConfig(), dispatcher=dispatcher)
        task = asyncio.create_task(coordinator.ask("Proceed?", "Gate", 60))
        await asyncio.wait_for(announced.wait(), 1)

        (pending,) = coordinator.registry.pending()
        assert bodies[0]["title"] == "Gate"
        assert bodies[0]["url"] == f"http://localhost:4591/{pending.id}"
        assert "Proceed?" in bodies[0]["text"]

        coordinator.registry.answer(pending.id, "ship it")
        assert await task == "ship it"

    @pytest.mark.asyncio
    async def test_failed_announcement_still_waits(self):
        dispatcher = Dispatcher(
            WebhookConfig(url="https://hooks.example.com/notify", type="generic"),
            transport=httpx.MockTransport(lambda r: httpx.Response(500, text="down")),
        )
        coordinator = AskCoordinator(AskConfig(), dispatcher=dispatcher)
        task = asyncio.create_task(coordinator.ask("Proceed?", None, 60))
        pending = await _wait_for_pending(coordinator)
        coordinator.registry.answer(pending.id, "yes")
        assert await task == "yes"

    @pytest.mark.asyncio
    async def test_cancelled_ask_discards_question(self):
        coordinator = AskCoordinator(AskConfig())
        task = asyncio.create_task(coordinator.ask("Proceed?", None, 60))
        await _wait_for_pending(coordinator)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert len(coordinator.registry) == 0

    @pytest.mark.asyncio
    async def test_stop_without_start(self):
        coordinator = AskCoordinator(AskConfig())
        coordinator.registry.register("q", None, 30)
        await coordinator.stop()
        assert len(coordinator.registry) == 0
