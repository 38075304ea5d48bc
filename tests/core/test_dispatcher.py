"""Tests for background notification dispatch."""

import asyncio

import pytest

from plexcord.core.dispatcher import NotificationDispatcher
from plexcord.models.schemas.notification import NotificationMessage
from tests.fakes import RecordingNotifier

MESSAGE = NotificationMessage(username="Plex", text="alice started watching Arrival")


class SlowNotifier(RecordingNotifier):
    """Notifier that blocks until released."""

    def __init__(self) -> None:
        super().__init__()
        self.release = asyncio.Event()

    async def send(self, message: NotificationMessage) -> None:
        await self.release.wait()
        await super().send(message)


class ExplodingNotifier(RecordingNotifier):
    """Notifier failing with an unexpected error."""

    async def send(self, message: NotificationMessage) -> None:
        raise RuntimeError("boom")


@pytest.mark.asyncio
async def test_dispatch_delivers_in_background():
    """Dispatched messages are delivered once the loop runs the task."""
    notifier = RecordingNotifier()
    dispatcher = NotificationDispatcher(notifier)

    task = dispatcher.dispatch(MESSAGE)

    assert task is not None
    assert await task is True
    assert notifier.messages == [MESSAGE]
    assert dispatcher.pending == 0


@pytest.mark.asyncio
async def test_dispatch_does_not_wait_for_delivery():
    """Dispatch returns while the delivery is still in progress."""
    notifier = SlowNotifier()
    dispatcher = NotificationDispatcher(notifier)

    dispatcher.dispatch(MESSAGE)
    await asyncio.sleep(0)

    assert dispatcher.pending == 1
    assert notifier.messages == []

    notifier.release.set()
    await dispatcher.drain()

    assert notifier.messages == [MESSAGE]
    assert dispatcher.pending == 0


@pytest.mark.asyncio
async def test_delivery_failures_are_swallowed():
    """Failed deliveries are logged and reported as unsuccessful."""
    dispatcher = NotificationDispatcher(RecordingNotifier(fail=True))

    task = dispatcher.dispatch(MESSAGE)

    assert await task is False


@pytest.mark.asyncio
async def test_unexpected_errors_are_swallowed():
    """Unexpected notifier errors do not escape the delivery task."""
    dispatcher = NotificationDispatcher(ExplodingNotifier())

    task = dispatcher.dispatch(MESSAGE)

    assert await task is False


@pytest.mark.asyncio
async def test_aclose_waits_for_pending_deliveries():
    """Closing waits for in-flight deliveries to finish."""
    notifier = SlowNotifier()
    dispatcher = NotificationDispatcher(notifier)
    dispatcher.dispatch(MESSAGE)

    asyncio.get_running_loop().call_later(0.01, notifier.release.set)
    await dispatcher.aclose(timeout=1.0)

    assert notifier.messages == [MESSAGE]


@pytest.mark.asyncio
async def test_aclose_cancels_after_timeout():
    """Deliveries still running after the timeout are cancelled."""
    notifier = SlowNotifier()
    dispatcher = NotificationDispatcher(notifier)
    task = dispatcher.dispatch(MESSAGE)

    await dispatcher.aclose(timeout=0.01)

    assert task is not None
    assert task.cancelled()
    assert dispatcher.pending == 0
    assert notifier.messages == []


@pytest.mark.asyncio
async def test_dispatch_after_close_is_dropped():
    """Messages dispatched after closing are not delivered."""
    notifier = RecordingNotifier()
    dispatcher = NotificationDispatcher(notifier)
    await dispatcher.aclose()

    assert dispatcher.dispatch(MESSAGE) is None
    assert notifier.messages == []
