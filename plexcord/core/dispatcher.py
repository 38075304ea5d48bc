"""Fire-and-forget notification dispatch."""

import asyncio

from plexcord import log
from plexcord.core.discord import Notifier
from plexcord.exceptions import NotificationDeliveryError
from plexcord.models.schemas.notification import NotificationMessage

__all__ = ["NotificationDispatcher"]


class NotificationDispatcher:
    """Delivers notifications in background tasks.

    ``dispatch`` returns immediately so webhook responses never wait on Discord.
    Delivery failures are logged and otherwise dropped; there is no retry queue.
    """

    def __init__(self, notifier: Notifier) -> None:
        """Initialize the dispatcher.

        Args:
            notifier (Notifier): The sink messages are delivered to.
        """
        self.notifier = notifier
        self._tasks: set[asyncio.Task] = set()
        self._closed = False

    @property
    def pending(self) -> int:
        """Number of deliveries that have not finished yet."""
        return len(self._tasks)

    def dispatch(self, message: NotificationMessage) -> asyncio.Task | None:
        """Schedule delivery of ``message`` on the running event loop.

        Returns:
            asyncio.Task | None: The delivery task, or None once the dispatcher
                has been closed.
        """
        if self._closed:
            log.warning("Dispatcher is closed, dropping notification")
            return None

        task = asyncio.create_task(self._deliver(message))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _deliver(self, message: NotificationMessage) -> bool:
        try:
            await self.notifier.send(message)
        except NotificationDeliveryError as e:
            log.error(f"Failed to deliver notification: {e}")
            return False
        except Exception as e:
            log.error(f"Unexpected error delivering notification: {e}", exc_info=True)
            return False
        log.debug(f"Delivered notification $$'{message.text}'$$")
        return True

    async def drain(self) -> None:
        """Wait until every scheduled delivery has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self, timeout: float = 10.0) -> None:
        """Stop accepting messages and wait up to ``timeout`` for pending deliveries.

        Deliveries still running after the timeout are cancelled.
        """
        self._closed = True
        if not self._tasks:
            return

        log.info(f"Waiting for {len(self._tasks)} pending notification(s)...")
        try:
            await asyncio.wait_for(self.drain(), timeout=timeout)
        except (TimeoutError, asyncio.TimeoutError):
            log.warning("Timed out waiting for notifications, cancelling the rest")
            for task in self._tasks:
                task.cancel()
            await asyncio.gather(*self._tasks, return_exceptions=True)
            self._tasks.clear()
