"""Tests for the Discord webhook notifier."""

from unittest.mock import AsyncMock, patch

import aiohttp
import pytest

from plexcord.core.discord import DiscordNotifier
from plexcord.exceptions import NotificationDeliveryError
from plexcord.models.schemas.notification import (
    NotificationAttachment,
    NotificationMessage,
)
from tests.fakes import FakeResponse, FakeSession

MESSAGE = NotificationMessage(
    username="Plex", text="alice started watching Arrival (2016) on Living Room"
)


def _notifier(responses: list) -> tuple[DiscordNotifier, FakeSession]:
    notifier = DiscordNotifier("123", "secret-token")
    session = FakeSession(responses)
    notifier._session = session
    return notifier, session


def test_url_targets_slack_endpoint():
    """Messages are posted to the webhook's Slack-compatible endpoint."""
    notifier = DiscordNotifier("123", "secret-token")

    assert notifier.enabled
    assert notifier.url == "https://discord.com/api/webhooks/123/secret-token/slack"


@pytest.mark.asyncio
async def test_send_posts_slack_body():
    """The message is serialized into a Slack-style JSON body."""
    notifier, session = _notifier([FakeResponse(204)])

    await notifier.send(MESSAGE)

    assert session.requests == [
        (
            "POST",
            notifier.url,
            {
                "username": "Plex",
                "text": "alice started watching Arrival (2016) on Living Room",
            },
        )
    ]


@pytest.mark.asyncio
async def test_send_includes_attachments():
    """Rich messages carry their attachments without empty fields."""
    notifier, session = _notifier([FakeResponse(200)])
    message = NotificationMessage(
        username="Plex",
        text="alice paused playback of Arrival (2016) on Living Room",
        attachments=[NotificationAttachment(color="#a67a2d", title="Arrival (2016)")],
    )

    await notifier.send(message)

    body = session.requests[0][2]
    assert body["attachments"] == [
        {"color": "#a67a2d", "title": "Arrival (2016)", "text": ""}
    ]


@pytest.mark.asyncio
async def test_send_disabled_without_credentials():
    """Without credentials nothing is posted."""
    notifier = DiscordNotifier(None, None)
    session = FakeSession([])
    notifier._session = session

    await notifier.send(MESSAGE)

    assert not notifier.enabled
    assert session.requests == []


@pytest.mark.asyncio
async def test_send_raises_on_rejection():
    """Client and server errors raise NotificationDeliveryError."""
    notifier, _ = _notifier([FakeResponse(404, text='{"message": "Unknown Webhook"}')])

    with pytest.raises(NotificationDeliveryError, match="404"):
        await notifier.send(MESSAGE)


@pytest.mark.asyncio
async def test_send_raises_on_connection_error():
    """Connection failures raise NotificationDeliveryError."""
    notifier, _ = _notifier([aiohttp.ClientConnectionError("refused")])

    with pytest.raises(NotificationDeliveryError, match="unreachable"):
        await notifier.send(MESSAGE)


@pytest.mark.asyncio
async def test_send_retries_once_after_rate_limit():
    """A 429 is honoured by waiting Retry-After and posting again."""
    notifier, session = _notifier(
        [FakeResponse(429, headers={"Retry-After": "2"}), FakeResponse(204)]
    )

    with patch("plexcord.core.discord.asyncio.sleep", new=AsyncMock()) as sleep:
        await notifier.send(MESSAGE)

    sleep.assert_awaited_once_with(2.0)
    assert len(session.requests) == 2


@pytest.mark.asyncio
async def test_send_gives_up_after_second_rate_limit():
    """A second 429 is treated as a delivery failure."""
    notifier, session = _notifier(
        [
            FakeResponse(429, headers={"Retry-After": "1"}),
            FakeResponse(429, text="rate limited"),
        ]
    )

    with (
        patch("plexcord.core.discord.asyncio.sleep", new=AsyncMock()),
        pytest.raises(NotificationDeliveryError, match="429"),
    ):
        await notifier.send(MESSAGE)
    assert len(session.requests) == 2
