"""Notification schema definitions.

Discord accepts Slack-formatted bodies on ``/api/webhooks/{id}/{token}/slack``, so
the message mirrors Slack's incoming webhook format.
"""

from pydantic import BaseModel, Field


class NotificationAttachment(BaseModel):
    """A Slack-style attachment carrying the rich fields of a notification."""

    color: str
    title: str
    text: str = ""
    thumb_url: str | None = None
    footer: str | None = None


class NotificationMessage(BaseModel):
    """A finished notification ready to be handed to the notifier."""

    username: str
    text: str
    attachments: list[NotificationAttachment] = Field(default_factory=list)

    def to_slack_body(self) -> dict:
        """Serialize the message into a Slack-compatible webhook body."""
        body = self.model_dump(exclude_none=True)
        if not self.attachments:
            body.pop("attachments")
        return body
