"""AI moderation of draft proposals."""

from proposal_box.moderation.client import (
    ModerationClient,
    ModerationError,
    ModerationTransport,
    OpenAIModerationTransport,
    get_default_moderation_client,
)

__all__ = [
    "ModerationClient",
    "ModerationError",
    "ModerationTransport",
    "OpenAIModerationTransport",
    "get_default_moderation_client",
]
