"""Per-user daily chat quota."""

from __future__ import annotations

import logging

from core.exceptions import QuotaExceededError
from core.models import User

logger = logging.getLogger(__name__)


class QuotaGate:
    """Decides whether a user may send another chat in the trailing 24 hours.

    The gate only reads ``user.messages_last_24h``; whoever stores the chat
    advances the counter. Two concurrent sessions can both pass at N-1.
    """

    def can_send(self, user: User | None, multi_user_mode: bool) -> bool:
        if not multi_user_mode:
            return True
        if user is None:
            return False
        if user.daily_message_limit is None:
            return True
        return user.messages_last_24h < user.daily_message_limit

    def check(self, user: User | None, multi_user_mode: bool) -> None:
        """Raise QuotaExceededError when ``can_send`` denies the user."""
        if self.can_send(user, multi_user_mode):
            return
        limit = user.daily_message_limit if user is not None else 0
        logger.info(
            "Chat quota reached for user %s (limit=%s)",
            user.id if user is not None else None,
            limit,
        )
        raise QuotaExceededError(limit)
