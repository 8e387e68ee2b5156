"""In-memory state for the chat booking flow.

Each chat session keeps its current step and a partially filled
``BookingDraft``. Entries live only in this process and expire once they
have not been touched for ``ttl_seconds``; ``run_sweeper`` removes them
periodically while the application is running.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

from app.schemas.chatbot import BookingDraft, ConversationStep

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ConversationState:
    step: ConversationStep = ConversationStep.START
    data: BookingDraft = field(default_factory=BookingDraft)
    last_update: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict:
        return {
            "step": self.step.value,
            "data": self.data.to_dict(),
            "last_update": self.last_update,
        }


class ConversationStateStore:
    """Chat session states keyed by chat id, with TTL expiry."""

    def __init__(
        self,
        ttl_seconds: int = 3600,
        sweep_interval_seconds: int = 3600,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.ttl = timedelta(seconds=ttl_seconds)
        self.sweep_interval_seconds = sweep_interval_seconds
        self._clock = clock
        self._states: Dict[str, ConversationState] = {}

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, chat_id: str) -> bool:
        return chat_id in self._states

    def get(self, chat_id: str) -> ConversationState:
        """Return the stored state, or a fresh default without storing it."""
        state = self._states.get(chat_id)
        if state is None:
            return ConversationState(last_update=self._clock())
        return state

    def set(
        self,
        chat_id: str,
        step: ConversationStep,
        data: Optional[BookingDraft] = None,
    ) -> ConversationState:
        """Replace the state for ``chat_id``."""
        state = ConversationState(
            step=ConversationStep(step),
            data=data if data is not None else BookingDraft(),
            last_update=self._clock(),
        )
        self._states[chat_id] = state
        return state

    def clear(self, chat_id: str) -> None:
        self._states.pop(chat_id, None)

    def sweep(self) -> int:
        """Drop every entry older than the TTL. Returns how many were removed."""
        cutoff = self._clock() - self.ttl
        expired = [k for k, s in self._states.items() if s.last_update < cutoff]
        for chat_id in expired:
            del self._states[chat_id]
        if expired:
            logger.info(f"Conversation sweep removed {len(expired)} expired sessions")
        return len(expired)

    async def run_sweeper(self) -> None:
        """Sweep forever at the configured interval until cancelled."""
        while True:
            try:
                await asyncio.sleep(self.sweep_interval_seconds)
                self.sweep()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.warning(f"Conversation sweep error: {e}")
