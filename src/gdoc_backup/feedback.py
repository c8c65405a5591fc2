"""Progress and per-item feedback channel."""

import logging
from typing import Protocol

from .models import FeedbackEvent, SyncAction

logger = logging.getLogger(__name__)


class FeedbackSink(Protocol):
    """Receives backup events synchronously, in the order they happen.

    Implementations must return quickly: the run waits for every call.
    """

    def on_progress(self, message: str, percent: float) -> None:
        """A progress message with overall completion (0-100)."""
        ...

    def on_item(self, event: FeedbackEvent) -> None:
        """The outcome of one (item, format) pair."""
        ...


class LoggingFeedback:
    """Sink that writes every event to the module logger."""

    def on_progress(self, message: str, percent: float) -> None:
        logger.info("[%5.1f%%] %s", percent, message)

    def on_item(self, event: FeedbackEvent) -> None:
        if event.action == SyncAction.ERROR:
            logger.error("%s", event)
        else:
            logger.info("%s", event)


class CollectingFeedback:
    """Sink that keeps all events in memory."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, float]] = []
        self.events: list[FeedbackEvent] = []

    def on_progress(self, message: str, percent: float) -> None:
        self.messages.append((message, percent))

    def on_item(self, event: FeedbackEvent) -> None:
        self.events.append(event)
