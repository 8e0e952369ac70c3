"""Publishes recording state for presentation collaborators."""

import logging
from typing import Callable
from pubsub import pub
from ..models.ui import RecordingState

logger = logging.getLogger(__name__)

DEFAULT_STATE_TOPIC = "recording.state"


class RecordingStatePublisher:
    """Publishes RecordingState snapshots using pubsub.pub."""

    def __init__(self, topic: str = DEFAULT_STATE_TOPIC):
        """Initialize state publisher.

        Args:
            topic: Pub/sub topic name; listeners receive a ``state`` argument
        """
        self.topic = topic
        logger.info(f"RecordingStatePublisher initialized with topic: {topic}")

    def publish_state(self, state: RecordingState) -> None:
        """Publish a state snapshot to the pub/sub topic."""
        pub.sendMessage(self.topic, state=state)
        logger.debug(f"Published recording state: {state.status.value}")

    def subscribe(self, listener: Callable[[RecordingState], None]) -> None:
        """Subscribe a listener taking a single ``state`` argument.

        pubsub holds listeners weakly; the caller must keep a reference.
        """
        pub.subscribe(listener, self.topic)

    def unsubscribe(self, listener: Callable[[RecordingState], None]) -> None:
        pub.unsubscribe(listener, self.topic)
