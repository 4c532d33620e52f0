import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Union
from uuid import uuid4

from shared.shared import ChangeChannel

logger = logging.getLogger(__name__)

Callback = Callable[[str, Any], None]


@dataclass
class Subscription:
    """Handle returned by ``subscribe``; closing it stops delivery"""

    channel: str
    callback: Callback
    notifier: "ChangeNotifier" = field(repr=False)
    id: str = field(default_factory=lambda: str(uuid4()))

    def close(self):
        self.notifier.unsubscribe(self)


class ChangeNotifier:
    """Service for fanning out store changes to subscribers"""

    def __init__(self):
        self.subscriptions: Dict[str, List[Subscription]] = {}

    def subscribe(self, channel: Union[str, ChangeChannel], callback: Callback) -> Subscription:
        """Register a callback for one channel"""
        channel_name = self._channel_name(channel)
        subscription = Subscription(channel=channel_name, callback=callback, notifier=self)
        self.subscriptions.setdefault(channel_name, []).append(subscription)
        logger.info(f"Subscription {subscription.id} registered on {channel_name}")
        return subscription

    def unsubscribe(self, subscription: Subscription) -> bool:
        """Remove a subscription; returns False if it was already gone"""
        subscribers = self.subscriptions.get(subscription.channel, [])
        remaining = [s for s in subscribers if s.id != subscription.id]
        if len(remaining) == len(subscribers):
            return False
        self.subscriptions[subscription.channel] = remaining
        logger.info(f"Subscription {subscription.id} removed from {subscription.channel}")
        return True

    def publish(self, channel: Union[str, ChangeChannel], payload: Any) -> int:
        """Deliver payload to every subscriber of the channel, returns delivered count"""
        channel_name = self._channel_name(channel)
        delivered = 0
        for subscription in list(self.subscriptions.get(channel_name, [])):
            try:
                subscription.callback(channel_name, payload)
                delivered += 1
            except Exception as e:
                logger.error(
                    f"Subscriber {subscription.id} on {channel_name} failed: {e}"
                )
        return delivered

    def get_subscriptions_info(self) -> Dict:
        return {
            channel: len(subscribers)
            for channel, subscribers in self.subscriptions.items()
            if subscribers
        }

    @staticmethod
    def _channel_name(channel: Union[str, ChangeChannel]) -> str:
        return channel.value if isinstance(channel, ChangeChannel) else str(channel)
