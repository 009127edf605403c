"""
Broadcast engine.

Fans one message out to every registered connection except its sender,
over a snapshot of the registry taken at call time.
"""
from typing import Optional

from chatrelay.logger import logger
from chatrelay.models import DeliverMessageEvent
from chatrelay.registry import ConnectionRegistry


class Broadcaster:
    def __init__(self, registry: ConnectionRegistry):
        self.registry = registry

    async def broadcast(self, sender_id: str, text: str) -> int:
        """Relay ``text`` from ``sender_id`` to everyone else. Returns deliveries made."""
        username = await self.registry.lookup(sender_id)
        if username is None:
            # sender left (or never identified) before we got here
            logger.log_ignored(sender_id, 'broadcast from unregistered sender')
            return 0

        event = DeliverMessageEvent(sender=username, text=text)
        delivered = await self.announce(event, exclude=sender_id)
        logger.log_broadcast(sender_id, username, delivered)
        return delivered

    async def announce(self, event, exclude: Optional[str] = None) -> int:
        """Deliver a server event to every registered connection but ``exclude``."""
        delivered = 0
        for entry in await self.registry.snapshot(exclude=exclude):
            try:
                await entry.connection.deliver(event)
                delivered += 1
            except Exception as e:
                # one bad target must not stop the rest
                logger.log_delivery_failure(entry.connection_id, e)
        return delivered
