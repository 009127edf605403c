"""
Per-connection handler.

Each client runs through CONNECTED -> IDENTIFIED -> CLOSED. Frames are read
one at a time and dispatched in the order they arrive.
"""
from enum import Enum

from chatrelay.broadcast import Broadcaster
from chatrelay.config import Settings
from chatrelay.connection import Connection
from chatrelay.exceptions import ConnectionClosedError, MalformedEventError
from chatrelay.framing import decode_client_event
from chatrelay.logger import logger
from chatrelay.models import IdentifyEvent, SendMessageEvent, UserLeftEvent, WelcomeEvent
from chatrelay.registry import ConnectionRegistry


class ConnectionState(str, Enum):
    CONNECTED = 'connected'
    IDENTIFIED = 'identified'
    CLOSED = 'closed'


class ConnectionHandler:
    def __init__(self, connection: Connection, registry: ConnectionRegistry,
                 broadcaster: Broadcaster, settings: Settings):
        self.connection = connection
        self.registry = registry
        self.broadcaster = broadcaster
        self.settings = settings
        self.state = ConnectionState.CONNECTED
        self.username = None
        # the connection may drop a stalled client before the client notices
        connection.on_close = self.close

    @property
    def connection_id(self) -> str:
        return self.connection.connection_id

    async def run(self):
        """Serve the connection until the client goes away."""
        self.connection.start()
        try:
            while self.state is not ConnectionState.CLOSED:
                message = await self.connection.websocket.receive()
                if message['type'] == 'websocket.disconnect':
                    break
                if self.state is ConnectionState.CLOSED:
                    # dropped by the server while we were waiting
                    break
                data = message.get('text')
                if data is None:
                    data = message.get('bytes')
                try:
                    await self.handle_frame(data)
                except ConnectionClosedError as e:
                    # our own outbox is gone, nothing more can reach this client
                    logger.log_delivery_failure(self.connection_id, e)
                    break
        finally:
            await self.close()

    async def handle_frame(self, data):
        if data is None:
            logger.log_ignored(self.connection_id, 'empty frame')
            return
        try:
            event = decode_client_event(data)
        except MalformedEventError as e:
            logger.log_ignored(self.connection_id, e.reason)
            return

        if isinstance(event, IdentifyEvent):
            await self.on_identify(event)
        elif isinstance(event, SendMessageEvent):
            await self.on_send_message(event)

    async def on_identify(self, event: IdentifyEvent):
        if self.state is not ConnectionState.CONNECTED:
            # first identification wins
            logger.log_ignored(self.connection_id, 'already identified')
            return

        online = await self.registry.register(self.connection_id, event.username, self.connection)
        self.username = event.username
        self.state = ConnectionState.IDENTIFIED
        logger.log_identify(self.connection_id, event.username, online)

        welcome = WelcomeEvent(text=self.settings.welcome_text(event.username, online))
        await self.connection.deliver(welcome)

    async def on_send_message(self, event: SendMessageEvent):
        if self.state is not ConnectionState.IDENTIFIED:
            logger.log_ignored(self.connection_id, 'message before identify')
            return
        await self.broadcaster.broadcast(self.connection_id, event.text)

    async def close(self):
        """Tear down: unregister, stop the writer, optionally tell the others."""
        if self.state is ConnectionState.CLOSED:
            return
        self.state = ConnectionState.CLOSED

        username = await self.registry.unregister(self.connection_id)
        await self.connection.close()
        logger.log_disconnect(self.connection_id, username)

        if username is not None and self.settings.announce_departures:
            notice = UserLeftEvent(username=username, text=f'{username} left the chat')
            await self.broadcaster.announce(notice, exclude=self.connection_id)
