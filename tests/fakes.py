"""Test doubles for connections and sockets."""
import asyncio
from unittest.mock import AsyncMock, MagicMock


class FakeConnection:
    """Stands in for Connection: records delivered events instead of writing a socket."""

    def __init__(self, connection_id, websocket=None, fail=False):
        self.connection_id = connection_id
        self.websocket = websocket or MagicMock()
        self.delivered = []
        self.fail = fail
        self.started = False
        self.closed = False

    def start(self):
        self.started = True

    async def deliver(self, event):
        if self.fail:
            raise RuntimeError('socket gone')
        self.delivered.append(event)

    async def close(self):
        self.closed = True


class FakeWebSocket:
    """Replays a fixed list of ASGI receive messages, then reports a disconnect."""

    def __init__(self, frames=()):
        self._messages = []
        for frame in frames:
            if isinstance(frame, bytes):
                self._messages.append({'type': 'websocket.receive', 'bytes': frame})
            else:
                self._messages.append({'type': 'websocket.receive', 'text': frame})
        self.send_text = AsyncMock()
        self.close = AsyncMock()
        self.client = None

    async def receive(self):
        await asyncio.sleep(0)
        if self._messages:
            return self._messages.pop(0)
        return {'type': 'websocket.disconnect', 'code': 1000}


class BlockingWebSocket(FakeWebSocket):
    """A client that never sends anything and never hangs up."""

    async def receive(self):
        await asyncio.Event().wait()
