"""
One live client link.

Outbound events go through a per-connection queue drained by a writer task,
so a broadcaster never waits on a slow socket and events to one client keep
their order.
"""
import asyncio
import contextlib
import uuid
from typing import Awaitable, Callable, Optional

from fastapi import WebSocket

from chatrelay.exceptions import ConnectionClosedError
from chatrelay.framing import encode_event
from chatrelay.logger import logger

# close code sent to a client whose outbox overflowed ("try again later")
SATURATED_CLOSE_CODE = 1013
# close code sent when writing to the socket failed
WRITE_FAILED_CLOSE_CODE = 1011


def new_connection_id() -> str:
    return uuid.uuid4().hex


class Connection:
    def __init__(self, websocket: WebSocket, connection_id: Optional[str] = None, outbox_size: int = 0):
        self.connection_id = connection_id or new_connection_id()
        self.websocket = websocket
        self.closed = False
        self._outbox: asyncio.Queue = asyncio.Queue(maxsize=outbox_size)
        self._writer_task: Optional[asyncio.Task] = None
        self._abort_task: Optional[asyncio.Task] = None
        # awaited once when the server drops this client on its own
        self.on_close: Optional[Callable[[], Awaitable[None]]] = None

    @property
    def peer(self):
        client = getattr(self.websocket, 'client', None)
        if client is None:
            return 'unknown'
        return f'{client.host}:{client.port}'

    def start(self):
        if self._writer_task is None:
            self._writer_task = asyncio.create_task(self._drain())

    async def deliver(self, event):
        """Queue an event for this client."""
        if self.closed:
            raise ConnectionClosedError(self.connection_id)
        try:
            self._outbox.put_nowait(encode_event(event))
        except asyncio.QueueFull:
            # the client is not reading; drop it rather than buffer forever
            self.closed = True
            self._abort_task = asyncio.create_task(self._abort(SATURATED_CLOSE_CODE))
            raise ConnectionClosedError(self.connection_id, 'saturated')

    async def close(self):
        self.closed = True
        task, self._writer_task = self._writer_task, None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def _drain(self):
        try:
            while True:
                payload = await self._outbox.get()
                await self.websocket.send_text(payload)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            # socket already torn down
            self.closed = True
            logger.log_delivery_failure(self.connection_id, e)
            self._abort_task = asyncio.create_task(self._abort(WRITE_FAILED_CLOSE_CODE))

    async def _abort(self, code: int):
        await self.close()
        if self.on_close is not None:
            await self.on_close()
        try:
            await self.websocket.close(code=code)
        except Exception as e:
            logger.debug(f"Close of id={self.connection_id} failed: {e}")
