"""Errors raised inside the relay. None of them is fatal to the server."""


class ChatRelayError(Exception):
    """Base class for relay errors."""


class MalformedEventError(ChatRelayError):
    """A client frame could not be turned into a known event."""

    def __init__(self, reason: str, raw: str = ''):
        super().__init__(reason)
        self.reason = reason
        self.raw = raw


class ConnectionClosedError(ChatRelayError):
    """Delivery was attempted on a connection that is closed or saturated."""

    def __init__(self, connection_id: str, reason: str = 'closed'):
        super().__init__(f'connection {connection_id} {reason}')
        self.connection_id = connection_id
        self.reason = reason
