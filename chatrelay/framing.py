"""
Framing helpers for the chat WebSocket.
Format: one UTF-8 JSON object per text frame, discriminated by "type".
"""
from pydantic import BaseModel, TypeAdapter, ValidationError

from chatrelay.exceptions import MalformedEventError
from chatrelay.models import ClientEvent

_client_event_adapter = TypeAdapter(ClientEvent)


def encode_event(event: BaseModel) -> str:
    return event.model_dump_json(by_alias=True)


def decode_client_event(text):
    """Parse one client frame, raising MalformedEventError when it is not a known event."""
    try:
        return _client_event_adapter.validate_json(text)
    except ValidationError as e:
        errors = e.errors()
        first = errors[0] if errors else {}
        loc = '.'.join(str(p) for p in first.get('loc', ()))
        reason = first.get('msg', 'invalid event')
        if loc:
            reason = f'{loc}: {reason}'
        raise MalformedEventError(reason, raw=text) from e
