# Wire events exchanged over the chat WebSocket.
# Every frame is a flat JSON object whose "type" field selects the event.
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

SERVER_SENDER = 'server'


# client -> server

class IdentifyEvent(BaseModel):
    type: Literal['identify'] = 'identify'
    username: str


class SendMessageEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal['send-message'] = 'send-message'
    # informational only, the sender is resolved from the registry
    sender_id: Optional[str] = Field(default=None, alias='senderId')
    text: str


ClientEvent = Annotated[Union[IdentifyEvent, SendMessageEvent], Field(discriminator='type')]


# server -> client

class WelcomeEvent(BaseModel):
    type: Literal['welcome'] = 'welcome'
    sender: str = SERVER_SENDER
    text: str


class DeliverMessageEvent(BaseModel):
    type: Literal['deliver-message'] = 'deliver-message'
    sender: str
    text: str


class UserLeftEvent(BaseModel):
    type: Literal['user-left'] = 'user-left'
    sender: str = SERVER_SENDER
    username: str
    text: str


ServerEvent = Union[WelcomeEvent, DeliverMessageEvent, UserLeftEvent]
