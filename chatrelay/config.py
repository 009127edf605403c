"""
Server configuration.

Values come from ``CHATRELAY_*`` environment variables (or a ``.env`` file)
and fall back to the defaults below.
"""

from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_WELCOME_TEMPLATE = 'Welcome {username}! There are {count} users online.'


class Settings(BaseSettings):
    """Relay settings."""

    model_config = SettingsConfigDict(env_prefix='CHATRELAY_', env_file='.env', extra='ignore')

    host: str = Field(default='0.0.0.0', description='Bind address')
    port: int = Field(default=3000, description='Listen port')
    ws_path: str = Field(default='/ws', description='WebSocket endpoint path')
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            'http://localhost:3000',
            'http://127.0.0.1:3000',
            'http://localhost:5173',
        ]
    )
    log_level: str = 'INFO'
    welcome_template: str = DEFAULT_WELCOME_TEMPLATE
    # broadcast a "user-left" notice when an identified client goes away
    announce_departures: bool = False
    # per-connection outbound queue bound; 0 means unbounded
    outbox_size: int = Field(default=256, ge=0)

    @field_validator('port')
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not 1 <= v <= 65535:
            raise ValueError('port must be between 1 and 65535')
        return v

    @field_validator('ws_path')
    @classmethod
    def validate_ws_path(cls, v: str) -> str:
        if not v.startswith('/'):
            raise ValueError("ws_path must start with '/'")
        return v

    @field_validator('welcome_template')
    @classmethod
    def validate_welcome_template(cls, v: str) -> str:
        try:
            v.format(username='user', count=0)
        except (AttributeError, KeyError, IndexError, ValueError) as e:
            raise ValueError(f'welcome_template may only use {{username}} and {{count}}: {e}') from e
        return v

    def welcome_text(self, username: str, count: int) -> str:
        return self.welcome_template.format(username=username, count=count)


@lru_cache
def get_settings() -> Settings:
    return Settings()
