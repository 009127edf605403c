"""
Connection registry.

The single shared map of online connections. Every read and write goes
through one asyncio.Lock; callers only ever see copies.
"""
import asyncio
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class RegistryEntry:
    connection_id: str
    username: str
    connection: Any  # anything with an async deliver(event)


class ConnectionRegistry:
    def __init__(self):
        self._entries: Dict[str, RegistryEntry] = {}  # connection_id -> entry
        self._lock = asyncio.Lock()

    async def register(self, connection_id: str, username: str, connection) -> int:
        """Insert or overwrite an entry and return the count right after it."""
        async with self._lock:
            self._entries[connection_id] = RegistryEntry(connection_id, username, connection)
            return len(self._entries)

    async def unregister(self, connection_id: str) -> Optional[str]:
        """Remove an entry, returning its username. Unknown ids are a no-op."""
        async with self._lock:
            entry = self._entries.pop(connection_id, None)
        return entry.username if entry else None

    async def lookup(self, connection_id: str) -> Optional[str]:
        async with self._lock:
            entry = self._entries.get(connection_id)
        return entry.username if entry else None

    async def count(self) -> int:
        async with self._lock:
            return len(self._entries)

    async def snapshot(self, exclude: Optional[str] = None) -> List[RegistryEntry]:
        async with self._lock:
            return [e for cid, e in self._entries.items() if cid != exclude]
