"""Tests for the broadcast engine."""
import pytest

from chatrelay.broadcast import Broadcaster
from chatrelay.models import DeliverMessageEvent, UserLeftEvent
from tests.fakes import FakeConnection


@pytest.fixture
def broadcaster(registry):
    return Broadcaster(registry)


async def _join(registry, connection_id, username, **kwargs):
    connection = FakeConnection(connection_id, **kwargs)
    await registry.register(connection_id, username, connection)
    return connection


class TestBroadcaster:

    @pytest.mark.asyncio
    async def test_delivers_to_everyone_but_sender(self, registry, broadcaster):
        alice = await _join(registry, 'a', 'Alice')
        bob = await _join(registry, 'b', 'Bob')
        carol = await _join(registry, 'c', 'Carol')

        delivered = await broadcaster.broadcast('b', 'hi')

        assert delivered == 2
        expected = DeliverMessageEvent(sender='Bob', text='hi')
        assert alice.delivered == [expected]
        assert carol.delivered == [expected]
        assert bob.delivered == []

    @pytest.mark.asyncio
    async def test_sender_name_comes_from_registry(self, registry, broadcaster):
        alice = await _join(registry, 'a', 'Alice')
        await _join(registry, 'b', 'Bob')

        await broadcaster.broadcast('b', 'hello')

        assert alice.delivered[0].sender == 'Bob'

    @pytest.mark.asyncio
    async def test_unregistered_sender_is_silent_noop(self, registry, broadcaster):
        alice = await _join(registry, 'a', 'Alice')

        assert await broadcaster.broadcast('ghost', 'boo') == 0
        assert alice.delivered == []

    @pytest.mark.asyncio
    async def test_sender_that_left_is_silent_noop(self, registry, broadcaster):
        alice = await _join(registry, 'a', 'Alice')
        await _join(registry, 'b', 'Bob')
        await registry.unregister('b')

        assert await broadcaster.broadcast('b', 'late') == 0
        assert alice.delivered == []

    @pytest.mark.asyncio
    async def test_failed_target_does_not_stop_others(self, registry, broadcaster):
        await _join(registry, 'a', 'Alice', fail=True)
        bob = await _join(registry, 'b', 'Bob')
        carol = await _join(registry, 'c', 'Carol')

        delivered = await broadcaster.broadcast('c', 'still here?')

        assert delivered == 1
        assert bob.delivered == [DeliverMessageEvent(sender='Carol', text='still here?')]
        assert carol.delivered == []

    @pytest.mark.asyncio
    async def test_departed_connection_receives_nothing(self, registry, broadcaster):
        alice = await _join(registry, 'a', 'Alice')
        await _join(registry, 'b', 'Bob')
        await registry.unregister('a')

        assert await broadcaster.broadcast('b', 'anyone?') == 0
        assert alice.delivered == []

    @pytest.mark.asyncio
    async def test_empty_text_is_relayed(self, registry, broadcaster):
        alice = await _join(registry, 'a', 'Alice')
        await _join(registry, 'b', 'Bob')

        await broadcaster.broadcast('b', '')

        assert alice.delivered == [DeliverMessageEvent(sender='Bob', text='')]

    @pytest.mark.asyncio
    async def test_announce_reaches_everyone_but_excluded(self, registry, broadcaster):
        alice = await _join(registry, 'a', 'Alice')
        bob = await _join(registry, 'b', 'Bob')
        notice = UserLeftEvent(username='Carol', text='Carol left the chat')

        assert await broadcaster.announce(notice, exclude='a') == 1
        assert bob.delivered == [notice]
        assert alice.delivered == []
