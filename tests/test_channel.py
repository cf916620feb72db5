import asyncio
import json

import pytest

from api.schemas.responses import AbortEvent, TextResponseEvent
from core.channel import STREAM_HEADERS, ChannelState, QueueResponseChannel
from core.exceptions import ChannelStateError


async def _drain(channel):
    return [json.loads(frame["data"]) async for frame in channel.events()]


def test_headers_describe_live_event_stream():
    headers = QueueResponseChannel().headers
    assert headers["Content-Type"] == "text/event-stream"
    assert headers["Cache-Control"] == "no-cache"
    assert headers["Connection"] == "keep-alive"
    assert headers["Access-Control-Allow-Origin"] == "*"
    assert headers == STREAM_HEADERS


def test_write_before_open_raises():
    channel = QueueResponseChannel()
    with pytest.raises(ChannelStateError):
        asyncio.run(channel.write(AbortEvent(error="x")))


def test_double_open_raises():
    channel = QueueResponseChannel()
    channel.open()
    with pytest.raises(ChannelStateError):
        channel.open()


def test_events_are_flushed_in_order_until_close():
    async def scenario():
        channel = QueueResponseChannel()
        channel.open()
        assert await channel.write(TextResponseEvent(text_response="Hel"))
        assert await channel.write(TextResponseEvent(text_response="lo"))
        await channel.close()
        return await _drain(channel)

    frames = asyncio.run(scenario())
    assert [f["textResponse"] for f in frames] == ["Hel", "lo"]
    assert all(f["type"] == "textResponseChunk" for f in frames)


def test_each_event_gets_fresh_id():
    a, b = AbortEvent(error="one"), AbortEvent(error="one")
    assert a.id != b.id


def test_close_is_idempotent_and_later_writes_are_dropped():
    async def scenario():
        channel = QueueResponseChannel()
        channel.open()
        await channel.close()
        await channel.close()
        delivered = await channel.write(TextResponseEvent(text_response="late"))
        return channel, delivered, await _drain(channel)

    channel, delivered, frames = asyncio.run(scenario())
    assert channel.state is ChannelState.CLOSED
    assert delivered is False
    assert frames == []


def test_consumer_leaving_marks_channel_disconnected():
    async def scenario():
        channel = QueueResponseChannel()
        channel.open()
        await channel.write(TextResponseEvent(text_response="first"))
        stream = channel.events()
        await stream.__anext__()
        await stream.aclose()
        delivered = await channel.write(TextResponseEvent(text_response="after"))
        return channel, delivered

    channel, delivered = asyncio.run(scenario())
    assert channel.disconnected
    assert delivered is False
