"""Tests for transports."""

import asyncio
import json

import httpx
import pytest

from welcome_bot.models import InboundMessage
from welcome_bot.transport import HttpOutbound, Outbox, QueueInbound, SendError


class TestQueueInbound:
    """Tests for QueueInbound."""

    async def test_yields_in_order_until_closed(self):
        """Test that messages come out in the order they were put."""
        inbound = QueueInbound()
        for i in range(3):
            await inbound.put(InboundMessage(conversation_id="chat1", text=str(i)))
        inbound.close()

        texts = [m.text async for m in inbound]
        assert texts == ["0", "1", "2"]

    async def test_put_after_close_rejected(self):
        """Test that a closed transport accepts nothing new."""
        inbound = QueueInbound()
        inbound.close()

        assert inbound.closed
        with pytest.raises(RuntimeError, match="closed"):
            await inbound.put(InboundMessage(conversation_id="chat1"))

    async def test_close_is_idempotent(self):
        inbound = QueueInbound()
        inbound.close()
        inbound.close()
        assert [m async for m in inbound] == []

    async def test_waits_for_messages(self):
        """Test that iteration blocks until a message arrives."""
        inbound = QueueInbound()

        async def first():
            async for message in inbound:
                return message

        task = asyncio.create_task(first())
        await asyncio.sleep(0.01)
        assert not task.done()

        await inbound.put(InboundMessage(conversation_id="chat1", text="hi"))
        message = await asyncio.wait_for(task, timeout=1)
        assert message.text == "hi"


class TestOutbox:
    """Tests for Outbox."""

    async def test_records_replies_per_conversation(self, outbox):
        await outbox.send("chat1", "one")
        await outbox.send("chat2", "other")
        await outbox.send("chat1", "two")

        assert [r.text for r in outbox.get_replies("chat1")] == ["one", "two"]
        assert [r.text for r in outbox.get_replies("chat2")] == ["other"]
        assert outbox.get_replies("chat3") == []

    async def test_clear(self, outbox):
        await outbox.send("chat1", "one")
        outbox.clear()
        assert outbox.get_replies("chat1") == []


class TestHttpOutbound:
    """Tests for HttpOutbound."""

    async def test_posts_reply(self):
        """Test that the reply is posted as JSON."""
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        outbound = HttpOutbound("http://hooks.test/reply", client=client)

        await outbound.send("chat1", "Привет")
        await outbound.close()

        assert len(requests) == 1
        assert str(requests[0].url) == "http://hooks.test/reply"
        assert json.loads(requests[0].content) == {
            "conversation_id": "chat1",
            "text": "Привет",
        }

    async def test_error_status_raises_send_error(self):
        """Test that a non-2xx response is a send failure."""
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(502))
        )
        outbound = HttpOutbound("http://hooks.test/reply", client=client)

        with pytest.raises(SendError, match="502"):
            await outbound.send("chat1", "hi")
        await outbound.close()

    async def test_network_error_raises_send_error(self):
        """Test that transport errors are wrapped."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        outbound = HttpOutbound("http://hooks.test/reply", client=client)

        with pytest.raises(SendError):
            await outbound.send("chat1", "hi")
        await outbound.close()
