"""Tests for SIM."""

import asyncio

import httpx
import pytest_asyncio

from sim import Sim
from sim.sim import SCENARIO
from welcome_bot.api import create_fastapi_app
from welcome_bot.app import Application
from welcome_bot.dialogue import START_PROMPT


@pytest_asyncio.fixture
async def app_client(settings):
    app = Application(settings)
    await app.start()
    transport = httpx.ASGITransport(app=create_fastapi_app(app))
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield app, c
    await app.stop()


class TestSim:
    """Tests for Sim against the in-process API."""

    async def test_send_message(self, app_client):
        """Test that a scenario message reaches the dispatcher."""
        app, client = app_client
        sim = Sim(api_url="http://test", client=client)

        await sim._send_message("sim_001", "Привет!")

        for _ in range(200):
            if app.outbox.get_replies("sim_001"):
                break
            await asyncio.sleep(0.01)

        assert [r.text for r in app.outbox.get_replies("sim_001")] == [START_PROMPT]

    async def test_stop_without_start(self):
        """Test that stopping an idle SIM is harmless."""
        sim = Sim()
        await sim.stop()
        assert not sim.running

    def test_scenario_conversations_unique(self):
        ids = [conversation_id for conversation_id, _ in SCENARIO]
        assert len(ids) == len(set(ids))
