import asyncio
import json
import os

import httpx

from config import Settings
from services.event_logs import EventLogs
from services.telemetry import Telemetry


def test_telemetry_disabled_without_endpoint():
    telemetry = Telemetry(settings=Settings(telemetry_endpoint=""))
    assert not telemetry.is_configured()
    asyncio.run(telemetry.send_telemetry("sent_chat", {"multiModal": False}))


def test_telemetry_posts_anonymous_record():
    received = []

    def handler(request: httpx.Request) -> httpx.Response:
        received.append(json.loads(request.content))
        return httpx.Response(200)

    async def scenario():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            telemetry = Telemetry(
                settings=Settings(telemetry_endpoint="http://collector.test/capture"),
                client=client,
            )
            await telemetry.send_telemetry("sent_chat", {"LLMSelection": "openai"})
            return telemetry

    telemetry = asyncio.run(scenario())
    assert received == [
        {
            "event": "sent_chat",
            "distinct_id": telemetry.distinct_id,
            "properties": {"LLMSelection": "openai"},
        }
    ]


def test_telemetry_swallows_transport_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async def scenario():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            telemetry = Telemetry(
                settings=Settings(telemetry_endpoint="http://collector.test/capture"),
                client=client,
            )
            await telemetry.send_telemetry("sent_chat", {})

    asyncio.run(scenario())


def test_event_logs_kept_in_process_without_redis():
    logs = EventLogs(settings=Settings(redis_url=""))
    asyncio.run(logs.log_event("sent_chat", {"workspaceName": "Docs"}, 4))
    recent = logs.recent()
    assert len(recent) == 1
    assert recent[0]["event"] == "sent_chat"
    assert recent[0]["metadata"] == {"workspaceName": "Docs"}
    assert recent[0]["userId"] == 4


def test_event_logs_pushed_to_redis():
    class FakeRedis:
        def __init__(self):
            self.lists = {}

        async def lpush(self, key, value):
            self.lists.setdefault(key, []).insert(0, value)

        async def ltrim(self, key, start, end):
            self.lists[key] = self.lists[key][start : end + 1]

    redis_client = FakeRedis()
    logs = EventLogs(settings=Settings(redis_url="redis://unused"), redis_client=redis_client)
    asyncio.run(logs.log_event("sent_chat", {"thread": "Plans"}, None))
    (key, values), = redis_client.lists.items()
    assert json.loads(values[0])["metadata"] == {"thread": "Plans"}
    assert logs.recent() == []


def test_shell_environment_does_not_reach_test_settings():
    assert "DISABLE_TELEMETRY" not in os.environ
    cfg = Settings(telemetry_endpoint="http://collector.test/capture")
    assert cfg.disable_telemetry is False
    assert Telemetry(settings=cfg).is_configured()


def test_disable_telemetry_env_wins_over_init(monkeypatch):
    monkeypatch.setenv("DISABLE_TELEMETRY", "1")
    cfg = Settings(telemetry_endpoint="http://collector.test/capture")
    assert cfg.disable_telemetry is True
    assert not Telemetry(settings=cfg).is_configured()


def test_settings_read_no_dotenv_from_working_directory():
    assert not os.path.exists(".env")
    assert Settings().disable_telemetry is False
