"""Fake collaborators shared by the session, engine and route tests."""

from __future__ import annotations

from api.schemas.responses import TextResponseEvent


class RecordingChannel:
    def __init__(self, fail_writes: bool = False) -> None:
        self.events = []
        self.opened = 0
        self.closed = 0
        self.fail_writes = fail_writes
        self.disconnected = False

    def open(self) -> None:
        self.opened += 1

    async def write(self, event) -> bool:
        if self.fail_writes:
            raise ConnectionResetError("client went away")
        self.events.append(event.to_wire())
        return True

    async def close(self) -> None:
        self.closed += 1

    def of_type(self, kind: str) -> list[dict]:
        return [e for e in self.events if e.get("type") == kind or e.get("action") == kind]


class FakeEngine:
    def __init__(self, chunks=("Hello", " world"), error: Exception | None = None, store=None):
        self.chunks = chunks
        self.error = error
        self.store = store
        self.calls = []

    async def stream_chat(self, **kwargs) -> None:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        channel = kwargs["channel"]
        for chunk in self.chunks:
            await channel.write(TextResponseEvent(text_response=chunk))
        await channel.write(TextResponseEvent(text_response="", close=True))
        if self.store is not None:
            self.store.record_chat(
                kwargs["workspace"],
                kwargs["message"],
                "".join(self.chunks),
                user=kwargs["user"],
                thread=kwargs["thread"],
            )


class FakeRenamer:
    def __init__(self, result=None, error: Exception | None = None):
        self.result = result
        self.error = error
        self.calls = []

    async def auto_rename_thread(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.result


class FakeTelemetry:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.sent = []

    async def send_telemetry(self, event, properties) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append((event, properties))


class FakeEventLogs:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.logged = []

    async def log_event(self, event, metadata, user_id=None) -> None:
        if self.error is not None:
            raise self.error
        self.logged.append((event, metadata, user_id))
