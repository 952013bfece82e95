from __future__ import annotations

import os
import tempfile
from collections.abc import Callable
from pathlib import Path

_TEST_DATA_DIR = Path(tempfile.mkdtemp(prefix="pathfinder-tests-"))
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_TEST_DATA_DIR / 'test.db'}")
os.environ.setdefault("DATA_DIR", str(_TEST_DATA_DIR))
os.environ.setdefault("APP_ENV", "test")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from pathfinder.api.app import create_app  # noqa: E402
from pathfinder.client.api import ApiClient  # noqa: E402
from pathfinder.db.base import Base  # noqa: E402
from pathfinder.db.session import engine  # noqa: E402
from pathfinder.errors import OracleError  # noqa: E402
from pathfinder.logging_config import configure_logging  # noqa: E402

# Handlers bind to the stream pytest installs, not to CliRunner's per-invoke buffers.
configure_logging()


@pytest.fixture(autouse=True)
def reset_db() -> None:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


@pytest.fixture
def api(client: TestClient) -> ApiClient:
    return ApiClient("http://testserver/api", session=client)


class ManualScheduler:
    """Scheduler whose clock only moves when a test calls ``advance``."""

    def __init__(self) -> None:
        self.now = 0.0
        self._timers: list[ManualTimer] = []

    def schedule(self, delay_sec: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self.now + delay_sec, callback)
        self._timers.append(timer)
        return timer

    def advance(self, seconds: float) -> None:
        self.now += seconds
        due = [timer for timer in self._timers if not timer.cancelled and timer.due <= self.now]
        self._timers = [timer for timer in self._timers if timer not in due and not timer.cancelled]
        for timer in sorted(due, key=lambda item: item.due):
            timer.callback()


class ManualTimer:
    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeChat:
    def __init__(self, oracle: FakeOracle, system_prompt: str) -> None:
        self.oracle = oracle
        self.system_prompt = system_prompt
        self.sent: list[str] = []

    def send(self, message: str, attachment=None) -> str:
        self.sent.append(message)
        return self.oracle._next(message)


class FakeOracle:
    """Scripted stand-in for Oracle: replies are popped in order, exceptions are raised."""

    def __init__(self, replies: list | None = None) -> None:
        self.replies = list(replies or [])
        self.prompts: list[str] = []
        self.systems: list[str | None] = []
        self.attachments: list = []
        self.schemas: list[dict] = []
        self.chats: list[FakeChat] = []

    def _next(self, prompt: str):
        self.prompts.append(prompt)
        if not self.replies:
            raise OracleError("no scripted reply")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    def generate(self, prompt: str, *, system: str | None = None, attachment=None) -> str:
        self.systems.append(system)
        self.attachments.append(attachment)
        return self._next(prompt)

    def generate_structured(self, prompt: str, schema: dict):
        self.schemas.append(schema)
        return self._next(prompt)

    def chat(self, system_prompt: str) -> FakeChat:
        chat = FakeChat(self, system_prompt)
        self.chats.append(chat)
        return chat


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def make_oracle() -> Callable[..., FakeOracle]:
    return lambda *replies: FakeOracle(list(replies))
