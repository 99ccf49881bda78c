"""Shared test fixtures for repltap tests."""

import sys
import time
from pathlib import Path

import pytest

from repltap.config import ReplConfig
from repltap.dispatcher import Dispatcher
from repltap.exceptions import AlreadyRunningError, NotRunningError
from repltap.session import BufferSink, Session
from repltap.types import SessionState

ECHO_SERVER = Path(__file__).parent / "fixtures" / "echo_server.py"


class FakeSession:
    """In-memory stand-in for Session that records every write."""

    def __init__(self):
        self.state = SessionState.STOPPED
        self.writes = []  # one list of chunks per write_chunks call
        self.boot = []
        self.interrupts = 0
        self.pid = None
        self.returncode = None

    @property
    def is_running(self):
        return self.state == SessionState.RUNNING

    @property
    def received(self):
        return "".join(c.text for chunks in self.writes for c in chunks)

    def start(self, boot=()):
        if self.state != SessionState.STOPPED:
            raise AlreadyRunningError()
        self.state = SessionState.RUNNING
        self.pid = 4242
        self.boot = list(boot)

    def stop(self):
        if self.state != SessionState.RUNNING:
            raise NotRunningError()
        self.state = SessionState.STOPPED
        self.pid = None
        return 0

    def interrupt(self):
        if self.state != SessionState.RUNNING:
            raise NotRunningError()
        self.interrupts += 1

    def write_chunks(self, chunks):
        if self.state != SessionState.RUNNING:
            raise NotRunningError()
        self.writes.append(list(chunks))


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def fake_dispatcher(fake_session):
    """Dispatcher over a FakeSession with BEGIN/END markers."""

    def _make(**config_kwargs):
        config_kwargs.setdefault("block_begin", "BEGIN")
        config_kwargs.setdefault("block_end", "END")
        config = ReplConfig(**config_kwargs)
        return Dispatcher(config, BufferSink(), session=fake_session)

    return _make


@pytest.fixture
def wait_for():
    """Poll a predicate until it holds or the timeout passes."""

    def _wait(predicate, timeout: float = 5.0, interval: float = 0.02) -> bool:
        deadline = time.time() + timeout
        while time.time() < deadline:
            if predicate():
                return True
            time.sleep(interval)
        return bool(predicate())

    return _wait


@pytest.fixture
def received_log(tmp_path):
    """Path the echo server appends raw stdin bytes to."""
    return tmp_path / "received.log"


@pytest.fixture
def read_received(received_log):
    def _read() -> str:
        if not received_log.exists():
            return ""
        return received_log.read_bytes().decode("utf-8")

    return _read


@pytest.fixture
def echo_command(received_log):
    def _command(mode: str = "echo") -> list[str]:
        return [sys.executable, "-u", str(ECHO_SERVER), str(received_log), mode]

    return _command


@pytest.fixture
def make_session(echo_command):
    """Factory for sessions running the echo server. Stopped on teardown."""
    sessions = []

    def _make(mode: str = "echo", **kwargs) -> Session:
        sink = kwargs.pop("sink", None) or BufferSink()
        session = Session(echo_command(mode), sink, **kwargs)
        sessions.append(session)
        return session

    yield _make

    for session in sessions:
        session.close()


@pytest.fixture
def make_dispatcher(echo_command):
    """Factory for dispatchers running the echo server. Stopped on teardown."""
    dispatchers = []

    def _make(mode: str = "echo", **config_kwargs) -> Dispatcher:
        command = echo_command(mode)
        config = ReplConfig(interpreter=command[0], arguments=command[1:], **config_kwargs)
        dispatcher = Dispatcher(config)
        dispatchers.append(dispatcher)
        return dispatcher

    yield _make

    for dispatcher in dispatchers:
        dispatcher.session.close()
