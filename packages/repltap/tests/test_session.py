"""Tests for repltap.session.process against the echo server test double."""

import os
import signal
import sys
import threading

import pytest

from repltap.exceptions import (
    AlreadyRunningError,
    EncodingError,
    NotRunningError,
    SpawnFailedError,
    TransportClosedError,
)
from repltap.session import BufferSink, Session
from repltap.types import Chunk, SessionState

pytestmark = [
    pytest.mark.subprocess,
    pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals and pipes"),
]


def test_starts_stopped(make_session):
    session = make_session()
    assert session.state == SessionState.STOPPED
    assert session.pid is None


def test_start_and_stop(make_session, wait_for):
    sink = BufferSink()
    session = make_session(sink=sink)

    session.start()
    assert session.state == SessionState.RUNNING
    assert session.pid is not None
    assert wait_for(lambda: "ready" in sink.tail())

    session.stop()
    assert session.state == SessionState.STOPPED
    assert session.pid is None
    assert session.returncode is None


def test_start_twice_fails(make_session):
    session = make_session()
    session.start()
    with pytest.raises(AlreadyRunningError):
        session.start()
    assert session.state == SessionState.RUNNING


def test_stop_when_stopped_fails(make_session):
    session = make_session()
    with pytest.raises(NotRunningError, match="no session running"):
        session.stop()

    session.start()
    session.stop()
    with pytest.raises(NotRunningError):
        session.stop()


def test_restart_after_stop(make_session, read_received, wait_for):
    session = make_session()
    session.start()
    session.stop()
    session.start()
    session.write("again\n")
    assert wait_for(lambda: read_received() == "again\n")


def test_spawn_failure_leaves_stopped(tmp_path):
    session = Session([str(tmp_path / "no-such-interpreter")], BufferSink())
    with pytest.raises(SpawnFailedError, match="no-such-interpreter"):
        session.start()
    assert session.state == SessionState.STOPPED


def test_spawn_permission_denied(tmp_path):
    script = tmp_path / "not-executable"
    script.write_text("#!/bin/sh\n")
    script.chmod(0o644)

    session = Session([str(script)], BufferSink())
    with pytest.raises(SpawnFailedError):
        session.start()
    assert session.state == SessionState.STOPPED


def test_write_before_start(make_session):
    session = make_session()
    with pytest.raises(NotRunningError):
        session.write("foo\n")


def test_write_after_stop_is_not_running(make_session):
    session = make_session()
    session.start()
    session.stop()
    with pytest.raises(NotRunningError):
        session.write("foo\n")


def test_writes_arrive_in_order(make_session, read_received, wait_for):
    sink = BufferSink()
    session = make_session(sink=sink)
    session.start()

    for i in range(50):
        session.write_chunks([Chunk(0, f"line {i}"), Chunk(1, "\n")])

    expected = "".join(f"line {i}\n" for i in range(50))
    assert wait_for(lambda: read_received() == expected)
    assert wait_for(lambda: "49:line 49" in sink.tail())

    echoed = [line for line in sink.tail(0).split("\n") if ":" in line]
    assert echoed == [f"{i}:line {i}" for i in range(50)]


def test_concurrent_writers_never_interleave(make_session, read_received, wait_for):
    session = make_session()
    session.start()

    def writer(tag):
        for i in range(20):
            chunks = [Chunk(0, f"{tag}"), Chunk(1, f"-{i}-"), Chunk(2, "end\n")]
            session.write_chunks(chunks)

    threads = [threading.Thread(target=writer, args=(tag,)) for tag in ("a", "b", "c")]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert wait_for(lambda: read_received().count("\n") == 60)
    lines = read_received().splitlines()
    for tag in ("a", "b", "c"):
        assert [line for line in lines if line.startswith(tag)] == [f"{tag}-{i}-end" for i in range(20)]


def test_boot_chunks_are_written_first(make_session, read_received, wait_for):
    session = make_session()
    session.start(boot=[Chunk(0, ":script Boot.hs\n")])
    session.write("d1 $ silence\n")
    assert wait_for(lambda: read_received() == ":script Boot.hs\nd1 $ silence\n")


def test_interrupt_keeps_running(make_session, wait_for):
    sink = BufferSink()
    session = make_session(sink=sink)
    session.start()
    assert wait_for(lambda: "ready" in sink.tail())

    session.interrupt()

    assert wait_for(lambda: "interrupted" in sink.tail())
    assert session.state == SessionState.RUNNING


def test_interrupt_when_stopped(make_session):
    with pytest.raises(NotRunningError):
        make_session().interrupt()


def test_external_kill_is_detected(make_session, wait_for):
    sink = BufferSink()
    session = make_session(sink=sink)
    session.start()

    os.kill(session.pid, signal.SIGKILL)

    assert session.wait_until_stopped(timeout=5)
    assert session.state == SessionState.STOPPED
    assert session.returncode == -signal.SIGKILL
    assert wait_for(lambda: "[process exited with code -9]" in sink.tail())

    with pytest.raises(TransportClosedError, match="exited with code -9"):
        session.write("foo\n")
    with pytest.raises(TransportClosedError):
        session.write("bar\n")


def test_interpreter_exit_from_input(make_session):
    session = make_session()
    session.start()
    session.write("quit\n")

    assert session.wait_until_stopped(timeout=5)
    assert session.returncode == 3
    with pytest.raises(TransportClosedError):
        session.write("foo\n")


def test_start_clears_lost_state(make_session):
    session = make_session()
    session.start()
    session.write("quit\n")
    assert session.wait_until_stopped(timeout=5)

    session.start()
    assert session.returncode is None
    session.write("hello\n")


def test_blocked_write_times_out_and_stops(make_session):
    session = make_session(mode="deaf", write_timeout=0.5, stop_timeout=1.0)
    session.start()

    # Far more than a pipe buffer holds; the deaf server never reads.
    with pytest.raises(TransportClosedError, match="blocked"):
        session.write("x" * (4 * 1024 * 1024))

    assert session.state == SessionState.STOPPED
    with pytest.raises(TransportClosedError):
        session.write("y\n")


def test_context_manager(echo_command, read_received, wait_for):
    with Session(echo_command(), BufferSink()) as session:
        assert session.is_running
        session.write("scoped\n")
        assert wait_for(lambda: read_received() == "scoped\n")
    assert session.state == SessionState.STOPPED


def test_unencodable_input_is_rejected_before_sending(make_session, read_received, wait_for):
    session = make_session(encoding="ascii")
    session.start()

    with pytest.raises(EncodingError, match="ascii"):
        session.write_chunks([Chunk(0, "d1 $ sound "), Chunk(1, '"♪"\n')])

    assert session.state == SessionState.RUNNING
    session.write("ok\n")
    assert wait_for(lambda: read_received() == "ok\n")
