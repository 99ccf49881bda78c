"""Tests for repltap.session.sink."""

import io
import threading

from rich.console import Console

from repltap.session import BufferSink


def test_tail_includes_partial_line():
    sink = BufferSink()
    sink.write("one\ntw")
    sink.write("o\nthr")
    assert sink.tail(10) == "one\ntwo\nthr"
    assert sink.line_count == 2


def test_tail_limits_to_newest():
    sink = BufferSink()
    sink.write("".join(f"{i}\n" for i in range(10)))
    assert sink.tail(3) == "7\n8\n9"


def test_ring_buffer_drops_oldest():
    sink = BufferSink(max_lines=3)
    sink.write("a\nb\nc\nd\ne\n")
    assert sink.tail(0) == "c\nd\ne"


def test_read_since_last():
    sink = BufferSink()
    sink.write("a\nb\n")
    assert sink.read_since_last() == "a\nb"
    assert sink.read_since_last() == ""

    sink.write("c\npart")
    assert sink.read_since_last() == "c\npart"
    sink.write("ial\n")
    assert sink.read_since_last() == "partial"


def test_read_since_last_after_overflow():
    sink = BufferSink(max_lines=2)
    sink.write("a\n")
    sink.read_since_last()
    sink.write("b\nc\nd\n")
    assert sink.read_since_last() == "c\nd"


def test_clear():
    sink = BufferSink()
    sink.write("a\nb")
    sink.clear()
    assert sink.tail() == ""
    sink.write("c\n")
    assert sink.read_since_last() == "c"


def test_echoes_to_console():
    buffer = io.StringIO()
    sink = BufferSink(console=Console(file=buffer, force_terminal=False, width=200))
    sink.write("[bold]not markup[/bold]\n")
    assert "[bold]not markup[/bold]" in buffer.getvalue()


def test_concurrent_writers_keep_every_line():
    sink = BufferSink(max_lines=10000)

    def produce(tag):
        for i in range(500):
            sink.write(f"{tag}{i}\n")

    threads = [threading.Thread(target=produce, args=(t,)) for t in "abcd"]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    lines = sink.tail(0).split("\n")
    assert len(lines) == 2000
    assert [line for line in lines if line.startswith("a")] == [f"a{i}" for i in range(500)]
