"""Tests for repltap.text.chunker."""

import pytest

from repltap.text import chunk, DEFAULT_CHUNK_SIZE

SAMPLES = [
    "d1 $ sound \"bd*2 [sn cp]\"\n",
    "a\nb\nc\n",
    "x" * 200,
    "line one\r\nline two\r\n" * 10,
    "no trailing newline",
    "\n\n\n",
    "ünïcödé ♪ " * 30,
]


def test_empty_string_yields_no_chunks():
    assert chunk("", 8) == []


@pytest.mark.parametrize("s", SAMPLES)
@pytest.mark.parametrize("n", [1, 2, 3, 7, 64, 1000])
def test_chunks_partition_input_within_bound(s, n):
    pieces = chunk(s, n)
    assert "".join(pieces) == s
    assert all(0 < len(p) <= n for p in pieces)


def test_prefers_cutting_after_newline():
    assert chunk("ab\ncdef\ngh", 6) == ["ab\n", "cdef\n", "gh"]


def test_hard_cut_without_newline():
    assert chunk("abcdefgh", 3) == ["abc", "def", "gh"]


def test_does_not_split_crlf_pair():
    pieces = chunk("abc\r\ndef", 4)
    assert pieces[0] == "abc"
    assert pieces[1].startswith("\r\n")
    assert "".join(pieces) == "abc\r\ndef"


def test_default_size():
    pieces = chunk("y" * (DEFAULT_CHUNK_SIZE * 2 + 1))
    assert [len(p) for p in pieces] == [DEFAULT_CHUNK_SIZE, DEFAULT_CHUNK_SIZE, 1]


@pytest.mark.parametrize("n", [0, -1, 2.5, True])
def test_rejects_invalid_sizes(n):
    with pytest.raises(ValueError):
        chunk("abc", n)
