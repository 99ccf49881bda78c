"""Tests for repltap.registry."""

import pytest

from repltap.registry import COMMANDS, describe, get_entry, key_bindings

OPERATIONS = [
    "start",
    "stop",
    "interrupt",
    "run-line",
    "run-region",
    "run-slot",
    "stop-slot",
    "stop-all",
    "load-file",
    "run-main",
]


@pytest.mark.parametrize("name", OPERATIONS)
def test_every_operation_is_registered(name):
    entry = get_entry(name)
    assert entry is not None
    assert entry.key
    assert entry.menu


def test_names_and_commands_are_unique():
    assert len({e.name for e in COMMANDS}) == len(COMMANDS)
    assert len({e.command for e in COMMANDS}) == len(COMMANDS)


def test_lookup_by_command_name():
    assert get_entry("run_line") is get_entry("run-line")


def test_describe_unknown():
    with pytest.raises(KeyError):
        describe("dance")


def test_key_overrides():
    rows = {e.name: e for e in key_bindings({"run-line": "C-RET", "stop_all": "C-."})}
    assert rows["run-line"].key == "C-RET"
    assert rows["stop-all"].key == "C-."
    assert rows["start"].key == get_entry("start").key


def test_key_override_unknown_operation():
    with pytest.raises(KeyError):
        key_bindings({"dance": "C-d"})


def test_registered_commands_exist_on_app():
    from repltap import commands

    for entry in COMMANDS:
        assert callable(getattr(commands, entry.command))
