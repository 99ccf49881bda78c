"""repltap commands."""

from .lifecycle import start, stop, interrupt, status
from .send import run_line, run_region, run_slot, stop_slot, stop_all, load_file, run_main
from .output import output
from .keys import keys

__all__ = [
    "start",
    "stop",
    "interrupt",
    "status",
    "run_line",
    "run_region",
    "run_slot",
    "stop_slot",
    "stop_all",
    "load_file",
    "run_main",
    "output",
    "keys",
]
