"""Globals every Lox program starts with."""

import time
from typing import Any, List


def std_clock(args: List[Any]) -> float:
    return time.monotonic()


def populate_standard_environment(interpreter) -> None:
    interpreter.define_native('clock', 0, std_clock)
