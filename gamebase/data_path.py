"""Paths relative to the directory of the running program."""

from __future__ import annotations

import functools
import os
import sys


@functools.lru_cache(maxsize=None)
def _program_dir() -> str:
    program = sys.argv[0] if sys.argv else ""
    if not program:
        return os.getcwd()
    return os.path.dirname(os.path.abspath(program))


def data_path(suffix: str) -> str:
    """Return ``suffix`` joined onto the directory holding the running program."""
    return _program_dir() + "/" + suffix