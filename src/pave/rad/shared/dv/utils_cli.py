# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/pave/rad/shared/dv/utils_cli.py

"""Command-line settings for testbench configuration.

Bench knobs reach the simulator process either as environment variables or as
plusargs forwarded by the dv tool. This module resolves them with a single,
predictable precedence so every bench reads its configuration the same way.

Configuration Precedence:
    1. Environment variables (NAME or PAVE_NAME)
    2. Plusargs (+NAME or +NAME=value)
    3. Default values

Functions:
    get_bool_setting: Resolve boolean configuration
    get_str_setting: Resolve string configuration
    get_int_setting: Resolve integer configuration (supports hex with 0x)
    iter_plusargs: Iterate over all plusargs

Plusargs Format:
    Boolean flags: +NAME (treated as True) or +NAME=1/0/true/false/yes/no
    String values: +NAME=value
    Integer values: +NAME=123 or +NAME=0x7B

Environment Variables:
    PLUSARGS, COCOTB_PLUSARGS, or PAVE_PLUSARGS: Space-separated plusargs
    Individual settings: NAME or PAVE_NAME (e.g., SEQ_LEN=200)

Example:
    >>> seq_len = get_int_setting("SEQ_LEN", 10)
    >>> coverage_en = get_bool_setting("COVERAGE_EN", True)
"""

from __future__ import annotations

import os
from typing import Iterable

_TRUE_SET = {"1", "true", "yes", "y", "on"}
_FALSE_SET = {"0", "false", "no", "n", "off"}
_PLUSARG_VARS = ("PLUSARGS", "COCOTB_PLUSARGS", "PAVE_PLUSARGS")


def _parse_bool(s: str) -> bool | None:
    """Convert str to bool."""
    v = s.strip().lower()
    if v in _TRUE_SET:
        return True
    if v in _FALSE_SET:
        return False
    return None


def iter_plusargs() -> Iterable[str]:
    """Yield +args from the first non-empty plusarg env var."""
    for var in _PLUSARG_VARS:
        s = os.environ.get(var, "")
        if s:
            return s.split()
    return []


def _get_plusarg(name: str) -> str | None:
    """Return the value of +NAME=val, '1' for a bare +NAME, else None."""
    prefix = f"+{name}="
    for tok in iter_plusargs():
        if tok.startswith(prefix):
            return tok[len(prefix) :]
        if tok == f"+{name}":
            return "1"
    return None


def _env_values(name: str) -> Iterable[str]:
    for key in (name, f"PAVE_{name}"):
        v = os.environ.get(key)
        if v is not None:
            yield v


def get_bool_setting(name: str, default: bool) -> bool:
    """
    Resolve a boolean setting with precedence: env > plusarg > default.
    Unparseable values fall through to the next source.
    """
    for v in _env_values(name):
        parsed = _parse_bool(v)
        if parsed is not None:
            return parsed
    v = _get_plusarg(name)
    if v is not None:
        parsed = _parse_bool(v)
        if parsed is not None:
            return parsed
    return default


def get_str_setting(name: str, default: str) -> str:
    """Resolve a string setting: env > plusarg > default."""
    for v in _env_values(name):
        return v
    v = _get_plusarg(name)
    return v if v is not None else default


def get_int_setting(name: str, default: int) -> int:
    """Resolve an int setting: env > plusarg > default (0x prefix allowed)."""
    for v in _env_values(name):
        try:
            return int(v, 0)
        except ValueError:
            continue
    v = _get_plusarg(name)
    if v is not None:
        try:
            return int(v, 0)
        except ValueError:
            pass
    return default
