# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: tests/conftest.py

"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

_SETTINGS = (
    "SEQ_LEN",
    "SEED",
    "TEST_MODE",
    "CLOCK_PERIOD_PS",
    "RESET_CYCLES",
    "RESET_ACTIVE_LOW",
    "COVERAGE_EN",
    "PRE_PS",
    "REPORT_JSON",
    "COCOTB_RANDOM_SEED",
)


@pytest.fixture
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove every bench setting from the environment for the test."""
    for name in _SETTINGS:
        monkeypatch.delenv(name, raising=False)
        monkeypatch.delenv(f"PAVE_{name}", raising=False)
    for var in ("PLUSARGS", "COCOTB_PLUSARGS", "PAVE_PLUSARGS"):
        monkeypatch.delenv(var, raising=False)
    return monkeypatch
