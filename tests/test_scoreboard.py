# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: tests/test_scoreboard.py

from __future__ import annotations

import logging

import pytest

from pave.rad.shared.dv import (
    ExpectationUnderflowError,
    LockstepError,
    Mismatch,
    Scoreboard,
)


def test_matching_values_pass() -> None:
    sb = Scoreboard("t", latency=1)
    sb.record_expected(0x11, cycle=3)
    assert sb.check(0x11, cycle=4)
    assert (sb.vect_cnt, sb.pass_cnt, sb.err_cnt) == (1, 1, 0)
    assert sb.passed
    assert sb.pending == 0


def test_mismatch_is_collected_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    sb = Scoreboard("t", latency=1)
    sb.record_expected(0x11, cycle=3)
    sb.record_expected(0x22, cycle=4)
    with caplog.at_level(logging.ERROR):
        assert not sb.check(0x10, cycle=4)
    assert sb.check(0x22, cycle=5)
    assert sb.mismatches == [Mismatch(cycle=4, expected=0x11, observed=0x10)]
    assert sb.err_cnt == 1
    assert not sb.passed
    assert "MISMATCH cycle=4 exp=0x11 act=0x10" in caplog.text


def test_check_is_fifo_ordered() -> None:
    sb = Scoreboard("t", latency=1)
    for cycle, v in enumerate([1, 2, 3], start=2):
        sb.record_expected(v, cycle)
    assert sb.pending == 3
    for cycle, v in enumerate([1, 2, 3], start=3):
        assert sb.check(v, cycle)
    assert [r.expected for r in sb.results] == [1, 2, 3]


def test_underflow_raises() -> None:
    with pytest.raises(ExpectationUnderflowError):
        Scoreboard("t").check(0, cycle=2)


def test_cycle_skew_raises() -> None:
    sb = Scoreboard("t", latency=1)
    sb.record_expected(0x11, cycle=3)
    with pytest.raises(LockstepError):
        sb.check(0x11, cycle=5)


def test_non_increasing_expectations_raise() -> None:
    sb = Scoreboard("t")
    sb.record_expected(1, cycle=4)
    with pytest.raises(LockstepError):
        sb.record_expected(2, cycle=4)


def test_zero_latency() -> None:
    sb = Scoreboard("t", latency=0)
    sb.record_expected(7, cycle=2)
    assert sb.check(7, cycle=2)


def test_negative_latency_rejected() -> None:
    with pytest.raises(ValueError):
        Scoreboard("t", latency=-1)


def test_report_banner(caplog: pytest.LogCaptureFixture) -> None:
    sb = Scoreboard("t")
    sb.record_expected(1, cycle=2)
    sb.check(1, cycle=3)
    with caplog.at_level(logging.INFO):
        sb.report()
    assert "*** TEST PASSED - 1 ran, 1 passed ***" in caplog.text
