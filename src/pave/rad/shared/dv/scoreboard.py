# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/pave/rad/shared/dv/scoreboard.py

"""In-order scoreboard with a fixed-latency expectation queue."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any

from . import utils_dv
from .utils_dv import ExpectationUnderflowError, LockstepError


@dataclass(frozen=True)
class Mismatch:
    """One failed comparison."""

    cycle: int
    expected: Any
    observed: Any

    def to_dict(self) -> dict[str, Any]:
        return {"cycle": self.cycle, "expected": self.expected, "observed": self.observed}


@dataclass(frozen=True)
class CheckResult:
    cycle: int
    expected: Any
    observed: Any
    passed: bool


class Scoreboard:
    """Compare observed values against expectations recorded `latency` cycles earlier.

    Expectations are appended with record_expected(value, cycle) and consumed
    oldest-first by check(observed, cycle). A value predicted from the inputs
    of cycle N must be observed at cycle N + latency; any other pairing means
    the expected and observed streams are out of lockstep.

    Statistics:
        vect_cnt: Total number of comparisons performed
        pass_cnt: Number of passing comparisons
        err_cnt: Number of failing comparisons

    Data mismatches are collected in `mismatches` and logged at ERROR; they
    never raise. Harness faults do:

    Raises:
        ExpectationUnderflowError: check() with an empty expectation queue.
        LockstepError: check() cycle is not expected cycle + latency.

    Reference:
        C.E. Cummings, "OVM/UVM Scoreboards - Fundamental Architectures,"
        SNUG 2013 (Silicon Valley)

    Example:
        >>> sb = Scoreboard("reg_en", latency=1)
        >>> sb.record_expected(0x11, cycle=3)
        >>> sb.check(0x11, cycle=4)
        True
    """

    def __init__(self, name: str = "sb", latency: int = 1) -> None:
        if latency < 0:
            raise ValueError(f"latency must be >= 0, got {latency}")
        self.name = name
        self.latency = latency
        self.logger = utils_dv.get_logger(f"sb.{name}")
        self._exp: deque[tuple[int, Any]] = deque()
        self.results: list[CheckResult] = []
        self.mismatches: list[Mismatch] = []
        self.vect_cnt: int = 0
        self.pass_cnt: int = 0
        self.err_cnt: int = 0

    @property
    def pending(self) -> int:
        """Number of expectations not yet checked."""
        return len(self._exp)

    def record_expected(self, value: Any, cycle: int) -> None:
        if self._exp and cycle <= self._exp[-1][0]:
            raise LockstepError(
                f"{self.name}: expectation for cycle {cycle} recorded after "
                f"cycle {self._exp[-1][0]}"
            )
        self._exp.append((cycle, value))

    def check(self, observed: Any, cycle: int) -> bool:
        """Pop the oldest expectation and compare it with `observed`."""
        if not self._exp:
            raise ExpectationUnderflowError(
                f"{self.name}: check at cycle {cycle} with no expectation queued"
            )
        exp_cycle, expected = self._exp.popleft()
        if cycle != exp_cycle + self.latency:
            raise LockstepError(
                f"{self.name}: observed cycle {cycle} but expectation from cycle "
                f"{exp_cycle} is due at cycle {exp_cycle + self.latency}"
            )

        self.vect_cnt += 1
        passed = observed == expected
        self.results.append(CheckResult(cycle, expected, observed, passed))
        if passed:
            self.pass_cnt += 1
            self.logger.debug(
                "PASS cycle=%d exp=%s act=%s vect_cnt=%d",
                cycle,
                _fmt(expected),
                _fmt(observed),
                self.vect_cnt,
            )
        else:
            self.err_cnt += 1
            self.mismatches.append(Mismatch(cycle, expected, observed))
            self.logger.error(
                "MISMATCH cycle=%d exp=%s act=%s", cycle, _fmt(expected), _fmt(observed)
            )
        return passed

    @property
    def passed(self) -> bool:
        return self.err_cnt == 0

    def report(self) -> None:
        if self.err_cnt == 0:
            self.logger.info(
                "*** TEST PASSED - %d ran, %d passed ***", self.vect_cnt, self.pass_cnt
            )
        else:
            self.logger.error(
                "*** TEST FAILED - %d ran, %d passed, %d failed ***",
                self.vect_cnt,
                self.pass_cnt,
                self.err_cnt,
            )


def _fmt(v: Any) -> str:
    return f"0x{v:02X}" if isinstance(v, int) and not isinstance(v, bool) else repr(v)
