# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/pave/rad/rad_reg_en/dv/rad_reg_en_checker.py

"""Per-cycle checking logic for rad_reg_en.

The checker holds no simulator handles. The environment feeds it one
observation per cycle plus the stimulus the driver applied in that cycle, so
the same logic runs under cocotb and against a plain Python device model in
unit tests.
"""

from __future__ import annotations

from typing import Any, Protocol

from pave.rad.shared.dv import utils_dv
from pave.rad.shared.dv.env_state import EnvState, EnvStateMachine
from pave.rad.shared.dv.run_report import RunReport
from pave.rad.shared.dv.scoreboard import Scoreboard
from pave.rad.shared.dv.utils_dv import (
    HarnessIntegrityError,
    LockstepError,
    StimulusDesyncError,
)

from .rad_reg_en_item import RadRegEnItem, RadRegEnObs
from .rad_reg_en_ref_model import RadRegEnRefModel

LATENCY = 1


class CoverageSink(Protocol):
    def sample(self, item: RadRegEnItem) -> None: ...

    def sample_obs(self, obs: RadRegEnObs) -> None: ...

    def summary(self) -> dict[str, Any]: ...


class RadRegEnChecker:
    """Advance the reference model, scoreboard and run state by one cycle.

    Order within step():
        1. Reset level drives RESET <-> RUNNING
        2. The applied stimulus must match the inputs the monitor saw
        3. The reference model is evaluated (every cycle)
        4. A cycle with stimulus records its expectation
        5. A cycle following a stimulus checks the observed output
        6. Once the driver is finished: DRAINING, then DONE when nothing is pending

    Raises:
        StimulusDesyncError: applied stimulus and observed inputs disagree,
            or items arrive out of order.
        LockstepError: expectations are left unchecked after draining.
        HarnessIntegrityError: step() after the run reached a terminal state.
    """

    def __init__(
        self,
        ref_model: RadRegEnRefModel | None = None,
        coverage: CoverageSink | None = None,
        *,
        seed: int | None = None,
        name: str = "reg_en_checker",
    ) -> None:
        self.logger = utils_dv.get_logger(name)
        self.ref_model = ref_model if ref_model is not None else RadRegEnRefModel()
        self.coverage = coverage
        self.seed = seed
        self.sb = Scoreboard("rad_reg_en", latency=LATENCY)
        self.fsm = EnvStateMachine(name)
        self.cycles: int = 0
        self.abort_reason: str | None = None
        self._prev_applied: bool = False
        self._next_index: int = 0
        self._drain_cycles: int = 0

    @property
    def state(self) -> EnvState:
        return self.fsm.state

    @property
    def done(self) -> bool:
        return self.fsm.state.terminal

    def step(
        self, obs: RadRegEnObs, applied: RadRegEnItem | None, finished: bool
    ) -> EnvState:
        if self.done:
            raise HarnessIntegrityError(
                f"observation for cycle {obs.cycle} after run reached {self.state.value}"
            )
        self.cycles += 1
        self.logger.debug("step obs=%s applied=%s finished=%s", obs, applied, finished)

        self._track_reset(obs.reset)

        if applied is not None:
            self._check_applied(obs, applied)
            enable, data_in = applied.enable, applied.data
        else:
            enable, data_in = bool(obs.enable), obs.data_in or 0

        exp = self.ref_model.calc_exp(obs.reset, enable, data_in)

        if applied is not None:
            self.sb.record_expected(exp, obs.cycle)
            if self.coverage is not None:
                self.coverage.sample(applied)
        if self._prev_applied:
            self.sb.check(obs.data, obs.cycle)
        if self.coverage is not None:
            self.coverage.sample_obs(obs)
        self._prev_applied = applied is not None

        if finished and applied is None and self.state in (EnvState.RESET, EnvState.RUNNING):
            self.fsm.move(EnvState.DRAINING)
        if self.state is EnvState.DRAINING:
            if self.sb.pending == 0:
                self.fsm.move(EnvState.DONE)
            else:
                self._drain_cycles += 1
                if self._drain_cycles > LATENCY:
                    raise LockstepError(
                        f"{self.sb.pending} expectation(s) still pending "
                        f"{self._drain_cycles} cycles into draining"
                    )
        return self.state

    def _track_reset(self, reset: bool) -> None:
        if reset:
            if self.state is EnvState.RUNNING:
                self.logger.info("Reset asserted mid-run")
                self.fsm.move(EnvState.RESET)
            self.ref_model.reset_change(True)
        elif self.state is EnvState.RESET:
            self.ref_model.reset_change(False)
            self.fsm.move(EnvState.RUNNING)

    def _check_applied(self, obs: RadRegEnObs, applied: RadRegEnItem) -> None:
        if applied.index != self._next_index:
            raise StimulusDesyncError(
                f"driver applied item {applied.index}, expected item {self._next_index}"
            )
        self._next_index += 1
        if obs.enable != applied.enable or obs.data_in != applied.data:
            raise StimulusDesyncError(
                f"cycle {obs.cycle}: driver applied en={int(applied.enable)} "
                f"data_in=0x{applied.data:02X} but monitor saw en={obs.enable} "
                f"data_in={obs.data_in}"
            )

    def abort(self, exc: BaseException) -> None:
        """Record an integrity failure and move to ABORTED."""
        self.abort_reason = f"{type(exc).__name__}: {exc}"
        self.logger.error("HARNESS INTEGRITY FAILURE: %s", self.abort_reason)
        if not self.done:
            self.fsm.move(EnvState.ABORTED)

    def report(self) -> RunReport:
        self.sb.report()
        rpt = RunReport(
            checks=self.sb.vect_cnt,
            passes=self.sb.pass_cnt,
            mismatches=list(self.sb.mismatches),
            final_state=self.state,
            abort_reason=self.abort_reason,
            cycles=self.cycles,
            seed=self.seed,
            coverage=self.coverage.summary() if self.coverage is not None else {},
        )
        log = self.logger.info if rpt.exit_code == 0 else self.logger.error
        log("Run %s", rpt.summary())
        return rpt
