# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/pave/rad/rad_reg_en/dv/rad_reg_en_env.py

"""rad_reg_en environment: builds the components and runs them to completion."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Coroutine

import cocotb
from cocotb.task import Task

from pave.rad.shared.dv import utils_cli, utils_dv
from pave.rad.shared.dv.clock_reset import ClockResetSource
from pave.rad.shared.dv.run_report import RunReport, append_report
from pave.rad.shared.dv.seq_port import SeqItemPort
from pave.rad.shared.dv.utils_dv import HarnessIntegrityError, StimulusDesyncError

from .rad_reg_en_checker import RadRegEnChecker
from .rad_reg_en_config import RadRegEnConfig
from .rad_reg_en_coverage import RadRegEnCoverage
from .rad_reg_en_driver import RadRegEnDriver
from .rad_reg_en_if import RadRegEnIf
from .rad_reg_en_item import RadRegEnItem
from .rad_reg_en_monitor import RadRegEnMonitor
from .rad_reg_en_ref_model import RadRegEnRefModel
from .rad_reg_en_sequence import RadRegEnSequence, make_sequence


class RadRegEnEnv:
    """Wire clock/reset, driver, monitor and checker together for one run.

    Topology:
        sequence -> SeqItemPort -> driver -> DUT -> monitor
        driver.ap (applied item) ─┐
        monitor.ap (observation) ─┴-> checker (ref model + scoreboard + state)

    run() starts the clock, the reset pulse, the driver and the monitor, then
    hands every observation (with the item the driver applied in the same
    cycle) to the checker until the run is DONE. A HarnessIntegrityError,
    whether raised by the checker or inside the driver, aborts the run with
    the results gathered so far. All tasks are cancelled and the clock stopped
    before run() returns.

    Environment Variables:
        REPORT_JSON: Append the RunReport to this file (optional). Runs built
            with record=False, such as self-checking negative tests, are not
            appended.
    """

    def __init__(
        self,
        dut: Any,
        cfg: RadRegEnConfig | None = None,
        *,
        sequence: RadRegEnSequence | None = None,
        ref_model: RadRegEnRefModel | None = None,
        max_cycles: int | None = None,
        record: bool = True,
        name: str = "rad_reg_en_env",
    ) -> None:
        self.logger = utils_dv.get_logger(name)
        self.name = name
        self.record = record
        self.cfg = cfg if cfg is not None else RadRegEnConfig.from_settings()
        self.bus = RadRegEnIf.from_dut(dut)
        self.clock_reset = ClockResetSource(
            dut,
            period_ps=self.cfg.clock_period_ps,
            reset_active_low=self.cfg.reset_active_low,
            reset_cycles=self.cfg.reset_cycles,
            pre_ps=self.cfg.pre_ps,
        )
        self.sequence = sequence if sequence is not None else make_sequence(self.cfg)
        self.port: SeqItemPort[RadRegEnItem] = SeqItemPort(self.sequence)
        self.driver = RadRegEnDriver(self.bus, self.clock_reset, self.port)
        self.monitor = RadRegEnMonitor(self.bus, self.clock_reset)
        self.coverage = RadRegEnCoverage(enabled=self.cfg.coverage_en)
        self.checker = RadRegEnChecker(ref_model, self.coverage, seed=self.cfg.seed)
        self.max_cycles = (
            max_cycles
            if max_cycles is not None
            else 2 * (self.sequence.length + self.cfg.reset_cycles) + 16
        )
        self._tasks: list[Task[None]] = []
        self._fault: HarnessIntegrityError | None = None

    async def _guard(self, coro: Coroutine[Any, Any, None]) -> None:
        """Run a component, turning an integrity failure into an abort."""
        try:
            await coro
        except HarnessIntegrityError as exc:
            self._fault = exc

    def _start(self, coro: Coroutine[Any, Any, None]) -> None:
        self._tasks.append(cocotb.start_soon(self._guard(coro)))

    async def run(self) -> RunReport:
        self.logger.debug("run begin")
        self.logger.info(
            "Config: seq_len=%d seed=%d test_mode=%s period=%d ps reset_cycles=%d",
            self.sequence.length,
            self.cfg.seed,
            self.cfg.test_mode.value,
            self.cfg.clock_period_ps,
            self.cfg.reset_cycles,
        )
        self.clock_reset.start_clock()
        self._start(self.clock_reset.pulse_reset())
        self._start(self.driver.run())
        self._start(self.monitor.run())
        try:
            await self._check_loop()
        except HarnessIntegrityError as exc:
            self.checker.abort(exc)
        finally:
            self.shutdown()

        self.coverage.report()
        report = self.checker.report()
        path = utils_cli.get_str_setting("REPORT_JSON", "")
        if path and self.record:
            append_report(Path(path), self.name, report)
            self.logger.debug("Report appended to %s", path)
        self.logger.debug("run end")
        return report

    async def _check_loop(self) -> None:
        while not self.checker.done:
            obs = await self.monitor.ap.get()
            if self._fault is not None:
                raise self._fault
            applied = None if self.driver.ap.empty() else self.driver.ap.get_nowait()
            if not self.driver.ap.empty():
                raise StimulusDesyncError(
                    f"driver applied more than one item before cycle {obs.cycle}"
                )
            self.checker.step(obs, applied, self.driver.finished)
            if not self.checker.done and self.checker.cycles >= self.max_cycles:
                raise HarnessIntegrityError(
                    f"run did not reach DONE within {self.max_cycles} cycles "
                    f"(state {self.checker.state.value})"
                )

    def shutdown(self) -> None:
        for task in self._tasks:
            task.cancel()
        self._tasks.clear()
        self.clock_reset.stop()
