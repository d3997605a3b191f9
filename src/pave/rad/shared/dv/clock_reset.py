# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/pave/rad/shared/dv/clock_reset.py

"""Clock and reset source with the drive/capture/sample timing helpers."""

from __future__ import annotations

from typing import Any, cast

from cocotb.clock import Clock
from cocotb.handle import LogicObject
from cocotb.triggers import Event, NextTimeStep, ReadOnly, ReadWrite, Timer

from . import utils_dv


class ClockResetSource:
    """Free-running clock plus a synchronous reset pulse.

    The source owns the only writers of the clock and reset signals. Every
    other component aligns to the three edges it exposes:

    Timing (clock starts low, period T):
        drive_edge():   falling edge (stimulus is applied here)
        capture_edge(): rising edge (the device updates here)
        sample_edge():  rising edge, then wait until pre_ps before the next
                        rising edge and enter ReadOnly, the cocotb
                        equivalent of SystemVerilog's #1step sampling.

    Reset Sequence:
        1. Assert reset immediately with a non-blocking-style write
        2. Hold it for `cycles` drive edges (at least one full period)
        3. Deassert on a drive edge and wake wait_reset_inactive() waiters

    pulse_reset() may be called again mid-run for directed reset tests.

    Reference:
        C.E. Cummings, "Applying Stimulus & Sampling Outputs - UVM Verification
        Testing Techniques," SNUG 2016 (Austin)

    Example:
        >>> cr = ClockResetSource(dut, period_ps=10_000, reset_cycles=2)
        >>> cr.start_clock()
        >>> await cr.pulse_reset()
        >>> await cr.drive_edge()
    """

    def __init__(
        self,
        dut: Any,
        *,
        clock_name: str = "clk",
        reset_name: str = "rst_n",
        period_ps: int = 10_000,
        start_high: bool = False,
        reset_active_low: bool = True,
        reset_cycles: int = 1,
        pre_ps: int = 1,
    ) -> None:
        self.logger = utils_dv.get_logger("clock_reset")
        if period_ps <= 0:
            raise ValueError(f"period_ps must be > 0, got {period_ps}")
        if not 0 <= pre_ps < period_ps:
            raise ValueError(
                f"pre_ps={pre_ps} must be in [0, period_ps={period_ps})"
            )
        if reset_cycles < 1:
            raise ValueError(f"reset_cycles must be >= 1, got {reset_cycles}")

        self.clock_name = clock_name
        self.reset_name = reset_name
        self.period_ps = period_ps
        self.start_high = start_high
        self.reset_active_low = reset_active_low
        self.reset_cycles = reset_cycles
        self.pre_ps = pre_ps
        self.preedge_delay_ps = period_ps - pre_ps

        self._clk = utils_dv.get_signal(dut, clock_name)
        self._rst = utils_dv.get_signal(dut, reset_name)
        self._clock: Clock | None = None
        self._reset_active = False
        # cleared until the first pulse completes so early waiters block
        self._inactive = Event()

    @property
    def reset_active(self) -> bool:
        """True while this source is holding reset asserted."""
        return self._reset_active

    @property
    def active_level(self) -> int:
        return 0 if self.reset_active_low else 1

    def start_clock(self) -> None:
        """Start the clock; a second call is a no-op."""
        self.logger.debug("start_clock begin")
        if self._clock is not None:
            return
        clk = cast(LogicObject, self._clk)
        self._clock = Clock(clk, self.period_ps, unit="ps")
        self._clock.start(start_high=self.start_high)
        self.logger.debug(
            "Started clock: dut.%s period=%d ps start_high=%s",
            self.clock_name,
            self.period_ps,
            self.start_high,
        )
        self.logger.debug("start_clock end")

    def stop(self) -> None:
        """Stop the clock if it is running."""
        if self._clock is not None:
            self._clock.stop()
            self._clock = None
            self.logger.debug("Stopped clock dut.%s", self.clock_name)

    async def pulse_reset(self, cycles: int | None = None) -> None:
        """Assert reset, hold it for `cycles` drive edges, then deassert."""
        self.logger.debug("pulse_reset begin")
        n = self.reset_cycles if cycles is None else cycles
        if n < 1:
            raise ValueError(f"reset pulse must span >= 1 cycle, got {n}")

        self._reset_active = True
        self._inactive.clear()
        self._rst.value = self.active_level
        await ReadWrite()  # like an NBA
        await NextTimeStep()

        for _ in range(n):
            await self.drive_edge()

        self._rst.value = 1 - self.active_level
        self._reset_active = False
        self._inactive.set()
        self.logger.debug("Reset dut.%s released after %d cycle(s)", self.reset_name, n)
        self.logger.debug("pulse_reset end")

    async def wait_reset_inactive(self) -> None:
        """Return once no reset pulse is in progress."""
        await self._inactive.wait()

    async def drive_edge(self) -> None:
        await self._clk.falling_edge

    async def capture_edge(self) -> None:
        await self._clk.rising_edge

    async def sample_edge(self) -> None:
        """Wait rising edge, then delay to just before the next one (ReadOnly)."""
        await self._clk.rising_edge
        if self.preedge_delay_ps > 0:
            await Timer(self.preedge_delay_ps, unit="ps")
        await ReadOnly()
