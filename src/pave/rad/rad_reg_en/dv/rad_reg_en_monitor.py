# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/pave/rad/rad_reg_en/dv/rad_reg_en_monitor.py

"""Passive monitor: one observation per clock cycle."""

from __future__ import annotations

from cocotb.queue import Queue

from pave.rad.shared.dv import utils_dv
from pave.rad.shared.dv.clock_reset import ClockResetSource

from .rad_reg_en_if import RadRegEnIf
from .rad_reg_en_item import RadRegEnObs


class RadRegEnMonitor:
    """Sample the bus just before every rising edge and publish a RadRegEnObs.

    Sampling happens pre_ps before rising edge k in the ReadOnly region, so
    the observation numbered k carries the inputs the device captures at edge
    k and data_out as left by edge k-1. The first sample precedes edge 2.
    """

    def __init__(
        self,
        bus: RadRegEnIf,
        clock_reset: ClockResetSource,
        name: str = "reg_en_monitor",
    ) -> None:
        self.logger = utils_dv.get_logger(name)
        self.bus = bus
        self.clock_reset = clock_reset
        self.ap: Queue[RadRegEnObs] = Queue()
        self.item_count: int = 0

    def sample(self, cycle: int) -> RadRegEnObs:
        rst = self.bus.read_reset()
        en, data_in = self.bus.read_inputs()
        return RadRegEnObs(
            cycle=cycle,
            data=self.bus.read_output(),
            reset=rst == self.clock_reset.active_level,
            enable=None if en is None else bool(en),
            data_in=data_in,
        )

    async def run(self) -> None:
        self.logger.debug("run begin")
        edges = 0
        while True:
            await self.clock_reset.sample_edge()
            edges += 1
            obs = self.sample(edges + 1)
            self.item_count += 1
            self.ap.put_nowait(obs)
