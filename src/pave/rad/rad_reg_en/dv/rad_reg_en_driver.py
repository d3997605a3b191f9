# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/pave/rad/rad_reg_en/dv/rad_reg_en_driver.py

"""Driver: applies one stimulus item per cycle on the falling edge."""

from __future__ import annotations

from cocotb.queue import Queue
from cocotb.triggers import NextTimeStep, ReadWrite

from pave.rad.shared.dv import utils_dv
from pave.rad.shared.dv.clock_reset import ClockResetSource
from pave.rad.shared.dv.seq_port import SeqItemPort

from .rad_reg_en_if import RadRegEnIf
from .rad_reg_en_item import RadRegEnItem


class RadRegEnDriver:
    """Pull items from the port and put them on en/data_in.

    Per item:
        1. get_next_item() (None ends the run)
        2. set en/data_in at the drive edge and publish the item on `ap`
        3. hold until the capture edge, then item_done()
        4. wait for the next drive edge

    When the sequence is exhausted the inputs return to idle (en=0,
    data_in=0) and `finished` is set.

    Attributes:
        ap: Queue of applied items, one per driven cycle
        finished: True once the last item was applied and the inputs idled
        drive_cnt: Number of items applied
    """

    def __init__(
        self,
        bus: RadRegEnIf,
        clock_reset: ClockResetSource,
        port: SeqItemPort[RadRegEnItem],
        name: str = "reg_en_driver",
    ) -> None:
        self.logger = utils_dv.get_logger(name)
        self.bus = bus
        self.clock_reset = clock_reset
        self.port = port
        self.ap: Queue[RadRegEnItem] = Queue()
        self.finished: bool = False
        self.drive_cnt: int = 0

    async def apply_initial_dut_inputs(self) -> None:
        """Idle inputs at time 0 with a non-blocking-style write."""
        self.bus.drive_idle()
        await ReadWrite()  # like an NBA at t=0
        await NextTimeStep()

    async def run(self) -> None:
        self.logger.debug("run begin")
        await self.apply_initial_dut_inputs()
        await self.clock_reset.wait_reset_inactive()
        # reset is released on a drive edge, so the first item goes out now
        while True:
            item = self.port.get_next_item()
            if item is None:
                break
            self.bus.drive(item.enable, item.data)
            self.ap.put_nowait(item)
            self.drive_cnt += 1
            self.logger.debug("drive %s", item)
            await self.clock_reset.capture_edge()
            self.port.item_done()
            await self.clock_reset.drive_edge()
        self.bus.drive_idle()
        self.finished = True
        self.logger.debug("run end: %d item(s) driven", self.drive_cnt)
