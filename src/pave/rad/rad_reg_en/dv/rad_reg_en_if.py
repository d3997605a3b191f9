# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/pave/rad/rad_reg_en/dv/rad_reg_en_if.py

"""Signal bundle for rad_reg_en: clk, rst_n, en, data_in[7:0], data_out[7:0]."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pave.rad.shared.dv import utils_dv


@dataclass(frozen=True)
class RadRegEnIf:
    """Handles to the device ports.

    Only the driver writes en and data_in; only the device writes data_out.
    The monitor reads everything and writes nothing.
    """

    clk: Any
    rst_n: Any
    en: Any
    data_in: Any
    data_out: Any

    @classmethod
    def from_dut(cls, dut: Any) -> RadRegEnIf:
        g = utils_dv.get_signal
        return cls(
            clk=g(dut, "clk"),
            rst_n=g(dut, "rst_n"),
            en=g(dut, "en"),
            data_in=g(dut, "data_in"),
            data_out=g(dut, "data_out"),
        )

    def drive(self, enable: bool, data: int) -> None:
        self.en.value = int(enable)
        self.data_in.value = data

    def drive_idle(self) -> None:
        self.drive(False, 0)

    def read_reset(self) -> int | None:
        return utils_dv.get_signal_value_int(self.rst_n.value)

    def read_inputs(self) -> tuple[int | None, int | None]:
        get = utils_dv.get_signal_value_int
        return get(self.en.value), get(self.data_in.value)

    def read_output(self) -> int | None:
        return utils_dv.get_signal_value_int(self.data_out.value)
