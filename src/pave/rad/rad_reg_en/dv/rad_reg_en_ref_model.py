# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/pave/rad/rad_reg_en/dv/rad_reg_en_ref_model.py

"""rad_reg_en reference model."""

from __future__ import annotations

from typing import Callable

from pave.rad.shared.dv import utils_dv

NextFn = Callable[[int, bool, bool, int], int]

VAL_ON_RESET = 0


def reg_en_next(state: int, reset: bool, enable: bool, data_in: int) -> int:
    """Register value after one rising edge."""
    if reset:
        return VAL_ON_RESET
    if enable:
        return data_in & 0xFF
    return state


class RadRegEnRefModel:
    """Stateful wrapper around a next-state function.

    calc_exp() is called once per cycle with the inputs captured at that
    cycle's edge and returns the value data_out must show one cycle later.
    next_fn can be replaced to inject faults in negative tests.
    """

    def __init__(self, next_fn: NextFn = reg_en_next, name: str = "reg_en_ref_model") -> None:
        self.logger = utils_dv.get_logger(name)
        self.next_fn = next_fn
        self.state: int = VAL_ON_RESET

    def reset_change(self, active: bool) -> None:
        self.logger.debug("reset_change active=%s", active)
        if active:
            self.state = VAL_ON_RESET

    def calc_exp(self, reset: bool, enable: bool, data_in: int) -> int:
        self.state = self.next_fn(self.state, reset, enable, data_in)
        return self.state
