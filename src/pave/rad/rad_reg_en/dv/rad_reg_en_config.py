# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/pave/rad/rad_reg_en/dv/rad_reg_en_config.py

"""Run configuration for the rad_reg_en bench.

Settings (env NAME or PAVE_NAME > plusarg +NAME=value > default):
    SEQ_LEN (int): Stimulus items to issue (default: 10)
    SEED (int): Generator seed (default: COCOTB_RANDOM_SEED, else 0)
    TEST_MODE (str): RANDOM, DIRECTED or HOLD (default: RANDOM)
    CLOCK_PERIOD_PS (int): Clock period in ps (default: 10000)
    RESET_CYCLES (int): Reset pulse length in cycles, >= 1 (default: 1)
    RESET_ACTIVE_LOW (bool): Reset polarity (default: True)
    COVERAGE_EN (bool): Sample functional coverage (default: True)
    PRE_PS (int): Monitor sample point before the rising edge (default: 1)
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from pave.rad.shared.dv import utils_cli


class TestMode(enum.Enum):
    RANDOM = "RANDOM"
    DIRECTED = "DIRECTED"
    HOLD = "HOLD"

    # keep pytest from collecting this as a test class
    __test__ = False

    @classmethod
    def parse(cls, s: str) -> TestMode:
        try:
            return cls(s.strip().upper())
        except ValueError as exc:
            valid = ", ".join(m.value for m in cls)
            raise ValueError(f"TEST_MODE must be one of {valid}, got {s!r}") from exc


@dataclass(frozen=True)
class RadRegEnConfig:
    seq_len: int = 10
    seed: int = 0
    test_mode: TestMode = TestMode.RANDOM
    clock_period_ps: int = 10_000
    reset_cycles: int = 1
    reset_active_low: bool = True
    coverage_en: bool = True
    pre_ps: int = 1

    def __post_init__(self) -> None:
        if self.seq_len < 0:
            raise ValueError(f"SEQ_LEN must be >= 0, got {self.seq_len}")
        if self.clock_period_ps <= 0 or self.clock_period_ps % 2:
            raise ValueError(
                f"CLOCK_PERIOD_PS must be a positive even number, got {self.clock_period_ps}"
            )
        if self.reset_cycles < 1:
            raise ValueError(f"RESET_CYCLES must be >= 1, got {self.reset_cycles}")
        # the sample point must fall after the drive (falling) edge
        if not 0 <= self.pre_ps < self.clock_period_ps // 2:
            raise ValueError(
                f"PRE_PS must be in [0, {self.clock_period_ps // 2}), got {self.pre_ps}"
            )

    @classmethod
    def from_settings(cls) -> RadRegEnConfig:
        """Resolve every setting from the environment and plusargs."""
        d = cls()
        seed = utils_cli.get_int_setting("COCOTB_RANDOM_SEED", d.seed)
        return cls(
            seq_len=utils_cli.get_int_setting("SEQ_LEN", d.seq_len),
            seed=utils_cli.get_int_setting("SEED", seed),
            test_mode=TestMode.parse(
                utils_cli.get_str_setting("TEST_MODE", d.test_mode.value)
            ),
            clock_period_ps=utils_cli.get_int_setting("CLOCK_PERIOD_PS", d.clock_period_ps),
            reset_cycles=utils_cli.get_int_setting("RESET_CYCLES", d.reset_cycles),
            reset_active_low=utils_cli.get_bool_setting(
                "RESET_ACTIVE_LOW", d.reset_active_low
            ),
            coverage_en=utils_cli.get_bool_setting("COVERAGE_EN", d.coverage_en),
            pre_ps=utils_cli.get_int_setting("PRE_PS", d.pre_ps),
        )
