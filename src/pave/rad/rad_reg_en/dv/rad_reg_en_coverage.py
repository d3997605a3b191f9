# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/pave/rad/rad_reg_en/dv/rad_reg_en_coverage.py

"""Functional coverage and output activity counting (cocotb-coverage)."""

from __future__ import annotations

import os
from typing import Any

from cocotb_coverage.coverage import CoverCross, CoverPoint, coverage_db

from pave.rad.shared.dv import utils_dv

from .rad_reg_en_item import RadRegEnItem, RadRegEnObs

COV_ENABLE = "rad_reg_en.enable"
COV_DATA_Q = "rad_reg_en.data_quartile"
COV_CROSS = "rad_reg_en.enable_x_data"

ENABLE_BINS: tuple[bool, ...] = (False, True)
DATA_Q_BINS: tuple[int, ...] = (0, 1, 2, 3)
_BIN_COUNT: dict[str, int] = {
    COV_ENABLE: len(ENABLE_BINS),
    COV_DATA_Q: len(DATA_Q_BINS),
    COV_CROSS: len(ENABLE_BINS) * len(DATA_Q_BINS),
}


class RadRegEnCoverage:
    """Coverage on applied stimulus plus toggle counts on data_out.

    Coverpoints (sampled for every applied item):
        rad_reg_en.enable:        enable low / high
        rad_reg_en.data_quartile: data_in in [0,63] [64,127] [128,191] [192,255]
        rad_reg_en.enable_x_data: enable x quartile cross

    Activity:
        Every observation adds the number of data_out bits that changed since
        the previous resolvable sample. This is the functional view of the
        switching activity the simulator dumps for the power flow.

    coverage_db is shared by every instance in the process, so it accumulates
    across the tests of one simulator run; report() and the YAML export show
    that cumulative view. summary() covers this instance only: its
    percentages come from the bins hit since construction.

    Environment Variables:
        COV_YAML: Path to write the coverage YAML report (optional)
    """

    def __init__(self, enabled: bool = True, name: str = "reg_en_coverage") -> None:
        self.logger = utils_dv.get_logger(name)
        self.enabled = enabled
        self.yaml_path: str | None = os.getenv("COV_YAML")
        self.items: int = 0
        self.enabled_items: int = 0
        self.out_toggles: int = 0
        self._last_out: int | None = None
        self._hits: dict[str, set[Any]] = {name: set() for name in _BIN_COUNT}

    def sample(self, item: RadRegEnItem) -> None:
        if not self.enabled:
            return
        self.items += 1
        self.enabled_items += int(item.enable)
        quartile = item.data >> 6
        self._hits[COV_ENABLE].add(item.enable)
        self._hits[COV_DATA_Q].add(quartile)
        self._hits[COV_CROSS].add((item.enable, quartile))
        self._sample_cov(item)

    @CoverPoint(COV_ENABLE, xf=lambda self, item: item.enable, bins=list(ENABLE_BINS))
    @CoverPoint(COV_DATA_Q, xf=lambda self, item: item.data >> 6, bins=list(DATA_Q_BINS))
    @CoverCross(COV_CROSS, items=[COV_ENABLE, COV_DATA_Q])
    def _sample_cov(self, item: RadRegEnItem) -> None:
        """Hook decorated with the coverpoints."""

    def sample_obs(self, obs: RadRegEnObs) -> None:
        if not self.enabled or obs.data is None:
            return
        if self._last_out is not None:
            self.out_toggles += bin(self._last_out ^ obs.data).count("1")
        self._last_out = obs.data

    def cover_percentage(self, name: str) -> float:
        """Percentage of `name`'s bins hit by this instance."""
        return 100.0 * len(self._hits[name]) / _BIN_COUNT[name]

    def summary(self) -> dict[str, Any]:
        if not self.enabled:
            return {}
        return {
            "items": self.items,
            "enabled_items": self.enabled_items,
            "out_toggles": self.out_toggles,
            **{name: self.cover_percentage(name) for name in _BIN_COUNT},
        }

    def report(self) -> None:
        """Emit the coverage report (and optional YAML)."""
        self.logger.debug("report begin")
        if not self.enabled:
            return
        self.logger.info(
            "RegEnCoverage summary: items=%d enabled=%d out_toggles=%d",
            self.items,
            self.enabled_items,
            self.out_toggles,
        )
        if self.items:
            coverage_db.report_coverage(self.logger.debug, bins=False)
        if self.yaml_path:
            coverage_db.export_to_yaml(self.yaml_path)
            self.logger.debug("Coverage YAML written to %s", self.yaml_path)
        self.logger.debug("report end")
