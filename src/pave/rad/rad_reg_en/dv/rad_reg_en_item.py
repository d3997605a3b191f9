# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/pave/rad/rad_reg_en/dv/rad_reg_en_item.py

"""Stimulus and observation transactions for rad_reg_en."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import Any

from pave.rad.shared.dv import utils_dv
from pave.rad.shared.dv.utils_dv import ItemDomainError


def _as_flag(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise ItemDomainError(f"{name} must be a bool or 0/1, got {value!r}")


class _JsonMixin:
    def to_dict(self) -> dict[str, Any]:
        return asdict(self)  # type: ignore[call-overload]

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)


@dataclass(frozen=True)
class RadRegEnItem(_JsonMixin):
    """One cycle of stimulus: the enable level and the byte on data_in.

    Raises ItemDomainError at construction if data is not an int in [0, 255]
    or index is negative, so an out-of-domain item never reaches the driver.
    """

    enable: bool
    data: int
    index: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "enable", _as_flag("enable", self.enable))
        utils_dv.check_byte("data", self.data)
        if isinstance(self.index, bool) or not isinstance(self.index, int):
            raise ItemDomainError(f"index must be an int, got {self.index!r}")
        if self.index < 0:
            raise ItemDomainError(f"index must be >= 0, got {self.index}")


@dataclass(frozen=True)
class RadRegEnObs(_JsonMixin):
    """What the monitor saw just before rising edge `cycle`.

    data is data_out during the cycle (the result of the previous edge);
    reset, enable and data_in are the inputs the device captures at the edge.
    Unresolvable (X/Z) values are None.
    """

    cycle: int
    data: int | None
    reset: bool = False
    enable: bool | None = None
    data_in: int | None = None

    def __post_init__(self) -> None:
        if isinstance(self.cycle, bool) or not isinstance(self.cycle, int):
            raise ItemDomainError(f"cycle must be an int, got {self.cycle!r}")
        if self.cycle < 1:
            raise ItemDomainError(f"cycle must be >= 1, got {self.cycle}")
        utils_dv.check_byte("data", self.data, optional=True)
        utils_dv.check_byte("data_in", self.data_in, optional=True)
        object.__setattr__(self, "reset", _as_flag("reset", self.reset))
        if self.enable is not None:
            object.__setattr__(self, "enable", _as_flag("enable", self.enable))
