# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/pave/rad/rad_reg_en/dv/rad_reg_en_sequence.py

"""Seeded stimulus sequences for rad_reg_en.

A sequence is a finite, lazy stream of RadRegEnItem. What each item contains
is decided by a strategy: a pure function of a seeded random.Random and the
item index returning (enable, data). The same seed always yields the same
sequence.

Strategies:
    random_strategy: independent uniform enable and data
    directed_strategy(): a fixed enable/data pattern, cycled
    hold_strategy: enable always low with random data (the output must stay 0)
"""

from __future__ import annotations

import random
from typing import Callable, Iterator, Sequence

from pave.rad.shared.dv import utils_dv

from .rad_reg_en_config import RadRegEnConfig, TestMode
from .rad_reg_en_item import RadRegEnItem

Strategy = Callable[[random.Random, int], "tuple[bool, int]"]

DIRECTED_ENABLES: tuple[int, ...] = (1, 0, 1, 1, 0)
DIRECTED_DATA: tuple[int, ...] = (0x11, 0x22, 0x33, 0x44, 0x55, 0x66, 0x77, 0x88)


def random_strategy(rng: random.Random, index: int) -> tuple[bool, int]:
    del index
    return bool(rng.getrandbits(1)), rng.getrandbits(8)


def hold_strategy(rng: random.Random, index: int) -> tuple[bool, int]:
    del index
    return False, rng.getrandbits(8)


def directed_strategy(
    enables: Sequence[int] = DIRECTED_ENABLES,
    data: Sequence[int] = DIRECTED_DATA,
) -> Strategy:
    """Return a strategy that cycles through fixed enable and data patterns."""
    if not enables or not data:
        raise ValueError("directed_strategy needs non-empty enables and data")
    for i, d in enumerate(data):
        utils_dv.check_byte(f"data[{i}]", d)
    en = tuple(bool(e) for e in enables)
    dat = tuple(data)

    def strategy(rng: random.Random, index: int) -> tuple[bool, int]:
        del rng
        return en[index % len(en)], dat[index % len(dat)]

    return strategy


class RadRegEnSequence:
    """Finite, non-restartable stream of `length` stimulus items."""

    def __init__(
        self,
        length: int,
        strategy: Strategy = random_strategy,
        seed: int | None = None,
        name: str = "reg_en_seq",
    ) -> None:
        if length < 0:
            raise ValueError(f"length must be >= 0, got {length}")
        self.logger = utils_dv.get_logger(f"seq.{name}")
        self.length = length
        self.seed = seed
        self._strategy = strategy
        self._rng = random.Random(seed)
        self._index = 0

    @property
    def exhausted(self) -> bool:
        return self._index >= self.length

    @property
    def issued(self) -> int:
        return self._index

    def next_item(self) -> RadRegEnItem | None:
        """Return the next item, or None once `length` items have been issued."""
        if self.exhausted:
            return None
        enable, data = self._strategy(self._rng, self._index)
        item = RadRegEnItem(enable=enable, data=data, index=self._index)
        self._index += 1
        self.logger.debug("next_item %s", item)
        return item

    def __iter__(self) -> Iterator[RadRegEnItem]:
        while True:
            item = self.next_item()
            if item is None:
                return
            yield item


def make_sequence(cfg: RadRegEnConfig) -> RadRegEnSequence:
    """Build the sequence selected by cfg.test_mode."""
    strategies: dict[TestMode, Strategy] = {
        TestMode.RANDOM: random_strategy,
        TestMode.DIRECTED: directed_strategy(),
        TestMode.HOLD: hold_strategy,
    }
    return RadRegEnSequence(
        cfg.seq_len, strategies[cfg.test_mode], cfg.seed, name=cfg.test_mode.value.lower()
    )
