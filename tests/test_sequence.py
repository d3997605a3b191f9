# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: tests/test_sequence.py

from __future__ import annotations

import random

import pytest

from pave.rad.rad_reg_en.dv.rad_reg_en_config import RadRegEnConfig, TestMode
from pave.rad.rad_reg_en.dv.rad_reg_en_sequence import (
    DIRECTED_DATA,
    RadRegEnSequence,
    directed_strategy,
    hold_strategy,
    make_sequence,
    random_strategy,
)
from pave.rad.shared.dv.utils_dv import ItemDomainError


def _pairs(seq: RadRegEnSequence) -> list[tuple[bool, int]]:
    return [(i.enable, i.data) for i in seq]


def test_length_is_exact_and_indices_are_consecutive() -> None:
    seq = RadRegEnSequence(25, seed=3)
    items = list(seq)
    assert len(items) == 25
    assert [i.index for i in items] == list(range(25))
    assert seq.exhausted
    assert seq.next_item() is None
    assert seq.issued == 25


def test_empty_sequence_is_exhausted_immediately() -> None:
    seq = RadRegEnSequence(0)
    assert seq.exhausted
    assert seq.next_item() is None
    assert list(seq) == []


def test_negative_length_rejected() -> None:
    with pytest.raises(ValueError):
        RadRegEnSequence(-1)


def test_same_seed_same_items() -> None:
    assert _pairs(RadRegEnSequence(50, seed=1234)) == _pairs(RadRegEnSequence(50, seed=1234))


def test_different_seed_different_items() -> None:
    assert _pairs(RadRegEnSequence(50, seed=1)) != _pairs(RadRegEnSequence(50, seed=2))


def test_sequence_is_not_restartable() -> None:
    seq = RadRegEnSequence(4, seed=9)
    assert len(list(seq)) == 4
    assert list(seq) == []


def test_random_strategy_stays_in_domain() -> None:
    rng = random.Random(0)
    for i in range(500):
        enable, data = random_strategy(rng, i)
        assert isinstance(enable, bool)
        assert 0 <= data <= 0xFF


def test_hold_strategy_never_enables() -> None:
    assert not any(e for e, _ in _pairs(RadRegEnSequence(40, hold_strategy, seed=5)))


def test_directed_strategy_cycles_patterns() -> None:
    seq = RadRegEnSequence(10, directed_strategy(), seed=0)
    pairs = _pairs(seq)
    assert [e for e, _ in pairs] == [True, False, True, True, False] * 2
    assert [d for _, d in pairs] == list(DIRECTED_DATA) + list(DIRECTED_DATA[:2])


def test_directed_strategy_validates_patterns() -> None:
    with pytest.raises(ValueError):
        directed_strategy(enables=(), data=(1,))
    with pytest.raises(ItemDomainError):
        directed_strategy(enables=(1,), data=(0x100,))


def test_make_sequence_follows_config() -> None:
    cfg = RadRegEnConfig(seq_len=5, seed=7, test_mode=TestMode.HOLD)
    seq = make_sequence(cfg)
    assert seq.length == 5
    assert seq.seed == 7
    assert not any(e for e, _ in _pairs(seq))
