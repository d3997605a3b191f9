# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: tests/test_item.py

from __future__ import annotations

import dataclasses
import json

import pytest

from pave.rad.rad_reg_en.dv.rad_reg_en_item import RadRegEnItem, RadRegEnObs
from pave.rad.shared.dv.utils_dv import ItemDomainError


def test_item_accepts_byte_range() -> None:
    assert RadRegEnItem(enable=True, data=0).data == 0
    assert RadRegEnItem(enable=False, data=255).data == 255


def test_item_coerces_int_enable() -> None:
    item = RadRegEnItem(enable=1, data=0x42)  # type: ignore[arg-type]
    assert item.enable is True


@pytest.mark.parametrize("data", [-1, 256, 1.5, "0x10", None, True])
def test_item_rejects_out_of_domain_data(data: object) -> None:
    with pytest.raises(ItemDomainError):
        RadRegEnItem(enable=True, data=data)  # type: ignore[arg-type]


@pytest.mark.parametrize("enable", [2, -1, "1", None])
def test_item_rejects_bad_enable(enable: object) -> None:
    with pytest.raises(ItemDomainError):
        RadRegEnItem(enable=enable, data=0)  # type: ignore[arg-type]


def test_item_rejects_negative_index() -> None:
    with pytest.raises(ItemDomainError):
        RadRegEnItem(enable=True, data=0, index=-1)


def test_domain_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        RadRegEnItem(enable=True, data=300)


def test_item_is_immutable() -> None:
    item = RadRegEnItem(enable=True, data=1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        item.data = 2  # type: ignore[misc]


def test_item_str_is_json() -> None:
    item = RadRegEnItem(enable=True, data=0x11, index=3)
    assert json.loads(str(item)) == {"enable": True, "data": 0x11, "index": 3}


def test_obs_allows_unresolved_values() -> None:
    obs = RadRegEnObs(cycle=2, data=None, reset=True)
    assert obs.data is None
    assert obs.enable is None


@pytest.mark.parametrize("cycle", [0, -3, True])
def test_obs_rejects_bad_cycle(cycle: object) -> None:
    with pytest.raises(ItemDomainError):
        RadRegEnObs(cycle=cycle, data=0)  # type: ignore[arg-type]


def test_obs_rejects_wide_data() -> None:
    with pytest.raises(ItemDomainError):
        RadRegEnObs(cycle=2, data=0x100)
    with pytest.raises(ItemDomainError):
        RadRegEnObs(cycle=2, data=0, data_in=-1)
