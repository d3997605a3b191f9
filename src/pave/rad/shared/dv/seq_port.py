# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/pave/rad/shared/dv/seq_port.py

"""Pull-style handshake between a sequence generator and a driver."""

from __future__ import annotations

from typing import Generic, Protocol, TypeVar

from . import utils_dv
from .utils_dv import StimulusDesyncError

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class ItemSource(Protocol[T_co]):
    def next_item(self) -> T_co | None: ...


class SeqItemPort(Generic[T]):
    """One-item-in-flight port in the style of a UVM seq_item_port.

    The driver calls get_next_item() to pull a transaction and item_done() once
    the device has captured it. At most one item is in flight; breaking that
    rule means the driver and generator disagree about what was applied.

    Raises:
        StimulusDesyncError: get_next_item() twice without item_done(), or
            item_done() with nothing in flight.
    """

    def __init__(self, source: ItemSource[T]) -> None:
        self.logger = utils_dv.get_logger("seq_port")
        self._source = source
        self._in_flight: T | None = None
        self.done_cnt: int = 0

    @property
    def in_flight(self) -> T | None:
        return self._in_flight

    def get_next_item(self) -> T | None:
        """Return the next item, or None once the source is exhausted."""
        if self._in_flight is not None:
            raise StimulusDesyncError(
                f"get_next_item() while {self._in_flight} is still in flight"
            )
        item = self._source.next_item()
        self._in_flight = item
        return item

    def item_done(self) -> None:
        if self._in_flight is None:
            raise StimulusDesyncError("item_done() with no item in flight")
        self.logger.debug("item_done %s", self._in_flight)
        self._in_flight = None
        self.done_cnt += 1
