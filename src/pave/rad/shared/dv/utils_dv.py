# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/pave/rad/shared/dv/utils_dv.py

"""Design verification utilities shared by every bench.

This module holds the harness error taxonomy, logger setup, and helpers for
working with cocotb signal handles.

Error Taxonomy:
    ItemDomainError: A transaction built with an out-of-domain value. Raised
        at construction; the item never enters the pipeline.
    HarnessIntegrityError: The harness itself is miswired (expected and
        observed streams drifted out of lockstep). Always fatal.
        - ExpectationUnderflowError: check() with an empty expectation queue
        - LockstepError: expected/observed cycle skew
        - StimulusDesyncError: generator/driver/monitor disagree on stimulus

    Data mismatches are not exceptions; the scoreboard collects them.

Functions:
    Logging:
        desired_log_level(): Get log level from COCOTB_LOG_LEVEL env var
        configure_logger(): Configure a component logger

    Signal Access:
        get_signal(): Get signal handle from DUT with validation
        get_signal_value_int(): Extract integer from Logic/LogicArray (or None if X/Z)

Example:
    >>> clk = get_signal(dut, "clk")
    >>> val = get_signal_value_int(dut.data_out.value)
    >>> if val is not None:
    ...     process(val)
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any, Union, cast

from cocotb.types import Logic, LogicArray

if TYPE_CHECKING:
    from cocotb.handle import SimHandleBase


class ItemDomainError(ValueError):
    """Raised when a transaction field is outside its legal domain."""


class HarnessIntegrityError(RuntimeError):
    """Raised when the harness detects it is miswired; aborts the run."""


class ExpectationUnderflowError(HarnessIntegrityError):
    """Raised when the scoreboard is asked to check with nothing expected."""


class LockstepError(HarnessIntegrityError):
    """Raised when an observation arrives at the wrong cycle for its expectation."""


class StimulusDesyncError(HarnessIntegrityError):
    """Raised when generator, driver and monitor disagree about the stimulus."""


def check_byte(name: str, value: Any, *, optional: bool = False) -> None:
    """Raise ItemDomainError unless value is an int in [0, 255]."""
    if value is None and optional:
        return
    # bool is an int subclass; a flag is never a data byte
    if isinstance(value, bool) or not isinstance(value, int):
        raise ItemDomainError(f"{name} must be an int, got {value!r}")
    if not 0 <= value <= 0xFF:
        raise ItemDomainError(f"{name} must be in [0, 255], got {value}")


def desired_log_level(default: int = logging.INFO) -> int:
    """Return desired log level from env vars or default."""
    name = (os.getenv("COCOTB_LOG_LEVEL") or "INFO").upper()
    return getattr(logging, name, default)


def configure_logger(logger: logging.Logger) -> logging.Logger:
    """Set the desired level and let records bubble up to cocotb's handlers."""
    logger.setLevel(desired_log_level())
    logger.propagate = True
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return the configured logger for a harness component."""
    return configure_logger(logging.getLogger(f"pave.{name}"))


def get_signal(dut: Any, signal_name: str) -> "SimHandleBase":
    """Return dut.<signal_name> or raise a clear error.

    Raises RuntimeError if signal not found, TypeError if signal has no .value.
    """
    signal = getattr(dut, signal_name, None)
    if signal is None:
        raise RuntimeError(f"Signal '{signal_name}' not found on DUT")
    if not hasattr(signal, "value"):
        raise TypeError(f"Signal '{signal_name}' has no .value property")
    return cast("SimHandleBase", signal)


def get_signal_value_int(sig: Union[Logic, LogicArray]) -> int | None:
    """Return integer value if resolvable (no X/Z), else None."""
    if isinstance(sig, Logic):
        return int(sig) if sig.is_resolvable else None
    return sig.to_unsigned() if sig.is_resolvable else None
