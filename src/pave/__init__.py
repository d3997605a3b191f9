# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/pave/__init__.py

"""PAVE: Power-Aware Verification Environment.

PAVE is a transaction-driven verification harness for synchronous RTL blocks.
It stimulates a device under test, passively observes its outputs, checks them
against an independently computed expectation, and exercises the device under
representative enable/data patterns so that a simulator-produced activity
trace can feed an external power-reporting step.

Main Components:

rad (Reusable Analog/Digital):
    Verified RTL fixtures and their cocotb testbenches:
    - rad_reg_en: 8-bit register with enable
    - shared: clock/reset source, scoreboard, state machine, run report
    - tools: dv, dv-regress, dv-report command-line tools

utils:
    Common utilities used by the command-line tools
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version

try:
    __version__ = pkg_version("pave")
except PackageNotFoundError:
    __version__ = "0+local"
