# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/pave/rad/shared/dv/__init__.py

"""Shared design verification infrastructure for RAD testbenches.

Benches are built from small independent components that talk over explicit
queues rather than from a class hierarchy.

Components:
- ClockResetSource: Clock generation, reset pulses, drive/capture/sample edges
- SeqItemPort: One-item-in-flight handshake between generator and driver
- Scoreboard: Fixed-latency, in-order expected/observed comparison
- EnvState / EnvStateMachine: RESET -> RUNNING -> DRAINING -> DONE lifecycle
- RunReport / RunStatus: Result record shared with the dv command-line tools

Utilities:
- utils_dv: Error taxonomy, logging, and signal helpers
- utils_cli: Environment/plusarg settings

clock_reset imports the simulator bridge and is therefore not re-exported
here; import it as pave.rad.shared.dv.clock_reset inside a cocotb test.
"""

from __future__ import annotations

from pave import __version__

from . import utils_cli, utils_dv
from .env_state import EnvState, EnvStateMachine
from .run_report import RunReport, RunStatus
from .scoreboard import CheckResult, Mismatch, Scoreboard
from .seq_port import SeqItemPort
from .utils_dv import (
    ExpectationUnderflowError,
    HarnessIntegrityError,
    ItemDomainError,
    LockstepError,
    StimulusDesyncError,
)

__all__ = (
    "__version__",
    "utils_cli",
    "utils_dv",
    "CheckResult",
    "EnvState",
    "EnvStateMachine",
    "ExpectationUnderflowError",
    "HarnessIntegrityError",
    "ItemDomainError",
    "LockstepError",
    "Mismatch",
    "RunReport",
    "RunStatus",
    "Scoreboard",
    "SeqItemPort",
    "StimulusDesyncError",
)
