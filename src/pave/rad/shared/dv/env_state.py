# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/pave/rad/shared/dv/env_state.py

"""Run state machine for a verification environment.

States:
    RESET:    reset is asserted; expectations computed here are the reset value
    RUNNING:  stimulus is flowing and responses are being checked
    DRAINING: the generator is exhausted; outstanding expectations are checked
    DONE:     every expectation was checked (terminal)
    ABORTED:  a harness integrity failure stopped the run (terminal)

Transitions:
    RESET    -> RUNNING | DRAINING | ABORTED
    RUNNING  -> RESET | DRAINING | ABORTED
    DRAINING -> DONE | ABORTED

Anything else raises HarnessIntegrityError.
"""

from __future__ import annotations

import enum

from . import utils_dv
from .utils_dv import HarnessIntegrityError


class EnvState(enum.Enum):
    RESET = "RESET"
    RUNNING = "RUNNING"
    DRAINING = "DRAINING"
    DONE = "DONE"
    ABORTED = "ABORTED"

    @property
    def terminal(self) -> bool:
        return self in (EnvState.DONE, EnvState.ABORTED)


_ALLOWED: dict[EnvState, frozenset[EnvState]] = {
    EnvState.RESET: frozenset({EnvState.RUNNING, EnvState.DRAINING, EnvState.ABORTED}),
    EnvState.RUNNING: frozenset({EnvState.RESET, EnvState.DRAINING, EnvState.ABORTED}),
    EnvState.DRAINING: frozenset({EnvState.DONE, EnvState.ABORTED}),
    EnvState.DONE: frozenset(),
    EnvState.ABORTED: frozenset(),
}


class EnvStateMachine:
    """Tracks the current EnvState and rejects illegal transitions."""

    def __init__(self, name: str = "env") -> None:
        self.logger = utils_dv.get_logger(f"{name}.state")
        self._state = EnvState.RESET
        self.history: list[EnvState] = [EnvState.RESET]

    @property
    def state(self) -> EnvState:
        return self._state

    def can_move(self, new: EnvState) -> bool:
        return new in _ALLOWED[self._state]

    def move(self, new: EnvState) -> None:
        """Move to `new`; staying in the current state is a no-op."""
        if new is self._state:
            return
        if not self.can_move(new):
            raise HarnessIntegrityError(
                f"illegal state transition {self._state.value} -> {new.value}"
            )
        self.logger.debug("%s -> %s", self._state.value, new.value)
        self._state = new
        self.history.append(new)
