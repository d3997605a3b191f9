# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/pave/rad/shared/dv/run_report.py

"""Structured result of one bench run, shared by the bench and the dv tools."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .env_state import EnvState
from .scoreboard import Mismatch


class RunStatus(enum.Enum):
    PASS = "PASS"
    FAIL = "FAIL"
    ABORT = "ABORT"

    @property
    def exit_code(self) -> int:
        return {RunStatus.PASS: 0, RunStatus.FAIL: 1, RunStatus.ABORT: 2}[self]

    @classmethod
    def worst(cls, statuses: list[RunStatus]) -> RunStatus:
        """ABORT beats FAIL beats PASS; an empty list is a PASS."""
        return max(statuses, key=lambda s: s.exit_code, default=cls.PASS)


@dataclass
class RunReport:
    """Outcome of a run.

    Attributes:
        checks: Comparisons performed by the scoreboard
        passes: Comparisons that matched
        mismatches: Every failed comparison (cycle, expected, observed)
        final_state: Environment state when the run ended
        abort_reason: Message of the integrity failure, if any
        cycles: Observations processed
        seed: Seed of the stimulus generator, when known
        coverage: Optional coverage summary
    """

    checks: int = 0
    passes: int = 0
    mismatches: list[Mismatch] = field(default_factory=list)
    final_state: EnvState = EnvState.RESET
    abort_reason: str | None = None
    cycles: int = 0
    seed: int | None = None
    coverage: dict[str, Any] = field(default_factory=dict)

    @property
    def status(self) -> RunStatus:
        if self.final_state is EnvState.ABORTED or self.abort_reason is not None:
            return RunStatus.ABORT
        if self.mismatches or self.final_state is not EnvState.DONE:
            return RunStatus.FAIL
        return RunStatus.PASS

    @property
    def exit_code(self) -> int:
        return self.status.exit_code

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "checks": self.checks,
            "passes": self.passes,
            "mismatches": [m.to_dict() for m in self.mismatches],
            "final_state": self.final_state.value,
            "abort_reason": self.abort_reason,
            "cycles": self.cycles,
            "seed": self.seed,
            "coverage": self.coverage,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> RunReport:
        return cls(
            checks=int(d.get("checks", 0)),
            passes=int(d.get("passes", 0)),
            mismatches=[
                Mismatch(m["cycle"], m["expected"], m["observed"])
                for m in d.get("mismatches", [])
            ],
            final_state=EnvState(d.get("final_state", EnvState.RESET.value)),
            abort_reason=d.get("abort_reason"),
            cycles=int(d.get("cycles", 0)),
            seed=d.get("seed"),
            coverage=dict(d.get("coverage") or {}),
        )

    def summary(self) -> str:
        s = f"{self.status.value}: {self.checks} checked, {self.passes} passed"
        if self.mismatches:
            s += f", {len(self.mismatches)} mismatched"
        if self.abort_reason:
            s += f" (aborted: {self.abort_reason})"
        return s


def append_report(path: Path, name: str, report: RunReport) -> Path:
    """Add `report` to the run file at `path`, creating it if needed.

    The file holds every test run by one simulator invocation:
    {"status": <worst status>, "runs": [{"name": ..., <report fields>}, ...]}
    """
    runs = [dict(rpt.to_dict(), name=n) for n, rpt in load_reports(path)]
    runs.append(dict(report.to_dict(), name=name))
    status = RunStatus.worst([RunStatus(r["status"]) for r in runs])
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps({"status": status.value, "runs": runs}, indent=2), encoding="utf-8"
    )
    return path


def load_reports(path: Path) -> list[tuple[str, RunReport]]:
    """Return (name, report) pairs from a run file; a missing file has none."""
    if not path.exists():
        return []
    data = json.loads(path.read_text(encoding="utf-8"))
    return [(str(r.get("name", "")), RunReport.from_dict(r)) for r in data.get("runs", [])]


def load_status(path: Path) -> RunStatus | None:
    """Worst status recorded in a run file, or None if it holds no runs."""
    reports = load_reports(path)
    if not reports:
        return None
    return RunStatus.worst([r.status for _, r in reports])
