# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/pave/rad/tools/dv_report.py

"""Summarize the per-seed manifests written by dv.

Every seed run by dv leaves a manifest.json holding its status (PASS, FAIL
or ABORT), the status it was expected to have, and a replay command. This
tool gathers them, prints one copy-pasteable line per run grouped by outcome,
and adds the check and mismatch counts from the bench's report.json when one
was written.

Usage:
    dv-report                    # scan out_dv/tests
    dv-report --outdir=<outdir>  # scan <outdir>/tests

Example output:
    PASS (EXPECTED): dv --design=rad_reg_en --test=test_rad_reg_en --seeds 42
    ABORT (UNEXPECTED): dv --design=rad_reg_en --test=test_rad_reg_en --seeds 7
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from pave import utils
from pave.rad.shared.dv.run_report import RunStatus, load_reports

DEFAULT_OUT_DIR = "out_dv"
DEFAULT_TESTS_SUBDIR = "tests"
_STATUSES = {s.value for s in RunStatus}


@dataclass(frozen=True)
class TestRun:
    """One seed's outcome as recorded in its manifest."""

    __test__ = False

    path: Path
    status: str
    expect: str
    replay_cmd: str
    checks: int = 0
    mismatches: int = 0

    @property
    def expected(self) -> bool:
        return self.status == self.expect


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        description="pave DV report generator",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    ap.add_argument("--outdir", default=DEFAULT_OUT_DIR, help="output directory")
    return ap.parse_args(argv)


def collect(tests_root: Path) -> list[TestRun]:
    """Load every valid manifest under `tests_root`, sorted by path."""
    if not tests_root.is_dir():
        print(f"\n[dv_report] No directory found at {tests_root}", file=sys.stderr)
        return []
    print(f"\n[dv_report] Scanning for test manifests in {tests_root}")
    runs = [
        tr
        for tr in (_load_run(p.parent) for p in sorted(tests_root.glob("**/manifest.json")))
        if tr is not None
    ]
    runs.sort(key=lambda r: str(r.path))
    return runs


def _load_run(run_dir: Path) -> TestRun | None:
    try:
        data = json.loads((run_dir / "manifest.json").read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return None
    status = str(data.get("status", "")).strip().upper()
    expect = str(data.get("expect", "PASS")).strip().upper()
    replay_cmd = str(data.get("replay_cmd", "")).strip()
    if status not in _STATUSES or expect not in _STATUSES or not replay_cmd:
        return None

    checks = mismatches = 0
    report = data.get("report")
    if report:
        try:
            reports = load_reports(Path(report))
        except (OSError, ValueError, KeyError):
            reports = []
        checks = sum(r.checks for _, r in reports)
        mismatches = sum(len(r.mismatches) for _, r in reports)
    return TestRun(
        path=run_dir,
        status=status,
        expect=expect,
        replay_cmd=replay_cmd,
        checks=checks,
        mismatches=mismatches,
    )


def _label(status: str, expected: bool) -> str:
    tag = f"{status} ({'EXPECTED' if expected else 'UNEXPECTED'})"
    return utils.green(tag) if expected else utils.red(tag)


def print_report(tests_root: Path, runs: Sequence[TestRun]) -> int:
    """Print runs grouped by outcome; return 1 if any outcome was unexpected."""
    if not runs:
        print(f"[dv_report] No test manifests found in {tests_root}", file=sys.stderr)
        return 1
    print(f"[dv_report] Results from test manifests in {tests_root}\n")

    # expected outcomes first, then unexpected, each in PASS/FAIL/ABORT order
    groups: list[tuple[str, bool, list[TestRun]]] = []
    for expected in (True, False):
        for status in RunStatus:
            members = [
                r for r in runs if r.status == status.value and r.expected is expected
            ]
            if members:
                groups.append((status.value, expected, members))

    for status, expected, members in groups:
        for r in members:
            detail = f" [{r.checks} checked, {r.mismatches} mismatched]" if r.checks else ""
            print(f"{_label(status, expected)}: {r.replay_cmd}{detail}")

    print(f"\n[dv_report] TOTALS: {len(runs)}\n")
    for status, expected, members in groups:
        print(f"{_label(status, expected)}: {len(members)}")

    if any(not r.expected for r in runs):
        print(f"\n[dv_report] SUMMARY: {utils.red('FAIL (unexpected outcomes)')}")
        return 1
    print(f"\n[dv_report] SUMMARY: {utils.green('PASS (no unexpected outcomes)')}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    tests_root = Path(f"{args.outdir}/{DEFAULT_TESTS_SUBDIR}").resolve()
    return print_report(tests_root, collect(tests_root))


if __name__ == "__main__":
    raise SystemExit(main())
