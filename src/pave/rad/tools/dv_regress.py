# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/pave/rad/tools/dv_regress.py

"""YAML-driven regression runner.

All job parameters live in the YAML file; the command line only names the
file and the output directory. Each job becomes one `dv` invocation with the
global default args followed by the job's own args, so job args win.

YAML Schema:
    defaults:
      args: ["--sim=icarus", "--waves=0"]   # optional, applied to every job

    jobs:
      - name: random
        args: ["--design=rad_reg_en", "--test=test_rad_reg_en", "--nseeds=4"]
      - name: directed
        args: "--design=rad_reg_en --test=test_rad_reg_en --test-mode=DIRECTED"

Usage:
    dv-regress --file=src/pave/rad/rad_reg_en/dv/dv_regress.yaml [--outdir=out_dv]

Each job's dv exit code is mapped back to an outcome: 0 means every seed met
its --expect, 1 a FAIL, 2 an ABORT. The regression exits with the worst.
"""

from __future__ import annotations

import argparse
import shlex
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

import yaml

from pave import utils
from pave.rad.shared.dv.run_report import RunStatus

DEFAULT_OUT_DIR = "out_dv"


@dataclass(frozen=True)
class Job:
    """A single regression job."""

    name: str
    args: list[str]


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        description="pave DV YAML regression (strict, YAML-only)",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    ap.add_argument("--file", type=Path, required=True, help="Path to dv_regress.yaml")
    ap.add_argument("--outdir", default=DEFAULT_OUT_DIR, help="output directory")
    return ap.parse_args(argv)


def _as_str_list(x: Any) -> list[str]:
    """YAML value (None, str, or list) to a list of args."""
    if x is None:
        return []
    if isinstance(x, str):
        return shlex.split(x)
    return [str(t) for t in list(x)]


def load_config(path: Path) -> tuple[list[str], list[Job]]:
    """Return (default_args, jobs) from a dv_regress.yaml file.

    Raises:
        ValueError: If the YAML is not a mapping or has no jobs.
    """
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("dv_regress.yaml must be a mapping")

    defaults = data.get("defaults") or {}
    if not isinstance(defaults, dict):
        raise ValueError("'defaults' must be a mapping")
    default_args = _as_str_list(defaults.get("args"))

    jobs_raw = data.get("jobs")
    if not isinstance(jobs_raw, list) or not jobs_raw:
        raise ValueError("'jobs' must be a non-empty list")

    jobs: list[Job] = []
    for idx, j in enumerate(jobs_raw):
        if not isinstance(j, dict):
            raise ValueError(f"jobs[{idx}] must be a mapping")
        jobs.append(Job(name=str(j.get("name") or f"job{idx}"), args=_as_str_list(j.get("args"))))
    return default_args, jobs


def job_command(default_args: Sequence[str], job: Job, outdir: str) -> list[str]:
    return ["dv", *default_args, *job.args, f"--outdir={outdir}"]


def outcome(rc: int) -> str:
    """dv exit code to a report label."""
    if rc == 0:
        return "OK"
    for status in RunStatus:
        if status.exit_code == rc:
            return status.value
    return RunStatus.ABORT.value


def _pretty_cmd(cmd: Sequence[str]) -> str:
    return " ".join(shlex.quote(x) for x in cmd)


def run_regress(args: argparse.Namespace) -> int:
    """Run every job in order and print a summary; return the worst exit code."""
    yaml_path = args.file.resolve()
    if not yaml_path.is_file():
        print(f"\n[dv_regress] No file found at {yaml_path}", file=sys.stderr)
        return 1
    print(f"\n[dv_regress] file: {yaml_path}")

    try:
        default_args, jobs = load_config(yaml_path)
    except (ValueError, yaml.YAMLError) as exc:
        print(f"[dv_regress] Invalid regression file: {exc}", file=sys.stderr)
        return 1

    results: list[tuple[str, str]] = []
    worst = 0
    for job in jobs:
        cmd = job_command(default_args, job, args.outdir)
        cmd_str = _pretty_cmd(cmd)
        print(f"\n[dv_regress] job: {job.name}")
        print(f"[dv_regress] cmd: {cmd_str}\n")
        job_rc = subprocess.run(cmd, check=False).returncode
        label = outcome(job_rc)
        results.append((label, cmd_str))
        worst = max(worst, 0 if label == "OK" else RunStatus(label).exit_code)

    print("\n[dv_regress] JOBS REPORT\n")
    for label, c in results:
        paint = utils.green if label == "OK" else utils.red
        print(f"{paint(label)}: {c}")

    rep = f"dv-report --outdir={args.outdir}"
    print(f"\n[dv_regress] To see a detailed report of all tests: {utils.yellow(rep)}")

    if worst:
        print(f"\n[dv_regress] SUMMARY: {utils.red('FAIL')}")
    else:
        print(f"\n[dv_regress] SUMMARY: {utils.green('PASS')}")
    return worst


def main(argv: Sequence[str] | None = None) -> int:
    return run_regress(parse_args(argv))


if __name__ == "__main__":
    raise SystemExit(main())
