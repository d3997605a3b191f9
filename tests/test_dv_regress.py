# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: tests/test_dv_regress.py

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any

import pytest

from pave.rad.tools import dv_regress

SHIPPED = (
    Path(dv_regress.__file__).resolve().parents[1] / "rad_reg_en" / "dv" / "dv_regress.yaml"
)


def _write(tmp_path: Path, text: str) -> Path:
    p = tmp_path / "dv_regress.yaml"
    p.write_text(text, encoding="utf-8")
    return p


def test_load_config_lists_and_strings(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        """
defaults:
  args: ["--sim=icarus"]
jobs:
  - name: one
    args: ["--design=rad_reg_en", "--nseeds=2"]
  - args: "--design=rad_reg_en --test-mode=HOLD"
""",
    )
    defaults, jobs = dv_regress.load_config(path)
    assert defaults == ["--sim=icarus"]
    assert [j.name for j in jobs] == ["one", "job1"]
    assert jobs[1].args == ["--design=rad_reg_en", "--test-mode=HOLD"]
    assert dv_regress.job_command(defaults, jobs[0], "out") == [
        "dv",
        "--sim=icarus",
        "--design=rad_reg_en",
        "--nseeds=2",
        "--outdir=out",
    ]


@pytest.mark.parametrize("text", ["- just a list", "jobs: []", "jobs: [3]", "defaults: 1\njobs: [{}]"])
def test_load_config_rejects_bad_shapes(tmp_path: Path, text: str) -> None:
    with pytest.raises(ValueError):
        dv_regress.load_config(_write(tmp_path, text))


def test_shipped_regression_file_loads() -> None:
    defaults, jobs = dv_regress.load_config(SHIPPED)
    assert "--design=rad_reg_en" in defaults
    assert {j.name for j in jobs} >= {"random", "directed", "hold"}


def test_outcome_labels() -> None:
    assert dv_regress.outcome(0) == "OK"
    assert dv_regress.outcome(1) == "FAIL"
    assert dv_regress.outcome(2) == "ABORT"
    assert dv_regress.outcome(-9) == "ABORT"


def test_run_regress_returns_worst(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = _write(
        tmp_path,
        "jobs:\n  - {name: a, args: '--x=0'}\n  - {name: b, args: '--x=1'}\n"
        "  - {name: c, args: '--x=2'}\n",
    )
    codes = {"--x=0": 0, "--x=1": 1, "--x=2": 2}
    calls: list[list[str]] = []

    def fake_run(cmd: list[str], check: bool) -> Any:
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, codes[cmd[1]])

    monkeypatch.setattr(dv_regress.subprocess, "run", fake_run)
    args = dv_regress.parse_args([f"--file={path}", "--outdir=o"])
    assert dv_regress.run_regress(args) == 2
    assert [c[-1] for c in calls] == ["--outdir=o"] * 3


def test_run_regress_missing_file(tmp_path: Path) -> None:
    args = dv_regress.parse_args([f"--file={tmp_path / 'missing.yaml'}"])
    assert dv_regress.run_regress(args) == 1
