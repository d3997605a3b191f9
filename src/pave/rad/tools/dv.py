# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/pave/rad/tools/dv.py

"""Build and run cocotb testbenches through pytest, one run per seed.

The tool compiles a design from its srclist with the cocotb runner, runs a
bench module against it for every requested seed, and leaves one directory
per seed holding the simulator log, the optional waveform (the activity trace
consumed by the power flow), the bench's report.json and a manifest.json with
a copy-pasteable replay command.

Command-line interface:
    dv --design=<design> --test=<test_module> [OPTIONS]

Typical usage:
    # Random stimulus, one seed
    dv --design=rad_reg_en --test=test_rad_reg_en --testcase=test_rad_reg_en

    # Directed pattern with a waveform dump for power analysis
    dv --design=rad_reg_en --test=test_rad_reg_en --testcase=test_rad_reg_en \\
       --test-mode=DIRECTED --waves=1

    # Ten random seeds, 200 items each
    dv --design=rad_reg_en --test=test_rad_reg_en --nseeds=10 --seq-len=200

Outcome per seed:
    PASS  every check matched and the run drained cleanly
    FAIL  at least one data mismatch (or a self-checking test failed)
    ABORT the harness detected an integrity failure, or no report was written

Exit code:
    0 when every seed met --expect, otherwise the worst of 1 (FAIL) and
    2 (ABORT) among the seeds that did not.
"""

from __future__ import annotations

import argparse
import hashlib
import json
import logging
import os
import random
import shlex
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final, Sequence

import pytest
from cocotb_tools.runner import get_runner

# If executed as a script (path mode), __package__ is empty/None and __spec__ is None.
if (__package__ in (None, "")) and (__spec__ is None):
    print("[dv] ERROR: Please run as 'dv'", file=sys.stderr)
    raise SystemExit(2)

# isort: off
from pave import utils  # pylint: disable=wrong-import-position
from pave.rad.shared.dv.run_report import (  # pylint: disable=wrong-import-position
    RunStatus,
    load_status,
)

# isort: on

PROJ_DIR: Final[Path] = utils.get_repo_root()
RAD_ROOT: Final[Path] = PROJ_DIR / "src" / "pave" / "rad"
DEFAULT_OUT_DIR = "out_dv"
DEFAULT_BUILDS_SUBDIR = "builds"
DEFAULT_TESTS_SUBDIR = "tests"
DEFAULT_FRAMEWORK = f"{Path(__file__).resolve()}::test_framework"
DEFAULT_PYTEST_OPTS: tuple[str, ...] = ("-vv", "-s", "-ra", "-x")
REPORT_NAME = "report.json"
TEST_MODES: tuple[str, ...] = ("RANDOM", "DIRECTED", "HOLD")

logger = logging.getLogger(__name__)


@dataclass
class _ContextBox:
    value: dict[str, Any] | None = None


@dataclass(frozen=True)
class BuildCfg:  # pylint: disable=too-many-instance-attributes
    """Everything that affects the compiled simulation."""

    sim: str
    waves: bool
    waves_fmt: str
    design: str
    build_dir: Path
    build_args: list[str]
    build_log_file: Path
    build_force: bool


@dataclass(frozen=True)
class TestCfg:  # pylint: disable=too-many-instance-attributes
    """One seeded run of a bench module."""

    __test__ = False

    sim: str
    waves: bool
    design: str
    build_dir: Path
    test_module: str
    testcase: str | None
    seed: int
    test_dir: Path
    test_log_file: Path
    wave_file: Path
    report_file: Path
    test_args: list[str]
    plusargs: list[str]
    extra_env: dict[str, str]
    results_xml: Path | None


# === CLI ===


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        description="Build and run cocotb testbenches via pytest",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # Global
    ap.add_argument(
        "--cmd",
        choices=["build", "test", "both"],
        default=os.getenv("CMD", "both"),
        help="run only build, only test, or both",
    )
    ap.add_argument(
        "--sim",
        choices=["icarus", "verilator"],
        default=os.getenv("SIM", "icarus"),
        help="simulator",
    )
    ap.add_argument("--outdir", default=DEFAULT_OUT_DIR, help="output directory")
    ap.add_argument(
        "--verbosity",
        choices=["critical", "error", "warning", "info", "debug", "notset"],
        default=os.getenv("VERBOSITY", "info"),
        help="logging level for the tool and the bench",
    )
    ap.add_argument(
        "--waves",
        choices=["0", "1"],
        default=os.getenv("WAVES", "0"),
        help="dump a waveform (switching activity) per seed",
    )
    ap.add_argument(
        "--waves_fmt",
        choices=["fst", "vcd"],
        default=os.getenv("WAVES_FMT", "fst"),
        help="waveform format",
    )

    # Build
    ap.add_argument("--design", default="", help="design under src/pave/rad/")
    ap.add_argument("--build-force", action="store_true", help="force a build")
    ap.add_argument(
        "--build-arg",
        dest="build_args",
        action="append",
        default=[],
        help="extra build arg passed verbatim to the simulator (repeatable)",
    )

    # Test
    ap.add_argument("--test", default="", help="pave.rad.<design>.dv.<test_module>")
    ap.add_argument(
        "--testcase", default=None, help="run only this cocotb test in the module"
    )
    ap.add_argument(
        "--expect",
        type=str.upper,
        choices=[s.value for s in RunStatus],
        default="PASS",
        help="expected outcome of every seed",
    )
    ap.add_argument(
        "--seeds",
        nargs="+",
        metavar="SEED",
        help="explicit seed list (decimal, 0x..., or 'random'); overrides --nseeds",
    )
    ap.add_argument(
        "--nseeds", type=int, default=0, help="generate N seeds if --seeds not given"
    )
    ap.add_argument(
        "--seed-base", type=int, default=1999, help="base seed for generated seeds"
    )
    ap.add_argument(
        "--seed-out",
        type=Path,
        default=None,
        help="write the final seed list to a file (one per line)",
    )
    ap.add_argument(
        "--seq-len", type=int, default=None, help="stimulus items per run (+SEQ_LEN)"
    )
    ap.add_argument(
        "--test-mode",
        type=str.upper,
        choices=TEST_MODES,
        default=None,
        help="stimulus strategy (+TEST_MODE)",
    )
    ap.add_argument(
        "--coverage-en",
        choices=["0", "1"],
        default=os.getenv("COVERAGE_EN", "1"),
        help="enable coverage collection",
    )

    return ap.parse_args(argv)


def validate_args(args: argparse.Namespace) -> None:
    """Fail fast on missing or inconsistent arguments."""
    if not args.design:
        raise SystemExit("[dv]: error: argument --design required")
    if args.cmd in {"both", "test"} and not args.test:
        raise SystemExit(f"[dv]: error: argument --test required for {args.cmd=}")
    if args.seq_len is not None and args.seq_len < 0:
        raise SystemExit(f"[dv]: error: --seq-len must be >= 0, got {args.seq_len}")
    if args.nseeds < 0:
        raise SystemExit(f"[dv]: error: --nseeds must be >= 0, got {args.nseeds}")
    srclist = RAD_ROOT / args.design / "rtl" / "srclist.f"
    if not srclist.is_file():
        raise SystemExit(f"[dv]: error: no srclist for design {args.design}: {srclist}")


def _strip_seed_args(argv: list[str]) -> list[str]:
    """Drop --seeds/--nseeds (both '--opt val' and '--opt=val' forms)."""
    out: list[str] = []
    i = 0
    while i < len(argv):
        tok = argv[i]
        if tok == "--nseeds":
            i += 2
            continue
        if tok == "--seeds":
            i += 1
            while i < len(argv) and not argv[i].startswith("-"):
                i += 1
            continue
        if tok.startswith(("--nseeds=", "--seeds=")):
            i += 1
            continue
        out.append(tok)
        i += 1
    return out


def _pretty(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


# === Context ===

_CTX = _ContextBox()


def _ctx() -> dict[str, Any]:
    """Context handed from main() to test_framework() inside pytest."""
    if _CTX.value is None:
        raise RuntimeError("[dv] internal context not set")
    return _CTX.value


# === Seeds ===


def derive_seeds(args: argparse.Namespace) -> list[int]:
    """Explicit --seeds win; else --nseeds drawn from --seed-base; else [42]."""
    rng = random.Random(args.seed_base & 0xFFFF_FFFF)
    if args.seeds:
        seeds = [utils.normalize_seed(rng, s) for s in args.seeds]
    elif args.nseeds > 0:
        seeds = [utils.normalize_seed(rng, "random") for _ in range(args.nseeds)]
    else:
        seeds = [42]
    print(f"[dv] using seeds: {seeds}")
    return seeds


# === Pytest Args ===


def _pytest_args(selector: str) -> list[str]:
    return [*DEFAULT_PYTEST_OPTS, selector]


def _pytest_cmd_str(selector: str) -> str:
    return "python -m pytest " + " ".join(_pytest_args(selector))


# === Build/Test Config ===


def _waves_fmt(ctx: dict[str, Any]) -> str:
    fmt = str(ctx.get("waves_fmt", "fst")).lower()
    fmt = fmt if fmt in {"fst", "vcd"} else "fst"
    # the cocotb Icarus runner only dumps FST
    if ctx.get("sim") == "icarus" and ctx.get("waves") and fmt != "fst":
        logger.warning("Icarus dumps FST only; overriding waves_fmt=%s -> fst", fmt)
        fmt = "fst"
    return fmt


def build_dir_for(ctx: dict[str, Any]) -> Path:
    """<outdir>/builds/<design>.<hash10>, hashed over build-affecting knobs."""
    waves = bool(ctx.get("waves", False))
    fp_obj = {
        "sim": str(ctx.get("sim", "icarus")),
        "waves": waves,
        "waves_fmt": _waves_fmt(ctx) if waves else "",
        "user_build_args": [str(x) for x in ctx.get("user_build_args", [])],
    }
    raw = json.dumps(fp_obj, sort_keys=True, separators=(",", ":")).encode()
    leaf = f"{ctx.get('design', '')}.{hashlib.sha1(raw).hexdigest()[:10]}"
    outdir = str(ctx.get("outdir", DEFAULT_OUT_DIR))
    return (PROJ_DIR / outdir / DEFAULT_BUILDS_SUBDIR / leaf).resolve()


def _write_build_manifest(cfg: BuildCfg, *, status: str) -> None:
    manifest = {
        "status": status,  # "started" | "built"
        "updated_at": utils.iso_utc(),
        "sim": cfg.sim,
        "waves": cfg.waves,
        "waves_fmt": cfg.waves_fmt,
        "design": cfg.design,
        "build_force": cfg.build_force,
        "build_dir": str(cfg.build_dir),
        "fingerprint": cfg.build_dir.name,
        "build_args": cfg.build_args,
    }
    cfg.build_dir.mkdir(parents=True, exist_ok=True)
    (cfg.build_dir / "manifest.json").write_text(
        json.dumps(manifest, indent=2), encoding="utf-8"
    )


def make_build_cfg(ctx: dict[str, Any]) -> BuildCfg:
    sim = str(ctx.get("sim", "icarus"))
    waves = bool(ctx.get("waves", False))
    waves_fmt = _waves_fmt(ctx)
    design = str(ctx["design"])
    build_dir = build_dir_for(ctx)
    build_dir.mkdir(parents=True, exist_ok=True)

    build_args: list[str] = []
    if sim == "verilator":
        build_args += ["--timing", "--autoflush"]
        if waves:
            build_args.append("--trace-fst" if waves_fmt == "fst" else "--trace")

    srclist = RAD_ROOT / design / "rtl" / "srclist.f"
    build_args += ["-f", str(utils.absolutize_srclist(srclist, PROJ_DIR, build_dir))]
    # user args last so they can override
    build_args += [str(x) for x in ctx.get("user_build_args", [])]

    return BuildCfg(
        sim=sim,
        waves=waves,
        waves_fmt=waves_fmt,
        design=design,
        build_dir=build_dir,
        build_args=build_args,
        build_log_file=build_dir / "build.log",
        build_force=bool(ctx.get("build_force", False)),
    )


def bench_plusargs(ctx: dict[str, Any]) -> list[str]:
    """Bench knobs forwarded as plusargs (read by utils_cli in the simulator)."""
    plusargs: list[str] = []
    if ctx.get("seq_len") is not None:
        plusargs.append(f"+SEQ_LEN={int(ctx['seq_len'])}")
    if ctx.get("test_mode"):
        plusargs.append(f"+TEST_MODE={ctx['test_mode']}")
    if "coverage_en" in ctx:
        plusargs.append(f"+COVERAGE_EN={int(bool(ctx['coverage_en']))}")
    return plusargs


def make_test_cfg(ctx: dict[str, Any], test_dir: Path) -> TestCfg:
    sim = str(ctx.get("sim", "icarus"))
    waves = bool(ctx.get("waves", False))
    design = str(ctx["design"])
    seed = int(ctx.get("seed", 42))
    test_dir.mkdir(parents=True, exist_ok=True)
    wave_file = test_dir / f"waves.{_waves_fmt(ctx)}"
    report_file = test_dir / REPORT_NAME

    test_args: list[str] = []
    plusargs = bench_plusargs(ctx)
    if waves and sim == "verilator":
        test_args = ["--trace-file", str(wave_file.resolve())]
    elif waves and sim == "icarus":
        # must be a plusarg so it lands after the .vvp file
        plusargs.append(f"+dumpfile_path={wave_file.resolve()}")

    extra_env: dict[str, str] = {
        "COCOTB_RANDOM_SEED": str(seed),
        "SEED": str(seed),
        "COCOTB_LOG_LEVEL": str(ctx.get("verbosity", "info")).upper(),
        "REPORT_JSON": str(report_file),
    }
    if plusargs:
        extra_env["COCOTB_PLUSARGS"] = " ".join(plusargs)

    results_xml: Path | None = None
    if os.getenv("PYTEST_CURRENT_TEST") is None:
        results_xml = test_dir / "results.xml"

    return TestCfg(
        sim=sim,
        waves=waves,
        design=design,
        build_dir=build_dir_for(ctx),
        test_module=f"pave.rad.{design}.dv.{ctx['test']}",
        testcase=ctx.get("testcase") or None,
        seed=seed,
        test_dir=test_dir,
        test_log_file=test_dir / "test.log",
        wave_file=wave_file,
        report_file=report_file,
        test_args=test_args,
        plusargs=plusargs,
        extra_env=extra_env,
        results_xml=results_xml,
    )


# === Actions ===


def run_build(cfg: BuildCfg) -> None:
    print("\n[dv] running build...\n")
    runner = get_runner(cfg.sim)
    _write_build_manifest(cfg, status="started")
    runner.build(
        hdl_toplevel=cfg.design,
        timescale=("1ns", "1ps"),
        waves=cfg.waves,
        build_dir=cfg.build_dir,
        build_args=cfg.build_args,
        log_file=str(cfg.build_log_file),
        always=cfg.build_force,
    )
    _write_build_manifest(cfg, status="built")


def run_test(cfg: TestCfg) -> None:
    print("\n[dv] running test...\n")
    cfg.report_file.unlink(missing_ok=True)
    runner = get_runner(cfg.sim)
    runner.test(
        hdl_toplevel_lang="verilog",
        hdl_toplevel=cfg.design,
        waves=cfg.waves,
        build_dir=str(cfg.build_dir),
        test_module=cfg.test_module,
        testcase=cfg.testcase,
        log_file=str(cfg.test_log_file),
        test_args=cfg.test_args,
        plusargs=cfg.plusargs,
        extra_env=cfg.extra_env,
        results_xml=str(cfg.results_xml) if cfg.results_xml else None,
    )


# === Pytest Entrypoint ===


def test_framework() -> None:
    """Pytest entrypoint: build and/or run the bench for the current context."""
    ctx = _ctx()
    cmd = str(ctx.get("cmd", "both")).lower()
    bcfg = make_build_cfg(ctx)

    print(f"\n\n[dv] sim={bcfg.sim} cmd={cmd} design={bcfg.design} seed={ctx.get('seed')}")

    if cmd in {"both", "build"}:
        run_build(bcfg)
        print(f"\n[dv] result: build: {bcfg.build_dir}")
    elif not bcfg.build_dir.exists():
        raise RuntimeError(
            f"[dv] build dir missing: {bcfg.build_dir}. Run with --cmd build first."
        )

    if cmd == "build" or not ctx.get("test"):
        print("[dv] skipping test (no --test or cmd=build)")
        return
    run_test(make_test_cfg(ctx, Path(ctx["test_dir"])))


# === Outcome ===


def classify(framework_rc: int, reported: RunStatus | None) -> RunStatus:
    """Combine the pytest return code with the status the bench reported."""
    if reported is None:
        # nothing recorded: either build-only or the bench never finished
        return RunStatus.PASS if framework_rc == 0 else RunStatus.ABORT
    if reported is RunStatus.PASS and framework_rc != 0:
        return RunStatus.FAIL
    return reported


def seed_exit_code(status: RunStatus, expect: RunStatus) -> int:
    if status is expect:
        return 0
    return status.exit_code if status is not RunStatus.PASS else 1


def _print_outcome(status: RunStatus, expect: RunStatus, replay: str) -> None:
    tag = f"{status.value} ({'EXPECTED' if status is expect else 'UNEXPECTED'})"
    paint = utils.green if status is expect else utils.red
    print(f"{paint(tag)}: {replay}")


def _run_one_seed(seed: int, test_dir: Path, ctx_base: dict[str, Any]) -> int:
    """Run pytest once for `seed`, write the manifest, return the seed's exit code."""
    test_dir.mkdir(parents=True, exist_ok=True)
    ctx = dict(ctx_base, seed=seed, test_dir=str(test_dir))
    _CTX.value = ctx
    sys.modules.setdefault("pave.rad.tools.dv", sys.modules[__name__])

    print(f"\n[dv] running {DEFAULT_FRAMEWORK} seed={seed} -> {test_dir}\n")
    t0 = time.time()
    framework_rc = int(pytest.main(_pytest_args(DEFAULT_FRAMEWORK)))
    t1 = time.time()

    report_file = test_dir / REPORT_NAME
    status = classify(framework_rc, load_status(report_file))
    expect = RunStatus(str(ctx.get("expect", "PASS")).upper())
    rc = seed_exit_code(status, expect)

    replay_argv = _strip_seed_args(list(ctx.get("orig_argv", []))) + ["--seeds", str(seed)]
    replay_cmd = _pretty(["dv", *replay_argv])

    manifest = {
        "status": status.value,
        "expect": expect.value,
        "framework_rc": framework_rc,
        "duration_s": round(t1 - t0, 3),
        "cmd": _pytest_cmd_str(DEFAULT_FRAMEWORK),
        "replay_cmd": replay_cmd,
        "build_dir": str(build_dir_for(ctx)),
        "test_dir": str(test_dir),
        "report": str(report_file) if report_file.exists() else None,
        "ctx": ctx,
    }
    (test_dir / "manifest.json").write_text(
        json.dumps(manifest, indent=2, default=str), encoding="utf-8"
    )

    print(f"\n[dv] result: test_dir: {test_dir}")
    print(f"[dv] result: duration: {t1 - t0:.2f}s")
    print(f"[dv] result: expect: {expect.value}")
    print(f"[dv] result: status: {status.value} (rc={framework_rc})\n")
    _print_outcome(status, expect, replay_cmd)
    return rc


# === Main ===


def main(argv: Sequence[str] | None = None) -> int:
    """Run every seed; return 0 if all met --expect, else the worst seed code."""
    orig_argv = list(sys.argv[1:] if argv is None else argv)
    args = parse_args(argv)
    validate_args(args)

    outdir = utils.ensure_dir(PROJ_DIR / args.outdir, make_if_not_exists=True)
    utils.configure_logger(args.verbosity, log_file=outdir / "dv.log")
    tests_root = outdir / DEFAULT_TESTS_SUBDIR

    ctx_base: dict[str, Any] = {
        "orig_argv": orig_argv,
        "cmd": args.cmd,
        "sim": args.sim,
        "outdir": args.outdir,
        "verbosity": args.verbosity,
        "waves": args.waves == "1",
        "waves_fmt": args.waves_fmt,
        "design": args.design,
        "build_force": bool(args.build_force),
        "user_build_args": list(args.build_args or []),
        "test": args.test,
        "testcase": args.testcase,
        "expect": args.expect,
        "seq_len": args.seq_len,
        "test_mode": args.test_mode,
        "coverage_en": args.coverage_en == "1",
    }
    build_name = build_dir_for(ctx_base).name

    if args.cmd == "build":
        return _run_one_seed(0, tests_root / f"{build_name}.build_only", ctx_base)

    rc = 0
    seeds = derive_seeds(args)
    label = args.testcase or args.test
    for idx, seed in enumerate(seeds):
        per_ctx = dict(ctx_base)
        # build once on the first seed
        if args.cmd == "both" and idx > 0:
            per_ctx["cmd"] = "test"
        rc = max(rc, _run_one_seed(seed, tests_root / f"{build_name}.{label}.{seed}", per_ctx))
    if args.seed_out:
        Path(args.seed_out).write_text(
            "".join(f"{s}\n" for s in seeds), encoding="utf-8", newline="\n"
        )
    return rc


if __name__ == "__main__":
    raise SystemExit(main())
