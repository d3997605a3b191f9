# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/pave/utils.py

"""Utility functions for dv.py and the other command-line tools."""

from __future__ import annotations

import logging
import random
import re
import time
from os import PathLike
from pathlib import Path
from typing import Union

RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
RESET = "\033[0m"


class NoColorFormatter(logging.Formatter):
    """Formatter that strips ANSI color codes from log messages."""

    ANSI_ESCAPE = re.compile(r"\033\[[0-9;]*m")

    def format(self, record: logging.LogRecord) -> str:
        """Format the record and strip ANSI codes."""
        return self.ANSI_ESCAPE.sub("", super().format(record))


def absolutize_srclist(infile: Path, repo_root: Path, out_dir: Path) -> Path:
    """
    Write a copy of the srclist with every path made absolute into out_dir.
    Nested -f files are inlined; +incdir+ entries are resolved too.
    """
    out = out_dir / "srclist.abs.f"
    lines_out: list[str] = []

    def expand(filepath: Path) -> None:
        for raw in filepath.read_text(encoding="utf-8").splitlines():
            line = raw.strip()
            if not line or line.startswith("//"):
                continue
            if line.startswith("+incdir+"):
                inc = (repo_root / line[len("+incdir+") :]).resolve()
                lines_out.append(f"+incdir+{inc}")
            elif line.startswith("-f "):
                nested = (repo_root / line[3:].strip()).resolve()
                if nested.exists():
                    expand(nested)
                else:
                    # left as-is so the simulator reports the missing file
                    lines_out.append(line)
            elif line.startswith(("-", "+")):
                lines_out.append(line)
            else:
                lines_out.append(str((repo_root / line).resolve()))

    expand(infile)
    out.write_text("\n".join(lines_out) + "\n", encoding="utf-8")
    return out


def configure_logger(
    verbosity: str = "info", log_file: Path | None = None
) -> logging.Logger:
    """Configure the root logger with a console handler and optional log file.

    Args:
        verbosity: Log level (critical, error, warning, info, debug, notset)
        log_file: Optional path; the file copy has ANSI colors stripped.

    Returns:
        The logger for this module.
    """
    level = verbosity.upper()
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    fmt = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(fmt=fmt, datefmt=datefmt))
    root.addHandler(console)

    if log_file:
        fh = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        fh.setLevel(level)
        fh.setFormatter(NoColorFormatter(fmt=fmt, datefmt=datefmt))
        root.addHandler(fh)

    return logging.getLogger(__name__)


def ensure_dir(
    d: Union[str, Path, PathLike[str]], make_if_not_exists: bool = False
) -> Path:
    """Return absolute path if directory exists, optionally create it."""
    path = Path(d)
    if not path.exists():
        if not make_if_not_exists:
            raise FileNotFoundError(f"Directory does not exist: {path}")
        path.mkdir(parents=True, exist_ok=True)
        logging.info("Created directory: %s", path)
    if not path.is_dir():
        raise NotADirectoryError(f"Not a directory: {path}")
    return path.resolve()


def get_repo_root() -> Path:
    """Return the root of the repo (where pyproject.toml lives)."""
    here = Path(__file__).resolve()
    for p in [here, *here.parents]:
        if (p / "pyproject.toml").exists():
            return p
    for p in here.parents:
        if p.name == "src":
            return p.parent
    return here.parents[-1]


def green(s: str) -> str:
    """Wrap text in green ANSI escape codes."""
    return f"{GREEN}{s}{RESET}"


def iso_utc() -> str:
    """Return current time in ISO8601 Z format (UTC)."""
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())


def normalize_seed(rng: random.Random, s: str) -> int:
    """
    Turn a seed string into a 32-bit int.
    Accepts decimal, 0x..., or 'rand'/'random'/'auto' (drawn from rng).
    Raises SystemExit on invalid input.
    """
    low = s.strip().lower()
    if low in {"rand", "random", "auto"}:
        return rng.getrandbits(32)
    try:
        return int(low, 0) & 0xFFFF_FFFF
    except ValueError as exc:
        raise SystemExit(
            f"[dv] Invalid seed '{s}'. Use decimal, 0x..., or 'random'."
        ) from exc


def red(s: str) -> str:
    """Wrap text in red ANSI escape codes."""
    return f"{RED}{s}{RESET}"


def yellow(s: str) -> str:
    """Wrap text in yellow ANSI escape codes."""
    return f"{YELLOW}{s}{RESET}"
