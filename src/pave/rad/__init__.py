# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/pave/rad/__init__.py

"""RAD (Reusable Analog/Digital) IP library.

This package contains RTL fixtures with their cocotb verification benches.

Modules:
- rad_reg_en: 8-bit register with enable and synchronous active-low reset

Subpackages:
- tools: DV command-line tools (dv, dv-regress, dv-report)
- shared: Harness components reused across benches

Each module typically contains:
- rtl/: SystemVerilog RTL and its srclist.f
- dv/: Design verification testbench (cocotb)
"""
