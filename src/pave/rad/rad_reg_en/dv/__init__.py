# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/pave/rad/rad_reg_en/dv/__init__.py

"""Design verification bench for rad_reg_en.

Transaction-driven bench for the 8-bit register with enable, built from
plain cocotb coroutines.

Components:
- rad_reg_en_item: Stimulus item and per-cycle observation
- rad_reg_en_config: Run configuration (plusargs and environment)
- rad_reg_en_sequence: Seeded stimulus generator and its strategies
- rad_reg_en_if: Signal bundle of the device
- rad_reg_en_driver: Applies one item per clock cycle
- rad_reg_en_monitor: Publishes one observation per clock cycle
- rad_reg_en_ref_model: Cycle-accurate reference model
- rad_reg_en_checker: Reference model, scoreboard and run state in one place
- rad_reg_en_coverage: Functional coverage collection
- rad_reg_en_env: Wires the components and runs them to completion

To run tests:
    dv --design=rad_reg_en --test=test_rad_reg_en
    dv-regress --file=src/pave/rad/rad_reg_en/dv/dv_regress.yaml
"""
