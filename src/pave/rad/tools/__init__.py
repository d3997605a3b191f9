# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/pave/rad/tools/__init__.py

"""Command-line tools for building and running the pave benches.

- dv: build a design and run a bench module for one or more seeds
- dv-regress: run the jobs listed in a dv_regress.yaml file
- dv-report: summarize the per-seed manifests left by dv
"""
