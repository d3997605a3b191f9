# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/pave/rad/rad_reg_en/__init__.py

"""rad_reg_en: 8-bit register with enable.

On a rising clock edge the register loads data_in when en is high and holds
otherwise. rst_n is synchronous and active low; data_out is the register.
"""
