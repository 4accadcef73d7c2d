# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Reporting utilities for the end-of-run summary.
"""

from .table import RunSummaryTableGenerator, format_duration

__all__ = ["RunSummaryTableGenerator", "format_duration"]
