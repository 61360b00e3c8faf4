#!/usr/bin/env python3
"""
Copyright 2025 The ksplot authors

This module runs KaKs_Calculator on the paralogous pairs and collects the Ks estimates for the
histogram

This file is part of ksplot. ksplot is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by the Free Software Foundation,
either version 3 of the License, or (at your option) any later version. ksplot is distributed in
the hope that it will be useful, but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU General Public License for more
details. You should have received a copy of the GNU General Public License along with ksplot. If
not, see <http://www.gnu.org/licenses/>.
"""

import math
from pathlib import Path

import numpy as np

from . import settings
from .bioformats import ExternalToolError, MalformedRecord, UnreadableFile
from .misc import run_logged_command


def run_kaks_calculator(kaks_calculator_path, axt_path: Path, kaks_path: Path, model: str):
    """
    Estimate Ka and Ks for every pair in `axt_path` using the method `model`
    """
    kaks_cmd = [
        kaks_calculator_path,
        "-i", axt_path,
        "-o", kaks_path,
        "-m", model,
    ]
    kaks_log = Path(Path(kaks_path).parent, f"{Path(kaks_path).name}.log")
    run_logged_command(kaks_cmd, kaks_log, "KaKs_Calculator")
    if not Path(kaks_path).is_file():
        raise ExternalToolError(
            f"KaKs_Calculator did not produce '{kaks_path}', see '{kaks_log}'"
        )
    return kaks_path


def extract_ks_series(kaks_path, exclude_zero: bool):
    """
    Read the Ks column of KaKs_Calculator's output in file order. Pairs without estimate ('NA')
    count as Ks = 0, so `exclude_zero` drops them together with the true zeros
    """
    ks_series = []
    try:
        kaks_in = open(kaks_path, "rt")
    except OSError as e:
        raise UnreadableFile(f"Could not open '{kaks_path}': {e.strerror}") from e
    with kaks_in:
        next(kaks_in, None)  # header
        for line in kaks_in:
            record = line.split()
            if not record:
                continue
            try:
                ks_field = record[settings.KAKS_KS_COLUMN]
                ks = 0.0 if ks_field == settings.KAKS_NA else float(ks_field)
            except (IndexError, ValueError):
                raise MalformedRecord(
                    f"Could not read Ks from KaKs_Calculator record: {line.strip()}"
                ) from None
            if exclude_zero and ks == 0:
                continue
            ks_series.append(ks)
    return ks_series


def ks_bin_edges(ks_min: float, ks_max: float, bin_size: float):
    """
    Histogram breaks from `ks_min` to `ks_max` every `bin_size`, the last break does not go beyond
    `ks_max`
    """
    if bin_size <= 0:
        raise ValueError(f"Bin size must be positive, got {bin_size}")
    if ks_max <= ks_min:
        raise ValueError(f"Ks max ({ks_max}) must be greater than Ks min ({ks_min})")
    num_bins = math.floor((ks_max - ks_min) / bin_size + 1e-10)
    return ks_min + np.arange(num_bins + 1) * bin_size


def write_ks_csv(ks_series, out_csv_path):
    out_csv_path = Path(out_csv_path)
    with open(out_csv_path, "wt") as csv_out:
        csv_out.write(f"{settings.KS_CSV_HEADER}\n")
        for ks in ks_series:
            csv_out.write(f"{ks}\n")
    return out_csv_path
