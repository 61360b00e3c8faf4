#!/usr/bin/env python3
"""
Copyright 2025 The ksplot authors

This is the control program of ksplot, it generates a Ks plot of the paralogs found in a
transcriptome assembly

This file is part of ksplot. ksplot is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by the Free Software Foundation,
either version 3 of the License, or (at your option) any later version. ksplot is distributed in
the hope that it will be useful, but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU General Public License for more
details. You should have received a copy of the GNU General Public License along with ksplot. If
not, see <http://www.gnu.org/licenses/>.
"""

import argparse
import sys

from . import settings
from .misc import MyHelpFormatter, bold, red
from .pipeline import ks_plot
from .version import __version__


def build_parser():
    description = bold(
        f"ksplot {__version__}: Ks plot of the paralogs in a transcriptome assembly\n"
    )
    parser = argparse.ArgumentParser(
        prog="ksplot",
        usage="ksplot TRANSCRIPTOME [options]",
        description=description,
        formatter_class=MyHelpFormatter,
        epilog="R|Examples:\n"
        "  ksplot assembly.fa -b 0.01\n"
        "      Ks (YN model) plot from [0, 3] with bins of 0.01, pairs with at least 300 bp\n"
        "  ksplot assembly.fa -x -m NG\n"
        "      Ks (NG model) plot from (0, 3] with bins of 0.05, pairs with at least 300 bp\n"
        "  ksplot assembly.fa --ks_max 5 -t 500\n"
        "      Ks (YN model) plot from [0, 5] with bins of 0.05, pairs with at least 500 bp\n",
        add_help=False,
    )

    input_group = parser.add_argument_group("Input")
    input_group.add_argument(
        "transcriptome",
        action="store",
        type=str,
        help="Transcriptome assembly in FASTA format",
    )

    output_group = parser.add_argument_group("Output")
    output_group.add_argument(
        "-o",
        "--out",
        action="store",
        default="./ksplot_out",
        type=str,
        dest="out",
        help="Output directory name",
    )
    output_group.add_argument(
        "--keep_all",
        action="store_true",
        dest="keep_all",
        help="Do not delete TransDecoder's working directory",
    )
    output_group.add_argument(
        "--overwrite",
        action="store_true",
        dest="overwrite",
        help="Rerun every step even if its output already exists",
    )

    kaks_group = parser.add_argument_group("Paralog pairs and Ks estimation")
    kaks_group.add_argument(
        "-m",
        "--model",
        action="store",
        default=settings.KAKS_MODEL,
        type=str,
        dest="model",
        help="B|Method used by KaKs_Calculator to estimate Ks, one of:\n"
        f"{', '.join(settings.KAKS_MODELS)}",
    )
    kaks_group.add_argument(
        "-t",
        "--match_length_threshold",
        action="store",
        default=settings.MATCH_LENGTH_THRESHOLD,
        type=int,
        dest="match_length_threshold",
        help="Minimum number of bp of homologous sequence both sequences of a pair must have",
    )
    kaks_group.add_argument(
        "-x",
        "--exclude_zero",
        action="store_true",
        dest="exclude_zero",
        help="Exclude Ks = 0 from the plot (pairs without Ks estimate are excluded too), useful for"
        " Trinity transcriptomes",
    )

    plot_group = parser.add_argument_group("Plot")
    plot_group.add_argument(
        "-b",
        "--bin_size",
        action="store",
        default=settings.BIN_SIZE,
        type=float,
        dest="bin_size",
        help="Size of the bins in the Ks histogram",
    )
    plot_group.add_argument(
        "--ks_min",
        action="store",
        default=settings.KS_MIN,
        type=float,
        dest="ks_min",
        help="Lower boundary of the x-axis of the Ks plot",
    )
    plot_group.add_argument(
        "--ks_max",
        action="store",
        default=settings.KS_MAX,
        type=float,
        dest="ks_max",
        help="Upper boundary of the x-axis of the Ks plot, larger Ks are not plotted",
    )

    deps_group = parser.add_argument_group("Software paths")
    deps_group.add_argument(
        "--transdecoder_path",
        action="store",
        default="TransDecoder",
        type=str,
        dest="transdecoder_path",
        help="Path to TransDecoder",
    )
    deps_group.add_argument(
        "--blat_path",
        action="store",
        default="blat",
        type=str,
        dest="blat_path",
        help="Path to BLAT",
    )
    deps_group.add_argument(
        "--kaks_calculator_path",
        action="store",
        default="KaKs_Calculator",
        type=str,
        dest="kaks_calculator_path",
        help="Path to KaKs_Calculator",
    )

    help_group = parser.add_argument_group("Help")
    help_group.add_argument("-h", "--help", action="help", help="Show this help message and exit")
    help_group.add_argument(
        "--version",
        action="version",
        version=f"ksplot v{__version__}",
        help="Show ksplot's version number",
    )
    return parser


def main():
    parser = build_parser()
    if len(sys.argv) == 1:
        parser.print_help()
        exit(red("\nERROR: You must specify a transcriptome for input\n"))

    full_command = " ".join(sys.argv)
    args = parser.parse_args(sys.argv[1:])
    ks_plot(full_command, args)
    exit(1)


if __name__ == "__main__":
    main()
