#!/usr/bin/env python3
"""
Copyright 2025 The ksplot authors

This module contains hard-coded settings for ksplot

This file is part of ksplot. ksplot is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by the Free Software Foundation,
either version 3 of the License, or (at your option) any later version. ksplot is distributed in
the hope that it will be useful, but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU General Public License for more
details. You should have received a copy of the GNU General Public License along with ksplot. If
not, see <http://www.gnu.org/licenses/>.
"""

# FASTA valid filename extensions:
FASTA_VALID_EXTENSIONS = [".fa", ".fna", ".fasta", ".fa.gz", ".fna.gz", ".fasta.gz"]

# Default method used by KaKs_Calculator to estimate Ks
KAKS_MODEL = "YN"

# Methods accepted by KaKs_Calculator, only shown in the help, the value is passed through as is
KAKS_MODELS = [
    "NG", "LWL", "LPB", "MLWL", "MLPB", "GY", "YN", "MYN", "MS", "MA",
    "GNG", "GLWL", "GLPB", "GMLWL", "GMLPB", "GYN", "GMYN",
]

# Minimum length in nucleotides that both sides of a reverse-translated BLAT hit must have
MATCH_LENGTH_THRESHOLD = 300

# Histogram bin size and x-axis range of the Ks plot
BIN_SIZE = 0.05
KS_MIN = 0.0
KS_MAX = 3.0

# Token written by KaKs_Calculator when Ks could not be estimated, it is read as Ks = 0
KAKS_NA = "NA"

# Zero-based column of the Ks value in the KaKs_Calculator output table
KAKS_KS_COLUMN = 3

# Header of the single-column file with the Ks series
KS_CSV_HEADER = "ks"

# Zero-based columns of BLAT's PSLX output used to extract paralogous pairs
PSLX_COLUMNS = {
    "q_name": 9,
    "t_name": 13,
    "q_seqs": 21,
    "t_seqs": 22,
}

# Character that marks the beginning of a FASTA header
FASTA_HEADER_MARKER = ">"

# Characters in sequence names replaced when loading the coding sequences, KaKs_Calculator and
# BLAT do not treat them the same way
SEQ_NAME_REPLACEMENTS = {"-": "_"}

# Working directory given to TransDecoder, removed after the run unless '--keep_all' is used
TRANSDECODER_WORKDIR = "ks-plot-transdecoder"

# Suffixes of the files produced along the pipeline, appended to the transcriptome filename
FORMAT_SUFFIXES = {
    "PEP": ".transdecoder.pep",
    "MRNA": ".transdecoder.mRNA",
    "PSLX": ".pslx",
    "ATX": ".atx",
    "KAKS": ".kaks",
    "CSV": ".csv",
    "HTML": "-ks.html",
}

# Name of the log file written to the output directory
LOG_FILENAME = "ksplot.log"

# Maximum width of the progress bars
TQDM_COLS = 120
