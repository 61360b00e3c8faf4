#!/usr/bin/env python3
"""
Copyright 2025 The ksplot authors

This file is part of ksplot. ksplot is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by the Free Software Foundation,
either version 3 of the License, or (at your option) any later version. ksplot is distributed in
the hope that it will be useful, but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU General Public License for more
details. You should have received a copy of the GNU General Public License along with ksplot. If
not, see <http://www.gnu.org/licenses/>.
"""

import shutil
import time
from pathlib import Path

from tqdm import tqdm

from . import log, settings
from .bioformats import KsPlotError, dict_to_axt, fasta_to_dict, pslx_to_hits
from .kaks import extract_ks_series, run_kaks_calculator, write_ks_csv
from .misc import (
    blat_path_version,
    bold,
    dim,
    elapsed_time,
    format_dep_msg,
    has_valid_ext,
    kaks_calculator_path_version,
    make_output_dir,
    output_exists,
    python_library_check,
    quit_with_error,
    successful_exit,
    transdecoder_path_version,
)
from .paralogs import extract_matches, run_blat_self, run_transdecoder
from .report import build_ks_report
from .version import __version__


def ks_plot(full_command, args):
    ksplot_start = time.time()
    out_dir, out_dir_msg = make_output_dir(args.out)
    log.logger = log.Log(Path(out_dir, settings.LOG_FILENAME), stdout_verbosity_level=1)

    mar = 24  # Margin for aligning parameters and values

    ################################################################################################
    ############################################################################### STARTING SECTION
    log.log_section_header("Starting ksplot", single_newline=False)
    log.log_explanation(
        "Welcome to ksplot. The coding regions of the transcriptome will be predicted with"
        " TransDecoder, the predicted proteins will be aligned against themselves with BLAT to find"
        " paralogous pairs, the protein alignments will be translated back to nucleotides to"
        " estimate Ks with KaKs_Calculator, and finally the Ks distribution will be plotted as a"
        " histogram",
        extra_empty_lines_after=0,
    )
    log.log_explanation("Intermediate files are kept in the output directory")

    log.log_parameter("ksplot version", f"v{__version__}", mar)
    log.log_parameter("Command", full_command, mar)
    log.log("")

    log.log(f"{'Dependencies':>{mar}}:")
    _, transdecoder_version, transdecoder_status = transdecoder_path_version(args.transdecoder_path)
    _, blat_version, blat_status = blat_path_version(args.blat_path)
    _, kaks_version, kaks_status = kaks_calculator_path_version(args.kaks_calculator_path)
    log.log(format_dep_msg(f"{'TransDecoder':>{mar}}: ", transdecoder_version, transdecoder_status))
    log.log(format_dep_msg(f"{'BLAT':>{mar}}: ", blat_version, blat_status))
    log.log(format_dep_msg(f"{'KaKs_Calculator':>{mar}}: ", kaks_version, kaks_status))
    log.log("")

    log.log(f"{'Python libraries':>{mar}}:")
    for library_name in ["numpy", "pandas", "plotly", "tqdm"]:
        _, library_version, library_status = python_library_check(library_name)
        log.log(format_dep_msg(f"{library_name:>{mar}}: ", library_version, library_status))
    log.log("")

    transcriptome = Path(args.transcriptome)
    log.log_parameter("Transcriptome", transcriptome, mar)
    log.log_parameter("Output directory", out_dir, mar, out_dir_msg)
    log.log_parameter("Overwrite files", args.overwrite, mar)
    log.log_parameter("Keep all files", args.keep_all, mar)
    log.log("")

    if not transcriptome.is_file():
        quit_with_error(f"Could not locate '{transcriptome}'")
    if not has_valid_ext(transcriptome, settings.FASTA_VALID_EXTENSIONS):
        log.log(dim(
            f"{'':>{mar}}  '{transcriptome.name}' does not have a usual FASTA extension"
            f" ({', '.join(settings.FASTA_VALID_EXTENSIONS)}), trying to use it anyway"
        ))
    for dep_name, dep_status, dep_option in [
        ("TransDecoder", transdecoder_status, "--transdecoder_path"),
        ("BLAT", blat_status, "--blat_path"),
        ("KaKs_Calculator", kaks_status, "--kaks_calculator_path"),
    ]:
        if dep_status == "not found":
            quit_with_error(
                f"ksplot could not find {dep_name}, please provide a valid path with '{dep_option}'"
            )
    if args.bin_size <= 0:
        quit_with_error(f"The bin size must be greater than 0, you provided {args.bin_size}")
    if args.ks_max <= args.ks_min:
        quit_with_error(
            f"'--ks_max' ({args.ks_max}) must be greater than '--ks_min' ({args.ks_min})"
        )

    file_prefix = transcriptome.name
    paths = {
        fmt: Path(out_dir, f"{file_prefix}{suffix}")
        for fmt, suffix in settings.FORMAT_SUFFIXES.items()
    }
    # Once a step runs, every following step has to run again
    rerun = args.overwrite

    ################################################################################################
    ########################################################################### TRANSDECODER SECTION
    log.log_section_header("Coding region prediction with TransDecoder")
    log.log_explanation(
        "TransDecoder identifies the candidate coding regions within the transcripts, the"
        " predicted proteins are used to find paralogs and their coding sequences to recover the"
        " nucleotides of the protein alignments"
    )
    if rerun or not (output_exists(paths["PEP"]) and output_exists(paths["MRNA"])):
        start = time.time()
        try:
            run_transdecoder(args.transdecoder_path, transcriptome, out_dir, args.keep_all)
        except KsPlotError as e:
            quit_with_error(f"Coding region prediction failed. {e}")
        rerun = True
        log.log(bold(
            f" └─→ Completed TransDecoder [{elapsed_time(time.time() - start)}]"
        ))
    else:
        log.log(dim("TransDecoder output found, skipping (use '--overwrite' to run it again)"))
    log.log_parameter("Proteins", paths["PEP"].name, mar)
    log.log_parameter("Coding sequences", paths["MRNA"].name, mar)

    ################################################################################################
    ################################################################################### BLAT SECTION
    log.log_section_header("Protein self-alignment with BLAT")
    log.log_explanation(
        "Every predicted protein is aligned against all the others, hits between different"
        " proteins indicate paralogous pairs"
    )
    if rerun or not paths["PSLX"].is_file():
        start = time.time()
        try:
            run_blat_self(args.blat_path, paths["PEP"], paths["PSLX"])
        except KsPlotError as e:
            quit_with_error(f"Protein self-alignment failed. {e}")
        log.log(bold(
            f" └─→ Completed self-alignment [{elapsed_time(time.time() - start)}]"
        ))
    else:
        log.log(dim("BLAT output found, skipping (use '--overwrite' to run it again)"))
    log.log_parameter("Alignments", paths["PSLX"].name, mar)

    ################################################################################################
    ########################################################################## PARALOG PAIRS SECTION
    log.log_section_header("Extraction of paralogous pairs")
    log.log_explanation(
        "The aligned protein blocks are translated back to the nucleotides of their coding"
        " sequences. Pairs where either sequence has fewer nucleotides than"
        " '--match_length_threshold' are discarded, and only the longest alignment is kept for"
        " each pair of sequences"
    )
    log.log_parameter("Min. match length", f"{args.match_length_threshold} bp", mar)
    start = time.time()
    try:
        sequences = fasta_to_dict(paths["MRNA"])
        tqdm_cols = min(shutil.get_terminal_size().columns, settings.TQDM_COLS)
        with tqdm(pslx_to_hits(paths["PSLX"]), ncols=tqdm_cols, unit="hit") as hits:
            matches = extract_matches(hits, sequences, args.match_length_threshold)
        dict_to_axt(matches, paths["ATX"])
    except (KsPlotError, OSError) as e:
        quit_with_error(f"Extraction of paralogous pairs failed. {e}")
    log.log_parameter("Coding sequences", log.int_to_str(len(sequences)), mar)
    log.log_parameter("Pairs extracted", log.int_to_str(len(matches)), mar)
    log.log_parameter("Pairs file", paths["ATX"].name, mar)
    log.log(bold(
        f" └─→ Completed parsing BLAT output, {len(matches)} hit(s) met the"
        f" requirements [{elapsed_time(time.time() - start)}]"
    ))

    ################################################################################################
    ################################################################################### KAKS SECTION
    log.log_section_header("Ks estimation with KaKs_Calculator")
    log.log_parameter("Method", args.model, mar)
    start = time.time()
    try:
        run_kaks_calculator(args.kaks_calculator_path, paths["ATX"], paths["KAKS"], args.model)
        ks_series = extract_ks_series(paths["KAKS"], args.exclude_zero)
        write_ks_csv(ks_series, paths["CSV"])
    except (KsPlotError, OSError) as e:
        quit_with_error(f"Ks estimation failed. {e}")
    log.log_parameter("Exclude Ks = 0", args.exclude_zero, mar)
    log.log_parameter("Ks values", log.int_to_str(len(ks_series)), mar)
    log.log_parameter("Ks table", paths["CSV"].name, mar)
    log.log(bold(
        f" └─→ Completed KaKs_Calculator [{elapsed_time(time.time() - start)}]"
    ))

    ################################################################################################
    ################################################################################### PLOT SECTION
    log.log_section_header("Ks plot")
    log.log_parameter("Ks range", f"[{args.ks_min}, {args.ks_max}]", mar)
    log.log_parameter("Bin size", args.bin_size, mar)
    ks_html_report, ks_html_msg = build_ks_report(
        paths["CSV"],
        paths["HTML"],
        file_prefix,
        args.ks_min,
        args.ks_max,
        args.bin_size,
        version=__version__,
        command=full_command,
    )
    log.log_parameter("Ks plot", ks_html_report, mar)
    log.log(f"{'':>{mar}}  {ks_html_msg}")

    ################################################################################################
    ################################################################################# ENDING SECTION
    successful_exit(
        f"ksplot: Ks plot completed [{elapsed_time(time.time() - ksplot_start)}]"
    )
