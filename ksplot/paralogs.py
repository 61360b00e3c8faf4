#!/usr/bin/env python3
"""
Copyright 2025 The ksplot authors

This module finds the paralogous pairs of coding sequences in a transcriptome: it predicts the
coding regions with TransDecoder, aligns the predicted proteins against themselves with BLAT and
turns the protein alignments back into nucleotide alignments for KaKs_Calculator

This file is part of ksplot. ksplot is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by the Free Software Foundation,
either version 3 of the License, or (at your option) any later version. ksplot is distributed in
the hope that it will be useful, but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU General Public License for more
details. You should have received a copy of the GNU General Public License along with ksplot. If
not, see <http://www.gnu.org/licenses/>.
"""

import shutil
from pathlib import Path

from . import settings
from .bioformats import (
    ExternalToolError,
    MisalignedLength,
    NoQualifyingMatches,
    UntranslatableFragment,
    reverse_translate,
)
from .misc import run_logged_command


def run_transdecoder(transdecoder_path, transcriptome_path: Path, out_dir: Path, keep_all=False):
    """
    Predict the coding regions of `transcriptome_path` with TransDecoder inside `out_dir`, returns
    the paths to the predicted proteins and their coding sequences
    """
    transcriptome_path = Path(transcriptome_path).resolve()
    workdir = Path(out_dir, settings.TRANSDECODER_WORKDIR)
    transdecoder_cmd = [
        transdecoder_path,
        "-t", transcriptome_path,
        "--workdir", workdir,
    ]
    transdecoder_log = Path(out_dir, f"{transcriptome_path.name}.transdecoder.log")
    run_logged_command(transdecoder_cmd, transdecoder_log, "TransDecoder", cwd=out_dir)

    if not keep_all:
        shutil.rmtree(workdir, ignore_errors=True)

    pep_path = Path(out_dir, f"{transcriptome_path.name}{settings.FORMAT_SUFFIXES['PEP']}")
    mrna_path = Path(out_dir, f"{transcriptome_path.name}{settings.FORMAT_SUFFIXES['MRNA']}")
    for expected in [pep_path, mrna_path]:
        if not expected.is_file():
            raise ExternalToolError(
                f"TransDecoder did not produce '{expected.name}', see '{transdecoder_log}'"
            )
    return pep_path, mrna_path


def run_blat_self(blat_path, pep_path: Path, pslx_path: Path):
    """
    Align the proteins in `pep_path` against themselves, the output keeps the aligned blocks
    (PSLX format) and has no header
    """
    blat_cmd = [
        blat_path,
        pep_path,
        pep_path,
        "-prot",
        "-out=pslx",
        pslx_path,
        "-noHead",
    ]
    blat_log = Path(Path(pslx_path).parent, f"{Path(pslx_path).name}.log")
    run_logged_command(blat_cmd, blat_log, "BLAT")
    if not Path(pslx_path).is_file():
        raise ExternalToolError(f"BLAT did not produce '{pslx_path}', see '{blat_log}'")
    return pslx_path


def reverse_translate_blocks(sequences: dict, seq_name: str, blocks: list):
    """
    Concatenate the reverse translations of the aligned aminoacid `blocks` of `seq_name`
    """
    if seq_name not in sequences:
        raise UntranslatableFragment(
            f"'{seq_name}' has BLAT hits but it is not among the coding sequences"
        )
    return "".join(reverse_translate(sequences[seq_name], block) for block in blocks)


def extract_matches(hits, sequences: dict, match_length_threshold: int):
    """
    Turn BLAT's protein self-alignments into nucleotide alignments and keep a single alignment per
    pair of sequences

    Parameters
    ----------
    hits : iterable
        Records from `bioformats.pslx_to_hits()`, dictionaries with 'q_name', 't_name', 'q_seqs'
        and 't_seqs'
    sequences : dict
        Coding sequences from `bioformats.fasta_to_dict()`
    match_length_threshold : int
        Minimum length in nucleotides both sides of the alignment must reach

    Returns
    -------
    dict
        Pair name 'q_<query>_t_<match>' as key and a dictionary with 'query_align',
        'match_align' and 'length' as value

    Raises
    ------
    MisalignedLength
        If a query alignment length is not a multiple of 3
    NoQualifyingMatches
        If no hit passed the filters
    """
    matches = {}
    accepted = set()  # "query-match" of every hit already accepted
    for hit in hits:
        query_name, match_name = hit["q_name"], hit["t_name"]
        if query_name == match_name:
            continue

        query_align = reverse_translate_blocks(sequences, query_name, hit["q_seqs"])
        match_align = reverse_translate_blocks(sequences, match_name, hit["t_seqs"])
        if min(len(query_align), len(match_align)) < match_length_threshold:
            continue

        if len(query_align) % 3 != 0:
            raise MisalignedLength(
                f"Alignment of '{query_name}' with '{match_name}' has {len(query_align)} bp,"
                " which is not a multiple of 3"
            )

        # B->A is dropped once A->B was accepted, reciprocal alignments are the same pair
        if f"{match_name}-{query_name}" in accepted:
            continue

        name = f"q_{query_name}_t_{match_name}"
        pair = {
            "query_align": query_align,
            "match_align": match_align,
            "length": len(query_align),
        }
        # Several hits between the same sequences, the longest one stays, ties keep the first
        if name not in matches or matches[name]["length"] < pair["length"]:
            matches[name] = pair
        accepted.add(f"{query_name}-{match_name}")

    if not matches:
        raise NoQualifyingMatches("No BLAT hits met the requirements")

    return dict(sorted(matches.items()))
