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

import gzip
import re
from pathlib import Path

from . import settings


class KsPlotError(Exception):
    """Base class of every error that aborts a ksplot run"""


class UnreadableFile(KsPlotError):
    """An input file is missing or cannot be opened"""


class MalformedRecord(KsPlotError):
    """A line of a tabular input has fewer fields than required"""


class UnknownSymbol(KsPlotError):
    """An aminoacid symbol is not in `REV_CODON_TABLE`"""


class UntranslatableFragment(KsPlotError):
    """An aminoacid fragment was not found in either orientation of its nucleotide sequence"""


class MisalignedLength(KsPlotError):
    """A reverse-translated alignment length is not a multiple of 3"""


class NoQualifyingMatches(KsPlotError):
    """No BLAT hit passed the filters, there is nothing to send to KaKs_Calculator"""


class ExternalToolError(KsPlotError):
    """An external program failed or did not produce its expected output"""


# Regular expressions matching all the codons of each aminoacid in the Standard genetic code, 'X'
# matches any codon. Positions that allow any nucleotide use '.' so codons with ambiguities that
# still translate to a single aminoacid are matched too
# fmt: off
REV_CODON_TABLE = {
    "A": "GC.",
    "C": "TG[CT]",
    "D": "GA[CT]",
    "E": "GA[AG]",
    "F": "TT[CT]",
    "G": "GG.",
    "H": "CA[CT]",
    "I": "AT[ACT]",
    "K": "AA[AG]",
    "L": "(?:TT[AG]|CT.)",
    "M": "ATG",
    "N": "AA[CT]",
    "P": "CC.",
    "Q": "CA[AG]",
    "R": "(?:AG[AG]|CG.)",
    "S": "(?:AG[CT]|TC.)",
    "T": "AC.",
    "V": "GT.",
    "W": "TGG",
    "Y": "TA[CT]",
    "X": "...",
}
# fmt: on


def codon_pattern(aminoacid: str):
    """
    Return the regular expression that matches the codons of `aminoacid`, lowercase residues as
    written by BLAT in PSLX files are accepted
    """
    try:
        return REV_CODON_TABLE[aminoacid.upper()]
    except KeyError:
        raise UnknownSymbol(f"'{aminoacid}' is not a valid aminoacid symbol") from None


def reverse_translate(dna: str, protein: str):
    """
    Recover from `dna` the nucleotides that encode the aminoacid fragment `protein`

    Parameters
    ----------
    dna : str
        Full nucleotide sequence the fragment was translated from
    protein : str
        Contiguous aminoacid fragment

    Returns
    -------
    str
        The leftmost substring of `dna` matching the codons of `protein`. When there is none, the
        leftmost match in `dna` read backwards (the reversed string, not the reverse complement)
        is returned instead, this covers hits reported in the opposite orientation

    Raises
    ------
    UnknownSymbol
        If `protein` contains a symbol without codons
    UntranslatableFragment
        If no substring matches in either orientation
    """
    regex = re.compile("".join(codon_pattern(aa) for aa in protein), re.IGNORECASE)
    for seq in (dna, dna[::-1]):
        match = regex.search(seq)
        if match:
            return match.group(0)
    raise UntranslatableFragment(
        f"Protein sequence '{protein}' could not be reverse translated"
    )


def clean_seq_name(seq_name: str):
    """
    Sequence names are compared after replacing the characters in `settings.SEQ_NAME_REPLACEMENTS`
    """
    for old, new in settings.SEQ_NAME_REPLACEMENTS.items():
        seq_name = seq_name.replace(old, new)
    return seq_name


def fasta_to_dict(fasta_path):
    """
    Turns the FASTA file in `fasta_path` into a dictionary of sequence names and sequences. Names
    are the text after '>' up to the first whitespace, with '-' replaced by '_'. For example:
    ```text
    >TRINITY_DN10-c0_g1_i1.p1 type:complete len:120
    ATGGCTATGGCT
    ATGGCT
    ```
    Returns the dictionary:
    ```
    {'TRINITY_DN10_c0_g1_i1.p1': 'ATGGCTATGGCTATGGCT'}
    ```
    """
    if f"{fasta_path}".endswith(".gz"):
        opener = gzip.open
    else:
        opener = open
    fasta_out = {}
    try:
        with opener(fasta_path, "rt") as fasta_in:
            name = None
            for line in fasta_in:
                line = line.rstrip()
                if not line:
                    continue
                if line.startswith(settings.FASTA_HEADER_MARKER):
                    fields = line[len(settings.FASTA_HEADER_MARKER):].split()
                    name = clean_seq_name(fields[0] if fields else "")
                    fasta_out.setdefault(name, "")
                elif name is not None:
                    fasta_out[name] += line
    except OSError as e:
        raise UnreadableFile(f"Could not open '{fasta_path}': {e.strerror}") from e
    return fasta_out


def parse_pslx_record(pslx_line):
    """
    Extract the query and target names and their aligned aminoacid blocks from a line of BLAT's
    PSLX output, names are cleaned the same way as in `fasta_to_dict()`
    """
    record = pslx_line.rstrip("\n").split("\t")
    cols = settings.PSLX_COLUMNS
    if len(record) <= max(cols.values()):
        raise MalformedRecord(
            f"PSLX record has {len(record)} fields, at least {max(cols.values()) + 1} are"
            f" required: {pslx_line.strip()}"
        )
    return {
        "q_name": clean_seq_name(record[cols["q_name"]]),
        "t_name": clean_seq_name(record[cols["t_name"]]),
        "q_seqs": [s for s in record[cols["q_seqs"]].strip(",").split(",") if s],
        "t_seqs": [s for s in record[cols["t_seqs"]].strip(",").split(",") if s],
    }


def pslx_to_hits(pslx_path):
    """
    Yield every record of the PSLX file `pslx_path` parsed by `parse_pslx_record()`
    """
    try:
        pslx_in = open(pslx_path, "rt")
    except OSError as e:
        raise UnreadableFile(f"Could not open '{pslx_path}': {e.strerror}") from e
    with pslx_in:
        for line in pslx_in:
            if line.strip():
                yield parse_pslx_record(line)


def dict_to_axt(matches: dict, out_axt_path):
    """
    Saves the paired alignments from `paralogs.extract_matches()` sorted by name to
    `out_axt_path`, each pair as a header line, the query and the match nucleotides and an empty
    line, the format read by KaKs_Calculator
    """
    out_axt_path = Path(out_axt_path)
    with open(out_axt_path, "wt") as axt_out:
        for name in sorted(matches):
            pair = matches[name]
            axt_out.write(
                f"{settings.FASTA_HEADER_MARKER}{name}\n"
                f"{pair['query_align']}\n"
                f"{pair['match_align']}\n\n"
            )
    return out_axt_path
