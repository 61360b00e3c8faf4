import gzip
import re

import pytest

from ksplot.bioformats import (
    REV_CODON_TABLE,
    MalformedRecord,
    UnknownSymbol,
    UnreadableFile,
    UntranslatableFragment,
    codon_pattern,
    dict_to_axt,
    fasta_to_dict,
    parse_pslx_record,
    pslx_to_hits,
    reverse_translate,
)

# Standard genetic code in NCBI order
BASE1 = "TTTTTTTTTTTTTTTTCCCCCCCCCCCCCCCCAAAAAAAAAAAAAAAAGGGGGGGGGGGGGGGG"
BASE2 = "TTTTCCCCAAAAGGGGTTTTCCCCAAAAGGGGTTTTCCCCAAAAGGGGTTTTCCCCAAAAGGGG"
BASE3 = "TCAGTCAGTCAGTCAGTCAGTCAGTCAGTCAGTCAGTCAGTCAGTCAGTCAGTCAGTCAGTCAG"
AMINOS = "FFLLSSSSYY**CC*WLLLLPPPPHHQQRRRRIIIMTTTTNNKKSSRRVVVVAAAADDEEGGGG"
STANDARD_CODE = {f"{b1}{b2}{b3}": aa for b1, b2, b3, aa in zip(BASE1, BASE2, BASE3, AMINOS)}

# One codon per aminoacid
CANONICAL_CODONS = {
    "A": "GCT", "C": "TGT", "D": "GAT", "E": "GAA", "F": "TTT", "G": "GGT", "H": "CAT",
    "I": "ATT", "K": "AAA", "L": "CTG", "M": "ATG", "N": "AAT", "P": "CCT", "Q": "CAA",
    "R": "CGT", "S": "AGC", "T": "ACT", "V": "GTT", "W": "TGG", "Y": "TAT",
}


@pytest.mark.parametrize("aminoacid", sorted(set(AMINOS) - {"*"}))
def test_codon_pattern_matches_exactly_its_codons(aminoacid):
    regex = re.compile(codon_pattern(aminoacid))
    for codon, encoded in STANDARD_CODE.items():
        assert bool(regex.fullmatch(codon)) == (encoded == aminoacid), codon


def test_wildcard_matches_every_codon():
    regex = re.compile(codon_pattern("X"))
    assert all(regex.fullmatch(codon) for codon in STANDARD_CODE)


def test_table_has_twenty_aminoacids_and_wildcard():
    assert set(REV_CODON_TABLE) == set(CANONICAL_CODONS) | {"X"}


def test_codon_pattern_accepts_lowercase():
    assert codon_pattern("m") == codon_pattern("M")


@pytest.mark.parametrize("symbol", ["*", "B", "Z", "J", "-"])
def test_codon_pattern_unknown_symbol(symbol):
    with pytest.raises(UnknownSymbol):
        codon_pattern(symbol)


def test_reverse_translate_recovers_canonical_codons():
    protein = "MKLVWYSRACDEFGHINPQT"
    dna = "".join(CANONICAL_CODONS[aa] for aa in protein)
    assert reverse_translate(f"CC{dna}GG", protein) == dna


def test_reverse_translate_is_repeatable():
    dna = "TTGCCATGGCAATGGCTAAGGC"
    assert reverse_translate(dna, "MA") == reverse_translate(dna, "MA") == "ATGGCA"


def test_reverse_translate_returns_leftmost_match():
    assert reverse_translate("GCCATGGCT", "A") == "GCC"


def test_reverse_translate_searches_reversed_sequence():
    # "ATGAAA" (MK) only appears when reading the sequence backwards, no complement
    assert reverse_translate("AAAGTA", "MK") == "ATGAAA"


def test_reverse_translate_forward_wins_over_reversed():
    assert reverse_translate("ATGAAG" + "AAAGTA", "MK") == "ATGAAG"


def test_reverse_translate_lowercase_fragment_and_soft_masked_dna():
    assert reverse_translate("ccatggct", "ma") == "atggct"


def test_reverse_translate_wildcard():
    assert reverse_translate("ATGNNNTGG", "MXW") == "ATGNNNTGG"


def test_reverse_translate_untranslatable():
    with pytest.raises(UntranslatableFragment):
        reverse_translate("ATGATGATG", "W")


def test_reverse_translate_unknown_symbol():
    with pytest.raises(UnknownSymbol):
        reverse_translate("ATGTAA", "M*")


def test_fasta_to_dict(tmp_path):
    fasta = tmp_path / "cds.fa"
    fasta.write_text(
        ">gene-1 type:complete len:2\n"
        "ATG\n"
        "GCT\n"
        "\n"
        ">gene2\n"
        "AAA\n"
    )
    assert fasta_to_dict(fasta) == {"gene_1": "ATGGCT", "gene2": "AAA"}


def test_fasta_to_dict_gzipped(tmp_path):
    fasta = tmp_path / "cds.fa.gz"
    with gzip.open(fasta, "wt") as fasta_out:
        fasta_out.write(">a-b-c\nATG\nTGG\n")
    assert fasta_to_dict(fasta) == {"a_b_c": "ATGTGG"}


def test_fasta_to_dict_repeated_name_is_concatenated(tmp_path):
    fasta = tmp_path / "cds.fa"
    fasta.write_text(">g-1\nATG\n>g_1\nTGG\n")
    assert fasta_to_dict(fasta) == {"g_1": "ATGTGG"}


def test_fasta_to_dict_unreadable(tmp_path):
    with pytest.raises(UnreadableFile):
        fasta_to_dict(tmp_path / "missing.fa")


def test_parse_pslx_record(pslx_line):
    record = parse_pslx_record(pslx_line("geneA", "geneB", ["mam", "kk"], ["MAM", "KR"]))
    assert record == {
        "q_name": "geneA",
        "t_name": "geneB",
        "q_seqs": ["mam", "kk"],
        "t_seqs": ["MAM", "KR"],
    }


def test_parse_pslx_record_cleans_names(pslx_line):
    record = parse_pslx_record(pslx_line("gene-1.p1", "gene-2.p1", ["M"], ["M"]))
    assert (record["q_name"], record["t_name"]) == ("gene_1.p1", "gene_2.p1")


def test_parse_pslx_record_too_few_fields():
    with pytest.raises(MalformedRecord):
        parse_pslx_record("\t".join(["0"] * 21) + "\n")


def test_pslx_to_hits_skips_blank_lines(tmp_path, pslx_line):
    pslx = tmp_path / "self.pslx"
    pslx.write_text(pslx_line("a", "b", ["M"], ["M"]) + "\n" + pslx_line("b", "a", ["K"], ["K"]))
    hits = list(pslx_to_hits(pslx))
    assert [(h["q_name"], h["t_name"]) for h in hits] == [("a", "b"), ("b", "a")]


def test_pslx_to_hits_unreadable(tmp_path):
    with pytest.raises(UnreadableFile):
        list(pslx_to_hits(tmp_path / "missing.pslx"))


def test_dict_to_axt_sorted_blocks(tmp_path):
    matches = {
        "q_b_t_c": {"query_align": "GGG", "match_align": "GGA", "length": 3},
        "q_a_t_b": {"query_align": "ATG", "match_align": "ATG", "length": 3},
    }
    axt = dict_to_axt(matches, tmp_path / "pairs.atx")
    assert axt.read_text() == (
        ">q_a_t_b\nATG\nATG\n\n"
        ">q_b_t_c\nGGG\nGGA\n\n"
    )
