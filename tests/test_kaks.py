import subprocess
from pathlib import Path

import numpy as np
import pytest

from ksplot.bioformats import ExternalToolError, MalformedRecord, UnreadableFile
from ksplot.kaks import extract_ks_series, ks_bin_edges, run_kaks_calculator, write_ks_csv

KAKS_OUTPUT = (
    "Sequence\tMethod\tKa\tKs\tKa/Ks\tP-Value(Fisher)\tLength\n"
    "q_geneA_t_geneB\tYN\t0.0123\t0.4123\t0.0298\t0.01\t900\n"
    "q_geneC_t_geneD\tYN\tNA\tNA\tNA\tNA\t450\n"
    "q_geneE_t_geneF\tYN\t0\t0\tNA\t1\t600\n"
)


@pytest.fixture
def kaks_file(tmp_path):
    kaks = tmp_path / "asm.fa.kaks"
    kaks.write_text(KAKS_OUTPUT)
    return kaks


def test_extract_ks_series_keeps_zero(kaks_file):
    assert extract_ks_series(kaks_file, exclude_zero=False) == [0.4123, 0.0, 0.0]


def test_extract_ks_series_exclude_zero(kaks_file):
    assert extract_ks_series(kaks_file, exclude_zero=True) == [0.4123]


def test_extract_ks_series_header_only(tmp_path):
    kaks = tmp_path / "empty.kaks"
    kaks.write_text(KAKS_OUTPUT.splitlines(keepends=True)[0])
    assert extract_ks_series(kaks, exclude_zero=False) == []


def test_extract_ks_series_malformed(tmp_path):
    kaks = tmp_path / "bad.kaks"
    kaks.write_text(KAKS_OUTPUT + "q_x_t_y\tYN\n")
    with pytest.raises(MalformedRecord):
        extract_ks_series(kaks, exclude_zero=False)


def test_extract_ks_series_not_a_number(tmp_path):
    kaks = tmp_path / "bad.kaks"
    kaks.write_text(KAKS_OUTPUT + "q_x_t_y\tYN\t0.1\tnope\t0.2\n")
    with pytest.raises(MalformedRecord):
        extract_ks_series(kaks, exclude_zero=False)


def test_extract_ks_series_unreadable(tmp_path):
    with pytest.raises(UnreadableFile):
        extract_ks_series(tmp_path / "missing.kaks", exclude_zero=False)


def test_ks_bin_edges_defaults():
    edges = ks_bin_edges(0.0, 3.0, 0.05)
    assert len(edges) == 61
    assert edges[0] == 0.0
    assert np.isclose(edges[-1], 3.0)


def test_ks_bin_edges_do_not_pass_ks_max():
    assert np.allclose(ks_bin_edges(0.0, 1.0, 0.3), [0.0, 0.3, 0.6, 0.9])


def test_ks_bin_edges_offset_minimum():
    assert np.allclose(ks_bin_edges(0.5, 1.5, 0.25), [0.5, 0.75, 1.0, 1.25, 1.5])


@pytest.mark.parametrize("ks_min, ks_max, bin_size", [(0, 3, 0), (0, 3, -0.1), (3, 3, 0.05)])
def test_ks_bin_edges_invalid(ks_min, ks_max, bin_size):
    with pytest.raises(ValueError):
        ks_bin_edges(ks_min, ks_max, bin_size)


def test_write_ks_csv(tmp_path):
    csv = write_ks_csv([0.4123, 0.0, 2.5], tmp_path / "asm.fa.csv")
    assert csv.read_text() == "ks\n0.4123\n0.0\n2.5\n"


def test_run_kaks_calculator(tmp_path, monkeypatch):
    axt = tmp_path / "asm.fa.atx"
    kaks = tmp_path / "asm.fa.kaks"
    calls = []

    def fake_run(command, stdout=None, stderr=None, cwd=None):
        calls.append(command)
        Path(command[4]).write_text(KAKS_OUTPUT)
        return subprocess.CompletedProcess(command, 0)

    monkeypatch.setattr(subprocess, "run", fake_run)
    assert run_kaks_calculator("KaKs_Calculator", axt, kaks, "NG") == kaks
    assert calls[0] == ["KaKs_Calculator", "-i", f"{axt}", "-o", f"{kaks}", "-m", "NG"]
    assert (tmp_path / "asm.fa.kaks.log").is_file()


def test_run_kaks_calculator_no_output(tmp_path, monkeypatch):
    monkeypatch.setattr(
        subprocess, "run", lambda command, **kwargs: subprocess.CompletedProcess(command, 0)
    )
    with pytest.raises(ExternalToolError):
        run_kaks_calculator("KaKs_Calculator", tmp_path / "a.atx", tmp_path / "a.kaks", "YN")
