import pytest


def make_pslx_line(q_name, t_name, q_seqs, t_seqs):
    """
    Build a BLAT PSLX line, only the name and aligned block columns carry real values
    """
    record = ["0"] * 23
    record[8] = "++"
    record[9] = q_name
    record[13] = t_name
    record[21] = "".join(f"{s}," for s in q_seqs)
    record[22] = "".join(f"{s}," for s in t_seqs)
    return "\t".join(record) + "\n"


@pytest.fixture
def pslx_line():
    return make_pslx_line


@pytest.fixture
def hit():
    def _hit(q_name, t_name, q_seqs, t_seqs):
        return {"q_name": q_name, "t_name": t_name, "q_seqs": q_seqs, "t_seqs": t_seqs}
    return _hit
