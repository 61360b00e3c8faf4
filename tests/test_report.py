from ksplot.report import build_ks_report


def test_build_ks_report(tmp_path):
    csv = tmp_path / "asm.fa.csv"
    csv.write_text("ks\n0.0\n0.12\n0.14\n0.9\n2.99\n3.5\n12.0\n")
    html, msg = build_ks_report(
        csv,
        tmp_path / "asm.fa-ks.html",
        "asm.fa",
        0.0,
        3.0,
        0.05,
        version="1.0.0",
        command="ksplot asm.fa",
    )
    text = html.read_text()
    assert html.is_file()
    assert "plotly" in text
    assert "asm.fa" in text
    assert "Command: ksplot asm.fa" in text
    assert "Report generated" in msg


def test_build_ks_report_nothing_below_ks_max(tmp_path):
    csv = tmp_path / "asm.fa.csv"
    csv.write_text("ks\n4.0\n5.0\n")
    html, _ = build_ks_report(csv, tmp_path / "asm.fa-ks.html", "asm.fa", 0.0, 3.0, 0.5)
    assert html.is_file()


def test_build_ks_report_counts_only_plotted_values(tmp_path):
    # Edges are 0.2, 0.5 and 0.8, so 0.1, 0.85 and 1.5 fall outside every bin
    csv = tmp_path / "asm.fa.csv"
    csv.write_text("ks\n0.1\n0.3\n0.6\n0.85\n1.5\n")
    html, _ = build_ks_report(csv, tmp_path / "asm.fa-ks.html", "asm.fa", 0.2, 1.0, 0.3)
    text = html.read_text()
    assert "(2 pairs with K" in text
    assert "(4 pairs with K" not in text
