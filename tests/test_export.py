from matplotlib.figure import Figure

from strain_multiplot.export import export_png


def test_export_png_appends_suffix(tmp_path) -> None:
    fig = Figure(figsize=(2, 1))
    fig.add_subplot(111).plot([0, 1], [0, 1])

    written = export_png(fig, str(tmp_path / "out" / "plot"), dpi=50)

    assert written.endswith("plot.png")
    with open(written, "rb") as fh:
        assert fh.read(8) == b"\x89PNG\r\n\x1a\n"
