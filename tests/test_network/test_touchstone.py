"""Tests for Touchstone export and import."""
import pytest

from antenna_em.interfaces import SParameterPoint
from antenna_em.network.touchstone import (
    DEFAULT_COMMENT, format_touchstone, read_touchstone, write_touchstone,
)


POINTS = [
    SParameterPoint(freq_ghz=2.4, s11_mag_db=-25.5, s11_phase_deg=12.25, vswr=1.1),
    SParameterPoint(freq_ghz=2.5, s11_mag_db=-10.0, s11_phase_deg=-45.0, vswr=1.9),
]


class TestFormat:
    """Tests for format_touchstone."""

    def test_exact_text(self):
        """Header and row formatting match the .s1p layout."""
        text = format_touchstone(POINTS)
        assert text == (
            f"! {DEFAULT_COMMENT}\n"
            "# GHz S DB R 50\n"
            "2.400000 -25.5000 12.2500\n"
            "2.500000 -10.0000 -45.0000"
        )

    def test_empty_sweep(self):
        """No points gives just the header."""
        assert format_touchstone([], "x") == "! x\n# GHz S DB R 50\n"


class TestReadWrite:
    """Tests for write_touchstone and read_touchstone."""

    def test_write_then_read(self, tmp_path):
        """Values survive a file round trip at the written precision."""
        path = write_touchstone(tmp_path / "sweep.s1p", POINTS)
        assert path.exists()
        loaded = read_touchstone(path)
        assert [p.freq_ghz for p in loaded] == pytest.approx([2.4, 2.5])
        assert loaded[0].s11_mag_db == pytest.approx(-25.5)
        assert loaded[1].s11_phase_deg == pytest.approx(-45.0)
        assert loaded[1].vswr == pytest.approx((1 + 10 ** -0.5) / (1 - 10 ** -0.5))

    def test_mhz_ma(self, tmp_path):
        """MHz frequencies and magnitude/angle data are converted."""
        path = tmp_path / "ma.s1p"
        path.write_text("! comment\n# MHz S MA R 50\n2400 0.5 30 ! inline\n")
        point = read_touchstone(path)[0]
        assert point.freq_ghz == pytest.approx(2.4)
        assert point.s11_mag_db == pytest.approx(-6.0206, abs=1e-4)
        assert point.s11_phase_deg == pytest.approx(30.0)
        assert point.vswr == pytest.approx(3.0)

    def test_real_imaginary(self, tmp_path):
        """RI data is converted to dB and degrees."""
        path = tmp_path / "ri.s1p"
        path.write_text("# Hz S RI R 50\n1e9 0 0.1\n")
        point = read_touchstone(path)[0]
        assert point.freq_ghz == pytest.approx(1.0)
        assert point.s11_mag_db == pytest.approx(-20.0)
        assert point.s11_phase_deg == pytest.approx(90.0)

    def test_bad_row(self, tmp_path):
        """Rows without three values are rejected with the line number."""
        path = tmp_path / "bad.s1p"
        path.write_text("# GHz S DB R 50\n1.0 -3.0\n")
        with pytest.raises(ValueError, match=":2:"):
            read_touchstone(path)

    def test_unsupported_option(self, tmp_path):
        """Unknown option tokens are rejected."""
        path = tmp_path / "y.s1p"
        path.write_text("# GHz Y DB R 50\n1.0 -3.0 0\n")
        with pytest.raises(ValueError, match="Unsupported"):
            read_touchstone(path)

    def test_empty_file(self, tmp_path):
        """A file with only comments has no data."""
        path = tmp_path / "empty.s1p"
        path.write_text("! nothing here\n")
        with pytest.raises(ValueError, match="No data"):
            read_touchstone(path)
