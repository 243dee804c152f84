"""
Unit tests for lab value display helpers.
"""

import pytest
from app.services.lipidgenomics.lab_units import (
    Analyte,
    LabBand,
    LabUnit,
    classify_value,
    convert,
    default_unit,
    format_value,
)


class TestConversion:

    def test_mmol_is_identity(self):
        assert convert(3.6, Analyte.LDL, LabUnit.MMOL) == 3.6

    def test_cholesterol_factor(self):
        assert convert(1.0, Analyte.HDL, LabUnit.MGDL) == pytest.approx(38.67)

    def test_triglyceride_factor(self):
        assert convert(1.0, Analyte.TG, "mgdl") == pytest.approx(88.57)


class TestFormatting:

    def test_mmol_one_decimal(self):
        assert format_value(3.6, Analyte.LDL, LabUnit.MMOL) == "3.6 mmol/L"
        assert format_value(2.65, Analyte.LDL, LabUnit.MMOL) in ("2.6 mmol/L", "2.7 mmol/L")

    def test_mgdl_integer(self):
        assert format_value(3.6, Analyte.LDL, LabUnit.MGDL) == "139 mg/dL"
        assert format_value(1.7, Analyte.TG, LabUnit.MGDL) == "151 mg/dL"


class TestBands:

    @pytest.mark.parametrize("value,band", [
        (2.9, LabBand.DESIRABLE),
        (3.0, LabBand.BORDERLINE),
        (3.9, LabBand.BORDERLINE),
        (4.0, LabBand.HIGH),
    ])
    def test_ldl(self, value, band):
        assert classify_value(value, Analyte.LDL) == band

    @pytest.mark.parametrize("value,band", [
        (1.0, LabBand.DESIRABLE),
        (0.95, LabBand.BORDERLINE),
        (0.8, LabBand.HIGH),
    ])
    def test_hdl_low_is_risk(self, value, band):
        assert classify_value(value, Analyte.HDL) == band

    @pytest.mark.parametrize("value,band", [
        (1.6, LabBand.DESIRABLE),
        (1.7, LabBand.BORDERLINE),
        (2.3, LabBand.HIGH),
    ])
    def test_tg(self, value, band):
        assert classify_value(value, Analyte.TG) == band

    def test_band_colors(self):
        assert LabBand.DESIRABLE.color == "green"
        assert LabBand.BORDERLINE.color == "orange"
        assert LabBand.HIGH.color == "red"


class TestDefaultUnit:

    @pytest.mark.parametrize("locale,unit", [
        ("en_US", LabUnit.MGDL),
        ("en-us", LabUnit.MGDL),
        ("en_GB", LabUnit.MMOL),
        ("de_DE", LabUnit.MMOL),
        (None, LabUnit.MMOL),
    ])
    def test_locale(self, locale, unit):
        assert default_unit(locale) == unit
