"""
Lab value display helpers: mmol/L <-> mg/dL conversion and threshold bands.
"""

from enum import Enum
from typing import Optional

# mg/dL per mmol/L
CHOLESTEROL_MGDL_PER_MMOL = 38.67
TRIGLYCERIDE_MGDL_PER_MMOL = 88.57


class LabUnit(str, Enum):
    MMOL = "mmol"
    MGDL = "mgdl"


class Analyte(str, Enum):
    LDL = "LDL"
    HDL = "HDL"
    TG = "TG"


class LabBand(str, Enum):
    """Three-way clinical band. For HDL, ``HIGH`` is the low-HDL risk band."""
    DESIRABLE = "desirable"
    BORDERLINE = "borderline"
    HIGH = "high"

    @property
    def color(self) -> str:
        return {"desirable": "green", "borderline": "orange", "high": "red"}[self.value]


def conversion_factor(analyte: Analyte) -> float:
    if Analyte(analyte) == Analyte.TG:
        return TRIGLYCERIDE_MGDL_PER_MMOL
    return CHOLESTEROL_MGDL_PER_MMOL


def convert(value_mmol: float, analyte: Analyte, unit: LabUnit) -> float:
    if LabUnit(unit) == LabUnit.MMOL:
        return value_mmol
    return value_mmol * conversion_factor(analyte)


def format_value(value_mmol: float, analyte: Analyte, unit: LabUnit) -> str:
    """``3.6 mmol/L`` (one decimal) or ``139 mg/dL`` (integer)."""
    if LabUnit(unit) == LabUnit.MMOL:
        return f"{value_mmol:.1f} mmol/L"
    return f"{round(convert(value_mmol, analyte, unit))} mg/dL"


def classify_value(value_mmol: float, analyte: Analyte) -> LabBand:
    """
    Band a value in mmol/L.

    LDL: <3.0 desirable, <4.0 borderline, else high.
    HDL: >=1.0 desirable, >=0.9 borderline, else high risk.
    TG:  <1.7 desirable, <2.3 borderline, else high.
    """
    analyte = Analyte(analyte)
    if analyte == Analyte.LDL:
        if value_mmol < 3.0:
            return LabBand.DESIRABLE
        if value_mmol < 4.0:
            return LabBand.BORDERLINE
        return LabBand.HIGH
    if analyte == Analyte.HDL:
        if value_mmol >= 1.0:
            return LabBand.DESIRABLE
        if value_mmol >= 0.9:
            return LabBand.BORDERLINE
        return LabBand.HIGH
    if value_mmol < 1.7:
        return LabBand.DESIRABLE
    if value_mmol < 2.3:
        return LabBand.BORDERLINE
    return LabBand.HIGH


def default_unit(locale: Optional[str]) -> LabUnit:
    """mg/dL for US locales, mmol/L everywhere else."""
    if locale and "US" in locale.upper():
        return LabUnit.MGDL
    return LabUnit.MMOL
