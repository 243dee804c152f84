from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Optional
from datetime import datetime

from app.services.lipidgenomics.lab_units import LabBand, LabUnit
from app.services.lipidgenomics.models import (
    CategoryLabel,
    DietExplanation,
    DietKey,
    InterpretedVariant,
    PhenotypeResult,
    SecondaryFlag,
)


class LabValue(BaseModel):
    mmol: float
    display: str
    band: LabBand
    color: str


class LabPanel(BaseModel):
    ldl: LabValue
    hdl: LabValue
    tg: LabValue


class CategoryReport(BaseModel):
    category: str
    description: str
    label: CategoryLabel
    color: str
    risk_score: int
    protective_score: int
    hits: List[str] = []
    variants: List[InterpretedVariant] = []


class RankedDiet(BaseModel):
    rank: int
    diet: DietKey
    label: str
    score: float
    labs: LabPanel


class ActiveDietReport(BaseModel):
    diet: DietKey
    label: str
    macros: str
    description: str
    foods: List[str] = []
    how_to: List[str] = []
    score: float
    labs: LabPanel
    apob_mgdl: int
    apob_display: str
    explanation: DietExplanation
    why_recommended: List[str] = []


class LipidProfileReport(BaseModel):
    timestamp: str
    unit: LabUnit
    variants_analyzed: int
    categories: List[CategoryReport]
    phenotypes: PhenotypeResult
    secondary_flags: List[SecondaryFlag] = []
    diet_ranking: List[RankedDiet]
    active_diet: ActiveDietReport
    parse_metrics: Optional[Dict[str, Any]] = None

    @field_validator('timestamp')
    @classmethod
    def validate_timestamp(cls, v):
        try:
            datetime.fromisoformat(v.replace('Z', '+00:00'))
            return v
        except ValueError:
            raise ValueError("Timestamp must be a valid ISO 8601 string")


class GenotypeAnalysisRequest(BaseModel):
    genotypes: Dict[str, str] = Field(default_factory=dict, description="Variant id -> genotype call")
    diet: Optional[str] = Field(None, description="Diet to explain; defaults to the top-ranked diet")
    unit: Optional[LabUnit] = Field(None, description="Display unit for lab values; defaults from Accept-Language")


class DietPresetResponse(BaseModel):
    diet: DietKey
    label: str
    macros: str
    description: str
    foods: List[str]
    how_to: List[str]
    baseline: LabPanel


class CategoryInfoResponse(BaseModel):
    category: str
    description: str
    variants: List[str]
