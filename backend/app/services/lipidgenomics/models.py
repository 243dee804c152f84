"""
Data models for the lipid genomics service.
These models represent the intermediate and final structures produced while
interpreting a raw genotype map into category scores, phenotypes and diet
predictions. Every model is frozen: results are recomputed per request and
never mutated in place.
"""

from enum import Enum
from typing import Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


# Variant id -> observed allele string, e.g. {"rs429358": "CT"}
GenotypeMap = Mapping[str, str]


class VariantStatus(str, Enum):
    """Direction of a single interpreted genotype call."""
    RISK = "Risk"
    PROTECTIVE = "Protective"
    NEUTRAL = "Neutral"


class Category(str, Enum):
    """The four fixed biological groupings of registry variants."""
    LDL_RECEPTOR = "LDL receptor function / cholesterol clearance"
    TRIGLYCERIDE = "Triglyceride metabolism & VLDL secretion"
    INSULIN_SENSITIVITY = "Insulin sensitivity / fat oxidation / carbohydrate tolerance"
    HEPATIC_LIPOGENESIS = "De novo lipogenesis & hepatic signalling"


class CategoryLabel(str, Enum):
    """Overall verdict for a category."""
    RISK = "Overall Risk"
    PROTECTIVE = "Overall Protective"
    NEUTRAL = "Overall Neutral"


class PolygenicClass(str, Enum):
    """Mutually exclusive polygenic classification."""
    NONE = "None"
    LDL_DOMINANT = "LDL-dominant"
    TG_DOMINANT = "TG-dominant"
    COMBINED = "Combined"

    @property
    def abbreviation(self) -> str:
        """Clinical shorthand used in justification text."""
        return {
            "None": "None",
            "LDL-dominant": "FHC",
            "TG-dominant": "FHT",
            "Combined": "FCHC",
        }[self.value]


class DietKey(str, Enum):
    """Diet presets known to the prediction engine."""
    KETO = "Keto"
    CARNIVORE = "Carnivore"
    LOW_CARB = "LowCarb"
    HIGH_CARB = "HighCarb"
    MEDITERRANEAN = "Mediterranean"


class FrozenModel(BaseModel):
    """Base for immutable result models."""
    model_config = ConfigDict(frozen=True)


# ── Registry entries ─────────────────────────────────────────────────────────

class VariantDefinition(FrozenModel):
    """Curated knowledge for one variant."""
    variant_id: str = Field(..., description="rsID-like identifier")
    risk_alleles: Tuple[str, ...] = Field(default=(), description="Alleles associated with worse outcomes")
    protective_alleles: Tuple[str, ...] = Field(default=(), description="Alleles associated with better outcomes")
    evidence: int = Field(..., ge=1, le=5, description="Strength of evidence (1-5)")
    effect: int = Field(..., ge=1, le=5, description="Relative effect size (1-5)")

    @property
    def weight(self) -> int:
        return self.evidence * self.effect


class MonogenicMarker(FrozenModel):
    """Highly penetrant pathogenic marker checked by the monogenic screen."""
    variant_id: str = Field(..., description="rsID of the marker")
    gene: str = Field(..., description="Gene symbol (e.g., APOB)")
    variant_label: str = Field(..., description="Protein-level variant label")
    pathogenic_allele: str = Field(..., description="Allele character that flags the marker")
    note: str = Field(..., description="Short clinical note")


# ── Interpretation ───────────────────────────────────────────────────────────

class InterpretedVariant(FrozenModel):
    """Result of interpreting one genotype call against the registry."""
    variant_id: str
    genotype: Optional[str] = None
    status: VariantStatus
    weight: int = Field(..., ge=0, le=25, description="evidence x effect, 0 when Neutral")
    color: str = Field(..., description="Qualitative tag: red, green or gray")
    tooltip: str


class CategoryScore(FrozenModel):
    """Aggregated risk/protective weight for one category."""
    category: Optional[Category] = None
    label: CategoryLabel
    color: str = Field(..., description="red, green or gray")
    risk_score: int = Field(0, ge=0)
    protective_score: int = Field(0, ge=0)
    hits: Tuple[str, ...] = Field(default=(), description="e.g. 'rs688 (AG) → Risk', input order")

    @property
    def is_risk(self) -> bool:
        return self.label == CategoryLabel.RISK

    @property
    def is_protective(self) -> bool:
        return self.label == CategoryLabel.PROTECTIVE


# ── Phenotypes ───────────────────────────────────────────────────────────────

class PhenotypeJustifications(FrozenModel):
    monogenic: Tuple[str, ...] = ()
    polygenic: Tuple[str, ...] = ()
    hyper_absorber: Tuple[str, ...] = ()


class PhenotypeResult(FrozenModel):
    """Exclusive phenotype classification for a genotype map."""
    monogenic_screen_positive: bool = False
    hyper_absorber: bool = False
    polygenic_class: PolygenicClass = PolygenicClass.NONE
    justifications: PhenotypeJustifications = Field(default_factory=PhenotypeJustifications)


class SecondaryFlag(FrozenModel):
    """Additive heuristic flag; several may fire at once."""
    label: str
    description: str
    severity: str = Field(..., description="Color tag: red, amber, green, gray, cyan or slate")


# ── Diet prediction ──────────────────────────────────────────────────────────

class LabPrediction(FrozenModel):
    """Predicted fasting lipids in mmol/L."""
    ldl: float
    hdl: float
    tg: float


class DietProfile(FrozenModel):
    """Static description and baseline labs for a diet preset."""
    key: DietKey
    label: str
    macros: str
    description: str
    foods: Tuple[str, ...] = ()
    how_to: Tuple[str, ...] = ()
    baseline: LabPrediction = Field(..., description="Labs at BMI 25, moderate activity")


class RiskContext(FrozenModel):
    """Boolean risk flags shared by lab prediction and explanation text."""
    ldl_risk: bool = False
    tg_risk: bool = False
    insulin_risk: bool = False
    liver_risk: bool = False
    hyper_absorber: bool = False

    @classmethod
    def from_categories(
        cls, categories: Dict[Category, CategoryScore], hyper_absorber: bool
    ) -> "RiskContext":
        return cls(
            ldl_risk=categories[Category.LDL_RECEPTOR].is_risk,
            tg_risk=categories[Category.TRIGLYCERIDE].is_risk,
            insulin_risk=categories[Category.INSULIN_SENSITIVITY].is_risk,
            liver_risk=categories[Category.HEPATIC_LIPOGENESIS].is_risk,
            hyper_absorber=hyper_absorber,
        )


class DietScore(FrozenModel):
    diet: DietKey
    score: float = Field(..., ge=0.0, le=1.0)
    labs: LabPrediction


class DietRanking(FrozenModel):
    """Diet presets ordered by descending fitness score."""
    entries: Tuple[DietScore, ...] = ()

    @property
    def best(self) -> Optional[DietScore]:
        return self.entries[0] if self.entries else None

    def get(self, diet: DietKey) -> Optional[DietScore]:
        for entry in self.entries:
            if entry.diet == diet:
                return entry
        return None


class DietExplanation(FrozenModel):
    """Benefits, cautions and tips for one diet under a given risk context."""
    diet: DietKey
    benefits: Tuple[str, ...] = ()
    cautions: Tuple[str, ...] = ()
    tips: Tuple[str, ...] = ()
