"""
Diet Engine - lab prediction, fitness scoring and ranking of diet presets.

Features:
- Static diet presets with baseline labs at BMI 25 and moderate activity
- Sparse additive adjustment table keyed by (diet, risk flag)
- Physiological floors on every predicted value
- Weighted fitness score in [0, 1] and a descending ranking
- Benefits/cautions/tips driven by the same risk flags as the prediction
"""

import logging
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, NamedTuple, Optional, Tuple, Union

from .category_aggregator import CategoryAggregator
from .config import LipidGenomicsConfig, get_config
from .models import (
    Category,
    CategoryScore,
    DietExplanation,
    DietKey,
    DietProfile,
    DietRanking,
    DietScore,
    GenotypeMap,
    LabPrediction,
    PhenotypeResult,
    PolygenicClass,
    RiskContext,
)
from .phenotype_classifier import PhenotypeClassifier

logger = logging.getLogger(__name__)


class UnknownDietError(ValueError):
    """Raised when a diet key is not one of the presets."""


# ============================================================================
# Diet presets
# ============================================================================

DIET_PROFILES: Mapping[DietKey, DietProfile] = MappingProxyType({
    DietKey.KETO: DietProfile(
        key=DietKey.KETO,
        label="Keto (<40g carbs)",
        macros="Carbs <10–15% (~<40g) • Protein 20–30% • Fat 55–70% (low SFA, higher MUFA/PUFA)",
        description=(
            "Very low carb to promote ketosis. Often lowers TG and improves glycaemia; "
            "LDL-C can rise if LDLR clearance is limited or SFA is high."
        ),
        foods=("fish, eggs", "olive oil, avocado, nuts", "non-starchy veg", "berries (small)",
               "full-fat dairy if tolerated"),
        how_to=(
            "Cap carbs at ~20–40g/day; track for 2–3 weeks.",
            "Prioritise unsaturated fats; keep SFA low (butter, coconut) if LDLR risk.",
            "Protein 1.2–1.6 g/kg/day; spread evenly.",
            "Add viscous fibre (psyllium/oats) if LDL climbs.",
        ),
        baseline=LabPrediction(ldl=3.6, hdl=1.4, tg=0.9),
    ),
    DietKey.CARNIVORE: DietProfile(
        key=DietKey.CARNIVORE,
        label="Carnivore",
        macros="Carbs ~0% • Protein 25–35% • Fat 65–75% (watch SFA)",
        description=(
            "All-animal foods. Frequently very low TG; LDL-C often rises, especially "
            "with low insulin and higher SFA."
        ),
        foods=("beef, lamb, pork, poultry", "fish, eggs",
               "animal fats; consider leaner cuts if LDLR risk"),
        how_to=(
            "Focus on leaner cuts + fish if LDLR risk or hyper-absorber.",
            "Consider adding soluble fibre (supplement) despite diet rules.",
            "Limit butter/tallow; prefer olive oil with fish where possible.",
        ),
        baseline=LabPrediction(ldl=3.8, hdl=1.3, tg=0.9),
    ),
    DietKey.LOW_CARB: DietProfile(
        key=DietKey.LOW_CARB,
        label="Low Carb (60–100g)",
        macros="Carbs 20–30% (~60–100g) • Protein 25–30% • Fat 40–50%",
        description=(
            "Lower carbohydrate load without full ketosis. Often lowers TG; easier to "
            "sustain than keto with fewer LDL spikes if SFA is kept modest."
        ),
        foods=("fish, poultry, lean meats", "eggs, Greek yogurt", "veg, salads, berries",
               "olive oil, nuts"),
        how_to=(
            "Keep carbs ~60–100g/day from low-GI sources.",
            "Protein 1.2–1.6 g/kg/day; distribute across meals.",
            "SFA <10% kcal if LDLR risk; emphasise MUFA/PUFA.",
        ),
        baseline=LabPrediction(ldl=3.3, hdl=1.3, tg=1.1),
    ),
    DietKey.HIGH_CARB: DietProfile(
        key=DietKey.HIGH_CARB,
        label="High Carb (150g+)",
        macros="Carbs 45–60% (≥150g) • Protein 20–25% • Fat 20–30%",
        description=(
            "Higher carb, lower fat. LDL-C may fall; TG can rise if carbs are refined "
            "or if TG/VLDL risk."
        ),
        foods=("whole grains, legumes", "fruit, starchy veg", "lean proteins",
               "minimal added sugar"),
        how_to=(
            "Prefer intact grains/legumes and fruit over juices/sugar.",
            "Keep added sugars low; time higher-carb meals around activity.",
            "Maintain adequate protein for satiety and glycaemia.",
        ),
        baseline=LabPrediction(ldl=3.0, hdl=1.0, tg=1.6),
    ),
    DietKey.MEDITERRANEAN: DietProfile(
        key=DietKey.MEDITERRANEAN,
        label="Mediterranean",
        macros="Carbs 35–45% • Protein 20–30% • Fat 25–35% (SFA <10%; MUFA/PUFA emphasis)",
        description="High fibre + MUFA/PUFA; favourable for LDL lowering and cardio-metabolic risk.",
        foods=("fish/seafood, poultry", "olive oil, nuts, seeds",
               "vegetables, legumes, whole grains", "limited sweets/alcohol"),
        how_to=(
            "Fibre 25–35 g/day; legumes most days.",
            "Olive oil as primary fat; fish 2–3×/week.",
            "Limit refined carbs and alcohol (helps TG).",
        ),
        baseline=LabPrediction(ldl=2.9, hdl=1.2, tg=1.1),
    ),
})


# ============================================================================
# Adjustment table
# ============================================================================

class RiskFlag(str, Enum):
    LDL_RISK = "ldl_risk"
    TG_RISK = "tg_risk"
    LIVER_RISK = "liver_risk"
    INSULIN_RISK = "insulin_risk"
    HYPER_ABSORBER = "hyper_absorber"


class LabAdjustment(NamedTuple):
    analyte: str   # "ldl" | "hdl" | "tg"
    delta: float   # mmol/L, signed


ADJUSTMENT_TABLE: Mapping[Tuple[DietKey, RiskFlag], Tuple[LabAdjustment, ...]] = MappingProxyType({
    (DietKey.KETO, RiskFlag.TG_RISK): (LabAdjustment("tg", -0.3),),
    (DietKey.KETO, RiskFlag.LDL_RISK): (LabAdjustment("ldl", +0.3),),
    (DietKey.KETO, RiskFlag.HYPER_ABSORBER): (LabAdjustment("ldl", +0.1),),
    (DietKey.KETO, RiskFlag.LIVER_RISK): (LabAdjustment("tg", -0.05),),

    (DietKey.CARNIVORE, RiskFlag.TG_RISK): (LabAdjustment("tg", -0.3),),
    (DietKey.CARNIVORE, RiskFlag.LDL_RISK): (LabAdjustment("ldl", +0.4),),
    (DietKey.CARNIVORE, RiskFlag.HYPER_ABSORBER): (LabAdjustment("ldl", +0.1),),

    (DietKey.LOW_CARB, RiskFlag.TG_RISK): (LabAdjustment("tg", -0.2),),
    (DietKey.LOW_CARB, RiskFlag.LDL_RISK): (LabAdjustment("ldl", +0.1),),
    (DietKey.LOW_CARB, RiskFlag.HYPER_ABSORBER): (LabAdjustment("ldl", +0.05),),

    (DietKey.MEDITERRANEAN, RiskFlag.LDL_RISK): (LabAdjustment("ldl", -0.25),),
    (DietKey.MEDITERRANEAN, RiskFlag.TG_RISK): (LabAdjustment("tg", -0.1),),

    (DietKey.HIGH_CARB, RiskFlag.LDL_RISK): (LabAdjustment("ldl", -0.15),),
    (DietKey.HIGH_CARB, RiskFlag.TG_RISK): (LabAdjustment("tg", +0.2),),
    (DietKey.HIGH_CARB, RiskFlag.LIVER_RISK): (LabAdjustment("tg", +0.05),),
})


def active_flags(context: RiskContext) -> Tuple[RiskFlag, ...]:
    return tuple(flag for flag in RiskFlag if getattr(context, flag.value))


# ============================================================================
# Explanation rules
# ============================================================================

# (section, flag or None for unconditional, text); order within a section is output order
ExplanationRule = Tuple[str, Optional[RiskFlag], str]

EXPLANATION_RULES: Mapping[DietKey, Tuple[ExplanationRule, ...]] = MappingProxyType({
    DietKey.KETO: (
        ("benefits", RiskFlag.TG_RISK, "Very low carb strongly reduces TG/remnants."),
        ("benefits", RiskFlag.INSULIN_RISK, "Low insulin exposure may improve glycaemia/appetite."),
        ("cautions", RiskFlag.LDL_RISK, "LDLR clearance risk + very low insulin can raise LDL-C if SFA is high."),
        ("cautions", RiskFlag.HYPER_ABSORBER,
         "Potential cholesterol sensitivity; moderate eggs/organ meats and add plant sterols."),
        ("cautions", RiskFlag.LIVER_RISK, "Prefer unsaturated fats + higher protein to protect liver."),
        ("tips", None, "Keep SFA low; emphasise olive oil, nuts, fish; add viscous fibre (oats/psyllium)."),
    ),
    DietKey.CARNIVORE: (
        ("benefits", RiskFlag.TG_RISK, "Nearly zero carb typically drives TG down."),
        ("benefits", RiskFlag.INSULIN_RISK, "Very low insulin exposure can control appetite/glycaemia."),
        ("cautions", None,
         "High SFA load may elevate LDL-C, especially with LDLR risk or hyper-absorber pattern."),
        ("cautions", RiskFlag.HYPER_ABSORBER, "Manage dietary cholesterol; consider leaner cuts and more fish."),
        ("tips", None, "Prefer fish/seafood and leaner cuts; consider fibre supplement for LDL/TG."),
    ),
    DietKey.LOW_CARB: (
        ("benefits", RiskFlag.TG_RISK, "Lower carb load reduces fasting TG."),
        ("benefits", RiskFlag.INSULIN_RISK, "Improves glycaemic control without full ketosis."),
        ("benefits", RiskFlag.LIVER_RISK, "Higher protein supports liver fat reduction."),
        ("cautions", RiskFlag.LDL_RISK, "Keep SFA <10% kcal; prioritise MUFA/PUFA."),
        ("cautions", RiskFlag.HYPER_ABSORBER, "Moderate very high-cholesterol foods; consider sterols/stanols."),
        ("tips", None, "Carbs from veg/berries/legumes; protein 1.2–1.6 g/kg/day."),
    ),
    DietKey.HIGH_CARB: (
        ("benefits", RiskFlag.LDL_RISK, "Lower dietary fat can reduce LDL-C."),
        ("cautions", RiskFlag.TG_RISK,
         "Refined carbs/sugars can worsen TG; keep to low-GI, fibre-rich sources."),
        ("cautions", RiskFlag.INSULIN_RISK,
         "High carb load may challenge glycaemia; emphasise whole foods and protein."),
        ("tips", None, "Use intact grains and legumes; time carbs near activity; keep added sugars minimal."),
    ),
    DietKey.MEDITERRANEAN: (
        ("benefits", None, "High fibre + MUFA/PUFA supports LDL lowering."),
        ("benefits", RiskFlag.LDL_RISK, "Favourable for LDLR impairment vs very-low-carb/high-SFA."),
        ("benefits", RiskFlag.HYPER_ABSORBER, "Soluble fibre and plant sterols reduce cholesterol absorption."),
        ("cautions", RiskFlag.TG_RISK, "If TG stubborn, reduce sugars/alcohol; tilt slightly lower-carb."),
        ("tips", None, "25–35 g/day fibre; olive oil, nuts, fish; limit refined carbs and alcohol."),
    ),
})


WHY_RULES: Mapping[DietKey, Tuple[Tuple[RiskFlag, str], ...]] = MappingProxyType({
    DietKey.KETO: (
        (RiskFlag.TG_RISK, "Very low carb targets TG/VLDL risk directly."),
        (RiskFlag.LDL_RISK, "But LDLR risk means watch saturated fat to avoid LDL-C rise."),
    ),
    DietKey.CARNIVORE: (
        (RiskFlag.TG_RISK, "Very low carb targets TG/VLDL risk directly."),
        (RiskFlag.LDL_RISK, "But LDLR risk means watch saturated fat to avoid LDL-C rise."),
    ),
    DietKey.LOW_CARB: (
        (RiskFlag.TG_RISK, "Lower carb intake reduces fasting TG while avoiding deep ketosis."),
        (RiskFlag.LDL_RISK, "Moderate fat and lower SFA are friendlier for LDLR impairment."),
    ),
    DietKey.HIGH_CARB: (
        (RiskFlag.LDL_RISK, "Lower dietary fat can reduce LDL-C with LDLR constraints."),
        (RiskFlag.TG_RISK, "But refine carbs carefully to prevent TG elevation."),
    ),
    DietKey.MEDITERRANEAN: (
        (RiskFlag.LDL_RISK, "MUFA/PUFA emphasis and fibre support LDL lowering with LDLR risk."),
        (RiskFlag.TG_RISK, "Lower alcohol/sugar variant of Mediterranean helps TG."),
    ),
})


def resolve_diet(diet: Union[DietKey, str]) -> DietKey:
    """Coerce a diet key; unknown keys are a caller error."""
    if isinstance(diet, DietKey):
        return diet
    try:
        return DietKey(diet)
    except ValueError:
        raise UnknownDietError(
            f"Unknown diet '{diet}'. Expected one of: {', '.join(d.value for d in DietKey)}"
        ) from None


def estimate_apob_mgdl(labs: LabPrediction) -> int:
    """Crude ApoB estimate (mg/dL) from LDL and TG, for display only."""
    ldl_mg = labs.ldl * 38.67
    tg_mg = labs.tg * 88.57
    apob = 0.95 * ldl_mg
    if tg_mg > 200:
        apob += 20
    elif tg_mg > 150:
        apob += 10
    elif tg_mg < 100:
        apob -= 5
    return max(40, round(apob))


# ============================================================================
# Engine
# ============================================================================

class DietEngine:
    """
    Predicts labs per diet, scores them and ranks the presets.

    Reads the hyper-absorber flag from the phenotype classifier; the
    classifier never reads from the engine.
    """

    def __init__(
        self,
        classifier: Optional[PhenotypeClassifier] = None,
        config: Optional[LipidGenomicsConfig] = None,
        profiles: Mapping[DietKey, DietProfile] = DIET_PROFILES,
        adjustments: Mapping[Tuple[DietKey, RiskFlag], Tuple[LabAdjustment, ...]] = ADJUSTMENT_TABLE,
    ):
        self.config = config or get_config()
        self.classifier = classifier or PhenotypeClassifier(config=self.config)
        self.aggregator: CategoryAggregator = self.classifier.aggregator
        self.profiles = profiles
        self.adjustments = adjustments

    @property
    def diet_keys(self) -> Tuple[DietKey, ...]:
        return tuple(self.profiles)

    def profile(self, diet: Union[DietKey, str]) -> DietProfile:
        key = resolve_diet(diet)
        if key not in self.profiles:
            raise UnknownDietError(f"No preset configured for diet '{key.value}'")
        return self.profiles[key]

    def risk_context(
        self,
        genotypes: Optional[GenotypeMap],
        categories: Optional[Dict[Category, CategoryScore]] = None,
    ) -> RiskContext:
        genotypes = genotypes or {}
        categories = categories or self.aggregator.aggregate_all(genotypes)
        return RiskContext.from_categories(categories, self.classifier.is_hyper_absorber(genotypes))

    # ------------------------------------------------------------------
    # Prediction
    # ------------------------------------------------------------------

    def predict_for_context(self, diet: Union[DietKey, str], context: RiskContext) -> LabPrediction:
        profile = self.profile(diet)
        values = {
            "ldl": profile.baseline.ldl,
            "hdl": profile.baseline.hdl,
            "tg": profile.baseline.tg,
        }
        for flag in active_flags(context):
            for adjustment in self.adjustments.get((profile.key, flag), ()):
                values[adjustment.analyte] += adjustment.delta

        floors = self.config.lab_floors
        return LabPrediction(
            ldl=max(floors.ldl, values["ldl"]),
            hdl=max(floors.hdl, values["hdl"]),
            tg=max(floors.tg, values["tg"]),
        )

    def predict_labs(self, diet: Union[DietKey, str], genotypes: Optional[GenotypeMap]) -> LabPrediction:
        """Baseline labs for ``diet`` plus additive genotype-driven adjustments."""
        key = resolve_diet(diet)
        return self.predict_for_context(key, self.risk_context(genotypes))

    # ------------------------------------------------------------------
    # Scoring and ranking
    # ------------------------------------------------------------------

    def score(self, labs: LabPrediction) -> float:
        """
        Weighted composite in [0, 1].

        LDL and TG parts fall linearly from 1 to 0 across a penalty range
        above their desirable threshold; the HDL part rises linearly to 1 at
        the HDL cap.
        """
        cfg = self.config.fitness
        ldl_part = max(0.0, 1 - max(0.0, labs.ldl - cfg.ldl_desirable_max) / cfg.ldl_penalty_range)
        tg_part = max(0.0, 1 - max(0.0, labs.tg - cfg.tg_desirable_max) / cfg.tg_penalty_range)
        hdl_part = min(1.0, labs.hdl / cfg.hdl_cap)
        total = cfg.ldl_weight * ldl_part + cfg.tg_weight * tg_part + cfg.hdl_weight * hdl_part
        return min(1.0, max(0.0, total))

    def rank(
        self,
        genotypes: Optional[GenotypeMap],
        categories: Optional[Dict[Category, CategoryScore]] = None,
    ) -> DietRanking:
        """
        Score every preset and sort descending.

        Ties keep preset declaration order (``sorted`` is stable).
        """
        context = self.risk_context(genotypes, categories)
        entries: List[DietScore] = []
        for key in self.diet_keys:
            labs = self.predict_for_context(key, context)
            entries.append(DietScore(diet=key, score=self.score(labs), labs=labs))

        entries = sorted(entries, key=lambda e: e.score, reverse=True)
        logger.debug("Diet ranking: %s", ", ".join(f"{e.diet.value}={e.score:.3f}" for e in entries))
        return DietRanking(entries=tuple(entries))

    # ------------------------------------------------------------------
    # Explanations
    # ------------------------------------------------------------------

    def explain_for_context(self, diet: Union[DietKey, str], context: RiskContext) -> DietExplanation:
        key = self.profile(diet).key
        sections: Dict[str, List[str]] = {"benefits": [], "cautions": [], "tips": []}
        for section, flag, text in EXPLANATION_RULES.get(key, ()):
            if flag is None or getattr(context, flag.value):
                sections[section].append(text)
        return DietExplanation(diet=key, **sections)

    def explain(
        self,
        diet: Union[DietKey, str],
        genotypes: Optional[GenotypeMap],
        categories: Optional[Dict[Category, CategoryScore]] = None,
    ) -> DietExplanation:
        """Benefits, cautions and tips for ``diet`` under this genotype map."""
        key = resolve_diet(diet)
        return self.explain_for_context(key, self.risk_context(genotypes, categories))

    def why_recommended(
        self,
        diet: Union[DietKey, str],
        categories: Dict[Category, CategoryScore],
        phenotypes: PhenotypeResult,
    ) -> Tuple[str, ...]:
        key = self.profile(diet).key
        context = RiskContext.from_categories(categories, phenotypes.hyper_absorber)

        lines = [
            "Genetics summary: "
            f"LDLR: {categories[Category.LDL_RECEPTOR].label.value}, "
            f"TG/VLDL: {categories[Category.TRIGLYCERIDE].label.value}, "
            f"Liver: {categories[Category.HEPATIC_LIPOGENESIS].label.value}, "
            f"Insulin: {categories[Category.INSULIN_SENSITIVITY].label.value}."
        ]
        if phenotypes.polygenic_class != PolygenicClass.NONE:
            lines.append(f"Polygenic classification: {phenotypes.polygenic_class.abbreviation}.")
        if phenotypes.hyper_absorber:
            lines.append("Hyper-absorber (APOE/PCSK9) pattern present.")
        for flag, text in WHY_RULES.get(key, ()):
            if getattr(context, flag.value):
                lines.append(text)
        return tuple(lines)
