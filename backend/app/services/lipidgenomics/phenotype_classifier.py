"""
Phenotype Classifier - monogenic screen, polygenic class and pattern flags.

Maps a genotype map (and its category scores) to:
- a monogenic FH screen flag, read directly from the marker calls
- an exclusive polygenic class from the LDL-receptor and TG category labels
- the APOE/PCSK9 hyper-absorber flag, read directly from three raw calls
- zero or more additive secondary flags

The polygenic class is a single enum value; secondary flags are a separate
list of independent records.
"""

import logging
from typing import Dict, List, Optional, Tuple

from .category_aggregator import CategoryAggregator
from .config import LipidGenomicsConfig, get_config
from .models import (
    Category,
    CategoryScore,
    GenotypeMap,
    PhenotypeJustifications,
    PhenotypeResult,
    PolygenicClass,
    SecondaryFlag,
)
from .variant_registry import VariantRegistry

logger = logging.getLogger(__name__)

MONOGENIC_NEGATIVE_CAVEAT = (
    "Screen is limited; many LDLR/APOB/PCSK9 variants are not on consumer arrays."
)
MONOGENIC_POSITIVE_FOLLOWUP = (
    "This is a screen; confirmatory clinical testing may be warranted."
)
HYPER_ABSORBER_NEGATIVE = "APOE/PCSK9 pattern not suggestive of hyper-absorption."


LMHR_LIKE_FLAG = SecondaryFlag(
    label="Possible LMHR-like response",
    description=(
        "LDL clearance risk with low TG/neutral HDL pattern may respond with "
        "large LDL rise on very low carb."
    ),
    severity="amber",
)

INSULIN_RESISTANT_TG_FLAG = SecondaryFlag(
    label="Possible insulin-resistant TG pattern",
    description=(
        "TG/VLDL and insulin signalling both at risk; higher TG likely with "
        "high refined carb intake."
    ),
    severity="red",
)


def _call(genotypes: GenotypeMap, variant_id: str) -> str:
    return genotypes.get(variant_id) or ""


class PhenotypeClassifier:
    """Pure mapping from (genotype map, category scores) to phenotype results."""

    def __init__(
        self,
        aggregator: Optional[CategoryAggregator] = None,
        config: Optional[LipidGenomicsConfig] = None,
    ):
        self.aggregator = aggregator or CategoryAggregator()
        self.registry: VariantRegistry = self.aggregator.registry
        self.config = config or get_config()

    # ------------------------------------------------------------------
    # Monogenic screen
    # ------------------------------------------------------------------

    def screen_monogenic(self, genotypes: Optional[GenotypeMap]) -> Tuple[bool, Tuple[str, ...]]:
        """Check the fixed FH marker list. Independent of the categories."""
        genotypes = genotypes or {}
        hits: List[str] = []
        for marker in self.registry.monogenic_markers:
            if marker.pathogenic_allele in _call(genotypes, marker.variant_id):
                hits.append(
                    f"{marker.gene} {marker.variant_label} ({marker.variant_id}) detected; {marker.note}"
                )

        if hits:
            logger.info("Monogenic FH screen positive: %d marker(s)", len(hits))
            return True, ("Monogenic FH (screen): POSITIVE.", *hits, MONOGENIC_POSITIVE_FOLLOWUP)

        screened = ", ".join(
            f"{m.gene} {m.variant_label.split(' ')[-1].strip('()')}"
            for m in self.registry.monogenic_markers
        )
        return False, (
            f"Monogenic FH (screen): NEGATIVE for {screened} in this file.",
            MONOGENIC_NEGATIVE_CAVEAT,
        )

    # ------------------------------------------------------------------
    # Polygenic class
    # ------------------------------------------------------------------

    def classify_polygenic(
        self, ldl: CategoryScore, tg: CategoryScore
    ) -> Tuple[PolygenicClass, Tuple[str, ...]]:
        """
        Exclusive 4-way class from the LDL-receptor and TG labels.

        Justification hit lists are capped (see ClassifierConfig): 5 per
        category for Combined, 8 for the single-category classes.
        """
        caps = self.config.classifier
        ldl_line = f"LDLR category indicates risk (risk {ldl.risk_score} vs protective {ldl.protective_score})."
        tg_line = f"TG/VLDL category indicates risk (risk {tg.risk_score} vs protective {tg.protective_score})."

        if ldl.is_risk and tg.is_risk:
            per = caps.combined_hits_per_category
            return PolygenicClass.COMBINED, (
                "Polygenic FCHC (combined hypercholesterolaemia + hypertriglyceridaemia).",
                ldl_line,
                tg_line,
                *ldl.hits[:per],
                *tg.hits[:per],
            )
        if ldl.is_risk:
            return PolygenicClass.LDL_DOMINANT, (
                "Polygenic FHC (hypercholesterolaemia, LDL-dominant).",
                ldl_line,
                *ldl.hits[:caps.single_category_hits],
            )
        if tg.is_risk:
            return PolygenicClass.TG_DOMINANT, (
                "Polygenic FHT (hypertriglyceridaemia, TG-dominant).",
                tg_line,
                *tg.hits[:caps.single_category_hits],
            )
        return PolygenicClass.NONE, (
            "Polygenic classification: None (LDLR and TG/VLDL categories are not overall at risk).",
            f"LDLR: risk {ldl.risk_score} vs protective {ldl.protective_score}; "
            f"TG/VLDL: risk {tg.risk_score} vs protective {tg.protective_score}.",
        )

    # ------------------------------------------------------------------
    # Hyper-absorber
    # ------------------------------------------------------------------

    def _apoe_risk_present(self, genotypes: GenotypeMap) -> bool:
        cfg = self.config.hyper_absorber
        return any(cfg.apoe_risk_allele in _call(genotypes, rsid) for rsid in cfg.apoe_markers)

    def _pcsk9_protective_present(self, genotypes: GenotypeMap) -> bool:
        cfg = self.config.hyper_absorber
        return cfg.pcsk9_protective_allele in _call(genotypes, cfg.pcsk9_marker)

    def is_hyper_absorber(self, genotypes: Optional[GenotypeMap]) -> bool:
        """APOE risk allele present and PCSK9 loss-of-function allele absent."""
        genotypes = genotypes or {}
        return self._apoe_risk_present(genotypes) and not self._pcsk9_protective_present(genotypes)

    def explain_hyper_absorber(self, genotypes: Optional[GenotypeMap]) -> Tuple[str, ...]:
        genotypes = genotypes or {}
        if not self.is_hyper_absorber(genotypes):
            return (HYPER_ABSORBER_NEGATIVE,)

        cfg = self.config.hyper_absorber
        markers = " and/or ".join(f"{rsid} {cfg.apoe_risk_allele}" for rsid in cfg.apoe_markers)
        return (
            f"APOE ε-risk allele present ({markers}).",
            f"PCSK9 LOF protective ({cfg.pcsk9_marker} {cfg.pcsk9_protective_allele}) absent; "
            "less counterbalance.",
        )

    # ------------------------------------------------------------------
    # Secondary flags
    # ------------------------------------------------------------------

    def secondary_flags(
        self,
        genotypes: Optional[GenotypeMap],
        categories: Optional[Dict[Category, CategoryScore]] = None,
    ) -> Tuple[SecondaryFlag, ...]:
        """Additive pattern rules; zero, one or several may fire."""
        categories = categories or self.aggregator.aggregate_all(genotypes)
        ldl = categories[Category.LDL_RECEPTOR]
        tg = categories[Category.TRIGLYCERIDE]
        insulin = categories[Category.INSULIN_SENSITIVITY]
        hyper_absorber = self.is_hyper_absorber(genotypes)

        flags: List[SecondaryFlag] = []
        if ldl.is_risk and not tg.is_risk and not insulin.is_risk and not hyper_absorber:
            flags.append(LMHR_LIKE_FLAG)
        if tg.is_risk and insulin.is_risk:
            flags.append(INSULIN_RESISTANT_TG_FLAG)
        return tuple(flags)

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def classify(
        self,
        genotypes: Optional[GenotypeMap],
        categories: Optional[Dict[Category, CategoryScore]] = None,
    ) -> PhenotypeResult:
        genotypes = genotypes or {}
        categories = categories or self.aggregator.aggregate_all(genotypes)

        monogenic, monogenic_lines = self.screen_monogenic(genotypes)
        polygenic, polygenic_lines = self.classify_polygenic(
            categories[Category.LDL_RECEPTOR], categories[Category.TRIGLYCERIDE]
        )
        hyper_absorber = self.is_hyper_absorber(genotypes)

        logger.debug(
            "Phenotypes: monogenic=%s polygenic=%s hyper_absorber=%s",
            monogenic, polygenic.value, hyper_absorber,
        )

        return PhenotypeResult(
            monogenic_screen_positive=monogenic,
            hyper_absorber=hyper_absorber,
            polygenic_class=polygenic,
            justifications=PhenotypeJustifications(
                monogenic=monogenic_lines,
                polygenic=polygenic_lines,
                hyper_absorber=self.explain_hyper_absorber(genotypes),
            ),
        )
