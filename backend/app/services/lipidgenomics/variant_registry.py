"""
Variant Registry - curated lipid/metabolic variant knowledge.

Holds the static tables the rest of the service interprets genotypes against:
per-variant risk/protective alleles with evidence and effect weights, the
grouping of variants into the four biological categories, and the short list
of monogenic FH markers. Tables are built once and are read-only for the
process lifetime.
"""

from types import MappingProxyType
from typing import FrozenSet, Iterable, Mapping, Optional, Tuple

from .models import Category, MonogenicMarker, VariantDefinition


def _variant(variant_id: str, risk: str = "", protective: str = "", *, evidence: int, effect: int) -> VariantDefinition:
    return VariantDefinition(
        variant_id=variant_id,
        risk_alleles=tuple(risk),
        protective_alleles=tuple(protective),
        evidence=evidence,
        effect=effect,
    )


# ============================================================================
# Variant definitions
# ============================================================================

VARIANT_DEFINITIONS: Tuple[VariantDefinition, ...] = (
    # LDL receptor / clearance
    _variant("rs429358", "C", "T", evidence=5, effect=5),     # APOE e4
    _variant("rs7412", "C", "T", evidence=5, effect=5),       # APOE e2
    _variant("rs688", "G", "A", evidence=4, effect=4),        # LDLR
    _variant("rs6511720", protective="T", evidence=5, effect=4),
    _variant("rs3846662", "G", "A", evidence=3, effect=3),    # HMGCR
    _variant("rs11591147", protective="T", evidence=5, effect=5),  # PCSK9 R46L
    _variant("rs1042031", protective="A", evidence=3, effect=3),
    _variant("rs693", "C", "T", evidence=3, effect=3),        # APOB
    _variant("rs6259", protective="A", evidence=2, effect=2),

    # Triglyceride / VLDL
    _variant("rs662799", "G", "A", evidence=5, effect=5),     # APOA5
    _variant("rs3135506", "C", "G", evidence=4, effect=4),
    _variant("rs1260326", "T", "C", evidence=5, effect=5),    # GCKR
    _variant("rs780094", "T", "C", evidence=4, effect=4),
    _variant("rs328", "C", "G", evidence=5, effect=5),        # LPL S447X
    _variant("rs13702", "T", "A", evidence=5, effect=4),
    _variant("rs12678919", "A", "G", evidence=4, effect=4),
    _variant("rs10503669", protective="A", evidence=3, effect=3),
    _variant("rs1748195", protective="G", evidence=3, effect=3),
    _variant("rs10889353", protective="C", evidence=2, effect=2),
    _variant("rs1044250", protective="C", evidence=3, effect=3),
    _variant("rs11672433", protective="A", evidence=3, effect=3),
    _variant("rs7255436", protective="G", evidence=3, effect=3),
    _variant("rs4846914", "G", "A", evidence=3, effect=3),
    _variant("rs5128", "G", "C", evidence=3, effect=3),       # APOC3
    _variant("rs708272", "G", "A", evidence=3, effect=3),     # CETP TaqIB
    _variant("rs5882", "G", "A", evidence=3, effect=3),

    # Insulin sensitivity
    _variant("rs1801282", "C", "G", evidence=3, effect=3),    # PPARG P12A
    _variant("rs7903146", "T", "C", evidence=5, effect=5),    # TCF7L2
    _variant("rs2943641", "C", "T", evidence=4, effect=4),    # IRS1
    _variant("rs9939609", "A", "T", evidence=5, effect=5),    # FTO
    _variant("rs5400", "T", "C", evidence=2, effect=2),       # SLC2A2

    # Hepatic lipogenesis
    _variant("rs738409", "G", "C", evidence=5, effect=5),     # PNPLA3 I148M
    _variant("rs58542926", "T", "C", evidence=5, effect=5),   # TM6SF2
    _variant("rs2306986", protective="C", evidence=3, effect=3),
    _variant("rs641738", "T", "C", evidence=3, effect=3),     # MBOAT7
)


CATEGORY_VARIANTS: Mapping[Category, Tuple[str, ...]] = MappingProxyType({
    Category.LDL_RECEPTOR: (
        "rs429358", "rs7412", "rs688", "rs6511720", "rs3846662", "rs11591147",
        "rs1042031", "rs693", "rs6259",
    ),
    Category.TRIGLYCERIDE: (
        "rs662799", "rs3135506", "rs1260326", "rs780094", "rs328", "rs13702",
        "rs12678919", "rs10503669", "rs1748195", "rs10889353", "rs1044250",
        "rs11672433", "rs7255436", "rs4846914", "rs5128", "rs708272", "rs5882",
    ),
    Category.INSULIN_SENSITIVITY: (
        "rs1801282", "rs7903146", "rs2943641", "rs9939609", "rs5400",
    ),
    Category.HEPATIC_LIPOGENESIS: (
        "rs738409", "rs58542926", "rs2306986", "rs641738",
    ),
})


CATEGORY_DESCRIPTIONS: Mapping[Category, str] = MappingProxyType({
    Category.LDL_RECEPTOR:
        "Genes affecting LDL receptor binding, APOB/APOE interactions, and clearance of LDL particles from blood.",
    Category.TRIGLYCERIDE:
        "Genes regulating hepatic VLDL export, lipoprotein lipase activity, and triglyceride turnover.",
    Category.INSULIN_SENSITIVITY:
        "Genes influencing insulin signalling, adiposity risk, and tolerance to carbohydrate loads.",
    Category.HEPATIC_LIPOGENESIS:
        "Genes impacting liver fat creation, export and signalling pathways (NAFLD/NASH risk).",
})


MONOGENIC_MARKERS: Tuple[MonogenicMarker, ...] = (
    MonogenicMarker(
        variant_id="rs5742904", gene="APOB", variant_label="p.Arg3527Gln (R3527Q)",
        pathogenic_allele="A", note="APOB pathogenic variant linked to FH.",
    ),
    MonogenicMarker(
        variant_id="rs137852912", gene="PCSK9", variant_label="p.Asp374Tyr (D374Y)",
        pathogenic_allele="A", note="PCSK9 GOF; raises LDL-C.",
    ),
    MonogenicMarker(
        variant_id="rs28942111", gene="PCSK9", variant_label="p.Ser127Arg (S127R)",
        pathogenic_allele="G", note="PCSK9 GOF; raises LDL-C.",
    ),
)


# ============================================================================
# Registry
# ============================================================================

class VariantRegistry:
    """
    Read-only lookup over the variant, category and marker tables.

    Construct with custom tables to inject alternative knowledge (tests do
    this); the default instance wraps the module tables above.
    """

    def __init__(
        self,
        definitions: Iterable[VariantDefinition] = VARIANT_DEFINITIONS,
        categories: Mapping[Category, Tuple[str, ...]] = CATEGORY_VARIANTS,
        monogenic_markers: Iterable[MonogenicMarker] = MONOGENIC_MARKERS,
    ):
        self._definitions: Mapping[str, VariantDefinition] = MappingProxyType(
            {d.variant_id: d for d in definitions}
        )
        self._categories: Mapping[Category, Tuple[str, ...]] = MappingProxyType(
            {c: tuple(ids) for c, ids in categories.items()}
        )
        self._markers: Tuple[MonogenicMarker, ...] = tuple(monogenic_markers)

        tracked = set(self._definitions)
        for ids in self._categories.values():
            tracked.update(ids)
        tracked.update(m.variant_id for m in self._markers)
        self._tracked: FrozenSet[str] = frozenset(tracked)

    def get(self, variant_id: str) -> Optional[VariantDefinition]:
        return self._definitions.get(variant_id)

    def __contains__(self, variant_id: str) -> bool:
        return variant_id in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    @property
    def definitions(self) -> Mapping[str, VariantDefinition]:
        return self._definitions

    @property
    def categories(self) -> Mapping[Category, Tuple[str, ...]]:
        return self._categories

    def category_variants(self, category: Category) -> Tuple[str, ...]:
        return self._categories.get(category, ())

    @property
    def monogenic_markers(self) -> Tuple[MonogenicMarker, ...]:
        return self._markers

    @property
    def tracked_ids(self) -> FrozenSet[str]:
        """Every variant id worth keeping from a raw export."""
        return self._tracked

    def describe(self, category: Category) -> str:
        return CATEGORY_DESCRIPTIONS.get(category, "")


_registry_instance: Optional[VariantRegistry] = None


def get_variant_registry() -> VariantRegistry:
    """Get the process-wide default registry instance."""
    global _registry_instance
    if _registry_instance is None:
        _registry_instance = VariantRegistry()
    return _registry_instance
