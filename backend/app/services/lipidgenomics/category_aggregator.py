"""
Category Aggregator - sums interpreted calls into category scores.
"""

import logging
from typing import Dict, Iterable, Optional, Tuple

from .genotype_interpreter import GenotypeInterpreter
from .models import Category, CategoryLabel, CategoryScore, GenotypeMap, InterpretedVariant, VariantStatus

logger = logging.getLogger(__name__)

LABEL_COLORS = {
    CategoryLabel.RISK: "red",
    CategoryLabel.PROTECTIVE: "green",
    CategoryLabel.NEUTRAL: "gray",
}


def label_for_scores(risk_score: int, protective_score: int) -> CategoryLabel:
    """Three-way comparison; equal sums (including 0/0) are Neutral."""
    if risk_score > protective_score:
        return CategoryLabel.RISK
    if protective_score > risk_score:
        return CategoryLabel.PROTECTIVE
    return CategoryLabel.NEUTRAL


class CategoryAggregator:
    """Aggregates interpreted variants for the four registry categories."""

    def __init__(self, interpreter: Optional[GenotypeInterpreter] = None):
        self.interpreter = interpreter or GenotypeInterpreter()
        self.registry = self.interpreter.registry

    def aggregate(
        self,
        variant_ids: Iterable[str],
        genotypes: Optional[GenotypeMap],
        category: Optional[Category] = None,
    ) -> CategoryScore:
        """
        Score one set of variants against a genotype map.

        Neutral calls add nothing and are not recorded as hits. Hits follow
        the iteration order of ``variant_ids``.
        """
        genotypes = genotypes or {}
        risk_score = 0
        protective_score = 0
        hits = []

        for variant_id in variant_ids:
            genotype = genotypes.get(variant_id)
            result = self.interpreter.interpret(variant_id, genotype)
            if result.status == VariantStatus.RISK:
                risk_score += result.weight
                hits.append(f"{variant_id} ({genotype}) → Risk")
            elif result.status == VariantStatus.PROTECTIVE:
                protective_score += result.weight
                hits.append(f"{variant_id} ({genotype}) → Protective")

        label = label_for_scores(risk_score, protective_score)
        return CategoryScore(
            category=category,
            label=label,
            color=LABEL_COLORS[label],
            risk_score=risk_score,
            protective_score=protective_score,
            hits=tuple(hits),
        )

    def aggregate_category(self, category: Category, genotypes: Optional[GenotypeMap]) -> CategoryScore:
        return self.aggregate(self.registry.category_variants(category), genotypes, category=category)

    def variant_calls(self, category: Category, genotypes: Optional[GenotypeMap]) -> Tuple[InterpretedVariant, ...]:
        """Every registry variant of ``category`` in registry order, uncalled variants included."""
        genotypes = genotypes or {}
        return tuple(
            self.interpreter.interpret(variant_id, genotypes.get(variant_id))
            for variant_id in self.registry.category_variants(category)
        )

    def aggregate_all(self, genotypes: Optional[GenotypeMap]) -> Dict[Category, CategoryScore]:
        """Score every category independently against the same genotype map."""
        scores = {category: self.aggregate_category(category, genotypes) for category in Category}
        for category, score in scores.items():
            logger.debug(
                "%s: %s (risk %d vs protective %d, %d hits)",
                category.value, score.label.value, score.risk_score,
                score.protective_score, len(score.hits),
            )
        return scores
