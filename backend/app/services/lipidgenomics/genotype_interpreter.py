"""
Genotype Interpreter - classifies one variant call against the registry.

A call is Risk if any listed risk allele appears in the genotype string,
otherwise Protective if any listed protective allele appears, otherwise
Neutral. The risk check runs first, so a heterozygous call carrying one risk
and one protective allele is Risk.
"""

from typing import Optional

from .models import InterpretedVariant, VariantStatus
from .variant_registry import VariantRegistry, get_variant_registry

NO_CALL_TOOLTIP = "No call / no known effect."
NO_EFFECT_TOOLTIP = "No strong effect known."
RISK_TOOLTIP = "Risk-associated allele present."
PROTECTIVE_TOOLTIP = "Protective allele present."

STATUS_COLORS = {
    VariantStatus.RISK: "red",
    VariantStatus.PROTECTIVE: "green",
    VariantStatus.NEUTRAL: "gray",
}


class GenotypeInterpreter:
    """Interprets single genotype calls. Stateless apart from the injected registry."""

    def __init__(self, registry: Optional[VariantRegistry] = None):
        self.registry = registry or get_variant_registry()

    def interpret(self, variant_id: str, genotype: Optional[str] = None) -> InterpretedVariant:
        definition = self.registry.get(variant_id)
        if definition is None or not genotype:
            return self._neutral(variant_id, genotype, NO_CALL_TOOLTIP)

        if any(allele in genotype for allele in definition.risk_alleles):
            return InterpretedVariant(
                variant_id=variant_id,
                genotype=genotype,
                status=VariantStatus.RISK,
                weight=definition.weight,
                color=STATUS_COLORS[VariantStatus.RISK],
                tooltip=RISK_TOOLTIP,
            )

        if any(allele in genotype for allele in definition.protective_alleles):
            return InterpretedVariant(
                variant_id=variant_id,
                genotype=genotype,
                status=VariantStatus.PROTECTIVE,
                weight=definition.weight,
                color=STATUS_COLORS[VariantStatus.PROTECTIVE],
                tooltip=PROTECTIVE_TOOLTIP,
            )

        return self._neutral(variant_id, genotype, NO_EFFECT_TOOLTIP)

    @staticmethod
    def _neutral(variant_id: str, genotype: Optional[str], tooltip: str) -> InterpretedVariant:
        return InterpretedVariant(
            variant_id=variant_id,
            genotype=genotype or None,
            status=VariantStatus.NEUTRAL,
            weight=0,
            color=STATUS_COLORS[VariantStatus.NEUTRAL],
            tooltip=tooltip,
        )
