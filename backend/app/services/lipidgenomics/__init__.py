"""
Lipid Genomics Service

Rule-based interpretation of consumer genotype exports into lipid/metabolic
category scores, phenotype classifications and ranked diet predictions.
"""

from .models import (
    Category,
    CategoryLabel,
    CategoryScore,
    DietExplanation,
    DietKey,
    DietProfile,
    DietRanking,
    DietScore,
    GenotypeMap,
    InterpretedVariant,
    LabPrediction,
    MonogenicMarker,
    PhenotypeResult,
    PolygenicClass,
    RiskContext,
    SecondaryFlag,
    VariantDefinition,
    VariantStatus,
)
from .config import (
    LipidGenomicsConfig,
    get_config,
    load_config_from_file,
    save_config_to_file,
)
from .variant_registry import VariantRegistry, get_variant_registry
from .genotype_interpreter import GenotypeInterpreter
from .category_aggregator import CategoryAggregator
from .phenotype_classifier import PhenotypeClassifier
from .diet_engine import DIET_PROFILES, DietEngine, UnknownDietError, estimate_apob_mgdl
from .lab_units import LabBand, LabUnit, classify_value, format_value

__all__ = [
    # Models
    'Category',
    'CategoryLabel',
    'CategoryScore',
    'DietExplanation',
    'DietKey',
    'DietProfile',
    'DietRanking',
    'DietScore',
    'GenotypeMap',
    'InterpretedVariant',
    'LabPrediction',
    'MonogenicMarker',
    'PhenotypeResult',
    'PolygenicClass',
    'RiskContext',
    'SecondaryFlag',
    'VariantDefinition',
    'VariantStatus',

    # Config
    'LipidGenomicsConfig',
    'get_config',
    'load_config_from_file',
    'save_config_to_file',

    # Registry
    'VariantRegistry',
    'get_variant_registry',

    # Interpretation
    'GenotypeInterpreter',
    'CategoryAggregator',
    'PhenotypeClassifier',

    # Diet engine
    'DIET_PROFILES',
    'DietEngine',
    'UnknownDietError',
    'estimate_apob_mgdl',

    # Display
    'LabBand',
    'LabUnit',
    'classify_value',
    'format_value',
]
