"""
Configuration for the lipid genomics service.
Centralizes the heuristic constants used by phenotype classification and
diet scoring. None of these values are derived from a cited model; they are
tunable configuration.
"""

import json
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FitnessScoringConfig(BaseModel):
    """Shape and weights of the diet fitness score."""
    model_config = ConfigDict(frozen=True)

    ldl_desirable_max: float = Field(
        default=3.0,
        description="LDL (mmol/L) above which the LDL partial score starts to fall"
    )
    ldl_penalty_range: float = Field(
        default=1.5,
        gt=0.0,
        description="LDL excess (mmol/L) at which the LDL partial score reaches 0"
    )
    tg_desirable_max: float = Field(
        default=1.7,
        description="TG (mmol/L) above which the TG partial score starts to fall"
    )
    tg_penalty_range: float = Field(
        default=0.8,
        gt=0.0,
        description="TG excess (mmol/L) at which the TG partial score reaches 0"
    )
    hdl_cap: float = Field(
        default=1.2,
        gt=0.0,
        description="HDL (mmol/L) at which the HDL partial score saturates at 1"
    )

    ldl_weight: float = Field(default=0.45, ge=0.0, le=1.0)
    tg_weight: float = Field(default=0.35, ge=0.0, le=1.0)
    hdl_weight: float = Field(default=0.20, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def validate_weights(self):
        total = self.ldl_weight + self.tg_weight + self.hdl_weight
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"Fitness weights must sum to 1.0 (got {total:.3f})")
        return self


class LabFloorConfig(BaseModel):
    """Physiological floors applied after all diet adjustments (mmol/L)."""
    model_config = ConfigDict(frozen=True)

    ldl: float = Field(default=1.5, gt=0.0)
    hdl: float = Field(default=0.6, gt=0.0)
    tg: float = Field(default=0.6, gt=0.0)


class HyperAbsorberConfig(BaseModel):
    """Markers for the APOE/PCSK9 hyper-absorption rule."""
    model_config = ConfigDict(frozen=True)

    apoe_markers: Tuple[str, ...] = Field(
        default=("rs429358", "rs7412"),
        description="APOE epsilon markers; any call containing the risk allele counts"
    )
    apoe_risk_allele: str = Field(default="C")
    pcsk9_marker: str = Field(
        default="rs11591147",
        description="PCSK9 loss-of-function marker that cancels the flag"
    )
    pcsk9_protective_allele: str = Field(default="T")


class ClassifierConfig(BaseModel):
    """Justification text limits for the polygenic classification."""
    model_config = ConfigDict(frozen=True)

    combined_hits_per_category: int = Field(
        default=5,
        ge=0,
        description="Top hits listed per category when both LDL and TG are at risk"
    )
    single_category_hits: int = Field(
        default=8,
        ge=0,
        description="Top hits listed for LDL-dominant or TG-dominant classes"
    )


class LipidGenomicsConfig(BaseModel):
    """Main configuration for the lipid genomics service."""
    model_config = ConfigDict(frozen=True)

    fitness: FitnessScoringConfig = Field(
        default_factory=FitnessScoringConfig,
        description="Diet fitness score configuration"
    )
    lab_floors: LabFloorConfig = Field(
        default_factory=LabFloorConfig,
        description="Lower bounds for predicted lab values"
    )
    hyper_absorber: HyperAbsorberConfig = Field(
        default_factory=HyperAbsorberConfig,
        description="Hyper-absorber marker configuration"
    )
    classifier: ClassifierConfig = Field(
        default_factory=ClassifierConfig,
        description="Phenotype classifier configuration"
    )


_config: Optional[LipidGenomicsConfig] = None


def get_config() -> LipidGenomicsConfig:
    """Get the process-wide default configuration, built on first use."""
    global _config
    if _config is None:
        from app.core.settings import get_settings

        path = get_settings().config_file
        _config = load_config_from_file(path) if path else LipidGenomicsConfig()
    return _config


def load_config_from_file(filepath: str) -> LipidGenomicsConfig:
    """Load configuration from a JSON file."""
    with open(filepath, 'r') as f:
        config_dict = json.load(f)

    return LipidGenomicsConfig(**config_dict)


def save_config_to_file(config: LipidGenomicsConfig, filepath: str):
    """Save a configuration to a JSON file."""
    with open(filepath, 'w') as f:
        json.dump(config.model_dump(mode="json"), f, indent=2)


# Convenience accessors
def get_fitness_config() -> FitnessScoringConfig:
    return get_config().fitness


def get_lab_floors() -> LabFloorConfig:
    return get_config().lab_floors
