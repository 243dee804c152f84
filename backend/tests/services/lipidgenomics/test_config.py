"""
Unit tests for the lipid genomics configuration and variant registry tables.
"""

import pytest
from pydantic import ValidationError

from app.services.lipidgenomics.config import (
    FitnessScoringConfig,
    LabFloorConfig,
    LipidGenomicsConfig,
    load_config_from_file,
    save_config_to_file,
)
from app.services.lipidgenomics.models import Category
from app.services.lipidgenomics.variant_registry import VariantRegistry, get_variant_registry


class TestLipidGenomicsConfig:

    def test_defaults(self):
        config = LipidGenomicsConfig()

        assert config.fitness.ldl_weight == 0.45
        assert config.fitness.tg_weight == 0.35
        assert config.fitness.hdl_weight == 0.20
        assert config.lab_floors == LabFloorConfig(ldl=1.5, hdl=0.6, tg=0.6)
        assert config.hyper_absorber.apoe_markers == ("rs429358", "rs7412")
        assert config.classifier.combined_hits_per_category == 5

    def test_weights_must_sum_to_one(self):
        with pytest.raises(ValidationError):
            FitnessScoringConfig(ldl_weight=1.0, tg_weight=1.0, hdl_weight=1.0)

    def test_rebalanced_weights_accepted(self):
        config = FitnessScoringConfig(ldl_weight=0.5, tg_weight=0.3, hdl_weight=0.2)

        assert config.ldl_weight == 0.5

    def test_invalid_penalty_range(self):
        with pytest.raises(ValidationError):
            FitnessScoringConfig(ldl_penalty_range=0.0)

    def test_frozen(self):
        config = LipidGenomicsConfig()

        with pytest.raises(ValidationError):
            config.fitness = FitnessScoringConfig()

    def test_file_round_trip(self, tmp_path):
        path = tmp_path / "lipidgenomics.json"
        config = LipidGenomicsConfig(lab_floors=LabFloorConfig(ldl=1.8))

        save_config_to_file(config, str(path))
        loaded = load_config_from_file(str(path))

        assert loaded == config
        assert loaded.lab_floors.ldl == 1.8


class TestVariantRegistry:

    @pytest.fixture
    def registry(self):
        return get_variant_registry()

    def test_singleton(self, registry):
        assert get_variant_registry() is registry

    def test_category_sizes(self, registry):
        sizes = {category: len(ids) for category, ids in registry.categories.items()}

        assert sizes == {
            Category.LDL_RECEPTOR: 9,
            Category.TRIGLYCERIDE: 17,
            Category.INSULIN_SENSITIVITY: 5,
            Category.HEPATIC_LIPOGENESIS: 4,
        }
        assert len(registry) == 35

    def test_every_category_variant_defined(self, registry):
        for ids in registry.categories.values():
            for variant_id in ids:
                assert variant_id in registry

    def test_tracked_ids_include_markers(self, registry):
        assert "rs5742904" in registry.tracked_ids
        assert "rs5742904" not in registry
        assert len(registry.tracked_ids) == 38

    def test_descriptions(self, registry):
        for category in Category:
            assert registry.describe(category)

    def test_tables_read_only(self, registry):
        with pytest.raises(TypeError):
            registry.definitions["rsNEW"] = None

    def test_empty_registry(self):
        registry = VariantRegistry(definitions=[], categories={}, monogenic_markers=())

        assert len(registry) == 0
        assert registry.category_variants(Category.LDL_RECEPTOR) == ()
        assert registry.tracked_ids == frozenset()
