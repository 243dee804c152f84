"""
Unit tests for the phenotype classifier.
Tests the monogenic screen, polygenic classes, hyper-absorber rule and
secondary flags.
"""

import pytest
from app.services.lipidgenomics.config import ClassifierConfig, LipidGenomicsConfig
from app.services.lipidgenomics.demo_profiles import get_demo_profile
from app.services.lipidgenomics.models import (
    Category,
    CategoryLabel,
    CategoryScore,
    PolygenicClass,
)
from app.services.lipidgenomics.phenotype_classifier import (
    HYPER_ABSORBER_NEGATIVE,
    INSULIN_RESISTANT_TG_FLAG,
    LMHR_LIKE_FLAG,
    MONOGENIC_NEGATIVE_CAVEAT,
    MONOGENIC_POSITIVE_FOLLOWUP,
    PhenotypeClassifier,
)


def _score(label: CategoryLabel, n_hits: int = 0, prefix: str = "rs") -> CategoryScore:
    risk, protective = {
        CategoryLabel.RISK: (10, 0),
        CategoryLabel.PROTECTIVE: (0, 10),
        CategoryLabel.NEUTRAL: (0, 0),
    }[label]
    return CategoryScore(
        label=label,
        color="gray",
        risk_score=risk,
        protective_score=protective,
        hits=tuple(f"{prefix}{i} (AA) → Risk" for i in range(n_hits)),
    )


def _categories(ldl=CategoryLabel.NEUTRAL, tg=CategoryLabel.NEUTRAL,
                insulin=CategoryLabel.NEUTRAL, liver=CategoryLabel.NEUTRAL):
    return {
        Category.LDL_RECEPTOR: _score(ldl),
        Category.TRIGLYCERIDE: _score(tg),
        Category.INSULIN_SENSITIVITY: _score(insulin),
        Category.HEPATIC_LIPOGENESIS: _score(liver),
    }


@pytest.fixture
def classifier():
    return PhenotypeClassifier()


class TestMonogenicScreen:

    def test_negative_for_empty_map(self, classifier):
        positive, lines = classifier.screen_monogenic({})

        assert positive is False
        assert lines == (
            "Monogenic FH (screen): NEGATIVE for APOB R3527Q, PCSK9 D374Y, PCSK9 S127R in this file.",
            MONOGENIC_NEGATIVE_CAVEAT,
        )

    def test_positive_names_marker(self, classifier):
        positive, lines = classifier.screen_monogenic({"rs5742904": "GA"})

        assert positive is True
        assert lines[0] == "Monogenic FH (screen): POSITIVE."
        assert lines[1] == (
            "APOB p.Arg3527Gln (R3527Q) (rs5742904) detected; APOB pathogenic variant linked to FH."
        )
        assert lines[-1] == MONOGENIC_POSITIVE_FOLLOWUP
        assert len(lines) == 3

    def test_non_pathogenic_call_is_negative(self, classifier):
        """rs28942111 flags on G only"""
        positive, _ = classifier.screen_monogenic({"rs28942111": "AA", "rs137852912": "GG"})

        assert positive is False

    def test_multiple_markers(self, classifier):
        positive, lines = classifier.screen_monogenic({"rs137852912": "AG", "rs28942111": "GG"})

        assert positive is True
        assert any("D374Y" in line for line in lines)
        assert any("S127R" in line for line in lines)

    def test_independent_of_categories(self, classifier):
        """A positive screen does not depend on the LDL receptor label"""
        result = classifier.classify({"rs5742904": "AA"})

        assert result.monogenic_screen_positive is True
        assert result.polygenic_class == PolygenicClass.NONE


class TestPolygenicClass:

    def test_none(self, classifier):
        cls, lines = classifier.classify_polygenic(_score(CategoryLabel.PROTECTIVE), _score(CategoryLabel.NEUTRAL))

        assert cls == PolygenicClass.NONE
        assert lines[0].startswith("Polygenic classification: None")
        assert "LDLR: risk 0 vs protective 10" in lines[1]

    def test_ldl_dominant(self, classifier):
        cls, lines = classifier.classify_polygenic(_score(CategoryLabel.RISK, 10), _score(CategoryLabel.NEUTRAL))

        assert cls == PolygenicClass.LDL_DOMINANT
        assert lines[0].startswith("Polygenic FHC")
        assert lines[1] == "LDLR category indicates risk (risk 10 vs protective 0)."
        assert len(lines) == 2 + 8

    def test_tg_dominant(self, classifier):
        cls, lines = classifier.classify_polygenic(_score(CategoryLabel.NEUTRAL), _score(CategoryLabel.RISK, 3))

        assert cls == PolygenicClass.TG_DOMINANT
        assert lines[0].startswith("Polygenic FHT")
        assert len(lines) == 2 + 3

    def test_combined_caps_hits_per_category(self, classifier):
        ldl = _score(CategoryLabel.RISK, 7, prefix="ldl")
        tg = _score(CategoryLabel.RISK, 6, prefix="tg")

        cls, lines = classifier.classify_polygenic(ldl, tg)

        assert cls == PolygenicClass.COMBINED
        assert lines[0].startswith("Polygenic FCHC")
        assert sum(1 for line in lines if line.startswith("ldl")) == 5
        assert sum(1 for line in lines if line.startswith("tg")) == 5

    def test_caps_come_from_config(self):
        config = LipidGenomicsConfig(classifier=ClassifierConfig(single_category_hits=2))
        classifier = PhenotypeClassifier(config=config)

        _, lines = classifier.classify_polygenic(_score(CategoryLabel.RISK, 10), _score(CategoryLabel.NEUTRAL))

        assert len(lines) == 2 + 2

    def test_abbreviations(self):
        assert PolygenicClass.LDL_DOMINANT.abbreviation == "FHC"
        assert PolygenicClass.TG_DOMINANT.abbreviation == "FHT"
        assert PolygenicClass.COMBINED.abbreviation == "FCHC"


class TestHyperAbsorber:

    @pytest.mark.parametrize("genotypes", [
        {"rs429358": "CT"},
        {"rs7412": "CC"},
        {"rs429358": "CT", "rs11591147": "GG"},
    ])
    def test_apoe_risk_without_pcsk9_protection(self, classifier, genotypes):
        assert classifier.is_hyper_absorber(genotypes) is True

    @pytest.mark.parametrize("genotypes", [
        {},
        {"rs429358": "TT", "rs7412": "TT"},
        {"rs429358": "CT", "rs11591147": "GT"},
    ])
    def test_not_hyper_absorber(self, classifier, genotypes):
        assert classifier.is_hyper_absorber(genotypes) is False

    def test_explanations(self, classifier):
        assert classifier.explain_hyper_absorber({}) == (HYPER_ABSORBER_NEGATIVE,)

        lines = classifier.explain_hyper_absorber({"rs429358": "CT"})
        assert "rs429358 C" in lines[0]
        assert "rs11591147 T" in lines[1]


class TestSecondaryFlags:

    def test_lmhr_like(self, classifier):
        flags = classifier.secondary_flags({}, _categories(ldl=CategoryLabel.RISK))

        assert flags == (LMHR_LIKE_FLAG,)
        assert flags[0].severity == "amber"

    def test_lmhr_suppressed_by_hyper_absorber(self, classifier):
        flags = classifier.secondary_flags({"rs429358": "CT"}, _categories(ldl=CategoryLabel.RISK))

        assert flags == ()

    def test_lmhr_suppressed_by_insulin_risk(self, classifier):
        flags = classifier.secondary_flags(
            {}, _categories(ldl=CategoryLabel.RISK, insulin=CategoryLabel.RISK)
        )

        assert flags == ()

    def test_insulin_resistant_tg(self, classifier):
        flags = classifier.secondary_flags(
            {}, _categories(tg=CategoryLabel.RISK, insulin=CategoryLabel.RISK)
        )

        assert flags == (INSULIN_RESISTANT_TG_FLAG,)
        assert flags[0].severity == "red"

    def test_no_flags_for_empty_map(self, classifier):
        assert classifier.secondary_flags({}) == ()


class TestClassify:

    def test_tg_risk_demo(self, classifier):
        """
        GIVEN the bundled TG-risk demo map
        WHEN it is classified
        THEN only the TG/VLDL category drives the polygenic class
        """
        result = classifier.classify(get_demo_profile("TG-risk"))

        assert result.polygenic_class == PolygenicClass.TG_DOMINANT
        assert result.hyper_absorber is False
        assert result.monogenic_screen_positive is False
        assert result.justifications.polygenic[1] == (
            "TG/VLDL category indicates risk (risk 179 vs protective 49)."
        )

    def test_mono_fh_demo(self, classifier):
        result = classifier.classify(get_demo_profile("MonoFH-positive"))

        assert result.monogenic_screen_positive is True
        assert any("rs5742904" in line for line in result.justifications.monogenic)

    def test_empty_map(self, classifier):
        result = classifier.classify({})

        assert result.monogenic_screen_positive is False
        assert result.hyper_absorber is False
        assert result.polygenic_class == PolygenicClass.NONE
        assert result.justifications.hyper_absorber == (HYPER_ABSORBER_NEGATIVE,)
