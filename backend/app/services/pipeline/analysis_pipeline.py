"""
Analysis Pipeline - orchestrates genotype export → categories → phenotypes → diets.

Receives a raw export (or an already parsed genotype map) from the API route,
runs the full interpretation and returns a LipidProfileReport.
"""
import logging
import time
from datetime import datetime, timezone
from typing import Optional, Union

from fastapi import UploadFile

from app.schemas.lipid_schema import (
    ActiveDietReport,
    CategoryReport,
    LabPanel,
    LabValue,
    LipidProfileReport,
    RankedDiet,
)
from app.services.genotype.parser import parse_genotype_export
from app.services.lipidgenomics.diet_engine import DietEngine, estimate_apob_mgdl
from app.services.lipidgenomics.lab_units import Analyte, LabUnit, classify_value, format_value
from app.services.lipidgenomics.models import DietKey, GenotypeMap, LabPrediction, RiskContext

logger = logging.getLogger(__name__)


def build_lab_panel(labs: LabPrediction, unit: LabUnit = LabUnit.MMOL) -> LabPanel:
    """Attach display strings and clinical bands to a prediction."""
    def value(mmol: float, analyte: Analyte) -> LabValue:
        band = classify_value(mmol, analyte)
        return LabValue(
            mmol=round(mmol, 3),
            display=format_value(mmol, analyte, unit),
            band=band,
            color=band.color,
        )

    return LabPanel(
        ldl=value(labs.ldl, Analyte.LDL),
        hdl=value(labs.hdl, Analyte.HDL),
        tg=value(labs.tg, Analyte.TG),
    )


def build_profile(
    genotypes: Optional[GenotypeMap],
    active_diet: Optional[Union[DietKey, str]] = None,
    unit: Union[LabUnit, str] = LabUnit.MMOL,
    engine: Optional[DietEngine] = None,
) -> LipidProfileReport:
    """
    Full interpretation of one genotype map.

    An empty map is valid and yields all-neutral categories, negative
    phenotype flags and baseline diet predictions. An unknown
    ``active_diet`` raises UnknownDietError.
    """
    start_time = time.time()
    genotypes = dict(genotypes or {})
    unit = LabUnit(unit)
    engine = engine or DietEngine()
    requested = engine.profile(active_diet).key if active_diet else None

    registry = engine.aggregator.registry
    analyzed = sum(1 for rsid, call in genotypes.items() if call and rsid in registry)
    logger.info("Building lipid profile from %d registry variant call(s)", analyzed)

    # ── 1. Category scores ────────────────────────────────────────────────
    categories = engine.aggregator.aggregate_all(genotypes)

    # ── 2. Phenotypes ────────────────────────────────────────────────────
    phenotypes = engine.classifier.classify(genotypes, categories)
    flags = engine.classifier.secondary_flags(genotypes, categories)

    # ── 3. Diet ranking ──────────────────────────────────────────────────
    ranking = engine.rank(genotypes, categories)
    selected = ranking.get(requested) if requested else ranking.best
    profile = engine.profile(selected.diet)

    # ── 4. Explanation for the active diet ───────────────────────────────
    context = RiskContext.from_categories(categories, phenotypes.hyper_absorber)
    explanation = engine.explain_for_context(selected.diet, context)
    why = engine.why_recommended(selected.diet, categories, phenotypes)
    apob = estimate_apob_mgdl(selected.labs)

    report = LipidProfileReport(
        timestamp=datetime.now(timezone.utc).isoformat(),
        unit=unit,
        variants_analyzed=analyzed,
        categories=[
            CategoryReport(
                category=category.value,
                description=registry.describe(category),
                label=score.label,
                color=score.color,
                risk_score=score.risk_score,
                protective_score=score.protective_score,
                hits=list(score.hits),
                variants=list(engine.aggregator.variant_calls(category, genotypes)),
            )
            for category, score in categories.items()
        ],
        phenotypes=phenotypes,
        secondary_flags=list(flags),
        diet_ranking=[
            RankedDiet(
                rank=position,
                diet=entry.diet,
                label=engine.profile(entry.diet).label,
                score=round(entry.score, 4),
                labs=build_lab_panel(entry.labs, unit),
            )
            for position, entry in enumerate(ranking.entries, start=1)
        ],
        active_diet=ActiveDietReport(
            diet=profile.key,
            label=profile.label,
            macros=profile.macros,
            description=profile.description,
            foods=list(profile.foods),
            how_to=list(profile.how_to),
            score=round(selected.score, 4),
            labs=build_lab_panel(selected.labs, unit),
            apob_mgdl=apob,
            apob_display=f"~{apob} mg/dL",
            explanation=explanation,
            why_recommended=list(why),
        ),
    )

    logger.info(
        "Lipid profile complete in %d ms: polygenic=%s monogenic=%s top diet=%s",
        int((time.time() - start_time) * 1000),
        phenotypes.polygenic_class.value,
        phenotypes.monogenic_screen_positive,
        ranking.best.diet.value,
    )
    return report


async def run_upload_pipeline(
    upload: UploadFile,
    active_diet: Optional[str] = None,
    unit: Union[LabUnit, str] = LabUnit.MMOL,
) -> LipidProfileReport:
    """
    Full pipeline: raw export → parse → build_profile.
    """
    logger.info("Parsing genotype export %s", upload.filename)
    content = await upload.read()
    parsed = parse_genotype_export(content)
    logger.info(
        "Parsed %d data line(s), kept %d tracked variant(s), skipped %d malformed",
        parsed.lines_read, parsed.variants_retained, parsed.lines_skipped,
    )

    report = build_profile(parsed.genotypes, active_diet=active_diet, unit=unit)
    return report.model_copy(update={"parse_metrics": dict(parsed.metrics)})
