from fastapi import APIRouter, Header, HTTPException, Query, status
from typing import List, Optional

from app.schemas.lipid_schema import CategoryInfoResponse, DietPresetResponse, LipidProfileReport
from app.services.lipidgenomics.demo_profiles import DEMO_PROFILES, get_demo_profile
from app.services.lipidgenomics.diet_engine import DIET_PROFILES, UnknownDietError
from app.services.lipidgenomics.lab_units import LabUnit, default_unit
from app.services.lipidgenomics.variant_registry import get_variant_registry
from app.services.pipeline.analysis_pipeline import build_lab_panel, build_profile

router = APIRouter()


@router.get("/diets", response_model=List[DietPresetResponse])
async def list_diets(
    unit: Optional[LabUnit] = Query(None, description="Display unit; mg/dL for US locales when omitted"),
    accept_language: Optional[str] = Header(None),
):
    """Diet presets with their baseline labs (BMI 25, moderate activity)."""
    return [
        DietPresetResponse(
            diet=profile.key,
            label=profile.label,
            macros=profile.macros,
            description=profile.description,
            foods=list(profile.foods),
            how_to=list(profile.how_to),
            baseline=build_lab_panel(profile.baseline, unit or default_unit(accept_language)),
        )
        for profile in DIET_PROFILES.values()
    ]


@router.get("/categories", response_model=List[CategoryInfoResponse])
async def list_categories():
    registry = get_variant_registry()
    return [
        CategoryInfoResponse(
            category=category.value,
            description=registry.describe(category),
            variants=list(variant_ids),
        )
        for category, variant_ids in registry.categories.items()
    ]


@router.get("/demos", response_model=List[str])
async def list_demos():
    return list(DEMO_PROFILES)


@router.get("/demos/{name}", response_model=LipidProfileReport)
async def analyze_demo(
    name: str,
    diet: Optional[str] = Query(None, description="Diet to explain; defaults to the top-ranked diet"),
    unit: Optional[LabUnit] = Query(None, description="Display unit; mg/dL for US locales when omitted"),
    accept_language: Optional[str] = Header(None),
):
    """Lipid profile for a bundled demo genotype map."""
    try:
        genotypes = get_demo_profile(name)
    except KeyError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown demo profile '{name}'")

    try:
        return build_profile(genotypes, active_diet=diet, unit=unit or default_unit(accept_language))
    except UnknownDietError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
