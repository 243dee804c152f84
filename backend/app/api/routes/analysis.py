from fastapi import APIRouter, UploadFile, File, Form, Header, HTTPException, status
from typing import Optional
import logging

from app.schemas.lipid_schema import GenotypeAnalysisRequest, LipidProfileReport
from app.services.genotype.parser import GenotypeParseError
from app.services.lipidgenomics.diet_engine import UnknownDietError
from app.services.lipidgenomics.lab_units import LabUnit, default_unit
from app.services.pipeline.analysis_pipeline import build_profile, run_upload_pipeline

router = APIRouter()
logger = logging.getLogger(__name__)

ACCEPTED_SUFFIXES = ('.txt', '.csv', '.tsv', '.txt.gz', '.csv.gz', '.tsv.gz')


@router.post(
    "/upload",
    response_model=LipidProfileReport,
    status_code=status.HTTP_200_OK,
    summary="Analyze a raw genotype export",
    description="Upload a consumer raw-data export (tab or comma separated) to receive a lipid profile and diet ranking."
)
async def analyze_upload(
    file: UploadFile = File(..., description="Raw genotype export (.txt/.csv/.tsv, optionally gzipped)"),
    diet: Optional[str] = Form(None, description="Diet to explain; defaults to the top-ranked diet"),
    unit: Optional[LabUnit] = Form(None, description="Display unit: mmol or mgdl"),
    accept_language: Optional[str] = Header(None),
) -> LipidProfileReport:
    """
    - **file**: Raw genotype export; column 1 variant id, column 4 genotype
    - **diet**: Optional diet key (Keto, Carnivore, LowCarb, HighCarb, Mediterranean)
    - **unit**: Display unit for lab values; mg/dL for US locales when omitted
    """
    if not file.filename or not file.filename.lower().endswith(ACCEPTED_SUFFIXES):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid file format. Please upload a .txt, .csv or .tsv raw data export."
        )

    try:
        return await run_upload_pipeline(file, active_diet=diet, unit=unit or default_unit(accept_language))
    except GenotypeParseError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Parsing error: {e}")
    except UnknownDietError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception:
        logger.exception("Unexpected error in analysis pipeline")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred during the analysis pipeline."
        )


@router.post(
    "/genotypes",
    response_model=LipidProfileReport,
    summary="Analyze a parsed genotype map",
)
async def analyze_genotypes(
    request: GenotypeAnalysisRequest,
    accept_language: Optional[str] = Header(None),
) -> LipidProfileReport:
    """Run the interpretation on a JSON genotype map. An empty map is valid."""
    try:
        return build_profile(
            request.genotypes,
            active_diet=request.diet,
            unit=request.unit or default_unit(accept_language),
        )
    except UnknownDietError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception:
        logger.exception("Unexpected error in analysis pipeline")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred during the analysis pipeline."
        )
