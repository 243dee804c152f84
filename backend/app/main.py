import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.api.router import api_router
from app.core import logging as _logging  # Initialize logging
from app.core.settings import get_settings
from app.services.lipidgenomics.config import get_config
from app.services.lipidgenomics.variant_registry import get_variant_registry

logger = logging.getLogger(__name__)

app = FastAPI(
    title="LipidGuard API",
    description="Genotype-driven lipid phenotype screening and diet response prediction",
    version="1.0.0"
)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API Routers
app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
async def startup_event():
    # Build the registry and configuration before the first request
    registry = get_variant_registry()
    get_config()
    logger.info("Variant registry loaded: %d variants, %d tracked ids", len(registry), len(registry.tracked_ids))


@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "LipidGuard"}
