"""
GeoWHD Query API

Read-only HTTP surface over the office registry and the dataset cache.
Run with:
    uvicorn geowhd.admin.main:app --port 8001
"""
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from geowhd import __version__
from geowhd.admin.api.v1 import api_router
from geowhd.bls.datasets import DATASETS
from geowhd.config import settings
from geowhd.logging_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Reference files and BLS extracts load on the first request that needs them
    logger.info(
        f"GeoWHD API {__version__} starting ({settings.app.environment}); "
        f"county reference: {settings.reference.county_path}"
    )
    yield
    logger.info("GeoWHD API shutting down")


app = FastAPI(
    title="GeoWHD Office Statistics API",
    description="BLS labor-market statistics aggregated to Wage and Hour district and regional offices",
    version=__version__,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.app.cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


@app.get("/")
async def root():
    return {
        "message": "GeoWHD Office Statistics API",
        "version": __version__,
        "datasets": {spec.name: spec.survey_name for spec in DATASETS.values()},
        "docs": "/api/docs",
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": __version__}


if __name__ == "__main__":
    import uvicorn

    configure_logging()
    uvicorn.run(
        "geowhd.admin.main:app",
        host="0.0.0.0",
        port=8001,
        log_level=settings.app.log_level.lower(),
    )
