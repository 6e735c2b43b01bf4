"""
Office statistics endpoints
"""
import json
import logging
from typing import Optional

import pandas as pd
from fastapi import APIRouter, Depends, HTTPException, Query

from geowhd.admin.core.service import get_geowhd_service
from geowhd.admin.schemas.statistics import DatasetStatusItem, DatasetStatusResponse, StatisticsResponse
from geowhd.bls.datasets import get_dataset_spec
from geowhd.exceptions import DatasetLoadError, ResolutionError
from geowhd.service import GeoWHDService

log = logging.getLogger(__name__)

router = APIRouter(prefix="/statistics", tags=["statistics"])


def _records(df: pd.DataFrame) -> list:
    """JSON-safe rows: NaN -> null, timestamps -> ISO dates"""
    return json.loads(df.to_json(orient="records", date_format="iso"))


@router.get("/datasets", response_model=DatasetStatusResponse)
def get_dataset_status(service: GeoWHDService = Depends(get_geowhd_service)):
    """Which upstream snapshots are already cached in this process"""
    return DatasetStatusResponse(datasets=[
        DatasetStatusItem(dataset_id=dataset_id.value, state=service.cache.state(dataset_id).value)
        for dataset_id in service.cache.dataset_ids()
    ])


@router.get("/{dataset}", response_model=StatisticsResponse)
def get_statistics(
    dataset: str,
    office: str = Query(..., description="District or regional office name"),
    aggregate: Optional[bool] = Query(None, description="Sum across the office's areas (dataset default if omitted)"),
    service: GeoWHDService = Depends(get_geowhd_service),
):
    """Statistics for one office from laus, qcew, oews or ces"""
    try:
        spec = get_dataset_spec(dataset)
        resolved = service.resolve_office(office)
        aggregate = spec.default_aggregate if aggregate is None else aggregate
        df = service.query(spec.name, resolved, aggregate)
    except ResolutionError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DatasetLoadError as e:
        log.error(f"Loading {dataset} failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return StatisticsResponse(
        dataset=spec.name,
        office=resolved.name,
        office_kind=resolved.kind.value,
        aggregate=aggregate,
        columns=[str(c) for c in df.columns],
        row_count=len(df),
        rows=_records(df),
    )
