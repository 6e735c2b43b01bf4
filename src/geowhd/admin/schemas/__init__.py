"""API Response Schemas"""
from geowhd.admin.schemas.offices import (
    OfficeListResponse,
    OfficeDetailResponse,
    CountyItem,
    MSAItem,
    MSAListResponse,
)
from geowhd.admin.schemas.statistics import (
    StatisticsResponse,
    DatasetStatusItem,
    DatasetStatusResponse,
)

__all__ = [
    # Office schemas
    "OfficeListResponse",
    "OfficeDetailResponse",
    "CountyItem",
    "MSAItem",
    "MSAListResponse",
    # Statistics schemas
    "StatisticsResponse",
    "DatasetStatusItem",
    "DatasetStatusResponse",
]
