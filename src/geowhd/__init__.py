"""
GeoWHD

BLS labor-market statistics (LAUS, QCEW, OEWS, CES) aggregated to Wage and
Hour district and regional offices.

Usage:
    import geowhd
    names = geowhd.list_offices()
    df = geowhd.laus("New York City District Office")
"""
from typing import List, Optional, Union

import pandas as pd

from geowhd.exceptions import (
    GeoWHDError,
    ResolutionError,
    DataIntegrityError,
    MissingReferenceError,
    FetchError,
    FormatError,
    ParseError,
)
from geowhd.geography.models import MetroArea, Office
from geowhd.geography.registry import OfficeNames
from geowhd.service import GeoWHDService, get_service, set_service

__version__ = "0.3.0"


def resolve_office(name: Union[str, Office]) -> Office:
    return get_service().resolve_office(name)


def list_offices() -> OfficeNames:
    return get_service().list_offices()


def get_msas() -> List[MetroArea]:
    return get_service().get_msas()


def query(dataset: str, office: Union[str, Office], aggregate: Optional[bool] = None) -> pd.DataFrame:
    return get_service().query(dataset, office, aggregate)


def laus(office: Union[str, Office], aggregate: bool = True) -> pd.DataFrame:
    return get_service().laus(office, aggregate)


def qcew(office: Union[str, Office], aggregate: bool = True) -> pd.DataFrame:
    return get_service().qcew(office, aggregate)


def oews(office: Union[str, Office]) -> pd.DataFrame:
    return get_service().oews(office)


def ces(office: Union[str, Office]) -> pd.DataFrame:
    return get_service().ces(office)


__all__ = [
    "__version__",
    "GeoWHDService",
    "get_service",
    "set_service",
    "resolve_office",
    "list_offices",
    "get_msas",
    "query",
    "laus",
    "qcew",
    "oews",
    "ces",
    "GeoWHDError",
    "ResolutionError",
    "DataIntegrityError",
    "MissingReferenceError",
    "FetchError",
    "FormatError",
    "ParseError",
]
