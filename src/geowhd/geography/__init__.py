"""Geographic reference model: counties, MSAs and the office hierarchy"""
from geowhd.geography.models import (
    County,
    MetroArea,
    DistrictOffice,
    RegionalOffice,
    Office,
    OfficeKind,
    GeographyKey,
)
from geowhd.geography.builder import Geography, build_geography, combined_fips_id
from geowhd.geography.registry import OfficeRegistry, OfficeNames

__all__ = [
    "County",
    "MetroArea",
    "DistrictOffice",
    "RegionalOffice",
    "Office",
    "OfficeKind",
    "GeographyKey",
    "Geography",
    "build_geography",
    "combined_fips_id",
    "OfficeRegistry",
    "OfficeNames",
]
