"""
Geography entities: counties, metro areas, district and regional offices

All entities are frozen. Offices expose their geography through
geography_keys() so queries never branch on the office type.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Tuple, Union


class OfficeKind(str, Enum):
    DISTRICT = "district"
    REGIONAL = "regional"


class GeographyKey(str, Enum):
    """Which identifier a dataset uses to place its rows"""
    COUNTY = "county"
    MSA = "msa"


def _unique(codes: Iterable[str]) -> Tuple[str, ...]:
    """Order-preserving de-duplication"""
    return tuple(dict.fromkeys(codes))


@dataclass(frozen=True)
class County:
    name: str
    county_fips: str
    state_abbreviation: str
    state_fips: str
    combined_fips_id: str
    district_office_name: str


@dataclass(frozen=True)
class MetroArea:
    area_code: str
    name: Optional[str] = None
    district_office_names: FrozenSet[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class DistrictOffice:
    name: str
    counties: Tuple[County, ...]
    metro_areas: Tuple[MetroArea, ...]
    region_name: str
    kind: OfficeKind = field(default=OfficeKind.DISTRICT, init=False)

    def county_fips_codes(self) -> Tuple[str, ...]:
        return _unique(county.combined_fips_id for county in self.counties)

    def metro_area_codes(self) -> Tuple[str, ...]:
        return _unique(msa.area_code for msa in self.metro_areas)

    def geography_keys(self, key: GeographyKey) -> Tuple[str, ...]:
        if key == GeographyKey.COUNTY:
            return self.county_fips_codes()
        return self.metro_area_codes()


@dataclass(frozen=True)
class RegionalOffice:
    name: str
    district_offices: Tuple[DistrictOffice, ...]
    kind: OfficeKind = field(default=OfficeKind.REGIONAL, init=False)

    @property
    def counties(self) -> Tuple[County, ...]:
        return tuple(county for office in self.district_offices for county in office.counties)

    @property
    def metro_areas(self) -> Tuple[MetroArea, ...]:
        seen = {}
        for office in self.district_offices:
            for msa in office.metro_areas:
                seen.setdefault(msa.area_code, msa)
        return tuple(seen.values())

    def district_office_names(self) -> Tuple[str, ...]:
        return tuple(office.name for office in self.district_offices)

    def county_fips_codes(self) -> Tuple[str, ...]:
        return _unique(code for office in self.district_offices for code in office.county_fips_codes())

    def metro_area_codes(self) -> Tuple[str, ...]:
        # MSAs shared by several district offices are listed once
        return _unique(code for office in self.district_offices for code in office.metro_area_codes())

    def geography_keys(self, key: GeographyKey) -> Tuple[str, ...]:
        if key == GeographyKey.COUNTY:
            return self.county_fips_codes()
        return self.metro_area_codes()


Office = Union[DistrictOffice, RegionalOffice]
