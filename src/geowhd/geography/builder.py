"""
Geography Builder

Turns raw reference rows (county -> district office assignments and the
MSA -> office membership list) into the validated, immutable office
hierarchy. Any inconsistency is fatal: there is no partial geography.
"""
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Set, Tuple

import pandas as pd

from geowhd.exceptions import DataIntegrityError, MissingReferenceError, ParseError
from geowhd.geography.models import County, DistrictOffice, MetroArea, Office, RegionalOffice
from geowhd.utils.data_transform import normalize_columns

logger = logging.getLogger(__name__)

COUNTY_COLUMNS = ['county_name', 'state_id', 'wh_office_name']
MSA_COLUMNS = ['area_code']
OFFICE_COLUMNS = ['office_name', 'region_name']


@dataclass(frozen=True)
class Geography:
    """The complete county / MSA / office graph. Built once per process."""
    counties: Tuple[County, ...]
    metro_areas: Tuple[MetroArea, ...]
    district_offices: Mapping[str, DistrictOffice]
    regional_offices: Mapping[str, RegionalOffice]

    @property
    def offices(self) -> Dict[str, Office]:
        merged: Dict[str, Office] = dict(self.regional_offices)
        merged.update(self.district_offices)
        return merged

    def get_msas(self) -> Tuple[MetroArea, ...]:
        """Every MSA in the reference table, including those no office serves"""
        return self.metro_areas

    def msa_offices(self) -> Dict[str, Tuple[str, ...]]:
        """area_code -> sorted district office names serving it"""
        return {msa.area_code: tuple(sorted(msa.district_office_names)) for msa in self.metro_areas}


# ---------------------- Field parsing ---------------------- #

def _text(value) -> str:
    if value is None:
        return ''
    if isinstance(value, float) and pd.isna(value):
        return ''
    return str(value).strip()


def _pad_fragment(value, width: int, field: str) -> str:
    if isinstance(value, float) and not pd.isna(value) and value.is_integer():
        value = int(value)
    text = _text(value)
    if not text.isdigit() or len(text) > width:
        raise ParseError(field, value, f"{field} must be numeric with at most {width} digits, got {value!r}")
    return text.zfill(width)


def combined_fips_id(state_fips, county_fips) -> str:
    """
    Build the 5-digit county identifier from its state and county fragments

    Examples:
        >>> combined_fips_id(1, 3)
        '01003'
        >>> combined_fips_id('36', '061')
        '36061'
    """
    return _pad_fragment(state_fips, 2, 'state_fips') + _pad_fragment(county_fips, 3, 'county_fips')


def split_geoid(geoid) -> Tuple[str, str]:
    """Split a (possibly zero-stripped) 5-digit GEOID into state and county FIPS"""
    padded = _pad_fragment(geoid, 5, 'geoid')
    return padded[:2], padded[2:]


# ---------------------- Builders ---------------------- #

def _require(df: pd.DataFrame, columns: List[str], table: str) -> None:
    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise DataIntegrityError(f"{table} reference table is missing columns {missing}")


def _build_counties(county_rows: pd.DataFrame) -> List[County]:
    _require(county_rows, COUNTY_COLUMNS, 'County')
    county_rows = county_rows.rename(columns={'geoid10': 'geoid'})
    has_geoid = 'geoid' in county_rows.columns
    if not has_geoid and not {'state_fips', 'county_fips'} <= set(county_rows.columns):
        raise DataIntegrityError("County reference table needs a geoid column or state_fips and county_fips columns")

    counties: List[County] = []
    seen: Dict[str, str] = {}
    for row in county_rows.to_dict('records'):
        if has_geoid:
            state_fips, county_fips = split_geoid(row['geoid'])
        else:
            state_fips = _pad_fragment(row['state_fips'], 2, 'state_fips')
            county_fips = _pad_fragment(row['county_fips'], 3, 'county_fips')
        fips = combined_fips_id(state_fips, county_fips)
        office_name = _text(row['wh_office_name'])
        if not office_name:
            raise MissingReferenceError(f"County {fips} has no district office assignment")
        if fips in seen:
            raise DataIntegrityError(
                f"County {fips} is listed more than once ({seen[fips]!r} and {office_name!r})"
            )
        seen[fips] = office_name
        counties.append(County(
            name=_text(row['county_name']),
            county_fips=county_fips,
            state_abbreviation=_text(row['state_id']),
            state_fips=state_fips,
            combined_fips_id=fips,
            district_office_name=office_name,
        ))
    return counties


def _office_regions_from_counties(county_rows: pd.DataFrame) -> Dict[str, str]:
    """district office -> region, checking every member county agrees"""
    regions: Dict[str, str] = {}
    for row in county_rows.to_dict('records'):
        office_name = _text(row['wh_office_name'])
        region_name = _text(row.get('region_name'))
        if not region_name:
            continue
        current = regions.setdefault(office_name, region_name)
        if current != region_name:
            raise DataIntegrityError(
                f"Counties of {office_name!r} disagree on region: {current!r} vs {region_name!r}"
            )
    return regions


def _office_regions_from_table(office_rows: pd.DataFrame) -> Dict[str, str]:
    _require(office_rows, OFFICE_COLUMNS, 'Office')
    regions: Dict[str, str] = {}
    for row in office_rows.to_dict('records'):
        office_name = _text(row['office_name'])
        region_name = _text(row['region_name'])
        if not office_name or not region_name:
            raise DataIntegrityError(f"Office reference row is incomplete: {row}")
        current = regions.setdefault(office_name, region_name)
        if current != region_name:
            raise DataIntegrityError(
                f"Office {office_name!r} is assigned to two regions: {current!r} and {region_name!r}"
            )
    return regions


def _build_metro_areas(msa_rows: Optional[pd.DataFrame], office_names: Set[str]) -> List[MetroArea]:
    if msa_rows is None:
        return []
    _require(msa_rows, MSA_COLUMNS, 'MSA')
    names: Dict[str, str] = {}
    members: Dict[str, Set[str]] = {}
    for row in msa_rows.to_dict('records'):
        area_code = _pad_fragment(row['area_code'], 5, 'area_code')
        members.setdefault(area_code, set())
        area_name = _text(row.get('area_name'))
        if area_name:
            names.setdefault(area_code, area_name)
        office_name = _text(row.get('office_name'))
        if not office_name:
            continue
        if office_name not in office_names:
            raise MissingReferenceError(f"MSA {area_code} references unknown district office {office_name!r}")
        members[area_code].add(office_name)

    return [
        MetroArea(area_code=code, name=names.get(code), district_office_names=frozenset(offices))
        for code, offices in sorted(members.items())
    ]


def build_geography(
    county_rows: pd.DataFrame,
    msa_rows: Optional[pd.DataFrame] = None,
    office_rows: Optional[pd.DataFrame] = None,
) -> Geography:
    """
    Construct the validated office hierarchy from raw reference rows

    Args:
        county_rows: One row per county with its district office (and region)
        msa_rows: MSA -> district office membership rows; offices may be blank
        office_rows: Optional office -> region assignment table. When omitted
            the assignments are derived from county_rows.

    Returns:
        Geography

    Raises:
        ParseError: a FIPS or area code fragment is malformed
        DataIntegrityError: reference rows contradict each other
        MissingReferenceError: a row names an office or region that does not exist
    """
    county_rows = normalize_columns(county_rows)
    msa_rows = normalize_columns(msa_rows) if msa_rows is not None else None

    counties = _build_counties(county_rows)
    county_regions = _office_regions_from_counties(county_rows)

    if office_rows is not None:
        office_regions = _office_regions_from_table(normalize_columns(office_rows))
        for county in counties:
            if county.district_office_name not in office_regions:
                raise MissingReferenceError(
                    f"County {county.combined_fips_id} references unknown district office "
                    f"{county.district_office_name!r}"
                )
        for office_name, region_name in county_regions.items():
            if office_regions[office_name] != region_name:
                raise DataIntegrityError(
                    f"Counties place {office_name!r} in {region_name!r} but the office table says "
                    f"{office_regions[office_name]!r}"
                )
    else:
        office_regions = county_regions
        for county in counties:
            if county.district_office_name not in office_regions:
                raise MissingReferenceError(
                    f"District office {county.district_office_name!r} has no region assignment"
                )

    if 'region_name' in county_rows.columns:
        known_regions = set(county_regions.values())
    else:
        staffed = {county.district_office_name for county in counties}
        known_regions = {region for office, region in office_regions.items() if office in staffed}
    for office_name, region_name in office_regions.items():
        if region_name not in known_regions:
            raise MissingReferenceError(
                f"District office {office_name!r} references region {region_name!r} which no county belongs to"
            )

    metro_areas = _build_metro_areas(msa_rows, set(office_regions))

    district_offices: Dict[str, DistrictOffice] = {}
    for office_name in sorted(office_regions):
        district_offices[office_name] = DistrictOffice(
            name=office_name,
            counties=tuple(c for c in counties if c.district_office_name == office_name),
            metro_areas=tuple(m for m in metro_areas if office_name in m.district_office_names),
            region_name=office_regions[office_name],
        )

    regional_offices: Dict[str, RegionalOffice] = {}
    for region_name in sorted(set(office_regions.values())):
        regional_offices[region_name] = RegionalOffice(
            name=region_name,
            district_offices=tuple(o for o in district_offices.values() if o.region_name == region_name),
        )

    collisions = set(district_offices) & set(regional_offices)
    if collisions:
        raise DataIntegrityError(f"Office names used by both a district and a region: {sorted(collisions)}")

    logger.info(
        f"Built geography: {len(counties)} counties, {len(metro_areas)} MSAs, "
        f"{len(district_offices)} district offices, {len(regional_offices)} regions"
    )
    return Geography(
        counties=tuple(counties),
        metro_areas=tuple(metro_areas),
        district_offices=MappingProxyType(district_offices),
        regional_offices=MappingProxyType(regional_offices),
    )
