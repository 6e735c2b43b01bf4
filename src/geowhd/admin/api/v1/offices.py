"""
Office and MSA reference endpoints
"""
from fastapi import APIRouter, Depends, HTTPException

from geowhd.admin.core.service import get_geowhd_service
from geowhd.admin.schemas.offices import (
    CountyItem, MSAItem, MSAListResponse, OfficeDetailResponse, OfficeListResponse,
)
from geowhd.exceptions import ResolutionError
from geowhd.geography.models import OfficeKind
from geowhd.service import GeoWHDService

router = APIRouter(tags=["offices"])


@router.get("/offices", response_model=OfficeListResponse)
def list_offices(service: GeoWHDService = Depends(get_geowhd_service)):
    """Regional and district office names, each sorted"""
    names = service.list_offices()
    return OfficeListResponse(
        regional_offices=names.regional_offices,
        district_offices=names.district_offices,
    )


@router.get("/offices/{name}", response_model=OfficeDetailResponse)
def get_office(name: str, service: GeoWHDService = Depends(get_geowhd_service)):
    """Resolve an office name and describe its geography"""
    try:
        office = service.resolve_office(name)
    except ResolutionError as e:
        raise HTTPException(status_code=404, detail=str(e))

    is_district = office.kind == OfficeKind.DISTRICT
    return OfficeDetailResponse(
        name=office.name,
        kind=office.kind.value,
        region_name=office.region_name if is_district else None,
        district_offices=[] if is_district else list(office.district_office_names()),
        counties=[
            CountyItem(name=c.name, fips=c.combined_fips_id, state=c.state_abbreviation)
            for c in office.counties
        ],
        county_fips_codes=list(office.county_fips_codes()),
        metro_area_codes=list(office.metro_area_codes()),
    )


@router.get("/msas", response_model=MSAListResponse)
def list_msas(service: GeoWHDService = Depends(get_geowhd_service)):
    """Every MSA in the reference table, including those no office serves"""
    msas = [
        MSAItem(area_code=m.area_code, name=m.name, district_offices=sorted(m.district_office_names))
        for m in service.get_msas()
    ]
    return MSAListResponse(total=len(msas), msas=msas)
