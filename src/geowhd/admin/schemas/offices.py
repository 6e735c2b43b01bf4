"""
Pydantic schemas for the office and MSA endpoints
"""
from typing import List, Optional
from pydantic import BaseModel, Field


class OfficeListResponse(BaseModel):
    """All registered office names, split by kind"""
    regional_offices: List[str]
    district_offices: List[str]


class CountyItem(BaseModel):
    """A county served by an office"""
    name: str
    fips: str
    state: str

    class Config:
        from_attributes = True


class OfficeDetailResponse(BaseModel):
    """A resolved office and its geography"""
    name: str
    kind: str = Field(..., description="district | regional")
    region_name: Optional[str] = Field(None, description="Owning region (district offices only)")
    district_offices: List[str] = Field(default_factory=list, description="Member district offices (regions only)")
    counties: List[CountyItem]
    county_fips_codes: List[str]
    metro_area_codes: List[str]


class MSAItem(BaseModel):
    """An MSA and the district offices serving it"""
    area_code: str
    name: Optional[str] = None
    district_offices: List[str]


class MSAListResponse(BaseModel):
    total: int
    msas: List[MSAItem]
