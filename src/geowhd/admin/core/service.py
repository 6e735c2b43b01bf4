"""
Service dependency for the Admin API

Thin wrapper around the process-wide GeoWHDService for FastAPI compatibility.
"""
from geowhd.service import GeoWHDService, get_service


def get_geowhd_service() -> GeoWHDService:
    """
    FastAPI dependency for the query service

    Usage in endpoints:
        from fastapi import Depends
        from geowhd.admin.core.service import get_geowhd_service

        @router.get("/endpoint")
        def endpoint(service: GeoWHDService = Depends(get_geowhd_service)):
            ...
    """
    return get_service()
