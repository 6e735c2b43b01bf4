"""
GeoWHD service

Owns the geography, the office registry, the dataset cache and the engine.
Most callers use the process-wide instance from get_service(); tests and
embedding applications construct their own with injected parts.
"""
import logging
import threading
from typing import List, Optional, Union

import pandas as pd

from geowhd.bls.adapters import build_cache
from geowhd.bls.cache import DatasetCache
from geowhd.bls.client import BLSDownloadClient
from geowhd.bls.datasets import Dataset
from geowhd.engine.aggregation import StatisticsEngine
from geowhd.geography.builder import Geography
from geowhd.geography.models import MetroArea, Office
from geowhd.geography.reference import load_reference_geography
from geowhd.geography.registry import OfficeNames, OfficeRegistry

logger = logging.getLogger(__name__)


class GeoWHDService:
    """Query surface over one geography and one dataset cache"""

    def __init__(
        self,
        geography: Geography,
        cache: Optional[DatasetCache] = None,
        client: Optional[BLSDownloadClient] = None,
    ):
        self.geography = geography
        self.registry = OfficeRegistry.from_geography(geography)
        self.cache = cache if cache is not None else build_cache(geography, client)
        self.engine = StatisticsEngine(self.cache, self.registry)

    @classmethod
    def from_reference_files(cls, client: Optional[BLSDownloadClient] = None) -> "GeoWHDService":
        return cls(load_reference_geography(), client=client)

    def resolve_office(self, name: Union[str, Office]) -> Office:
        return self.registry.resolve(name)

    def list_offices(self) -> OfficeNames:
        return self.registry.list_offices()

    def get_msas(self) -> List[MetroArea]:
        return list(self.geography.get_msas())

    def query(
        self,
        dataset: Union[str, Dataset],
        office: Union[str, Office],
        aggregate: Optional[bool] = None,
    ) -> pd.DataFrame:
        return self.engine.query(dataset, office, aggregate=aggregate)

    def laus(self, office: Union[str, Office], aggregate: bool = True) -> pd.DataFrame:
        """Local Area Unemployment Statistics for the last 14 months"""
        return self.query(Dataset.LAUS, office, aggregate)

    def qcew(self, office: Union[str, Office], aggregate: bool = True) -> pd.DataFrame:
        """Quarterly establishment counts, employment and wages"""
        return self.query(Dataset.QCEW, office, aggregate)

    def oews(self, office: Union[str, Office]) -> pd.DataFrame:
        """Occupational employment and wage series for the office's MSAs"""
        return self.query(Dataset.OEWS, office, False)

    def ces(self, office: Union[str, Office]) -> pd.DataFrame:
        """Employment by industry series for the office's MSAs"""
        return self.query(Dataset.CES, office, False)


_service: Optional[GeoWHDService] = None
_service_lock = threading.Lock()


def get_service() -> GeoWHDService:
    """Process-wide service, built from the configured reference files on first use"""
    global _service
    if _service is None:
        with _service_lock:
            if _service is None:
                logger.info("Initializing GeoWHD service from reference files")
                _service = GeoWHDService.from_reference_files()
    return _service


def set_service(service: Optional[GeoWHDService]) -> None:
    """Install (or clear, with None) the process-wide service"""
    global _service
    with _service_lock:
        _service = service
