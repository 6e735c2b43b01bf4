"""
Retrieval adapter wiring

Maps each DatasetId to the parser routine that fetches and normalizes it.
"""
from typing import Dict, Optional

from geowhd.bls.cache import DatasetCache, Loader
from geowhd.bls.client import BLSDownloadClient
from geowhd.bls.datasets import DatasetId
from geowhd.bls.la_flat_file_parser import LAFlatFileParser
from geowhd.bls.oe_flat_file_parser import OEFlatFileParser
from geowhd.bls.qcew_archive_parser import QCEWArchiveParser
from geowhd.bls.sm_flat_file_parser import SMFlatFileParser
from geowhd.geography.builder import Geography


def build_loaders(geography: Geography, client: Optional[BLSDownloadClient] = None) -> Dict[DatasetId, Loader]:
    """One loader per cache slot, sharing a single download client"""
    client = client or BLSDownloadClient()
    msa_offices = geography.msa_offices()

    laus = LAFlatFileParser(client)
    qcew = QCEWArchiveParser(client)
    oews = OEFlatFileParser(client, msa_offices=msa_offices)
    ces = SMFlatFileParser(client, msa_offices=msa_offices)

    return {
        DatasetId.LAUS: laus.load,
        DatasetId.QCEW: qcew.load,
        DatasetId.OEWS_SERIES: oews.load_series,
        DatasetId.OEWS_DATA: oews.load_data,
        DatasetId.CES_SERIES: ces.load_series,
        DatasetId.CES_DATA: ces.load_data,
    }


def build_cache(geography: Geography, client: Optional[BLSDownloadClient] = None) -> DatasetCache:
    return DatasetCache(build_loaders(geography, client))
