"""BLS retrieval adapters and the dataset cache"""
from geowhd.bls.cache import DatasetCache, SlotState
from geowhd.bls.client import BLSDownloadClient
from geowhd.bls.datasets import Dataset, DatasetId, DATASETS, get_dataset_spec

__all__ = [
    "BLSDownloadClient",
    "DatasetCache",
    "SlotState",
    "Dataset",
    "DatasetId",
    "DATASETS",
    "get_dataset_spec",
]
