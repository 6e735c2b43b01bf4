"""
Dataset Cache

One lazily populated slot per DatasetId. A slot is fetched at most once per
successful load and then serves every later read for the life of the
process. A failed load leaves the slot empty so a later call can try again.
"""
import logging
import threading
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional

import pandas as pd

from geowhd.bls.datasets import DatasetId

logger = logging.getLogger(__name__)

Loader = Callable[[], pd.DataFrame]


class SlotState(str, Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"


class _Slot:
    def __init__(self, loader: Loader):
        self.loader = loader
        self.lock = threading.Lock()
        self.state = SlotState.UNLOADED
        self.snapshot: Optional[pd.DataFrame] = None


class DatasetCache:
    """Fetch-once-per-process store of upstream dataset snapshots"""

    def __init__(self, loaders: Mapping[DatasetId, Loader]):
        self._slots: Dict[DatasetId, _Slot] = {
            DatasetId(dataset_id): _Slot(loader) for dataset_id, loader in loaders.items()
        }

    def _slot(self, dataset_id: DatasetId) -> _Slot:
        try:
            return self._slots[DatasetId(dataset_id)]
        except (KeyError, ValueError):
            raise KeyError(f"No loader registered for dataset {dataset_id!r}") from None

    def ensure(self, dataset_id: DatasetId) -> pd.DataFrame:
        """
        Return the snapshot for dataset_id, loading it on first use

        Concurrent callers wait on the slot lock while a load is in progress
        and then receive the same snapshot.

        Raises:
            Whatever the loader raises (FetchError, FormatError, ParseError).
            The slot is left unloaded.
        """
        slot = self._slot(dataset_id)
        if slot.state == SlotState.LOADED:
            return slot.snapshot

        with slot.lock:
            if slot.state == SlotState.LOADED:
                return slot.snapshot

            slot.state = SlotState.LOADING
            logger.info(f"Loading dataset {DatasetId(dataset_id).value}")
            try:
                snapshot = slot.loader()
            except Exception:
                slot.state = SlotState.UNLOADED
                logger.error(f"Loading dataset {DatasetId(dataset_id).value} failed; slot left unloaded")
                raise

            slot.snapshot = snapshot
            slot.state = SlotState.LOADED
            logger.info(f"Dataset {DatasetId(dataset_id).value} loaded: {len(snapshot):,} rows")
            return snapshot

    def state(self, dataset_id: DatasetId) -> SlotState:
        return self._slot(dataset_id).state

    def is_loaded(self, dataset_id: DatasetId) -> bool:
        return self.state(dataset_id) == SlotState.LOADED

    def loaded_datasets(self) -> List[DatasetId]:
        return [dataset_id for dataset_id, slot in self._slots.items() if slot.state == SlotState.LOADED]

    def dataset_ids(self) -> List[DatasetId]:
        return list(self._slots)
