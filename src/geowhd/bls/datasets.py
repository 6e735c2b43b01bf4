"""
Dataset identifiers

DatasetId names the six cached snapshots. Dataset names what a caller can
query: LAUS and QCEW map to one snapshot each, OEWS and CES pair a series
snapshot with an observation snapshot.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Union

from geowhd.geography.models import GeographyKey


class DatasetId(str, Enum):
    LAUS = "laus"
    QCEW = "qcew"
    OEWS_SERIES = "oews_series"
    OEWS_DATA = "oews_data"
    CES_SERIES = "ces_series"
    CES_DATA = "ces_data"


class Dataset(str, Enum):
    LAUS = "laus"
    QCEW = "qcew"
    OEWS = "oews"
    CES = "ces"


@dataclass(frozen=True)
class DatasetSpec:
    """How a queryable dataset is stored, keyed and aggregated"""
    name: str
    survey_name: str
    geography_key: GeographyKey
    key_column: str
    default_aggregate: bool
    snapshot: DatasetId
    observations: Optional[DatasetId] = None

    @property
    def is_series_dataset(self) -> bool:
        return self.observations is not None


DATASETS: Dict[Dataset, DatasetSpec] = {
    Dataset.LAUS: DatasetSpec(
        name='laus',
        survey_name='Local Area Unemployment Statistics',
        geography_key=GeographyKey.COUNTY,
        key_column='fips',
        default_aggregate=True,
        snapshot=DatasetId.LAUS,
    ),
    Dataset.QCEW: DatasetSpec(
        name='qcew',
        survey_name='Quarterly Census of Employment and Wages',
        geography_key=GeographyKey.COUNTY,
        key_column='fips',
        default_aggregate=True,
        snapshot=DatasetId.QCEW,
    ),
    Dataset.OEWS: DatasetSpec(
        name='oews',
        survey_name='Occupational Employment and Wage Statistics',
        geography_key=GeographyKey.MSA,
        key_column='msa_code',
        default_aggregate=False,
        snapshot=DatasetId.OEWS_SERIES,
        observations=DatasetId.OEWS_DATA,
    ),
    Dataset.CES: DatasetSpec(
        name='ces',
        survey_name='State and Metro Area Employment (CES)',
        geography_key=GeographyKey.MSA,
        key_column='area_code',
        default_aggregate=False,
        snapshot=DatasetId.CES_SERIES,
        observations=DatasetId.CES_DATA,
    ),
}


def get_dataset_spec(dataset: Union[str, Dataset]) -> DatasetSpec:
    """
    Look up a queryable dataset by enum or case-insensitive name

    Raises:
        ValueError: unknown dataset name
    """
    if isinstance(dataset, Dataset):
        return DATASETS[dataset]
    try:
        return DATASETS[Dataset(str(dataset).strip().lower())]
    except ValueError:
        valid = ', '.join(d.value for d in Dataset)
        raise ValueError(f"Unknown dataset {dataset!r}; expected one of: {valid}") from None
