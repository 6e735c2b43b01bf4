"""
Aggregation Engine

filter -> aggregate -> derive. Rows are selected by the office's geography
keys, optionally summed across constituent areas, and derived metrics are
recomputed from the summed values rather than averaged.
"""
import logging
from typing import Iterable, List, Optional, Union

import pandas as pd

from geowhd.bls.cache import DatasetCache
from geowhd.bls.datasets import Dataset, DatasetSpec, get_dataset_spec
from geowhd.bls.la_flat_file_parser import COUNT_COLUMNS as LAUS_COUNT_COLUMNS, derive_unemployment_rate
from geowhd.bls.qcew_archive_parser import QCEW_COLUMNS
from geowhd.geography.models import Office
from geowhd.geography.registry import OfficeRegistry
from geowhd.utils.data_transform import empty_frame

logger = logging.getLogger(__name__)

LAUS_ROW_COLUMNS = [
    'fips', 'area_title', 'period', 'preliminary',
    'civilian_labor_force', 'employed', 'unemployed', 'unemployment_rate',
]
LAUS_AGGREGATE_COLUMNS = ['period'] + LAUS_COUNT_COLUMNS + ['unemployment_rate']

QCEW_GROUP_COLUMNS = ['year', 'qtr', 'agglvl_code', 'own_code', 'industry_code']
QCEW_SUM_COLUMNS = ['qtrly_estabs', 'month1_emplvl', 'month2_emplvl', 'month3_emplvl', 'total_qtrly_wages']
QCEW_EMPLOYMENT_COLUMNS = ['month1_emplvl', 'month2_emplvl', 'month3_emplvl']
QCEW_AGGREGATE_COLUMNS = QCEW_GROUP_COLUMNS + QCEW_SUM_COLUMNS + ['counties', 'suppressed_counties', 'avg_wkly_wage']
SERIES_RESULT_COLUMNS = ['series_id', 'district_offices', 'year', 'period', 'value', 'value_footnote_codes']
WEEKS_PER_QUARTER = 13


def filter_rows(df: pd.DataFrame, key_column: str, keys: Iterable[str]) -> pd.DataFrame:
    """Rows whose key_column is one of keys"""
    return df[df[key_column].isin(list(keys))].copy()


def aggregate_laus(df: pd.DataFrame) -> pd.DataFrame:
    """
    Sum labor force, employment and unemployment per period and derive the
    unemployment rate from the sums (not an average of county rates).
    """
    grouped = df.groupby('period', as_index=False)[LAUS_COUNT_COLUMNS].sum()
    grouped['unemployment_rate'] = derive_unemployment_rate(grouped)
    return grouped[LAUS_AGGREGATE_COLUMNS].sort_values('period').reset_index(drop=True)


def laus_rows(df: pd.DataFrame) -> pd.DataFrame:
    """One row per county per period with the row-wise derived rate"""
    df = df.copy()
    df['unemployment_rate'] = derive_unemployment_rate(df)
    return df[LAUS_ROW_COLUMNS].sort_values(['fips', 'period']).reset_index(drop=True)


def derive_average_weekly_wage(df: pd.DataFrame) -> pd.Series:
    """total quarterly wages / average monthly employment / 13 weeks"""
    employment = df[QCEW_EMPLOYMENT_COLUMNS].mean(axis=1)
    return df['total_qtrly_wages'] / employment.where(employment > 0) / WEEKS_PER_QUARTER


def aggregate_qcew(df: pd.DataFrame) -> pd.DataFrame:
    """
    Sum establishments, employment and wages across counties for each
    quarter, ownership and industry; average weekly wage is derived from the
    summed wages and employment.
    """
    df = df.copy()
    df['suppressed'] = (df.get('disclosure_code', pd.Series('', index=df.index)) == 'N').astype('int64')
    agg = {col: (col, 'sum') for col in QCEW_SUM_COLUMNS}
    agg['counties'] = ('fips', 'nunique')
    agg['suppressed_counties'] = ('suppressed', 'sum')
    grouped = df.groupby(QCEW_GROUP_COLUMNS, as_index=False, dropna=False).agg(**agg)
    grouped['avg_wkly_wage'] = derive_average_weekly_wage(grouped)
    return grouped.sort_values(QCEW_GROUP_COLUMNS).reset_index(drop=True)


def qcew_rows(df: pd.DataFrame) -> pd.DataFrame:
    return df.sort_values(['fips'] + QCEW_GROUP_COLUMNS).reset_index(drop=True)


def empty_result(spec: DatasetSpec, aggregate: bool) -> pd.DataFrame:
    """Result frame for an office with no areas, shaped like a normal result"""
    if spec.is_series_dataset:
        columns = SERIES_RESULT_COLUMNS[:1] + [spec.key_column] + SERIES_RESULT_COLUMNS[1:]
        if spec.name == Dataset.CES.value:
            columns.append('date')
    elif spec.name == Dataset.LAUS.value:
        columns = LAUS_AGGREGATE_COLUMNS if aggregate else LAUS_ROW_COLUMNS
    else:
        columns = QCEW_AGGREGATE_COLUMNS if aggregate else ['fips'] + QCEW_COLUMNS
    return empty_frame(list(columns))


def join_observations(series: pd.DataFrame, observations: pd.DataFrame) -> pd.DataFrame:
    """
    Left join series metadata against observations on series_id

    Series without observations keep NaN value columns; observations without
    a matching series are dropped.
    """
    observations = observations.rename(columns={'footnote_codes': 'value_footnote_codes'})
    overlap = [c for c in observations.columns if c in series.columns and c != 'series_id']
    observations = observations.drop(columns=overlap)
    joined = series.merge(observations, on='series_id', how='left')
    sort_columns = [c for c in ('series_id', 'year', 'period') if c in joined.columns]
    return joined.sort_values(sort_columns).reset_index(drop=True)


class StatisticsEngine:
    """Office-scoped queries over cached BLS snapshots"""

    def __init__(self, cache: DatasetCache, registry: OfficeRegistry):
        self.cache = cache
        self.registry = registry

    def query(
        self,
        dataset: Union[str, Dataset],
        office: Union[str, Office],
        aggregate: Optional[bool] = None,
    ) -> pd.DataFrame:
        """
        Statistics for one office

        Args:
            dataset: 'laus', 'qcew', 'oews' or 'ces'
            office: Office name or entity (district or regional)
            aggregate: Sum across the office's areas. Defaults per dataset:
                LAUS and QCEW aggregate, OEWS and CES cannot.

        Raises:
            ValueError: unknown dataset, or aggregation requested for a series dataset
            ResolutionError: unknown office name
            FetchError, FormatError, ParseError: dataset could not be loaded
        """
        spec = get_dataset_spec(dataset)
        resolved = self.registry.resolve(office)
        if aggregate is None:
            aggregate = spec.default_aggregate
        if aggregate and spec.is_series_dataset:
            raise ValueError(f"{spec.name} is a series dataset and cannot be aggregated across areas")

        keys = resolved.geography_keys(spec.geography_key)
        if not keys:
            # Nothing to select, so the upstream snapshot is not loaded
            logger.warning(f"{resolved.name} has no {spec.geography_key.value} geography; result is empty")
            return empty_result(spec, aggregate)

        filtered = filter_rows(self.cache.ensure(spec.snapshot), spec.key_column, keys)
        logger.debug(f"{spec.name}: {len(filtered):,} rows for {resolved.name} ({len(keys)} areas)")
        return self._finish(spec, filtered, aggregate)

    def _finish(self, spec: DatasetSpec, filtered: pd.DataFrame, aggregate: bool) -> pd.DataFrame:
        if spec.is_series_dataset:
            return join_observations(filtered, self.cache.ensure(spec.observations))
        if spec.name == Dataset.LAUS.value:
            return aggregate_laus(filtered) if aggregate else laus_rows(filtered)
        return aggregate_qcew(filtered) if aggregate else qcew_rows(filtered)

    def geography_keys(self, dataset: Union[str, Dataset], office: Union[str, Office]) -> List[str]:
        spec = get_dataset_spec(dataset)
        return list(self.registry.resolve(office).geography_keys(spec.geography_key))
