# sm_flat_file_parser.py
"""
Parser for BLS State and Metro Area Employment (SM, the state and area CES
program) flat files downloaded from:
https://download.bls.gov/pub/time.series/sm/

Series whose area code is not served by any district office are dropped
before they reach the cache.
"""
import logging
from typing import Mapping, Optional, Tuple

import pandas as pd

from geowhd.bls.client import BLSDownloadClient
from geowhd.bls.periods import monthly_period_dates
from geowhd.bls.time_series_parser import TableSource, TimeSeriesFlatFileParser
from geowhd.config import settings

log = logging.getLogger(__name__)


class SMFlatFileParser(TimeSeriesFlatFileParser):
    """Parser for SM (State and Metro Area Employment) survey flat files"""

    source = 'CES'
    series_required = ['series_id', 'area_code']

    def __init__(
        self,
        client: Optional[BLSDownloadClient] = None,
        msa_offices: Optional[Mapping[str, Tuple[str, ...]]] = None,
        series_url: Optional[str] = None,
        data_url: Optional[str] = None,
        chunk_size: Optional[int] = None,
    ):
        super().__init__(
            client=client,
            series_url=series_url or settings.data_sources.ces_series_url,
            data_url=data_url or settings.data_sources.ces_data_url,
            msa_offices={code: offices for code, offices in (msa_offices or {}).items() if offices},
            chunk_size=chunk_size,
        )

    def filter_series(self, chunk: pd.DataFrame) -> pd.DataFrame:
        """Drop series whose area has no office mapping"""
        mapped = chunk[chunk['area_code'].isin(list(self.msa_offices))].copy()
        mapped['district_offices'] = self.offices_for(mapped['area_code'])
        return mapped

    def parse_series(self, source: TableSource) -> pd.DataFrame:
        df = super().parse_series(source)
        if 'district_offices' not in df.columns:
            df['district_offices'] = pd.Series(dtype='object')
        return df

    def parse_data(self, source: TableSource) -> pd.DataFrame:
        """Observations plus a month-end date (NaT for M13 annual averages)"""
        df = super().parse_data(source)
        df['date'] = monthly_period_dates(df['year'], df['period'])
        return df
