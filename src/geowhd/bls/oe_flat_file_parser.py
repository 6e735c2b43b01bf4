# oe_flat_file_parser.py
"""
Parser for BLS Occupational Employment and Wage Statistics (OE/OEWS) flat files downloaded from:
https://download.bls.gov/pub/time.series/oe/

Only metropolitan-area series are kept. OEWS area codes are seven digits:
'00' followed by the five-digit CBSA (or NECTA) code used by the MSA
reference table.
"""
import logging
from typing import Mapping, Optional, Tuple

import pandas as pd

from geowhd.bls.client import BLSDownloadClient
from geowhd.bls.time_series_parser import TableSource, TimeSeriesFlatFileParser
from geowhd.config import settings

log = logging.getLogger(__name__)

METRO_AREATYPE_CODE = 'M'


class OEFlatFileParser(TimeSeriesFlatFileParser):
    """Parser for OE (Occupational Employment and Wage Statistics) survey flat files"""

    source = 'OEWS'
    series_required = ['series_id', 'areatype_code', 'area_code']

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
            series_url=series_url or settings.data_sources.oews_series_url,
            data_url=data_url or settings.data_sources.oews_data_url,
            msa_offices=msa_offices,
            chunk_size=chunk_size,
        )

    def filter_series(self, chunk: pd.DataFrame) -> pd.DataFrame:
        """Keep metropolitan series and annotate each with every office serving its MSA"""
        metro = chunk[chunk['areatype_code'] == METRO_AREATYPE_CODE].copy()
        metro['msa_code'] = metro['area_code'].str[-5:]
        metro['district_offices'] = self.offices_for(metro['msa_code'])
        return metro

    def parse_series(self, source: TableSource) -> pd.DataFrame:
        df = super().parse_series(source)
        for col in ('msa_code', 'district_offices'):
            if col not in df.columns:
                df[col] = pd.Series(dtype='object')
        unmapped = (df['district_offices'].map(len) == 0).sum() if len(df) else 0
        if unmapped:
            log.info(f"  {unmapped:,} metropolitan series have no serving district office")
        return df
