# la_flat_file_parser.py
"""
Parser for the BLS Local Area Unemployment Statistics (LA) county extract:
https://www.bls.gov/web/metro/laucntycur14.txt

The extract covers the last 14 months for every county. It is a
pipe-delimited text table wrapped in a fixed title block and footnotes.
"""
import logging
from typing import List, Optional

import numpy as np
import pandas as pd

from geowhd.bls.client import BLSDownloadClient
from geowhd.bls.periods import is_preliminary, parse_month_year_periods
from geowhd.config import settings
from geowhd.exceptions import FormatError
from geowhd.utils.data_transform import to_float_column, to_int_column, zero_pad_codes

log = logging.getLogger(__name__)

HEADER_LINES = 6
FOOTER_LINES = 5

LAUS_COLUMNS = [
    'area_code', 'state_fips', 'county_fips', 'area_title', 'period',
    'civilian_labor_force', 'employed', 'unemployed', 'unemployment_rate',
]
COUNT_COLUMNS = ['civilian_labor_force', 'employed', 'unemployed']


def derive_unemployment_rate(df: pd.DataFrame) -> pd.Series:
    """unemployed / civilian_labor_force * 100; NaN where the labor force is zero"""
    labor_force = df['civilian_labor_force'].astype('float64').replace(0, np.nan)
    return df['unemployed'].astype('float64') / labor_force * 100


class LAFlatFileParser:
    """Parser for the LA 14-month county extract"""

    source = 'LAUS'

    def __init__(self, client: Optional[BLSDownloadClient] = None, url: Optional[str] = None):
        self.client = client or BLSDownloadClient()
        self.url = url or settings.data_sources.laus_url

    # ==================== PARSERS ====================

    def data_lines(self, content: str) -> List[str]:
        """Strip the title block and footnotes, leaving only table rows"""
        lines = content.splitlines()
        while lines and not lines[-1].strip():
            lines.pop()
        if len(lines) <= HEADER_LINES + FOOTER_LINES:
            raise FormatError(self.source, f"expected more than {HEADER_LINES + FOOTER_LINES} lines, got {len(lines)}")
        return [line for line in lines[HEADER_LINES:len(lines) - FOOTER_LINES] if line.strip()]

    def parse_lines(self, lines: List[str]) -> pd.DataFrame:
        """
        Parse pipe-delimited table rows

        Args:
            lines: Table rows with the title block and footnotes already removed

        Returns:
            DataFrame with fips, month-end period and recomputed unemployment_rate
        """
        records = []
        for lineno, line in enumerate(lines, 1):
            fields = [field.strip() for field in line.split('|')]
            if len(fields) != len(LAUS_COLUMNS):
                raise FormatError(
                    self.source,
                    f"row {lineno} has {len(fields)} fields, expected {len(LAUS_COLUMNS)}: {line!r}"
                )
            records.append(fields)

        raw = pd.DataFrame(records, columns=LAUS_COLUMNS, dtype=str)

        df = pd.DataFrame({
            'area_code': raw['area_code'],
            'state_fips': zero_pad_codes(raw['state_fips'], 2, 'state_fips'),
            'county_fips': zero_pad_codes(raw['county_fips'], 3, 'county_fips'),
            'area_title': raw['area_title'],
            'period': parse_month_year_periods(raw['period']),
            'preliminary': is_preliminary(raw['period']),
        })
        for col in COUNT_COLUMNS:
            df[col] = to_int_column(raw[col], col)
        df['reported_unemployment_rate'] = to_float_column(raw['unemployment_rate'])
        df['fips'] = df['state_fips'] + df['county_fips']
        df['unemployment_rate'] = derive_unemployment_rate(df)
        return df

    def parse_text(self, content: str) -> pd.DataFrame:
        return self.parse_lines(self.data_lines(content))

    # ==================== LOADING ====================

    def load(self) -> pd.DataFrame:
        """Fetch and parse the current extract"""
        log.info("=" * 60)
        log.info("LOADING LAUS COUNTY EXTRACT")
        log.info("=" * 60)
        df = self.parse_text(self.client.get_text(self.url))
        log.info(
            f"Parsed {len(df):,} LAUS rows covering {df['fips'].nunique():,} counties "
            f"and {df['period'].nunique()} periods"
        )
        return df
