# qcew_archive_parser.py
"""
Parser for the BLS Quarterly Census of Employment and Wages (QCEW) quarterly
single-file archive, e.g.:
https://data.bls.gov/cew/data/files/2024/csv/2024_qtrly_singlefile.zip

The archive holds one data file (CSV, or a spreadsheet in older releases)
covering every area and aggregation level. Only county-level aggregations
(agglvl_code 70-78) are kept. The archive is downloaded into a temporary
directory that is removed as soon as parsing finishes.
"""
import io
import logging
import tempfile
import zipfile
from datetime import date
from pathlib import Path
from typing import Iterator, List, Optional

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException

from geowhd.bls.client import BLSDownloadClient
from geowhd.config import settings
from geowhd.exceptions import FormatError
from geowhd.utils.data_transform import (
    empty_frame, normalize_column_name, normalize_columns, require_columns, strip_strings,
)

log = logging.getLogger(__name__)

COUNTY_AGGLVL_MIN = 70
COUNTY_AGGLVL_MAX = 78

CODE_COLUMNS = [
    'area_fips', 'own_code', 'industry_code', 'agglvl_code', 'size_code',
    'year', 'qtr', 'disclosure_code',
]
VALUE_COLUMNS = [
    'qtrly_estabs', 'month1_emplvl', 'month2_emplvl', 'month3_emplvl',
    'total_qtrly_wages', 'avg_wkly_wage',
]
QCEW_COLUMNS = CODE_COLUMNS + VALUE_COLUMNS
REQUIRED_COLUMNS = ['area_fips', 'agglvl_code', 'year', 'qtr'] + VALUE_COLUMNS

# Header variants seen in spreadsheet releases
QCEW_ALIASES = {
    'area_code': 'area_fips',
    'own': 'own_code',
    'naics': 'industry_code',
    'aggregation_level': 'agglvl_code',
    'agglevel_code': 'agglvl_code',
    'establishment_count': 'qtrly_estabs',
    'total_quarterly_wages': 'total_qtrly_wages',
    'average_weekly_wage': 'avg_wkly_wage',
}

DATA_SUFFIXES = ('.csv', '.xlsx')


def _canonical(name: str) -> str:
    normalized = normalize_column_name(name)
    return QCEW_ALIASES.get(normalized, normalized)


class QCEWArchiveParser:
    """Parser for the QCEW quarterly single-file archive"""

    source = 'QCEW'

    def __init__(
        self,
        client: Optional[BLSDownloadClient] = None,
        year: Optional[int] = None,
        url_template: Optional[str] = None,
        chunk_size: Optional[int] = None,
    ):
        self.client = client or BLSDownloadClient()
        data_sources = settings.data_sources
        # Most recent complete release by default
        self.year = year or data_sources.qcew_year or date.today().year - 1
        self.url_template = url_template or data_sources.qcew_url_template
        self.chunk_size = chunk_size or data_sources.chunk_size
        self.encoding = data_sources.encoding

    @property
    def url(self) -> str:
        return self.url_template.format(year=self.year)

    # ==================== PARSERS ====================

    def filter_county_rows(self, df: pd.DataFrame) -> pd.DataFrame:
        """Keep county-level aggregations with a numeric 5-digit area FIPS"""
        df = strip_strings(df)
        agglvl = pd.to_numeric(df['agglvl_code'], errors='coerce')
        area = df['area_fips'].astype(str)
        mask = agglvl.between(COUNTY_AGGLVL_MIN, COUNTY_AGGLVL_MAX) & area.str.fullmatch(r'\d{5}')
        out = df.loc[mask, [c for c in QCEW_COLUMNS if c in df.columns]].copy()
        out['agglvl_code'] = agglvl[mask].astype('int64')
        for col in ('year', 'qtr'):
            out[col] = pd.to_numeric(out[col], errors='coerce').astype('Int64')
        for col in VALUE_COLUMNS:
            out[col] = pd.to_numeric(out[col], errors='coerce')
        out['fips'] = out['area_fips']
        return out

    def _read_csv_chunks(self, handle) -> Iterator[pd.DataFrame]:
        reader = pd.read_csv(
            handle,
            dtype=str,
            keep_default_na=False,
            usecols=lambda c: _canonical(c) in QCEW_COLUMNS,
            chunksize=self.chunk_size,
            encoding=self.encoding,
        )
        for chunk in reader:
            yield chunk.rename(columns=_canonical)

    def _read_member_chunks(self, handle, member: str) -> Iterator[pd.DataFrame]:
        if member.lower().endswith('.xlsx'):
            sheet = pd.read_excel(io.BytesIO(handle.read()), dtype=str, engine='openpyxl')
            yield normalize_columns(sheet).rename(columns=lambda c: QCEW_ALIASES.get(c, c))
        else:
            yield from self._read_csv_chunks(handle)

    def parse_member(self, archive: zipfile.ZipFile, member: str) -> pd.DataFrame:
        """
        Parse one data file from the archive

        Raises:
            FormatError: the member is empty, truncated, not decodable or not
                a readable spreadsheet, or lacks a required column
        """
        log.info(f"Parsing {member}")
        label = f"{self.source} {member}"
        frames: List[pd.DataFrame] = []
        rows_read = 0
        try:
            with archive.open(member) as handle:
                for chunk in self._read_member_chunks(handle, member):
                    require_columns(chunk, REQUIRED_COLUMNS, label)
                    rows_read += len(chunk)
                    frames.append(self.filter_county_rows(chunk))
                    if rows_read and rows_read % (self.chunk_size * 10) == 0:
                        log.info(f"  Read {rows_read:,} rows from {member}...")
        # EmptyDataError, ParserError and UnicodeDecodeError are all ValueErrors
        except (ValueError, zipfile.BadZipFile, InvalidFileException) as e:
            raise FormatError(label, f"unreadable data file: {e}") from e

        log.info(f"Completed {member}: {rows_read:,} rows read")
        if not frames:
            return empty_frame(QCEW_COLUMNS + ['fips'])
        return pd.concat(frames, ignore_index=True)

    def parse_archive(self, archive_path: Path) -> pd.DataFrame:
        try:
            archive = zipfile.ZipFile(archive_path)
        except zipfile.BadZipFile as e:
            raise FormatError(self.source, f"{archive_path.name} is not a zip archive") from e

        with archive:
            members = [n for n in archive.namelist() if n.lower().endswith(DATA_SUFFIXES)]
            if not members:
                raise FormatError(self.source, f"no data file in archive; found {archive.namelist()}")
            df = pd.concat([self.parse_member(archive, m) for m in sorted(members)], ignore_index=True)
        return df

    # ==================== LOADING ====================

    def load(self) -> pd.DataFrame:
        """Download the archive for self.year and parse its county rows"""
        log.info("=" * 60)
        log.info(f"LOADING QCEW {self.year} QUARTERLY ARCHIVE")
        log.info("=" * 60)
        with tempfile.TemporaryDirectory(prefix='geowhd-qcew-') as tmp_dir:
            archive_path = self.client.download_to_file(self.url, Path(tmp_dir) / f"qcew_{self.year}.zip")
            df = self.parse_archive(archive_path)
        log.info(f"Parsed {len(df):,} county-level QCEW rows for {df['fips'].nunique():,} counties")
        return df
