# time_series_parser.py
"""
Shared parsing for BLS time.series flat files downloaded from:
https://download.bls.gov/pub/time.series/<survey>/

Every survey directory follows the same split: a <survey>.series file with
one row of metadata per series and <survey>.data.* files with one row per
observation (series_id, year, period, value, footnote_codes). Files are
tab-delimited with space-padded headers and values.
"""
import logging
import tempfile
from pathlib import Path
from typing import Callable, Iterable, List, Mapping, Optional, Tuple, Union

import pandas as pd

from geowhd.bls.client import BLSDownloadClient
from geowhd.config import settings
from geowhd.exceptions import FormatError
from geowhd.utils.data_transform import (
    empty_frame, normalize_columns, require_columns, strip_strings, to_float_column,
)

log = logging.getLogger(__name__)

DATA_COLUMNS = ['series_id', 'year', 'period', 'value', 'footnote_codes']
REQUIRED_DATA_COLUMNS = ['series_id', 'year', 'period', 'value']

TableSource = Union[str, Path, object]


def _sniff_separator(source: TableSource) -> str:
    """Tab for standard files; runs of whitespace for space-padded dumps"""
    if isinstance(source, (str, Path)):
        with open(source, 'r', encoding='utf-8', errors='replace') as f:
            header = f.readline()
    else:
        position = source.tell()
        header = source.readline()
        source.seek(position)
    if isinstance(header, bytes):
        header = header.decode('utf-8', errors='replace')
    return '\t' if '\t' in header else r'\s+'


class TimeSeriesFlatFileParser:
    """Base parser for a BLS survey's series and data files"""

    source = 'BLS'
    series_required: List[str] = ['series_id']

    def __init__(
        self,
        client: Optional[BLSDownloadClient] = None,
        series_url: Optional[str] = None,
        data_url: Optional[str] = None,
        msa_offices: Optional[Mapping[str, Tuple[str, ...]]] = None,
        chunk_size: Optional[int] = None,
    ):
        self.client = client or BLSDownloadClient()
        self.series_url = series_url
        self.data_url = data_url
        self.msa_offices = dict(msa_offices or {})
        self.chunk_size = chunk_size or settings.data_sources.chunk_size
        self.encoding = settings.data_sources.encoding

    # ==================== TABLE READING ====================

    def read_table(
        self,
        source: TableSource,
        required: Iterable[str],
        name: str,
        transform: Optional[Callable[[pd.DataFrame], pd.DataFrame]] = None,
    ) -> pd.DataFrame:
        """
        Read a delimited series/data table in chunks

        Args:
            source: File path or text buffer
            required: Columns that must be present after normalization
            name: Label for log and error messages
            transform: Applied to each normalized chunk (e.g. row filters)
        """
        label = f"{self.source} {name}"
        separator = _sniff_separator(source)
        frames: List[pd.DataFrame] = []
        rows_read = 0
        try:
            reader = pd.read_csv(
                source,
                sep=separator,
                dtype=str,
                keep_default_na=False,
                chunksize=self.chunk_size,
                encoding=self.encoding,
            )
            for chunk in reader:
                chunk = strip_strings(normalize_columns(chunk))
                require_columns(chunk, required, label)
                rows_read += len(chunk)
                frames.append(transform(chunk) if transform else chunk)
        except (pd.errors.EmptyDataError, pd.errors.ParserError) as e:
            raise FormatError(label, str(e)) from e
        except UnicodeDecodeError as e:
            raise FormatError(label, f"not valid {self.encoding} text: {e}") from e

        log.info(f"Completed parsing {label}: {rows_read:,} rows read")
        if not frames:
            return empty_frame(list(required))
        return pd.concat(frames, ignore_index=True)

    def fetch_table(self, url: str, parse: Callable[[Path], pd.DataFrame]) -> pd.DataFrame:
        """Download url into a temporary directory, parse it, and remove the file"""
        with tempfile.TemporaryDirectory(prefix=f"geowhd-{self.source.lower()}-") as tmp_dir:
            path = self.client.download_to_file(url, Path(tmp_dir) / url.rsplit('/', 1)[-1])
            return parse(path)

    # ==================== SERIES ====================

    def filter_series(self, chunk: pd.DataFrame) -> pd.DataFrame:
        """Survey-specific series restriction; keeps everything by default"""
        return chunk

    def offices_for(self, codes: pd.Series) -> pd.Series:
        """All district offices serving each MSA code, as sorted tuples"""
        return codes.map(lambda code: self.msa_offices.get(code, ()))

    def parse_series(self, source: TableSource) -> pd.DataFrame:
        return self.read_table(source, self.series_required, 'series', self.filter_series)

    # ==================== DATA ====================

    def parse_data(self, source: TableSource) -> pd.DataFrame:
        """
        Parse an observation file

        Returns:
            DataFrame with series_id, year (Int64), period, value (float, NaN for
            suppressed cells) and footnote_codes
        """
        df = self.read_table(source, REQUIRED_DATA_COLUMNS, 'data')
        if 'footnote_codes' not in df.columns:
            df['footnote_codes'] = ''
        df = df[DATA_COLUMNS].copy()
        df['year'] = pd.to_numeric(df['year'], errors='coerce').astype('Int64')
        df['value'] = to_float_column(df['value'])
        return df

    # ==================== LOADING ====================

    def load_series(self) -> pd.DataFrame:
        log.info("=" * 60)
        log.info(f"LOADING {self.source} SERIES")
        log.info("=" * 60)
        df = self.fetch_table(self.series_url, self.parse_series)
        log.info(f"Kept {len(df):,} {self.source} series")
        return df

    def load_data(self) -> pd.DataFrame:
        log.info("=" * 60)
        log.info(f"LOADING {self.source} OBSERVATIONS")
        log.info("=" * 60)
        df = self.fetch_table(self.data_url, self.parse_data)
        log.info(f"Loaded {len(df):,} {self.source} observations")
        return df
