"""
Data Transformation Utilities
Normalizes upstream BLS headers and values into the shapes used downstream
"""
import re
from typing import Iterable, List

import pandas as pd

from geowhd.exceptions import FormatError, ParseError


def normalize_column_name(name: str) -> str:
    """
    Convert an upstream header to canonical lowercase_underscore form

    Args:
        name: Raw column header, possibly multi-line or padded

    Returns:
        Normalized column name

    Examples:
        >>> normalize_column_name('Area\\nCode')
        'area_code'
        >>> normalize_column_name('  Civilian Labor  Force ')
        'civilian_labor_force'
        >>> normalize_column_name('Avg. Wkly Wage')
        'avg_wkly_wage'
        >>> normalize_column_name('series_id        ')
        'series_id'
    """
    # Step 1: Newlines inside spreadsheet headers become spaces
    s1 = re.sub(r'[\r\n]+', ' ', str(name))

    # Step 2: Drop punctuation except underscores and hyphens
    s2 = re.sub(r'[^\w\s-]', '', s1)

    # Step 3: Collapse whitespace and hyphen runs to a single underscore
    s3 = re.sub(r'[\s-]+', '_', s2.strip())

    return s3.lower().strip('_')


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Rename every column of df to its normalized form"""
    return df.rename(columns={col: normalize_column_name(col) for col in df.columns})


def strip_strings(df: pd.DataFrame) -> pd.DataFrame:
    """Trim stray whitespace from every text column"""
    for col in df.columns:
        if pd.api.types.is_string_dtype(df[col].dtype):
            df[col] = df[col].str.strip()
    return df


def require_columns(df: pd.DataFrame, columns: Iterable[str], source: str) -> None:
    """Raise FormatError if any expected column is absent"""
    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise FormatError(source, f"missing expected columns {missing}; found {list(df.columns)}")


def to_int_column(series: pd.Series, field: str) -> pd.Series:
    """
    Coerce a column of counts (possibly with thousands separators) to integers

    Raises:
        ParseError: on the first value that is not a whole number
    """
    cleaned = series.astype(str).str.replace(',', '', regex=False).str.strip()
    numeric = pd.to_numeric(cleaned, errors='coerce')
    bad = numeric.isna() | (numeric % 1 != 0)
    if bad.any():
        raise ParseError(field, series[bad].iloc[0])
    return numeric.astype('int64')


def to_float_column(series: pd.Series) -> pd.Series:
    """Coerce a value column to float. BLS suppression markers become NaN."""
    cleaned = series.astype(str).str.replace(',', '', regex=False).str.strip()
    return pd.to_numeric(cleaned, errors='coerce')


def zero_pad_codes(series: pd.Series, width: int, field: str) -> pd.Series:
    """
    Left-pad numeric code fragments (FIPS, area codes) to a fixed width

    Raises:
        ParseError: if a value is non-numeric or wider than width
    """
    text = series.astype(str).str.strip()
    # Integers read back from CSV as floats ("1003.0")
    text = text.str.replace(r'\.0+$', '', regex=True)
    bad = ~text.str.fullmatch(r'\d+') | (text.str.len() > width)
    if bad.any():
        raise ParseError(field, series[bad].iloc[0])
    return text.str.zfill(width)


def empty_frame(columns: List[str]) -> pd.DataFrame:
    """An empty DataFrame with the given columns"""
    return pd.DataFrame({col: pd.Series(dtype='object') for col in columns})
