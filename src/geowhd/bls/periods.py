"""BLS period helpers"""
import re

import pandas as pd

from geowhd.exceptions import ParseError

PRELIMINARY_MARKER = "(p)"
_MONTHLY_PERIOD = re.compile(r"^M(0[1-9]|1[0-2])$")


def is_preliminary(period: pd.Series) -> pd.Series:
    return period.astype(str).str.contains(PRELIMINARY_MARKER, regex=False)


def parse_month_year_periods(period: pd.Series) -> pd.Series:
    """
    Parse LAUS "Mon-YY" periods (optionally suffixed "(p)") to month-end dates

    Examples:
        "Aug-23(p)" -> 2023-08-31
        "Feb-24"    -> 2024-02-29

    Raises:
        ParseError: on the first value that is not a Mon-YY period
    """
    cleaned = period.astype(str).str.replace(PRELIMINARY_MARKER, "", regex=False).str.strip()
    parsed = pd.to_datetime(cleaned, format="%b-%y", errors="coerce")
    if parsed.isna().any():
        raise ParseError("period", period[parsed.isna()].iloc[0])
    return parsed + pd.offsets.MonthEnd(0)


def monthly_period_dates(year: pd.Series, period: pd.Series) -> pd.Series:
    """
    Month-end dates for BLS M01..M12 periods; NaT for M13 and non-monthly periods
    """
    period = period.astype(str).str.strip()
    monthly = period.str.match(_MONTHLY_PERIOD)
    month = period.where(monthly).str[1:]
    year_text = pd.to_numeric(year, errors="coerce").astype("Int64").astype(str)
    dates = pd.to_datetime(year_text + "-" + month + "-01", format="%Y-%m-%d", errors="coerce")
    return dates + pd.offsets.MonthEnd(0)
