import pandas as pd
import pytest

from geowhd.bls.la_flat_file_parser import LAFlatFileParser
from geowhd.exceptions import FormatError, ParseError

from conftest import FakeClient

LAUS_URL = "https://example.test/laucntycur14.txt"

HEADER = [
    "                 Labor force data by county, not seasonally adjusted,",
    "                        latest 14 months",
    "",
    " LAUS Code | State FIPS | County FIPS | County Name/State Abbreviation | Period | Labor Force | Employed | Unemployed | Unemployment Rate (%)",
    "           |    Code    |     Code    |                                |        |             |          |   Level    |",
    "-----------|------------|-------------|--------------------------------|--------|-------------|----------|------------|----------------",
]
FOOTER = [
    "",
    " (p) = preliminary.",
    " Note: Data are not seasonally adjusted.",
    " SOURCE: U.S. Bureau of Labor Statistics,",
    " Local Area Unemployment Statistics.",
]


def _extract(rows):
    return "\n".join(HEADER + rows + FOOTER) + "\n\n"


@pytest.fixture
def parser():
    return LAFlatFileParser(client=FakeClient({}), url=LAUS_URL)


def test_parse_county_row(parser):
    df = parser.parse_text(_extract([
        "CN0100300000000 |  1 |   3 | Baldwin County, AL | Aug-23(p) | 100,000 | 97,000 | 3,000 | 3.0",
    ]))
    assert len(df) == 1
    row = df.iloc[0]
    assert row["fips"] == "01003"
    assert row["state_fips"] == "01"
    assert row["county_fips"] == "003"
    assert row["area_title"] == "Baldwin County, AL"
    assert row["period"] == pd.Timestamp("2023-08-31")
    assert bool(row["preliminary"]) is True
    assert row["civilian_labor_force"] == 100000
    assert row["employed"] == 97000
    assert row["unemployed"] == 3000
    assert row["unemployment_rate"] == pytest.approx(3.0)


def test_rate_is_recomputed_from_counts(parser):
    df = parser.parse_text(_extract([
        "CN3600100000000 | 36 | 001 | Albany County, NY | Jul-23 | 3,000 | 2,900 | 100 | 9.9",
    ]))
    assert df.iloc[0]["reported_unemployment_rate"] == pytest.approx(9.9)
    assert df.iloc[0]["unemployment_rate"] == pytest.approx(100 / 3000 * 100)


def test_zero_labor_force_has_no_rate(parser):
    df = parser.parse_text(_extract([
        "CN1500500000000 | 15 | 005 | Kalawao County, HI | Jul-23 | 0 | 0 | 0 | -",
    ]))
    assert pd.isna(df.iloc[0]["unemployment_rate"])
    assert pd.isna(df.iloc[0]["reported_unemployment_rate"])


def test_title_block_and_footnotes_are_dropped(parser):
    rows = [
        "CN0100100000000 | 01 | 001 | Autauga County, AL | Jul-23 | 26,000 | 25,300 | 700 | 2.7",
        "CN0100300000000 | 01 | 003 | Baldwin County, AL | Jul-23 | 100,000 | 97,000 | 3,000 | 3.0",
    ]
    lines = parser.data_lines(_extract(rows))
    assert lines == rows


def test_wrong_field_count(parser):
    with pytest.raises(FormatError, match="row 1 has 8 fields"):
        parser.parse_text(_extract([
            "CN0100300000000 | 01 | 003 | Baldwin County, AL | Aug-23 | 100,000 | 97,000 | 3,000",
        ]))


def test_non_numeric_count(parser):
    with pytest.raises(ParseError) as exc_info:
        parser.parse_text(_extract([
            "CN0100300000000 | 01 | 003 | Baldwin County, AL | Aug-23 | n/a | 97,000 | 3,000 | 3.0",
        ]))
    assert exc_info.value.field == "civilian_labor_force"


def test_truncated_payload(parser):
    with pytest.raises(FormatError):
        parser.parse_text("\n".join(HEADER))


def test_load_fetches_configured_url():
    payload = _extract([
        "CN0100300000000 | 01 | 003 | Baldwin County, AL | Aug-23 | 100,000 | 97,000 | 3,000 | 3.0",
        "CN0100300000000 | 01 | 003 | Baldwin County, AL | Sep-23(p) | 101,000 | 98,000 | 3,000 | 3.0",
    ]).encode("utf-8")
    client = FakeClient({LAUS_URL: payload})
    df = LAFlatFileParser(client=client, url=LAUS_URL).load()
    assert client.fetched == [LAUS_URL]
    assert list(df["period"]) == [pd.Timestamp("2023-08-31"), pd.Timestamp("2023-09-30")]
