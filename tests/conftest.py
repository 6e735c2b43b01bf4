"""Shared fixtures: a small two-region geography and in-memory BLS snapshots"""
from typing import Callable, Dict

import pandas as pd
import pytest

from geowhd.bls.cache import DatasetCache
from geowhd.bls.datasets import DatasetId
from geowhd.geography.builder import Geography, build_geography
from geowhd.geography.registry import OfficeRegistry
from geowhd.service import GeoWHDService


ALBANY = "Albany District Office"
BOSTON = "Boston District Office"
CHICAGO = "Chicago District Office"
NORTHEAST = "Northeast Region"
MIDWEST = "Midwest Region"


@pytest.fixture
def county_rows() -> pd.DataFrame:
    return pd.DataFrame([
        {"county_name": "Albany County", "GEOID10": "36001", "state_id": "NY",
         "wh_office_name": ALBANY, "region_name": NORTHEAST},
        {"county_name": "Rensselaer County", "GEOID10": "36083", "state_id": "NY",
         "wh_office_name": ALBANY, "region_name": NORTHEAST},
        {"county_name": "Suffolk County", "GEOID10": "25025", "state_id": "MA",
         "wh_office_name": BOSTON, "region_name": NORTHEAST},
        {"county_name": "Cook County", "GEOID10": "17031", "state_id": "IL",
         "wh_office_name": CHICAGO, "region_name": MIDWEST},
    ])


@pytest.fixture
def msa_rows() -> pd.DataFrame:
    return pd.DataFrame([
        {"area_code": "10580", "area_name": "Albany-Schenectady-Troy, NY", "office_name": ALBANY},
        {"area_code": "14460", "area_name": "Boston-Cambridge-Newton, MA-NH", "office_name": BOSTON},
        {"area_code": "99999", "area_name": "Shared Test MSA", "office_name": ALBANY},
        {"area_code": "99999", "area_name": "Shared Test MSA", "office_name": BOSTON},
        {"area_code": "16980", "area_name": "Chicago-Naperville-Elgin, IL-IN-WI", "office_name": CHICAGO},
        {"area_code": "33860", "area_name": "Montgomery, AL", "office_name": ""},
    ])


@pytest.fixture
def geography(county_rows, msa_rows) -> Geography:
    return build_geography(county_rows, msa_rows)


@pytest.fixture
def registry(geography) -> OfficeRegistry:
    return OfficeRegistry.from_geography(geography)


# ---------------------- Snapshots ---------------------- #

AUG = pd.Timestamp("2023-08-31")
SEP = pd.Timestamp("2023-09-30")


def _laus_row(fips, title, period, clf, unemployed, preliminary=False):
    return {
        "area_code": f"CN{fips}00000000",
        "state_fips": fips[:2],
        "county_fips": fips[2:],
        "area_title": title,
        "period": period,
        "preliminary": preliminary,
        "civilian_labor_force": clf,
        "employed": clf - unemployed,
        "unemployed": unemployed,
        "reported_unemployment_rate": round(unemployed / clf * 100, 1),
        "fips": fips,
        "unemployment_rate": unemployed / clf * 100,
    }


@pytest.fixture
def laus_snapshot() -> pd.DataFrame:
    return pd.DataFrame([
        _laus_row("36001", "Albany County, NY", AUG, 1000, 50),
        _laus_row("36083", "Rensselaer County, NY", AUG, 2000, 150),
        _laus_row("36001", "Albany County, NY", SEP, 1000, 40, preliminary=True),
        _laus_row("36083", "Rensselaer County, NY", SEP, 2000, 160, preliminary=True),
        _laus_row("25025", "Suffolk County, MA", AUG, 4000, 100),
        _laus_row("17031", "Cook County, IL", AUG, 8000, 400),
        _laus_row("06037", "Los Angeles County, CA", AUG, 9000, 450),
    ])


def _qcew_row(fips, estabs, emplvl, wages, own="0", industry="10", qtr=1, disclosure=""):
    return {
        "area_fips": fips,
        "own_code": own,
        "industry_code": industry,
        "agglvl_code": 70,
        "size_code": "0",
        "year": 2023,
        "qtr": qtr,
        "disclosure_code": disclosure,
        "qtrly_estabs": estabs,
        "month1_emplvl": emplvl,
        "month2_emplvl": emplvl,
        "month3_emplvl": emplvl,
        "total_qtrly_wages": wages,
        "avg_wkly_wage": round(wages / emplvl / 13) if emplvl else 0,
        "fips": fips,
    }


@pytest.fixture
def qcew_snapshot() -> pd.DataFrame:
    df = pd.DataFrame([
        _qcew_row("36001", 100, 1000, 13_000_000),
        _qcew_row("36083", 50, 300, 3_900_000),
        _qcew_row("36001", 10, 0, 0, own="5", industry="1012", disclosure="N"),
        _qcew_row("36083", 20, 200, 2_600_000, own="5", industry="1012"),
        _qcew_row("17031", 900, 9000, 117_000_000),
    ])
    df["year"] = df["year"].astype("Int64")
    df["qtr"] = df["qtr"].astype("Int64")
    return df


@pytest.fixture
def oews_series() -> pd.DataFrame:
    return pd.DataFrame([
        {"series_id": "OEUM001058000000000000001", "areatype_code": "M", "area_code": "0010580",
         "series_title": "Employment for All Occupations in Albany", "msa_code": "10580",
         "district_offices": (ALBANY,)},
        {"series_id": "OEUM009999900000000000001", "areatype_code": "M", "area_code": "0099999",
         "series_title": "Employment for All Occupations in Shared MSA", "msa_code": "99999",
         "district_offices": (ALBANY, BOSTON)},
        {"series_id": "OEUM001446000000000000001", "areatype_code": "M", "area_code": "0014460",
         "series_title": "Employment for All Occupations in Boston", "msa_code": "14460",
         "district_offices": (BOSTON,)},
    ])


@pytest.fixture
def oews_data() -> pd.DataFrame:
    df = pd.DataFrame([
        {"series_id": "OEUM001058000000000000001", "year": 2023, "period": "A01",
         "value": 420000.0, "footnote_codes": ""},
        {"series_id": "OEUM001058000000000000001", "year": 2022, "period": "A01",
         "value": 415000.0, "footnote_codes": ""},
        {"series_id": "OEUM001446000000000000001", "year": 2023, "period": "A01",
         "value": 2700000.0, "footnote_codes": ""},
        {"series_id": "OEUM007777700000000000001", "year": 2023, "period": "A01",
         "value": 1.0, "footnote_codes": ""},
    ])
    df["year"] = df["year"].astype("Int64")
    return df


@pytest.fixture
def ces_series() -> pd.DataFrame:
    return pd.DataFrame([
        {"series_id": "SMU36105800000000001", "state_code": "36", "area_code": "10580",
         "industry_code": "00000000", "district_offices": (ALBANY,)},
        {"series_id": "SMU17169800000000001", "state_code": "17", "area_code": "16980",
         "industry_code": "00000000", "district_offices": (CHICAGO,)},
    ])


@pytest.fixture
def ces_data() -> pd.DataFrame:
    df = pd.DataFrame([
        {"series_id": "SMU36105800000000001", "year": 2023, "period": "M01",
         "value": 450.1, "footnote_codes": "", "date": pd.Timestamp("2023-01-31")},
        {"series_id": "SMU36105800000000001", "year": 2023, "period": "M02",
         "value": 451.3, "footnote_codes": "", "date": pd.Timestamp("2023-02-28")},
        {"series_id": "SMU17169800000000001", "year": 2023, "period": "M01",
         "value": 4700.0, "footnote_codes": "", "date": pd.Timestamp("2023-01-31")},
    ])
    df["year"] = df["year"].astype("Int64")
    return df


class CountingLoader:
    """Loader stand-in that records how often it ran"""

    def __init__(self, frame: pd.DataFrame):
        self.frame = frame
        self.calls = 0

    def __call__(self) -> pd.DataFrame:
        self.calls += 1
        return self.frame


@pytest.fixture
def loaders(laus_snapshot, qcew_snapshot, oews_series, oews_data, ces_series, ces_data) -> Dict[DatasetId, Callable]:
    return {
        DatasetId.LAUS: CountingLoader(laus_snapshot),
        DatasetId.QCEW: CountingLoader(qcew_snapshot),
        DatasetId.OEWS_SERIES: CountingLoader(oews_series),
        DatasetId.OEWS_DATA: CountingLoader(oews_data),
        DatasetId.CES_SERIES: CountingLoader(ces_series),
        DatasetId.CES_DATA: CountingLoader(ces_data),
    }


@pytest.fixture
def cache(loaders) -> DatasetCache:
    return DatasetCache(loaders)


@pytest.fixture
def service(geography, cache) -> GeoWHDService:
    return GeoWHDService(geography, cache=cache)


# ---------------------- HTTP fakes ---------------------- #

class FakeResponse:
    def __init__(self, content: bytes = b"", status_code: int = 200, reason: str = "OK"):
        self.content = content
        self.status_code = status_code
        self.reason = reason
        self.closed = False

    def iter_content(self, chunk_size=1):
        for start in range(0, len(self.content), chunk_size):
            yield self.content[start:start + chunk_size]

    def close(self):
        self.closed = True


class FakeSession:
    """Serves canned responses by URL and records every request"""

    def __init__(self, responses: Dict[str, FakeResponse]):
        self.responses = responses
        self.headers = {}
        self.requests = []

    def get(self, url, timeout=None, stream=False):
        self.requests.append({"url": url, "timeout": timeout, "stream": stream})
        return self.responses[url]

    def close(self):
        pass


class FakeClient:
    """BLSDownloadClient stand-in backed by an in-memory url -> bytes map"""

    def __init__(self, payloads: Dict[str, bytes]):
        self.payloads = payloads
        self.fetched = []

    def get_bytes(self, url):
        self.fetched.append(url)
        return self.payloads[url]

    def get_text(self, url, encoding="utf-8"):
        return self.get_bytes(url).decode(encoding)

    def download_to_file(self, url, dest_path):
        dest_path.write_bytes(self.get_bytes(url))
        return dest_path
