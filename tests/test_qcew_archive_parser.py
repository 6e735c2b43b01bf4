import io
import zipfile

import pandas as pd
import pytest

from geowhd.bls.qcew_archive_parser import QCEWArchiveParser
from geowhd.exceptions import FormatError

from conftest import FakeClient

QCEW_TEMPLATE = "https://example.test/cew/{year}/{year}_qtrly_singlefile.zip"

CSV_HEADER = (
    '"area_fips","own_code","industry_code","agglvl_code","size_code","year","qtr",'
    '"disclosure_code","qtrly_estabs","month1_emplvl","month2_emplvl","month3_emplvl",'
    '"total_qtrly_wages","taxable_qtrly_wages","avg_wkly_wage","lq_qtrly_estabs"'
)
CSV_ROWS = [
    # national and state totals
    '"US000","0","10","10","0","2023","1","","11000000","150000000","150000000","150000000","1","1","1","1"',
    '"36000","0","10","50","0","2023","1","","600000","9000000","9000000","9000000","1","1","1","1"',
    # MSA total
    '"C1058","0","10","40","0","2023","1","","25000","420000","420000","420000","1","1","1","1"',
    # county rows
    '"36001","0","10","70","0","2023","1","","10000","200000","201000","202000","2626000000","1","1010","1"',
    '"36083","5","1012","74","0","2023","1","N","0","0","0","0","0","0","0","1"',
    # unknown / statewide county
    '"36999","0","10","70","0","2023","1","","5","10","10","10","1","1","1","1"',
]


def _zip_bytes(members):
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, text in members.items():
            archive.writestr(name, text)
    return buffer.getvalue()


def _csv(rows=CSV_ROWS):
    return "\n".join([CSV_HEADER] + rows) + "\n"


@pytest.fixture
def parser():
    return QCEWArchiveParser(client=FakeClient({}), year=2023, url_template=QCEW_TEMPLATE, chunk_size=2)


def test_url_uses_year(parser):
    assert parser.url == "https://example.test/cew/2023/2023_qtrly_singlefile.zip"


def test_keeps_only_county_aggregations(parser, tmp_path):
    path = tmp_path / "qcew.zip"
    path.write_bytes(_zip_bytes({"2023.q1-q4.singlefile.csv": _csv()}))

    df = parser.parse_archive(path)

    assert sorted(df["fips"]) == ["36001", "36083", "36999"]
    assert set(df["agglvl_code"]) == {70, 74}
    assert "lq_qtrly_estabs" not in df.columns
    albany = df[df["fips"] == "36001"].iloc[0]
    assert albany["qtrly_estabs"] == 10000
    assert albany["total_qtrly_wages"] == 2626000000
    assert albany["year"] == 2023
    assert albany["qtr"] == 1
    suppressed = df[df["fips"] == "36083"].iloc[0]
    assert suppressed["disclosure_code"] == "N"


def test_not_a_zip(parser, tmp_path):
    path = tmp_path / "qcew.zip"
    path.write_bytes(b"<html>Access Denied</html>")
    with pytest.raises(FormatError, match="not a zip archive"):
        parser.parse_archive(path)


def test_zip_without_data_file(parser, tmp_path):
    path = tmp_path / "qcew.zip"
    path.write_bytes(_zip_bytes({"README.txt": "nothing here"}))
    with pytest.raises(FormatError, match="no data file"):
        parser.parse_archive(path)


def test_missing_required_column(parser, tmp_path):
    header = CSV_HEADER.replace('"total_qtrly_wages",', "")
    rows = ['"36001","0","10","70","0","2023","1","","1","1","1","1","1","1","1"']
    path = tmp_path / "qcew.zip"
    path.write_bytes(_zip_bytes({"data.csv": "\n".join([header] + rows) + "\n"}))
    with pytest.raises(FormatError, match="total_qtrly_wages"):
        parser.parse_archive(path)


@pytest.mark.parametrize("member, content", [
    ("data.csv", ""),
    ("data.csv", CSV_HEADER + '\n"36001,0,10,70,0,2023,1\n'),
    ("allhlcn232.xlsx", b"not a spreadsheet"),
])
def test_unreadable_member_raises_format_error(parser, tmp_path, member, content):
    path = tmp_path / "qcew.zip"
    path.write_bytes(_zip_bytes({member: content}))
    with pytest.raises(FormatError, match=member) as exc_info:
        parser.parse_archive(path)
    assert exc_info.value.__cause__ is not None


def test_spreadsheet_member(parser, tmp_path):
    sheet = pd.DataFrame([
        {"Area Code": "36001", "Own": "0", "NAICS": "10", "Aggregation Level": "70", "Year": "2023",
         "Qtr": "2", "Establishment Count": "10000", "Month1 Emplvl": "200000",
         "Month2 Emplvl": "200000", "Month3 Emplvl": "200000",
         "Total Quarterly Wages": "2600000000", "Average Weekly Wage": "1000"},
        {"Area Code": "36000", "Own": "0", "NAICS": "10", "Aggregation Level": "50", "Year": "2023",
         "Qtr": "2", "Establishment Count": "1", "Month1 Emplvl": "1",
         "Month2 Emplvl": "1", "Month3 Emplvl": "1",
         "Total Quarterly Wages": "1", "Average Weekly Wage": "1"},
    ])
    xlsx = io.BytesIO()
    sheet.to_excel(xlsx, index=False, engine="openpyxl")
    path = tmp_path / "qcew.zip"
    path.write_bytes(_zip_bytes({"allhlcn232.xlsx": xlsx.getvalue()}))

    df = parser.parse_archive(path)

    assert list(df["fips"]) == ["36001"]
    assert df.iloc[0]["own_code"] == "0"
    assert df.iloc[0]["industry_code"] == "10"
    assert df.iloc[0]["qtr"] == 2


def test_load_downloads_and_cleans_up():
    payload = _zip_bytes({"2023.q1-q4.singlefile.csv": _csv()})
    client = FakeClient({"https://example.test/cew/2023/2023_qtrly_singlefile.zip": payload})
    parser = QCEWArchiveParser(client=client, year=2023, url_template=QCEW_TEMPLATE)

    df = parser.load()

    assert len(df) == 3
    assert client.fetched == ["https://example.test/cew/2023/2023_qtrly_singlefile.zip"]
