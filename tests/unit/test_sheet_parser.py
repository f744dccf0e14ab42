"""
Unit tests for the sheet file parser.
"""

from io import BytesIO
import pytest
import pandas as pd

from exceptions import SheetEmptyError, SheetParseError
from parsers.sheet_parser import list_sheet_names, parse_sheet_file


# ===================
# FIXTURES
# ===================

def create_excel_file(sheets: dict[str, pd.DataFrame]) -> BytesIO:
    """Helper to create test Excel files in memory."""
    output = BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        for name, df in sheets.items():
            df.to_excel(writer, sheet_name=name, index=False)
    output.seek(0)
    return output


@pytest.fixture
def units_frame():
    return pd.DataFrame({
        " Unit Code ": ["A-101", "A-102", None],
        "Area": [117, 104.5, None],
        "Bedrooms": [2, 2, None],
        "Notes": ["corner", None, None],
    })


# ===================
# TESTS
# ===================

class TestParseExcel:
    """Workbook parsing."""

    def test_parses_first_sheet(self, units_frame):
        """Headers are stripped, cells are strings, empty rows dropped."""
        file = create_excel_file({"Units": units_frame})
        sheet = parse_sheet_file(file, "units.xlsx")

        assert sheet.columns == ["Unit Code", "Area", "Bedrooms", "Notes"]
        assert sheet.sheet_name == "Units"
        assert sheet.total_rows == 2
        assert sheet.rows[0]["Unit Code"] == "A-101"
        assert sheet.rows[0]["Notes"] == "corner"
        assert sheet.rows[1]["Notes"] == ""
        assert all(isinstance(v, str) for row in sheet.rows for v in row.values())

    def test_selects_sheet(self, units_frame):
        """A named sheet is read."""
        other = pd.DataFrame({"X": ["1"]})
        file = create_excel_file({"Cover": other, "Units": units_frame})
        sheet = parse_sheet_file(file, "units.xlsx", sheet_name="Units")
        assert sheet.sheet_name == "Units"
        assert "Unit Code" in sheet.columns

    def test_missing_sheet_raises(self, units_frame):
        """Unknown sheet name raises a parse error."""
        file = create_excel_file({"Units": units_frame})
        with pytest.raises(SheetParseError):
            parse_sheet_file(file, "units.xlsx", sheet_name="Prices")

    def test_list_sheet_names(self, units_frame):
        """Sheet names in workbook order."""
        file = create_excel_file({"Cover": pd.DataFrame({"X": ["1"]}), "Units": units_frame})
        assert list_sheet_names(file) == ["Cover", "Units"]

    def test_corrupt_file_raises(self):
        """Bytes that are not a workbook raise a parse error."""
        with pytest.raises(SheetParseError) as exc:
            parse_sheet_file(BytesIO(b"not a workbook"), "units.xlsx")
        assert exc.value.code == "SHEET_PARSE_ERROR"

    def test_na_text_kept_in_workbook(self):
        """Workbook cells reading N/A are not treated as missing."""
        frame = pd.DataFrame({"Unit Code": ["A-101"], "View": ["N/A"]})
        sheet = parse_sheet_file(create_excel_file({"Units": frame}), "units.xlsx")
        assert sheet.rows[0]["View"] == "N/A"


class TestParseCsv:
    """CSV parsing."""

    def test_parses_csv(self):
        """CSV cells are read as text."""
        file = BytesIO(b"Unit Code,Price\nA-101,\"1,250,000\"\nA-102,007\n")
        sheet = parse_sheet_file(file, "units.csv")
        assert sheet.columns == ["Unit Code", "Price"]
        assert sheet.rows[0]["Price"] == "1,250,000"
        assert sheet.rows[1]["Price"] == "007"
        assert sheet.sheet_name == ""

    def test_empty_csv_raises(self):
        """No header row raises SheetEmptyError."""
        with pytest.raises(SheetEmptyError):
            parse_sheet_file(BytesIO(b""), "units.csv")

    def test_unsupported_extension(self):
        """Unknown extensions are rejected."""
        with pytest.raises(SheetParseError):
            parse_sheet_file(BytesIO(b"x"), "units.pdf")

    def test_na_text_kept(self):
        """Cells reading NA, N/A, None or null stay as text."""
        file = BytesIO(b"Unit Code,View,Finishing\nA-101,NA,N/A\nA-102,None,null\n,,\n")
        sheet = parse_sheet_file(file, "units.csv")
        assert sheet.total_rows == 2
        assert sheet.rows[0] == {"Unit Code": "A-101", "View": "NA", "Finishing": "N/A"}
        assert sheet.rows[1] == {"Unit Code": "A-102", "View": "None", "Finishing": "null"}

    def test_whitespace_rows_dropped(self):
        """Rows with only blank cells are dropped."""
        file = BytesIO(b"Unit Code,Price\nA-101,100\n  ,  \n")
        sheet = parse_sheet_file(file, "units.csv")
        assert [r["Unit Code"] for r in sheet.rows] == ["A-101"]
