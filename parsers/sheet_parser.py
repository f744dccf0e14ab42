"""
Sheet file parser.

Reads a developer's unit sheet (.xlsx, .xls or .csv) into SheetData:
headers as columns, one dict per row, every cell as text.
"""

from io import BytesIO
from pathlib import Path
from typing import Optional, Union
import structlog

import pandas as pd

from exceptions import SheetEmptyError, SheetParseError
from models.sheet import SheetData

logger = structlog.get_logger(__name__)

EXCEL_EXTENSIONS = (".xlsx", ".xlsm", ".xls")
CSV_EXTENSIONS = (".csv",)

FileSource = Union[str, Path, BytesIO]


def _extension(file_name: str) -> str:
    return Path(file_name).suffix.lower()


def _open_workbook(file: FileSource) -> pd.ExcelFile:
    try:
        return pd.ExcelFile(file, engine="openpyxl")
    except Exception as e:
        logger.error("excel_read_failed", error=str(e))
        raise SheetParseError(
            message="Failed to read Excel file",
            details={"original_error": str(e)}
        )


def list_sheet_names(file: FileSource) -> list[str]:
    """
    Sheet names of a workbook, in workbook order.

    Raises:
        SheetParseError: If the workbook cannot be opened
    """
    return list(_open_workbook(file).sheet_names)


def _read_frame(file: FileSource, file_name: str, sheet_name: Optional[str]) -> tuple[pd.DataFrame, str]:
    extension = _extension(file_name)

    if extension in CSV_EXTENSIONS:
        try:
            return pd.read_csv(file, dtype=str, keep_default_na=False), ""
        except pd.errors.EmptyDataError:
            raise SheetEmptyError(file_name)
        except Exception as e:
            logger.error("csv_read_failed", file_name=file_name, error=str(e))
            raise SheetParseError(
                message="Failed to read CSV file",
                details={"file_name": file_name, "original_error": str(e)}
            )

    if extension in EXCEL_EXTENSIONS:
        excel = _open_workbook(file)
        if not excel.sheet_names:
            raise SheetEmptyError(file_name)
        name = sheet_name or excel.sheet_names[0]
        if name not in excel.sheet_names:
            raise SheetParseError(
                message=f"Sheet '{name}' not found",
                details={"file_name": file_name, "sheet_names": list(excel.sheet_names)}
            )
        try:
            return excel.parse(name, dtype=str, keep_default_na=False), name
        except Exception as e:
            logger.error("sheet_read_failed", file_name=file_name, sheet=name, error=str(e))
            raise SheetParseError(
                message=f"Failed to read sheet '{name}'",
                details={"file_name": file_name, "original_error": str(e)}
            )

    raise SheetParseError(
        message=f"Unsupported file type: {extension or 'none'}",
        details={"file_name": file_name, "supported": list(EXCEL_EXTENSIONS + CSV_EXTENSIONS)}
    )


def parse_sheet_file(
    file: FileSource,
    file_name: str,
    sheet_name: Optional[str] = None,
) -> SheetData:
    """
    Parse an uploaded sheet.

    Args:
        file: File path (str/Path) or file-like object (BytesIO)
        file_name: Original file name, used to pick the reader
        sheet_name: Workbook sheet to read (first sheet when None)

    Returns:
        SheetData with stripped headers and string cells (missing -> "")

    Raises:
        SheetParseError: File cannot be read or has an unsupported type
        SheetEmptyError: Sheet has no header row
    """
    logger.info("parsing_sheet", file_name=file_name, sheet_name=sheet_name)

    df, resolved_name = _read_frame(file, file_name, sheet_name)

    if len(df.columns) == 0:
        raise SheetEmptyError(file_name, resolved_name or None)

    df.columns = [str(col).strip() for col in df.columns]

    # Drop rows where every cell is blank; "NA"/"N/A" stay as text
    df = df.fillna("").astype(str)
    df = df[df.apply(lambda col: col.str.strip() != "").any(axis=1)]

    rows = [
        {column: str(value) for column, value in record.items()}
        for record in df.to_dict(orient="records")
    ]

    sheet = SheetData(
        columns=list(df.columns),
        rows=rows,
        file_name=file_name,
        sheet_name=resolved_name,
        total_rows=len(rows),
    )

    logger.info(
        "sheet_parsed",
        file_name=file_name,
        sheet_name=resolved_name,
        columns=len(sheet.columns),
        rows=len(rows),
    )
    return sheet
