"""
Sheet file parsers.

Parsing sits outside the ingestion engine: it only produces SheetData.
"""

from parsers.sheet_parser import (
    parse_sheet_file,
    list_sheet_names,
)

__all__ = [
    "parse_sheet_file",
    "list_sheet_names",
]
