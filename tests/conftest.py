"""
Shared test fixtures.
"""

import sys
from pathlib import Path

# Add project root to Python path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

import pytest

from models.sheet import SheetData, TableData
from services.column_mapper import init_mappings, set_mapping
from services.schema_registry import SchemaRegistry, get_schema_registry


# ===================
# REGISTRY
# ===================

@pytest.fixture
def registry() -> SchemaRegistry:
    """Shared schema registry."""
    return get_schema_registry()


@pytest.fixture
def blank_mappings(registry):
    """One unmapped entry per system field."""
    return init_mappings(registry.get_fields())


# ===================
# SHEETS
# ===================

@pytest.fixture
def sample_sheet() -> SheetData:
    """
    Small developer sheet.

    Three apartments in one project, one villa in another.
    """
    columns = ["Unit Code", "Project", "Unit Type", "Property Type", "Area (sqm)", "Bedrooms", "Price", "Status"]
    rows = [
        ["A-101", "Palm Hills", "2BR", "Apartment", "117", "2", "1,250,000", "Available"],
        ["A-102", "Palm Hills", "2BR", "Apartment", "104", "2", "1,100,000", "Reserved"],
        ["A-201", "Palm Hills", "3BR", "Apartment", "160", "3", "1,900,000", "Sold"],
        ["V-01", "Sodic West", "Villa", "Villa", "320", "4", "9,000,000", "Available"],
    ]
    return SheetData(
        columns=columns,
        rows=[dict(zip(columns, row)) for row in rows],
        file_name="units.xlsx",
        sheet_name="Units",
        total_rows=len(rows),
    )


@pytest.fixture
def sample_table(sample_sheet) -> TableData:
    """sample_sheet in positional form."""
    return TableData(
        headers=list(sample_sheet.columns),
        rows=[[row[c] for c in sample_sheet.columns] for row in sample_sheet.rows],
    )


@pytest.fixture
def sample_mappings(blank_mappings):
    """Mappings for sample_sheet."""
    mappings = blank_mappings
    for field_id, column in (
        ("unit_code", "Unit Code"),
        ("project_name", "Project"),
        ("unit_type", "Unit Type"),
        ("property_type", "Property Type"),
        ("net_bua", "Area (sqm)"),
        ("bedrooms", "Bedrooms"),
        ("prices", "Price"),
        ("status", "Status"),
    ):
        mappings = set_mapping(mappings, field_id, column)
    return mappings


# ===================
# API CLIENT
# ===================

@pytest.fixture
def test_client():
    """
    Create FastAPI test client.

    Usage:
        def test_endpoint(test_client):
            response = test_client.get("/api/sheets/fields")
            assert response.status_code == 200
    """
    from fastapi.testclient import TestClient
    from main import app

    return TestClient(app)
