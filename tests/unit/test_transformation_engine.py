"""
Unit tests for the transformation engine.

Covers:
1. Construction of the tagged union
2. Split / Merge / Static / Formula semantics
3. Ordering and the row-count invariant
4. Advisory ordering check
"""

import pytest

from exceptions import InvalidTransformationError
from models.sheet import SheetData, TableData
from models.transformation import (
    FormulaTransformation,
    MergeTransformation,
    SplitTransformation,
    StaticTransformation,
)
from services.transformation_engine import (
    DIVISION_BY_ZERO,
    apply_transformation,
    apply_transformations,
    build_transformation,
    find_ordering_issues,
    format_number,
    parse_float,
    sheet_to_table,
)
from tests.factories import SheetFactory


# ===================
# FIXTURES
# ===================

def split(source, delimiter, targets, order=0, id=None):
    return build_transformation({
        "type": "split",
        "id": id or f"split-{source}",
        "order": order,
        "config": {"source_column": source, "delimiter": delimiter, "target_columns": targets},
    })


def merge(sources, target, separator=" ", order=0):
    return build_transformation({
        "type": "merge",
        "order": order,
        "config": {"source_columns": sources, "target_column": target, "separator": separator},
    })


def static(target, value, order=0):
    return build_transformation({
        "type": "static",
        "order": order,
        "config": {"target_column": target, "value": value},
    })


def formula(operation, col1, col2, target="Result", order=0):
    return build_transformation({
        "type": "formula",
        "order": order,
        "config": {"target_column": target, "formula": operation, "column1": col1, "column2": col2},
    })


# ===================
# TEST 1: CONSTRUCTION
# ===================

class TestBuildTransformation:
    """Tagged union construction."""

    def test_builds_each_variant(self):
        """type selects the variant class."""
        assert isinstance(split("X", "-", ["Y"]), SplitTransformation)
        assert isinstance(merge(["X"], "Y"), MergeTransformation)
        assert isinstance(static("Y", "v"), StaticTransformation)
        assert isinstance(formula("add", "A", "B"), FormulaTransformation)

    def test_unknown_type_raises(self):
        """Unknown type fails at construction."""
        with pytest.raises(InvalidTransformationError) as exc:
            build_transformation({"type": "pivot", "config": {}})
        assert exc.value.code == "INVALID_TRANSFORMATION"
        assert exc.value.status_code == 422

    def test_split_without_targets_raises(self):
        """Split needs at least one target column."""
        with pytest.raises(InvalidTransformationError):
            build_transformation({
                "type": "split",
                "config": {"source_column": "X", "delimiter": "-", "target_columns": []},
            })

    def test_formula_bad_operation_raises(self):
        """Formula operation must be one of the four."""
        with pytest.raises(InvalidTransformationError):
            formula("power", "A", "B")

    def test_affected_columns_filled(self):
        """affected_columns defaults to reads plus writes."""
        t = split("Code", "-", ["Building", "Unit"])
        assert t.affected_columns == ["Code", "Building", "Unit"]

    def test_delimiter_whitespace_kept(self):
        """A space delimiter survives validation."""
        t = split("Name", " ", ["First", "Last"])
        assert t.config.delimiter == " "


# ===================
# TEST 2: SEMANTICS
# ===================

class TestSplit:
    """Split by literal delimiter."""

    def test_split_assigns_segments(self):
        """Segments land in target columns in order."""
        data = SheetFactory.table(["Code"], [["B1-204"]])
        result = apply_transformation(data, split("Code", "-", ["Building", "Unit"]))
        assert result.headers == ["Code", "Building", "Unit"]
        assert result.rows == [["B1-204", "B1", "204"]]

    def test_split_fewer_segments_pads_empty(self):
        """Missing segments become empty strings."""
        data = SheetFactory.table(["Code"], [["B1"]])
        result = apply_transformation(data, split("Code", "-", ["Building", "Unit"]))
        assert result.rows == [["B1", "B1", ""]]

    def test_split_extra_segments_dropped(self):
        """Segments beyond the target count are dropped."""
        data = SheetFactory.table(["Code"], [["A-B-C"]])
        result = apply_transformation(data, split("Code", "-", ["X", "Y"]))
        assert result.rows == [["A-B-C", "A", "B"]]

    def test_split_multichar_delimiter(self):
        """Delimiter is literal, not a pattern."""
        data = SheetFactory.table(["Code"], [["A.|B"]])
        result = apply_transformation(data, split("Code", ".|", ["X", "Y"]))
        assert result.rows == [["A.|B", "A", "B"]]

    def test_split_existing_target_overwritten(self):
        """An existing target column is reused, not duplicated."""
        data = SheetFactory.table(["Code", "X"], [["A-B", "old"]])
        result = apply_transformation(data, split("Code", "-", ["X", "Y"]))
        assert result.headers == ["Code", "X", "Y"]
        assert result.rows == [["A-B", "A", "B"]]

    def test_split_missing_source_adds_headers_only(self):
        """Missing source column: targets are added empty."""
        data = SheetFactory.table(["Other"], [["v"]])
        result = apply_transformation(data, split("Code", "-", ["X", "Y"]))
        assert result.headers == ["Other", "X", "Y"]
        assert result.rows == [["v", "", ""]]


class TestMerge:
    """Merge with empty-filtering."""

    def test_merge_filters_empty(self):
        """Empty cells are skipped before joining."""
        data = SheetFactory.table(["A", "B", "C"], [["foo", "", "bar"]])
        result = apply_transformation(data, merge(["A", "B", "C"], "M", "-"))
        assert result.rows[0][-1] == "foo-bar"

    def test_merge_default_separator(self):
        """Default separator is one space."""
        data = SheetFactory.table(["First", "Last"], [["Ola", "Nour"]])
        result = apply_transformation(data, merge(["First", "Last"], "Name"))
        assert result.rows[0][-1] == "Ola Nour"

    def test_merge_all_empty(self):
        """All-empty sources give an empty cell."""
        data = SheetFactory.table(["A", "B"], [["", ""]])
        result = apply_transformation(data, merge(["A", "B"], "M", "-"))
        assert result.rows[0][-1] == ""

    def test_merge_skips_missing_source(self):
        """Missing source columns are ignored."""
        data = SheetFactory.table(["A"], [["x"]])
        result = apply_transformation(data, merge(["A", "Ghost"], "M", "/"))
        assert result.rows[0][-1] == "x"

    def test_split_merge_round_trip(self):
        """Split then merge with the same delimiter restores the cell."""
        data = SheetFactory.table(["X"], [["A-B"]])
        result = apply_transformations(data, [
            split("X", "-", ["Y", "Z"], order=0),
            merge(["Y", "Z"], "X2", "-", order=1),
        ])
        assert result.rows[0][result.headers.index("X2")] == "A-B"


class TestStatic:
    """Static value."""

    def test_static_creates_column(self):
        """Missing target column is created."""
        data = SheetFactory.table(["A"], [["1"], ["2"]])
        result = apply_transformation(data, static("Currency", "EGP"))
        assert result.headers == ["A", "Currency"]
        assert [r[1] for r in result.rows] == ["EGP", "EGP"]

    def test_static_overwrites(self):
        """Existing values are overwritten."""
        data = SheetFactory.table(["Currency"], [["USD"], [""]])
        result = apply_transformation(data, static("Currency", "EGP"))
        assert result.rows == [["EGP"], ["EGP"]]


class TestFormula:
    """Binary formula with degraded operands."""

    @pytest.mark.parametrize("operation,expected", [
        ("multiply", "7000"),
        ("add", "170"),
        ("subtract", "30"),
        ("divide", "1.4285714285714286"),
    ])
    def test_operations(self, operation, expected):
        """Each operation computes its result."""
        data = SheetFactory.table(["A", "B"], [["100", "70"]])
        result = apply_transformation(data, formula(operation, "A", "B"))
        assert result.rows[0][-1] == expected

    def test_divide_by_zero_sentinel(self):
        """Dividing by zero writes the sentinel string."""
        data = SheetFactory.table(["A", "B"], [["10", "0"]])
        result = apply_transformation(data, formula("divide", "A", "B"))
        assert result.rows[0][-1] == DIVISION_BY_ZERO == "Error: Division by zero"

    def test_multiply_by_zero(self):
        """Zero operands compute normally for other operations."""
        data = SheetFactory.table(["A", "B"], [["10", "0"]])
        result = apply_transformation(data, formula("multiply", "A", "B"))
        assert result.rows[0][-1] == "0"

    def test_non_numeric_reads_as_zero(self):
        """Non-numeric operand degrades to 0."""
        data = SheetFactory.table(["A", "B"], [["abc", "5"]])
        result = apply_transformation(data, formula("add", "A", "B"))
        assert result.rows[0][-1] == "5"

    def test_non_numeric_divisor_is_division_by_zero(self):
        """Non-numeric divisor reads as 0."""
        data = SheetFactory.table(["A", "B"], [["5", "n/a"]])
        result = apply_transformation(data, formula("divide", "A", "B"))
        assert result.rows[0][-1] == DIVISION_BY_ZERO

    def test_missing_operand_column(self):
        """Missing operand column reads as 0."""
        data = SheetFactory.table(["A"], [["5"]])
        result = apply_transformation(data, formula("subtract", "A", "Ghost"))
        assert result.rows[0][-1] == "5"

    def test_leading_number_parsed(self):
        """'45 sqm' reads as 45."""
        assert parse_float("45 sqm") == 45.0
        assert parse_float("") == 0.0
        assert parse_float("sqm 45") == 0.0

    def test_format_number(self):
        """Integral results drop the trailing .0."""
        assert format_number(70.0) == "70"
        assert format_number(0.5) == "0.5"
        assert format_number(-3.0) == "-3"


# ===================
# TEST 3: ORDERING AND INVARIANTS
# ===================

class TestApplyTransformations:
    """Fold behavior."""

    def test_runs_in_order_field(self):
        """Steps run by `order`, not list position."""
        data = SheetFactory.table(["A"], [["x"]])
        result = apply_transformations(data, [
            static("A", "second", order=2),
            static("A", "first", order=1),
        ])
        assert result.rows == [["second"]]

    def test_equal_order_keeps_list_order(self):
        """Ties keep list order."""
        data = SheetFactory.table(["A"], [["x"]])
        result = apply_transformations(data, [static("A", "one"), static("A", "two")])
        assert result.rows == [["two"]]

    def test_later_step_reads_derived_column(self):
        """A column added by one step is visible to the next."""
        data = SheetFactory.table(["Price", "Area"], [["1000", "10"]])
        result = apply_transformations(data, [
            formula("divide", "Price", "Area", target="PPS", order=0),
            formula("multiply", "PPS", "Area", target="Back", order=1),
        ])
        assert result.rows[0][result.headers.index("Back")] == "1000"

    def test_forward_reference_degrades(self):
        """Reading a column created later gives defaults, not errors."""
        data = SheetFactory.table(["Area"], [["10"]])
        result = apply_transformations(data, [
            formula("add", "PPS", "Area", target="Sum", order=0),
            static("PPS", "5", order=1),
        ])
        assert result.rows[0][result.headers.index("Sum")] == "10"

    @pytest.mark.parametrize("row_count", [0, 1, 7])
    def test_row_count_invariant(self, row_count):
        """Output row count always equals input row count."""
        data = SheetFactory.table(["Code", "A", "B"], [["X-1", str(i), "0"] for i in range(row_count)])
        transformations = [
            split("Code", "-", ["P", "Q", "R"]),
            merge(["P", "Missing", "Q"], "M", "|", order=1),
            static("S", "v", order=2),
            formula("divide", "A", "B", order=3),
        ]
        result = apply_transformations(data, transformations)
        assert len(result.rows) == row_count
        assert all(len(row) == len(result.headers) for row in result.rows)

    def test_input_not_mutated(self):
        """The input table is left as it was."""
        data = SheetFactory.table(["A"], [["x"]])
        apply_transformations(data, [static("A", "y")])
        assert data.rows == [["x"]]

    def test_short_rows_padded(self):
        """Ragged rows are padded to the header width."""
        data = TableData(headers=["A", "B"], rows=[["1"]])
        result = apply_transformation(data, static("C", "z"))
        assert result.rows == [["1", "", "z"]]


class TestSheetToTable:
    """SheetData conversion."""

    def test_converts_rows(self):
        """Dict rows become positional string rows."""
        sheet = SheetData(columns=["A", "B"], rows=[{"A": 1, "B": None}, {"A": 2.0, "B": "x"}])
        table = sheet_to_table(sheet)
        assert table.headers == ["A", "B"]
        assert table.rows == [["1", ""], ["2", "x"]]

    def test_headers_from_rows_when_missing(self):
        """Empty columns list falls back to row keys."""
        sheet = SheetData(rows=[{"A": "1"}, {"B": "2"}])
        table = sheet_to_table(sheet)
        assert table.headers == ["A", "B"]
        assert table.rows == [["1", ""], ["", "2"]]


# ===================
# TEST 4: ORDERING CHECK
# ===================

class TestFindOrderingIssues:
    """Advisory dependency check."""

    def test_no_issues_when_ordered(self):
        """Reads after the producing step are fine."""
        issues = find_ordering_issues(["Code"], [
            split("Code", "-", ["B", "U"], order=0),
            merge(["B", "U"], "Full", order=1),
        ])
        assert issues == []

    def test_forward_reference_reported(self):
        """Reading a column produced later is reported."""
        issues = find_ordering_issues(["Area"], [
            formula("add", "PPS", "Area", target="Sum", order=0),
            static("PPS", "5", order=1),
        ])
        assert len(issues) == 1
        assert issues[0].column == "PPS"
        assert issues[0].position == 0
