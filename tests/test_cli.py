"""
Tests for the reporting CLI

Tests cover:
- columns / summary / score subcommands
- Export file written with filters applied
- Error exits for missing and unsupported files
"""

import csv

import pytest

from reporting.cli import load_export, main


EXPORT_CSV = (
    "Address,Suburb,Property Type,Price,DOM,Description\n"
    '12 Smith St,Parramatta,Warehouse,$1.2M,200,"Mortgagee auction - must sell, vacant possession"\n'
    '3 King St,Newcastle,Retail,"$900,000",20,"Leased investment, net income $50k"\n'
)


@pytest.fixture
def export_file(tmp_path):
    path = tmp_path / "export.csv"
    path.write_text(EXPORT_CSV, encoding="utf-8")
    return path


class TestLoadExport:

    def test_load_export(self, export_file):
        headers, rows = load_export(export_file)

        assert headers[0] == "Address"
        assert len(rows) == 2


class TestCommands:
    """Tests for CLI subcommands."""

    def test_columns(self, export_file, capsys):
        assert main(["columns", str(export_file)]) == 0

        out = capsys.readouterr().out
        assert "asking_price" in out
        assert "Mapped 6 of 15 fields" in out

    def test_summary(self, export_file, capsys):
        assert main(["summary", str(export_file)]) == 0

        out = capsys.readouterr().out
        assert "Total properties: 2" in out
        assert "High Priority:    1" in out
        assert "mortgagee" in out
        assert "$1.20M" in out

    def test_score_writes_export(self, export_file, tmp_path, capsys):
        output = tmp_path / "scored.csv"

        assert main(["score", str(export_file), "-o", str(output)]) == 0

        with output.open(newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
        assert [r["Address"] for r in rows] == ["12 Smith St", "3 King St"]
        assert rows[0]["Score"] == "90"
        assert "Scored 2 listings, 2 matched" in capsys.readouterr().out

    def test_score_with_filters(self, export_file, tmp_path):
        output = tmp_path / "scored.csv"

        code = main([
            "score", str(export_file), "-o", str(output),
            "--priority", "High Priority",
            "--sort", "address", "--direction", "asc",
        ])

        assert code == 0
        with output.open(newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
        assert [r["Priority"] for r in rows] == ["High Priority"]

    def test_unknown_priority(self, export_file, tmp_path, capsys):
        code = main([
            "score", str(export_file), "-o", str(tmp_path / "out.csv"),
            "--priority", "Urgent",
        ])

        assert code == 1
        assert "Unknown priority" in capsys.readouterr().err


class TestErrors:
    """Tests for error exits."""

    def test_missing_file(self, tmp_path, capsys):
        assert main(["summary", str(tmp_path / "missing.csv")]) == 1
        assert "File not found" in capsys.readouterr().err

    def test_unsupported_file(self, tmp_path, capsys):
        path = tmp_path / "export.xlsx"
        path.write_bytes(b"not a csv")

        assert main(["columns", str(path)]) == 1
        assert "Please upload a CSV file" in capsys.readouterr().err

    def test_score_refuses_unmappable_file(self, tmp_path, capsys):
        path = tmp_path / "export.csv"
        path.write_text("Col A,Col B\n1,2\n", encoding="utf-8")

        assert main(["score", str(path), "-o", str(tmp_path / "out.csv")]) == 1
        assert "columns recognised" in capsys.readouterr().err
