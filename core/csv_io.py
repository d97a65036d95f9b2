"""
CSV boundary: export files in, scored exports out.
"""

from __future__ import annotations

import csv
import io
from pathlib import PurePath
from typing import Iterable, Mapping, Optional, Sequence


SUPPORTED_EXTENSIONS = {
    "csv": ",",
    "tsv": "\t",
}

UNSUPPORTED_FILE_MESSAGE = (
    "Please upload a CSV file. You can export from Excel using Save As > CSV."
)


class UnsupportedFileError(ValueError):
    """Raised when an uploaded file is not a CSV or TSV export."""

    def __init__(self, filename: Optional[str] = None):
        self.filename = filename
        super().__init__(UNSUPPORTED_FILE_MESSAGE)


def detect_delimiter(filename: Optional[str]) -> str:
    """
    Pick the delimiter from the file extension.

    Raises:
        UnsupportedFileError: Extension is not .csv or .tsv
    """
    if not filename:
        raise UnsupportedFileError(filename)
    ext = PurePath(filename).suffix.lower().lstrip(".")
    if ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFileError(filename)
    return SUPPORTED_EXTENSIONS[ext]


def decode_upload(data: bytes) -> str:
    """Decode uploaded bytes, dropping a UTF-8 BOM if present."""
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        # Excel on Windows commonly saves CSV as cp1252
        return data.decode("cp1252", errors="replace")


def read_csv(
    text: str,
    delimiter: str = ",",
) -> tuple[list[str], list[dict[str, Optional[str]]]]:
    """
    Parse export text into headers and row mappings.

    The first row holds the headers. Blank lines are skipped. Short rows
    leave missing cells as None.

    Returns:
        (headers, rows)
    """
    reader = csv.DictReader(io.StringIO(text, newline=""), delimiter=delimiter)
    rows = [
        row for row in reader
        if any(value not in (None, "") for key, value in row.items() if key is not None)
    ]
    headers = list(reader.fieldnames or [])
    return headers, rows


def write_csv(
    rows: Iterable[Mapping[str, object]],
    columns: Sequence[str],
) -> str:
    """Serialise rows to CSV text with a header row in column order."""
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(columns), extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    return buffer.getvalue()
