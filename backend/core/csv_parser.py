"""
CSV Parser

Turns uploaded CSV bytes into a Dataset using Polars.
Every column is read as text; typing is left to the profiler.
"""

import hashlib
import io
from datetime import datetime
from pathlib import Path
from typing import Union

import chardet
import polars as pl
from polars.exceptions import NoDataError

from core.dataset import Dataset
from core.logging_config import upload_logger as logger


class CSVParser:
    """Header-driven CSV parser using Polars."""

    def detect_encoding(self, file_path: Union[str, Path]) -> str:
        """Detect file encoding using chardet."""
        with open(file_path, "rb") as f:
            # Read first 100KB for detection
            raw_data = f.read(102400)

        return self.detect_encoding_from_bytes(raw_data)

    def detect_encoding_from_bytes(self, data: bytes) -> str:
        """Detect encoding from bytes."""
        # Use first 100KB for detection
        sample = data[:102400]
        result = chardet.detect(sample)
        encoding = result.get("encoding", "utf-8")
        return encoding or "utf-8"

    def parse_file(self, file_path: Union[str, Path]) -> Dataset:
        """
        Parse a CSV file from disk.

        Args:
            file_path: Path to CSV file

        Returns:
            Dataset
        """
        with open(file_path, "rb") as f:
            data = f.read()
        return self.parse_bytes(data, Path(file_path).name)

    def parse_bytes(self, data: bytes, filename: str = "upload.csv") -> Dataset:
        """
        Parse CSV from bytes.

        Args:
            data: Raw CSV bytes
            filename: Original filename (for logging)

        Returns:
            Dataset with headers in file order

        Raises:
            ValueError: If the file has no header row
        """
        if not data.strip():
            raise ValueError("CSV file is empty")

        encoding = self.detect_encoding_from_bytes(data)

        # Decode bytes to string
        try:
            text = data.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            # Fallback to latin-1 which accepts any byte
            text = data.decode("latin-1")

        try:
            df = pl.read_csv(
                io.StringIO(text),
                infer_schema_length=0,
                truncate_ragged_lines=True,
            )
        except NoDataError as e:
            raise ValueError("CSV file is empty") from e

        return self._to_dataset(df, filename)

    def _to_dataset(self, df: pl.DataFrame, filename: str) -> Dataset:
        """
        Convert a string-typed frame.

        Polars skips empty lines; delimiter-only lines stay as rows
        of missing cells.
        """
        headers = df.columns
        records = list(df.iter_rows(named=True))

        logger.info(f"Parsed {filename}: {len(records)} rows x {len(headers)} columns")
        return Dataset.from_records(headers, records)

    def generate_session_id(self, filename: str) -> str:
        """
        Generate unique session ID based on filename and timestamp.

        Args:
            filename: Original filename

        Returns:
            Unique session ID
        """
        timestamp = datetime.now().isoformat()
        content = f"{filename}_{timestamp}"
        return hashlib.sha256(content.encode()).hexdigest()[:16]


# Global parser instance
csv_parser = CSVParser()
