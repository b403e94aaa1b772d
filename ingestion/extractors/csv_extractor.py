"""
CSV file row source
"""

import asyncio
import pandas as pd
from typing import List
from pathlib import Path
from ingestion.base import RowSource
from core.exceptions import SourceReadError
import logging

logger = logging.getLogger(__name__)


class CSVRowSource(RowSource):
    """
    Read sales rows from a CSV file.

    Supports:
    - Header skipping (first line is never a data row)
    - Untyped reads: every cell stays text, typing is the parser's job
    - Strict field counts: a line wider than the header aborts the read,
      a narrower line is returned short and rejected by the row parser
    """

    def __init__(self, file_path: str, source_name: str = None):
        self.file_path = Path(file_path)
        super().__init__(source_name=source_name or self.file_path.name)

    async def fetch_rows(self) -> List[List[str]]:
        """Read the entire CSV file in a worker thread"""
        logger.info(f"Reading CSV from {self.file_path}")

        rows = await asyncio.to_thread(self._read)

        logger.info(f"Read {len(rows)} data rows from CSV")
        return rows

    def _read(self) -> List[List[str]]:
        try:
            # header=None keeps the header line's width as the expected width.
            # The python engine leaves cells past the end of a short line
            # unset instead of filling them with empty text, and object dtype
            # keeps every present cell as the exact text read.
            df = pd.read_csv(
                self.file_path,
                header=None,
                dtype=object,
                keep_default_na=False,
                on_bad_lines="error",
                engine="python",
            )
        except pd.errors.EmptyDataError:
            logger.warning(f"CSV file is empty: {self.file_path}")
            return []
        except (OSError, ValueError) as e:
            # ParserError and UnicodeDecodeError are both ValueErrors
            raise SourceReadError(str(self.file_path), str(e), original_exception=e)

        records = df.itertuples(index=False, name=None)
        next(records, None)  # skip header

        return [self._row_fields(values) for values in records]

    @staticmethod
    def _row_fields(values) -> List[str]:
        """Cut a row at its first unset cell so short lines keep their real width"""
        fields = []
        for value in values:
            if not isinstance(value, str):
                break
            fields.append(value)
        return fields
