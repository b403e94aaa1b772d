"""
Abstract base class for row sources
"""

from abc import ABC, abstractmethod
from typing import List


class RowSource(ABC):
    """
    Abstract base class for all sales row sources.

    Responsibilities:
    - Read the whole source before any row is processed
    - Drop the header line
    - Surface open/read failures as SourceReadError
    """

    def __init__(self, source_name: str):
        self.source_name = source_name

    @abstractmethod
    async def fetch_rows(self) -> List[List[str]]:
        """
        Read every data row from the source.

        Returns:
            Data rows in file order, each a list of text fields. The
            header is not included; row 1 is the first data row.

        Raises:
            SourceReadError: If the source cannot be opened or fully read
        """
        pass
