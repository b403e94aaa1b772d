"""
Parse untyped CSV rows into typed sales entities with Pydantic validation
"""

from typing import Sequence
from pydantic import ValidationError as PydanticValidationError
from schemas.sales import SalesRow, EntityBundle, SOURCE_COLUMNS
from core.exceptions import ValidationError
import logging

logger = logging.getLogger(__name__)


class RowParser:
    """
    Convert one source row into an EntityBundle.

    Handles:
    - Field count check against the fixed column layout
    - Date, integer and non-negative decimal parsing
    - All-or-nothing: a single bad field rejects the whole row

    The parser holds no state, one instance can serve any number of rows.
    """

    columns = SOURCE_COLUMNS

    def parse(self, row: int, fields: Sequence[str]) -> EntityBundle:
        """
        Parse and validate a row.

        Args:
            row: 1-based data row number (the header is row 0)
            fields: Raw text fields in source column order

        Returns:
            Validated EntityBundle

        Raises:
            ValidationError: Naming the first failing column
        """
        if len(fields) != len(self.columns):
            raise ValidationError(
                row,
                "row",
                f"expected {len(self.columns)} fields, got {len(fields)}"
            )

        try:
            sales_row = SalesRow(**dict(zip(self.columns, fields)))
        except PydanticValidationError as e:
            error = e.errors()[0]
            field = str(error["loc"][0]) if error.get("loc") else "row"
            raise ValidationError(row, field, error["msg"])

        return sales_row.to_bundle(row)
