"""
Data cell and data row models.

A cell either holds a string value or is explicitly missing. The two are
distinct: DataCell(value='') is a present empty string, DataCell.missing() is
a missing value. No numeric coercion happens here; survey cells often hold
formatted text such as '12.3%' or 'n/a'.
"""

from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, model_validator


class DataCell(BaseModel):
    """
    One cell of a raw data row.

    Invariant: is_missing implies value is None.

    Example:
        >>> DataCell.of('12.3').value
        '12.3'
        >>> DataCell.missing().is_missing
        True
    """

    value: Optional[str] = Field(
        default=None,
        description="Cell text as found in the document",
        examples=[".140", "12.3%"]
    )

    is_missing: bool = Field(
        default=False,
        description="True when the cell was marked missing (<x/>)"
    )

    model_config = {"frozen": True}

    @model_validator(mode='after')
    def check_missing_has_no_value(self) -> 'DataCell':
        if self.is_missing and self.value is not None:
            raise ValueError(
                f"Missing cell cannot carry a value, got: '{self.value}'"
            )
        return self

    @classmethod
    def of(cls, value: str) -> 'DataCell':
        """Create a present cell."""
        return cls(value=value, is_missing=False)

    @classmethod
    def missing(cls) -> 'DataCell':
        """Create a missing cell."""
        return cls(value=None, is_missing=True)

    def __repr__(self) -> str:
        if self.is_missing:
            return "DataCell(missing)"
        return f"DataCell({self.value!r})"


class DataRow(BaseModel):
    """
    One raw <r> row: one cell per column label, in column order.

    Raw rows are interleaved by statistic; see Table.get_statistic_data().
    """

    cells: Tuple[DataCell, ...] = Field(default_factory=tuple)

    model_config = {"frozen": True}

    def values(self) -> List[Optional[str]]:
        """Cell values with missing cells as None."""
        return [None if cell.is_missing else cell.value for cell in self.cells]

    def __len__(self) -> int:
        return len(self.cells)
