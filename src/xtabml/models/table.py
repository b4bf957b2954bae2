"""
Table model and the read-only table query layer.

Raw data rows are interleaved by statistic. For a table declaring statistics
('Percent', 'n') and row labels (A, B, C) the raw rows are:

    0: A / Percent
    1: A / n
    2: B / Percent
    3: B / n
    4: C / Percent
    5: C / n

i.e. raw row r belongs to statistic r % n_stats and row label r // n_stats.
XtabML does not declare this stride in-band; it is the working assumption of
this library and is checked (not trusted) before data is de-interleaved.
"""

from typing import Iterator, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from xtabml.exceptions import InvalidStructureError
from xtabml.models.data import DataRow
from xtabml.models.edge import Edge
from xtabml.validators import validate_required_text


Matrix = List[List[Optional[str]]]


class Control(BaseModel):
    """
    Metadata attached to a table or document (e.g. weight, base, project).

    Example:
        >>> Control(kind='base', value='Total sample; Unweighted; base n = 713')
    """

    kind: str = Field(..., examples=["base", "weight", "project"])
    value: str = Field(default="")

    model_config = {"frozen": True}


class DataRowSeries(BaseModel):
    """
    The raw data rows of one statistic, in row label order.

    Derived on demand from Table.data_rows; never stored on the table.
    """

    statistic: str
    index: int
    row_labels: Tuple[str, ...]
    rows: Tuple[DataRow, ...]

    model_config = {"frozen": True}

    def values(self) -> Matrix:
        """Matrix of cell values, missing cells as None."""
        return [row.values() for row in self.rows]

    def __len__(self) -> int:
        return len(self.rows)


class Table(BaseModel):
    """
    One cross-tabulation table.

    Attributes:
        title: Table title (e.g. 'q4: Age')
        name: Optional opaque identifier, usually a UUID
        controls: Table-level controls in document order
        row_edge: Row dimension
        column_edge: Column dimension
        statistics: Statistic type labels in declaration order
        data_rows: Raw data rows, interleaved by statistic

    Example:
        >>> table.shape()
        (3, 2)
        >>> table.statistic_types()
        ['Percent', 'n']
        >>> table.get_statistic_data(0)
        [['.140', '.200'], ...]
    """

    title: str = Field(..., examples=["q4: Age"])
    name: Optional[str] = Field(
        default=None,
        examples=["97f48ec3-87c5-4c39-b6c2-5229cc884666"]
    )
    controls: Tuple[Control, ...] = Field(default_factory=tuple)
    row_edge: Edge
    column_edge: Edge
    statistics: Tuple[str, ...] = Field(default_factory=tuple)
    data_rows: Tuple[DataRow, ...] = Field(default_factory=tuple)

    model_config = {"frozen": True}

    @field_validator('title')
    @classmethod
    def check_title(cls, value: str) -> str:
        return validate_required_text(value)

    # === Labels ===

    def row_labels(self) -> List[str]:
        """Row labels, depth-first across the row edge's groups."""
        return self.row_edge.labels()

    def column_labels(self) -> List[str]:
        """Column labels, depth-first across the column edge's groups."""
        return self.column_edge.labels()

    def statistic_types(self) -> List[str]:
        """Statistic labels in the order the table declares them."""
        return list(self.statistics)

    def shape(self) -> Tuple[int, int]:
        """(row label count, column label count)."""
        return len(self.row_labels()), len(self.column_labels())

    # === Controls ===

    def controls_of(self, kind: str) -> List[Control]:
        return [control for control in self.controls if control.kind == kind]

    def get_control(self, kind: str) -> Optional[str]:
        """
        Value of the first control of the given kind.

        Example:
            >>> table.get_control('base')
            'Total sample; Unweighted; base n = 713'
        """
        for control in self.controls:
            if control.kind == kind:
                return control.value
        return None

    # === Statistic de-interleaving ===

    def check_interleaving(self) -> None:
        """
        Verify that the raw rows can be split evenly across statistics.

        Raises:
            InvalidStructureError: If the data row count is not a multiple of
                the statistic count, or does not equal
                row label count * statistic count.
        """
        n_stats = len(self.statistics)
        n_rows = len(self.data_rows)
        if n_stats == 0:
            if n_rows:
                raise InvalidStructureError(
                    f"Table has {n_rows} data rows but declares no statistics",
                    context={"table": self.title}
                )
            return

        if n_rows % n_stats != 0:
            raise InvalidStructureError(
                f"Data row count {n_rows} is not a multiple of "
                f"statistic count {n_stats}",
                context={"table": self.title}
            )

        n_labels = len(self.row_labels())
        if n_rows != n_labels * n_stats:
            raise InvalidStructureError(
                f"Expected {n_labels} row labels x {n_stats} statistics = "
                f"{n_labels * n_stats} data rows, found {n_rows}",
                context={"table": self.title}
            )

    def get_series(self, statistic_index: int) -> Optional[DataRowSeries]:
        """
        Raw rows belonging to one statistic, in row label order.

        Returns None when statistic_index is outside [0, len(statistics)).
        """
        n_stats = len(self.statistics)
        if not 0 <= statistic_index < n_stats:
            return None

        self.check_interleaving()

        rows = tuple(
            row for r, row in enumerate(self.data_rows)
            if r % n_stats == statistic_index
        )
        return DataRowSeries(
            statistic=self.statistics[statistic_index],
            index=statistic_index,
            row_labels=tuple(self.row_labels()),
            rows=rows,
        )

    def iter_series(self) -> Iterator[DataRowSeries]:
        """One DataRowSeries per declared statistic, in declaration order."""
        for i in range(len(self.statistics)):
            yield self.get_series(i)

    def get_statistic_data(self, statistic_index: int) -> Optional[Matrix]:
        """
        Data matrix (row labels x column labels) for one statistic.

        Args:
            statistic_index: Position in statistic_types()

        Returns:
            List of rows, each a list of Optional[str] (None = missing),
            or None if statistic_index is out of range.

        Raises:
            InvalidStructureError: If the raw rows do not de-interleave evenly
        """
        series = self.get_series(statistic_index)
        if series is None:
            return None
        return series.values()

    def __repr__(self) -> str:
        rows, cols = self.shape()
        return (
            f"Table(title='{self.title}', "
            f"shape=({rows}, {cols}), "
            f"statistics={list(self.statistics)})"
        )
