"""
pandas views over parsed tables.

Values stay as the strings found in the document (dtype=object); missing cells
become None. Numeric conversion is left to the caller, e.g.:

    >>> df = statistic_frame(table, 'n')
    >>> df.apply(pd.to_numeric, errors='coerce')
"""

import logging
from typing import Union

import pandas as pd

from xtabml.models import Table

logger = logging.getLogger(__name__)


def _statistic_index(table: Table, statistic: Union[int, str]) -> int:
    if isinstance(statistic, str):
        try:
            return table.statistics.index(statistic)
        except ValueError:
            raise KeyError(
                f"Table '{table.title}' has no statistic '{statistic}'; "
                f"available: {list(table.statistics)}"
            ) from None

    if not 0 <= statistic < len(table.statistics):
        raise KeyError(
            f"Statistic index {statistic} out of range for table '{table.title}' "
            f"({len(table.statistics)} statistics)"
        )
    return statistic


def statistic_frame(table: Table, statistic: Union[int, str] = 0) -> pd.DataFrame:
    """
    One statistic of a table as a DataFrame.

    Args:
        table: Parsed table
        statistic: Statistic position or label (e.g. 0 or 'Percent')

    Returns:
        DataFrame indexed by row label, one column per column label

    Raises:
        KeyError: If the statistic does not exist
        InvalidStructureError: If the raw rows do not de-interleave evenly

    Example:
        >>> statistic_frame(table, 'Percent').loc['16-19 yrs', 'Male']
        '.200'
    """
    index = _statistic_index(table, statistic)
    matrix = table.get_statistic_data(index)

    return pd.DataFrame(
        matrix,
        index=pd.Index(table.row_labels(), name='label'),
        columns=table.column_labels(),
        dtype=object,
    )


def table_frame(table: Table) -> pd.DataFrame:
    """
    All raw data rows in long format.

    Rows keep raw document order and are indexed by (label, statistic), so
    the interleaving is visible:

        label         statistic   Male   Female
        15 and under  Percent     .140   .100
        15 and under  n           12     9
        16-19 yrs     Percent     ...

    Raises:
        InvalidStructureError: If the raw rows do not de-interleave evenly
    """
    table.check_interleaving()

    n_stats = len(table.statistics)
    labels = table.row_labels()
    keys = [
        (labels[r // n_stats], table.statistics[r % n_stats])
        for r in range(len(table.data_rows))
    ]
    logger.debug(f"Building long frame for '{table.title}' ({len(keys)} rows)")

    return pd.DataFrame(
        [row.values() for row in table.data_rows],
        index=pd.MultiIndex.from_tuples(keys, names=['label', 'statistic']),
        columns=table.column_labels(),
        dtype=object,
    )
