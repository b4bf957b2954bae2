"""
Pydantic models for parsed XtabML documents.

All models are frozen: a parsed Document is an immutable snapshot.
"""

from xtabml.models.data import DataCell, DataRow
from xtabml.models.edge import Edge, Element, Group, Summary
from xtabml.models.table import Control, DataRowSeries, Table
from xtabml.models.document import ControlType, Document, Language, StatisticType

__all__ = [
    'DataCell',
    'DataRow',
    'Edge',
    'Element',
    'Group',
    'Summary',
    'Control',
    'DataRowSeries',
    'Table',
    'ControlType',
    'Document',
    'Language',
    'StatisticType',
]
