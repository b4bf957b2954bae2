"""
xtabml: streaming parser for XtabML cross-tabulation exports.

Main package exports for user-facing API.
"""

from xtabml.config import ParserSettings, get_settings
from xtabml.exceptions import (
    InvalidStructureError,
    MalformedXMLError,
    MissingElementError,
    ResourceAccessError,
    XtabMLError,
)
from xtabml.models import (
    Control,
    DataCell,
    DataRow,
    DataRowSeries,
    Document,
    Edge,
    Element,
    Group,
    Table,
)
from xtabml.parsers import (
    XtabMLParser,
    parse,
    parse_bytes,
    parse_file,
    parse_stream,
    parse_string,
)
from xtabml.api import statistic_frame, table_frame

__all__ = [
    # Parsing
    'XtabMLParser',
    'parse',
    'parse_bytes',
    'parse_file',
    'parse_stream',
    'parse_string',
    # Models
    'Control',
    'DataCell',
    'DataRow',
    'DataRowSeries',
    'Document',
    'Edge',
    'Element',
    'Group',
    'Table',
    # Views
    'statistic_frame',
    'table_frame',
    # Errors
    'XtabMLError',
    'MalformedXMLError',
    'InvalidStructureError',
    'MissingElementError',
    'ResourceAccessError',
    # Settings
    'ParserSettings',
    'get_settings',
]
