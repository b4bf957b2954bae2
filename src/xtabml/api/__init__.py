"""
User-facing views over parsed tables.

Converts the immutable Table model into pandas DataFrames for analysis.
"""

from xtabml.api.frames import statistic_frame, table_frame

__all__ = [
    'statistic_frame',
    'table_frame',
]
