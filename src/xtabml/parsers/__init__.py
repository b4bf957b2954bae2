"""
Streaming XtabML parser.

Layers, bottom-up:
- events: lxml feed parser -> pull iterator of lexical events
- frames: one typed frame per open element, holding partial state
- builders: frame -> finished model value
- xtabml_parser: the state machine tying them together
"""

from .events import EventKind, LexicalEvent, iter_events
from .xtabml_parser import (
    XtabMLParser,
    parse,
    parse_bytes,
    parse_file,
    parse_stream,
    parse_string,
)

__all__ = [
    # Lexer
    'EventKind',
    'LexicalEvent',
    'iter_events',
    # Parser
    'XtabMLParser',
    'parse',
    'parse_bytes',
    'parse_file',
    'parse_stream',
    'parse_string',
]
