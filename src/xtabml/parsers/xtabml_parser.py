"""
XtabML parse state machine and public entry points.

The machine folds lexical events into the data model in a single forward
pass:

1. start: grammar lookup (element known, legal parent, required attributes),
   then a typed frame is pushed
2. data: appended to the top frame's own text buffer, or rejected when it is
   non-whitespace text in an element that carries no text
3. end: the top frame is popped, finalized by its builder and attached to
   its parent
4. eof: open frames mean the input stopped inside an element

Each parse call runs its own _StateMachine, so one XtabMLParser may be used
from several threads at once. The first error aborts the parse; there is no
partial result.
"""

import io
import logging
import os
from pathlib import Path
from typing import IO, List, Optional, Union

from xtabml.config import Grammar, ParserSettings, get_grammar, get_settings, load_grammar
from xtabml.exceptions import InvalidStructureError, ResourceAccessError
from xtabml.models import Document, Table
from xtabml.parsers.builders import BUILDERS
from xtabml.parsers.events import EventKind, LexicalEvent, iter_events
from xtabml.parsers.frames import FRAME_CLASSES, Frame

logger = logging.getLogger(__name__)

Source = Union[str, os.PathLike, bytes, bytearray, memoryview, IO[bytes], IO[str]]


class _StateMachine:
    """Context stack plus the finished document of one parse call."""

    def __init__(self, grammar: Grammar):
        self.grammar = grammar
        self.stack: List[Frame] = []
        self.document: Optional[Document] = None

    def feed(self, event: LexicalEvent) -> None:
        if event.kind is EventKind.START:
            self._start(event.tag, event.attrs)
        elif event.kind is EventKind.DATA:
            self._data(event.text)
        elif event.kind is EventKind.END:
            self._end(event.tag)
        else:
            self._eof()

    def _path(self, tag: str) -> str:
        return '/' + '/'.join([frame.tag for frame in self.stack] + [tag])

    def _start(self, tag: str, attrs) -> None:
        path = self._path(tag)
        rule = self.grammar.rule_for(tag)
        if rule is None:
            raise InvalidStructureError(f"Unexpected element <{tag}>", path=path)

        parent = self.stack[-1].tag if self.stack else None
        if not rule.allows_parent(parent):
            where = f"<{parent}>" if parent else "the document root"
            raise InvalidStructureError(
                f"<{tag}> is not allowed in {where}",
                path=path,
                context={"allowed": rule.parents or ['root']}
            )

        resolved = rule.resolve_attributes(attrs, path)
        frame_cls = FRAME_CLASSES[rule.frame]
        self.stack.append(
            frame_cls(kind=rule.frame, tag=tag, path=path, attrs=resolved, carries_text=rule.text)
        )

    def _data(self, text: str) -> None:
        if not self.stack:
            return
        frame = self.stack[-1]
        if frame.carries_text:
            frame.text_parts.append(text)
        elif text.strip():
            raise InvalidStructureError(
                f"Unexpected text {text.strip()[:40]!r} in <{frame.tag}>",
                path=frame.path
            )

    def _end(self, tag: str) -> None:
        if not self.stack:
            raise InvalidStructureError(f"Unexpected end tag </{tag}>")

        frame = self.stack.pop()
        # lxml rejects mismatched end tags first; kept for direct event feeds
        if frame.tag != tag:
            raise InvalidStructureError(
                f"End tag </{tag}> does not match open element <{frame.tag}>",
                path=frame.path
            )

        entity = BUILDERS[frame.kind](frame)

        if isinstance(entity, Table):
            rows, cols = entity.shape()
            logger.debug(
                f"Parsed table '{entity.title}' "
                f"({rows}x{cols}, statistics={list(entity.statistics)})"
            )

        if self.stack:
            self.stack[-1].attach(entity)
        else:
            self.document = entity

    def _eof(self) -> None:
        if self.stack:
            innermost = self.stack[-1]
            raise InvalidStructureError(
                f"Unclosed element <{innermost.tag}> at end of input",
                path=innermost.path,
                context={"open": len(self.stack)}
            )
        if self.document is None:
            raise InvalidStructureError("Input contains no root element")


class XtabMLParser:
    """
    Parser for XtabML documents.

    Holds configuration only; every parse call gets fresh state.

    Example:
        >>> parser = XtabMLParser()
        >>> doc = parser.parse_file('resources/example.xte')
        >>> doc.tables[0].row_labels()
        ['15 and under', '16-19 yrs', ...]
    """

    def __init__(
        self,
        settings: Optional[ParserSettings] = None,
        grammar: Optional[Grammar] = None,
    ):
        self.settings = settings or get_settings()
        if grammar is not None:
            self.grammar = grammar
        elif self.settings.grammar_path is not None:
            self.grammar = load_grammar(self.settings.grammar_path)
        else:
            self.grammar = get_grammar()

    def parse(self, source: Source) -> Document:
        """
        Parse a path, an in-memory buffer or an open stream.

        Args:
            source: str / os.PathLike (file path), bytes-like (document
                content) or an object with read() (binary or text stream)

        Raises:
            TypeError: If source is none of the above
        """
        if isinstance(source, (bytes, bytearray, memoryview)):
            return self.parse_bytes(bytes(source))
        if isinstance(source, (str, os.PathLike)):
            return self.parse_file(source)
        if hasattr(source, 'read'):
            return self.parse_stream(source)
        raise TypeError(
            f"Cannot parse source of type {type(source).__name__}; "
            f"expected a path, bytes or a readable stream"
        )

    def parse_file(self, path: Union[str, os.PathLike]) -> Document:
        """
        Parse an XtabML file.

        Raises:
            ResourceAccessError: If the file cannot be opened or read
        """
        path = Path(path)
        try:
            fh = open(path, 'rb')
        except OSError as e:
            logger.error(f"Cannot open XtabML file {path}: {e}")
            raise ResourceAccessError(
                f"Cannot open file: {e.strerror or e}",
                source=str(path)
            ) from e

        with fh:
            return self.parse_stream(fh, source_name=str(path))

    def parse_bytes(self, data: bytes) -> Document:
        return self.parse_stream(io.BytesIO(data), source_name='<bytes>')

    def parse_string(self, text: str) -> Document:
        """Parse document text; any encoding declaration in it is ignored."""
        return self.parse_stream(io.StringIO(text), source_name='<string>')

    def parse_stream(self, stream: Union[IO[bytes], IO[str]], source_name: Optional[str] = None) -> Document:
        """
        Parse a readable stream to completion. The stream is not closed.

        Raises:
            MalformedXMLError: Lexer syntax error
            InvalidStructureError: Grammar violation
            MissingElementError: Required attribute or child absent
            ResourceAccessError: Stream read failure
        """
        source_name = source_name or getattr(stream, 'name', None) or '<stream>'
        machine = _StateMachine(self.grammar)

        events = iter_events(
            stream,
            chunk_size=self.settings.chunk_size,
            huge_tree=self.settings.huge_tree,
            encoding=self.settings.encoding,
        )
        try:
            for event in events:
                machine.feed(event)
        except ResourceAccessError as e:
            logger.error(f"Failed reading {source_name}: {e}")
            if e.source is None:
                e.source = source_name
                e.context["source"] = source_name
            raise

        document = machine.document
        logger.info(f"Parsed {len(document.tables)} table(s) from {source_name}")
        return document


def parse(source: Source, settings: Optional[ParserSettings] = None) -> Document:
    """
    Parse an XtabML document.

    Args:
        source: File path, bytes-like document content, or readable stream
        settings: Optional parser settings (defaults to get_settings())

    Returns:
        Fully built, immutable Document

    Example:
        >>> doc = parse('survey.xte')
        >>> table = doc.tables[0]
        >>> table.shape()
        (11, 3)
    """
    return XtabMLParser(settings).parse(source)


def parse_file(path: Union[str, os.PathLike], settings: Optional[ParserSettings] = None) -> Document:
    return XtabMLParser(settings).parse_file(path)


def parse_bytes(data: bytes, settings: Optional[ParserSettings] = None) -> Document:
    return XtabMLParser(settings).parse_bytes(data)


def parse_string(text: str, settings: Optional[ParserSettings] = None) -> Document:
    return XtabMLParser(settings).parse_string(text)


def parse_stream(stream: Union[IO[bytes], IO[str]], settings: Optional[ParserSettings] = None) -> Document:
    return XtabMLParser(settings).parse_stream(stream)
