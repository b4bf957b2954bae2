"""
Lexical event source over lxml.

Turns a byte (or text) stream into a pull-based iterator of low-level XML
events. lxml's feed parser drives a collecting parser target; the stream is
read in chunks and the events produced by each chunk are handed out before
the next chunk is read, so the document is never held in memory as a tree.

Comments and processing instructions are dropped. Tag and attribute names
are reduced to their local names (namespace URIs are stripped).
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import IO, Deque, Dict, Iterator, Optional, Union

from lxml import etree

from xtabml.exceptions import MalformedXMLError, ResourceAccessError

logger = logging.getLogger(__name__)

# libxml2 codes raised when the input ends inside an open element
_TRUNCATION_CODES = frozenset({
    etree.ErrorTypes.ERR_DOCUMENT_END,
    etree.ErrorTypes.ERR_TAG_NOT_FINISHED,
    etree.ErrorTypes.ERR_LTSLASH_REQUIRED,
    etree.ErrorTypes.ERR_GT_REQUIRED,
})


class EventKind(str, Enum):
    START = 'start'
    END = 'end'
    DATA = 'data'
    EOF = 'eof'


@dataclass(frozen=True)
class LexicalEvent:
    """
    One lexical event.

    START carries tag and attrs, END carries tag, DATA carries text,
    EOF carries nothing.
    """

    kind: EventKind
    tag: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)
    text: Optional[str] = None


def local_name(name: str) -> str:
    """'{http://example.org/ns}table' -> 'table'."""
    if name.startswith('{'):
        return etree.QName(name).localname
    return name


class _EventCollector:
    """lxml parser target that queues events instead of building a tree."""

    def __init__(self):
        self.events: Deque[LexicalEvent] = deque()
        self.depth = 0

    def start(self, tag, attrib):
        self.depth += 1
        attrs = {local_name(k): v for k, v in attrib.items()}
        self.events.append(LexicalEvent(EventKind.START, tag=local_name(tag), attrs=attrs))

    def end(self, tag):
        self.depth -= 1
        self.events.append(LexicalEvent(EventKind.END, tag=local_name(tag)))

    def data(self, data):
        self.events.append(LexicalEvent(EventKind.DATA, text=data))

    def close(self):
        return None


def _malformed(exc: etree.XMLSyntaxError) -> MalformedXMLError:
    line, column = (exc.position if exc.position else (None, None))
    return MalformedXMLError(f"XML syntax error: {exc.msg}", line=line, column=column)


def iter_events(
    stream: IO[Union[bytes, str]],
    chunk_size: int = 64 * 1024,
    huge_tree: bool = False,
    encoding: Optional[str] = None,
) -> Iterator[LexicalEvent]:
    """
    Yield lexical events for the XML document read from stream.

    The last event is always EOF. When the input stops inside an open element,
    the events seen so far are still delivered followed by EOF, so the caller
    can report which element was left unclosed.

    Args:
        stream: Readable binary or text stream (not closed here)
        chunk_size: Bytes/characters per read
        huge_tree: Passed to lxml.etree.XMLParser
        encoding: Override the declared document encoding

    Raises:
        MalformedXMLError: If lxml reports a syntax error, or a text stream
            cannot be decoded
        ResourceAccessError: If reading the stream fails or it is closed
    """
    collector = _EventCollector()
    parser = None

    total = 0
    while True:
        try:
            chunk = stream.read(chunk_size)
        except UnicodeDecodeError as e:
            raise MalformedXMLError(f"XML syntax error: cannot decode text stream: {e.reason}") from e
        except OSError as e:
            raise ResourceAccessError(f"Failed to read XML source: {e}") from e
        except ValueError as e:
            # closed or detached stream
            raise ResourceAccessError(f"Failed to read XML source: {e}") from e

        if not chunk:
            break

        # Text streams are re-encoded; any declared encoding no longer applies
        if isinstance(chunk, str):
            chunk = chunk.encode('utf-8')
            encoding = 'utf-8'
        total += len(chunk)

        if parser is None:
            parser = etree.XMLParser(
                target=collector,
                huge_tree=huge_tree,
                encoding=encoding,
                resolve_entities=False,
                no_network=True,
            )

        try:
            parser.feed(chunk)
        except etree.XMLSyntaxError as e:
            raise _malformed(e) from e

        while collector.events:
            yield collector.events.popleft()

    if parser is None:
        raise MalformedXMLError("XML syntax error: document is empty")

    try:
        parser.close()
    except etree.XMLSyntaxError as e:
        codes = {e.code} | {entry.type for entry in e.error_log}
        if collector.depth > 0 and codes & _TRUNCATION_CODES:
            logger.debug(f"Input ended inside {collector.depth} open element(s): {e.msg}")
        else:
            raise _malformed(e) from e

    while collector.events:
        yield collector.events.popleft()

    logger.debug(f"Lexer consumed {total} bytes of input")
    yield LexicalEvent(EventKind.EOF)
