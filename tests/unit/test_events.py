"""
Unit tests for the lxml-backed lexical event source.
"""

import io

import pytest


def _events(data, **kwargs):
    from xtabml.parsers.events import iter_events

    stream = io.StringIO(data) if isinstance(data, str) else io.BytesIO(data)
    return list(iter_events(stream, **kwargs))


class TestIterEvents:
    """Test suite for iter_events()."""

    def test_event_sequence(self):
        from xtabml.parsers.events import EventKind

        events = _events(b'<a x="1"><b>hi</b></a>')

        assert [(e.kind, e.tag) for e in events] == [
            (EventKind.START, 'a'),
            (EventKind.START, 'b'),
            (EventKind.DATA, None),
            (EventKind.END, 'b'),
            (EventKind.END, 'a'),
            (EventKind.EOF, None),
        ]
        assert events[0].attrs == {'x': '1'}
        assert events[2].text == 'hi'

    def test_comments_and_processing_instructions_dropped(self):
        from xtabml.parsers.events import EventKind

        events = _events(b'<a><!-- note --><?pi data?></a>')

        assert [e.kind for e in events] == [EventKind.START, EventKind.END, EventKind.EOF]

    def test_namespaced_names_reduced_to_local(self):
        events = _events(b'<n:a xmlns:n="urn:x" n:attr="v"/>')

        assert events[0].tag == 'a'
        assert events[0].attrs == {'attr': 'v'}

    def test_entities_are_decoded(self):
        events = _events(b'<a>1 &lt; 2 &amp; 3</a>')

        assert ''.join(e.text for e in events if e.text) == '1 < 2 & 3'

    def test_tiny_chunks(self):
        """Chunking should not change the event stream."""
        data = b'<a><b>hello world</b><c/></a>'

        whole = _events(data)
        chunked = _events(data, chunk_size=3)

        def squash(events):
            return [(e.kind, e.tag, e.attrs) for e in events if e.text is None]

        assert squash(chunked) == squash(whole)
        assert ''.join(e.text for e in chunked if e.text) == 'hello world'

    def test_truncated_input_ends_with_eof(self):
        """Input stopping inside an element still yields EOF."""
        from xtabml.parsers.events import EventKind

        events = _events(b'<a><b>')

        assert [e.kind for e in events] == [EventKind.START, EventKind.START, EventKind.EOF]

    def test_syntax_error_raises_malformed(self):
        from xtabml.exceptions import MalformedXMLError

        with pytest.raises(MalformedXMLError) as exc_info:
            _events(b'<a><b></a>')

        assert exc_info.value.line == 1

    def test_empty_input_raises_malformed(self):
        from xtabml.exceptions import MalformedXMLError

        with pytest.raises(MalformedXMLError, match="empty"):
            _events(b'')

    def test_text_stream(self):
        events = _events('<a>café</a>')

        text = ''.join(e.text for e in events if e.text is not None)

        assert text == 'café'


class TestLocalName:

    def test_local_name(self):
        from xtabml.parsers.events import local_name

        assert local_name('{urn:x}table') == 'table'
        assert local_name('table') == 'table'
