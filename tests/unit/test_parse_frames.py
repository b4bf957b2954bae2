"""
Unit tests for parse frames (the per-element partial state).
"""

import pytest


def _frame(cls_name, kind_name, tag):
    from xtabml.config import FrameKind
    from xtabml.parsers import frames

    return getattr(frames, cls_name)(kind=FrameKind[kind_name], tag=tag, path=f'/xtab/{tag}', attrs={})


class TestAttach:
    """Children are routed to the right ordered collection."""

    def test_table_frame_collects_children(self):
        from xtabml.models import Control, DataCell, DataRow
        from xtabml.parsers.frames import CarriedText, DataBlock, StatisticDecl

        frame = _frame('TableFrame', 'TABLE', 'table')
        row = DataRow(cells=(DataCell.of('1'),))

        frame.attach(Control(kind='base', value='All'))
        frame.attach(StatisticDecl('Percent'))
        frame.attach(StatisticDecl('n'))
        frame.attach(DataBlock((row,)))
        frame.attach(CarriedText('title', 'q1'))

        assert [c.kind for c in frame.controls] == ['base']
        assert frame.statistics == ['Percent', 'n']
        assert frame.data_rows == (row,)
        assert frame.title_text == 'q1'

    def test_second_data_block_rejected(self):
        from xtabml.exceptions import InvalidStructureError
        from xtabml.parsers.frames import DataBlock

        frame = _frame('TableFrame', 'TABLE', 'table')
        frame.attach(DataBlock(()))

        with pytest.raises(InvalidStructureError, match="more than one <data>"):
            frame.attach(DataBlock(()))

    def test_group_frame_keeps_mixed_order(self):
        from xtabml.models import Element, Group

        frame = _frame('GroupFrame', 'GROUP', 'group')
        inner = Group(children=(Element(label='b'),))

        frame.attach(Element(label='a'))
        frame.attach(inner)
        frame.attach(Element(label='c'))

        assert frame.children == [Element(label='a'), inner, Element(label='c')]

    def test_unexpected_child_rejected(self):
        from xtabml.exceptions import InvalidStructureError
        from xtabml.models import DataCell

        frame = _frame('EdgeFrame', 'EDGE', 'edge')

        with pytest.raises(InvalidStructureError, match="cannot contain DataCell"):
            frame.attach(DataCell.of('1'))

    def test_second_text_child_rejected(self):
        from xtabml.exceptions import InvalidStructureError
        from xtabml.parsers.frames import CarriedText

        frame = _frame('ElementFrame', 'ELEMENT', 'element')
        frame.attach(CarriedText('t', 'one'))

        with pytest.raises(InvalidStructureError, match="more than one"):
            frame.attach(CarriedText('text', 'two'))


class TestTextBuffers:

    def test_own_text_joins_parts(self):
        frame = _frame('TextFrame', 'TEXT', 't')
        frame.text_parts.extend(['ab', 'c'])

        assert frame.own_text() == 'abc'

    def test_leaf_text_ignores_whitespace_around_child(self):
        from xtabml.parsers.frames import CarriedText

        frame = _frame('CellFrame', 'CELL', 'c')
        frame.text_parts.append('\n   ')
        frame.attach(CarriedText('v', '42'))

        assert frame.leaf_text() == '42'
