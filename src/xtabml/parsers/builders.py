"""
Finalization of parse frames into model values.

One pure function per frame kind: (attributes, own text, finished children)
-> entity. Required-field and consistency checks for finished entities live
here and nowhere else; the grammar only covers nesting and attributes.

Text handling:
- cell values are kept verbatim (a present empty string stays '')
- labels, titles, control values and metadata are whitespace-trimmed
"""

from typing import Callable, Dict

from xtabml.config import FrameKind
from xtabml.exceptions import InvalidStructureError, MissingElementError
from xtabml.models import (
    Control,
    ControlType,
    DataCell,
    DataRow,
    Document,
    Edge,
    Element,
    Group,
    Language,
    StatisticType,
    Summary,
    Table,
)
from xtabml.parsers.frames import (
    CarriedText,
    CellFrame,
    ControlFrame,
    DataBlock,
    DataBlockFrame,
    DefinitionFrame,
    DocumentFrame,
    EdgeFrame,
    ElementFrame,
    Frame,
    GroupFrame,
    MissingFrame,
    RowFrame,
    StatisticDecl,
    StatisticFrame,
    SummaryFrame,
    TableFrame,
    TextFrame,
)
from xtabml.validators import AXES, normalize_optional_text


DOCUMENT_META = ('date', 'time', 'origin', 'user')


def build_document(frame: DocumentFrame) -> Document:
    """Metadata may come from root attributes or child elements; children win."""
    meta = {
        name: normalize_optional_text(frame.meta.get(name, frame.attrs.get(name)))
        for name in DOCUMENT_META
    }
    return Document(
        version=frame.attrs['version'].strip(),
        languages=tuple(frame.languages),
        control_types=tuple(frame.control_types),
        statistic_types=tuple(frame.statistic_types),
        controls=tuple(frame.controls),
        tables=tuple(frame.tables),
        **meta,
    )


def build_text(frame: TextFrame) -> CarriedText:
    return CarriedText(frame.tag, frame.own_text())


def build_meta(frame: TextFrame) -> CarriedText:
    return CarriedText(frame.tag, frame.own_text().strip())


def build_definition(frame: DefinitionFrame):
    text = frame.own_text().strip()
    if frame.kind == FrameKind.LANGUAGE:
        return Language(lang=frame.attrs['lang'], base=frame.attrs.get('base'), description=text)
    if frame.kind == FrameKind.CONTROL_TYPE:
        return ControlType(name=frame.attrs['name'], status=frame.attrs.get('status'), text=text)
    return StatisticType(name=frame.attrs['name'], text=text)


def build_control(frame: ControlFrame) -> Control:
    """
    Control value comes from the 'value' attribute or from the text.

    Raises:
        InvalidStructureError: If both are given
    """
    text = frame.leaf_text().strip()
    if 'value' in frame.attrs:
        if text:
            raise InvalidStructureError(
                "Control has both a value attribute and text",
                path=frame.path
            )
        value = frame.attrs['value']
    else:
        value = text
    return Control(kind=frame.attrs['kind'], value=value)


def build_element(frame: ElementFrame) -> Element:
    label = frame.leaf_text().strip()
    if not label:
        raise MissingElementError('label', path=frame.path, kind='text')
    return Element(label=label, code=frame.attrs.get('code'))


def build_summary(frame: SummaryFrame) -> Summary:
    label = frame.leaf_text().strip()
    if not label:
        raise MissingElementError('label', path=frame.path, kind='text')
    return Summary(label=label)


def build_group(frame: GroupFrame) -> Group:
    label = frame.attrs.get('label')
    if label is None and frame.label_text is not None:
        label = frame.label_text
    return Group(
        label=normalize_optional_text(label),
        children=tuple(frame.children),
        summaries=tuple(frame.summaries),
    )


def build_edge(frame: EdgeFrame) -> Edge:
    axis = frame.attrs['axis'].strip()
    if axis not in AXES:
        raise InvalidStructureError(
            f"Edge axis must be one of {list(AXES)}, got: '{axis}'",
            path=frame.path
        )
    if not frame.groups:
        raise MissingElementError('group', path=frame.path, kind='element')
    return Edge(axis=axis, groups=tuple(frame.groups))


def build_statistic(frame: StatisticFrame) -> StatisticDecl:
    label = frame.attrs['type'].strip()
    if not label:
        raise MissingElementError('type', path=frame.path)
    return StatisticDecl(label)


def build_data(frame: DataBlockFrame) -> DataBlock:
    return DataBlock(tuple(frame.rows))


def build_row(frame: RowFrame) -> DataRow:
    return DataRow(cells=tuple(frame.cells))


def build_cell(frame: CellFrame) -> DataCell:
    if frame.missing:
        if frame.carried is not None or frame.own_text().strip():
            raise InvalidStructureError(
                "Cell marked missing also carries a value",
                path=frame.path
            )
        return DataCell.missing()
    return DataCell.of(frame.leaf_text())


def build_missing(frame: MissingFrame) -> DataCell:
    return DataCell.missing()


def _single_edge(frame: TableFrame, axis: str) -> Edge:
    edges = [edge for edge in frame.edges if edge.axis == axis]
    name = 'row' if axis == 'r' else 'column'
    if not edges:
        raise MissingElementError(f"edge axis='{axis}'", path=frame.path, kind='element')
    if len(edges) > 1:
        raise InvalidStructureError(
            f"Table has {len(edges)} {name} edges, expected exactly one",
            path=frame.path
        )
    return edges[0]


def build_table(frame: TableFrame) -> Table:
    """
    Assemble a table and check it against the interleaving assumption.

    Raises:
        MissingElementError: No title, missing row/column edge, or data rows
            without any statistic declaration
        InvalidStructureError: Duplicate edges, a row whose cell count differs
            from the column label count, or a <data> block whose row count does
            not equal row labels x statistics
    """
    title = frame.attrs.get('title')
    if title is None or not title.strip():
        title = frame.title_text
    if title is None or not title.strip():
        raise MissingElementError('title', path=frame.path)

    row_edge = _single_edge(frame, 'r')
    column_edge = _single_edge(frame, 'c')
    data_rows = frame.data_rows or ()

    if data_rows and not frame.statistics:
        raise MissingElementError('statistic', path=frame.path, kind='element')

    n_cols = len(column_edge.labels())
    for r, row in enumerate(data_rows):
        if len(row.cells) != n_cols:
            raise InvalidStructureError(
                f"Data row {r} has {len(row.cells)} cells, expected {n_cols} "
                f"(one per column label)",
                path=frame.path,
                context={"table": title.strip()}
            )

    table = Table(
        title=title.strip(),
        name=normalize_optional_text(frame.attrs.get('name')),
        controls=tuple(frame.controls),
        row_edge=row_edge,
        column_edge=column_edge,
        statistics=tuple(frame.statistics),
        data_rows=data_rows,
    )

    # Without a <data> block the check is left to the query methods
    if frame.data_rows is None:
        return table

    try:
        table.check_interleaving()
    except InvalidStructureError as e:
        e.path = e.path or frame.path
        raise

    return table


BUILDERS: Dict[FrameKind, Callable[[Frame], object]] = {
    FrameKind.DOCUMENT: build_document,
    FrameKind.META: build_meta,
    FrameKind.LANGUAGE: build_definition,
    FrameKind.CONTROL_TYPE: build_definition,
    FrameKind.STATISTIC_TYPE: build_definition,
    FrameKind.CONTROL: build_control,
    FrameKind.TABLE: build_table,
    FrameKind.TEXT: build_text,
    FrameKind.EDGE: build_edge,
    FrameKind.GROUP: build_group,
    FrameKind.ELEMENT: build_element,
    FrameKind.SUMMARY: build_summary,
    FrameKind.STATISTIC: build_statistic,
    FrameKind.DATA: build_data,
    FrameKind.ROW: build_row,
    FrameKind.CELL: build_cell,
    FrameKind.MISSING: build_missing,
}
