"""
Parse frames: one per currently open XML element.

Each frame kind carries only the partial state that is legal for the entity
it is building. Finished children are handed to the parent frame through
attach(), which appends them to the right ordered collection, so every
sequence in the model keeps document order.

A frame's text buffer belongs to that frame alone; it is created empty on
push and consumed by the builder on pop.
"""

from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional, Tuple, Type, Union

from xtabml.config import FrameKind
from xtabml.exceptions import InvalidStructureError
from xtabml.models import (
    Control,
    ControlType,
    DataCell,
    DataRow,
    Edge,
    Element,
    Group,
    Language,
    StatisticType,
    Summary,
    Table,
)


class CarriedText(NamedTuple):
    """Text of a <t>, <text>, <title>, <v> or metadata element, for its parent."""
    tag: str
    text: str


class StatisticDecl(NamedTuple):
    """A table's <statistic type="..."/> declaration."""
    label: str


class DataBlock(NamedTuple):
    """Rows of a finished <data> element."""
    rows: Tuple[DataRow, ...]


@dataclass
class Frame:
    kind: FrameKind
    tag: str
    path: str
    attrs: Dict[str, str]
    carries_text: bool = False
    text_parts: List[str] = field(default_factory=list)

    def own_text(self) -> str:
        return ''.join(self.text_parts)

    def attach(self, child) -> None:
        raise InvalidStructureError(
            f"<{self.tag}> cannot contain {type(child).__name__}",
            path=self.path
        )


@dataclass
class TextBearingFrame(Frame):
    """Frame whose text may arrive directly or through one text child."""

    carried: Optional[str] = None

    def attach(self, child) -> None:
        if isinstance(child, CarriedText):
            if self.carried is not None:
                raise InvalidStructureError(
                    f"<{self.tag}> has more than one <{child.tag}> text child",
                    path=self.path
                )
            self.carried = child.text
        else:
            super().attach(child)

    def leaf_text(self) -> str:
        """Text of the frame; mixing direct text with a text child is an error."""
        if self.carried is None:
            return self.own_text()
        if self.own_text().strip():
            raise InvalidStructureError(
                f"<{self.tag}> mixes direct text with a text child",
                path=self.path
            )
        return self.carried


@dataclass
class TextFrame(Frame):
    pass


@dataclass
class DocumentFrame(Frame):
    meta: Dict[str, str] = field(default_factory=dict)
    languages: List[Language] = field(default_factory=list)
    control_types: List[ControlType] = field(default_factory=list)
    statistic_types: List[StatisticType] = field(default_factory=list)
    controls: List[Control] = field(default_factory=list)
    tables: List[Table] = field(default_factory=list)

    def attach(self, child) -> None:
        if isinstance(child, Table):
            self.tables.append(child)
        elif isinstance(child, Control):
            self.controls.append(child)
        elif isinstance(child, CarriedText):
            self.meta[child.tag] = child.text
        elif isinstance(child, Language):
            self.languages.append(child)
        elif isinstance(child, ControlType):
            self.control_types.append(child)
        elif isinstance(child, StatisticType):
            self.statistic_types.append(child)
        else:
            super().attach(child)


@dataclass
class TableFrame(Frame):
    title_text: Optional[str] = None
    controls: List[Control] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    statistics: List[str] = field(default_factory=list)
    data_rows: Optional[Tuple[DataRow, ...]] = None

    def attach(self, child) -> None:
        if isinstance(child, Control):
            self.controls.append(child)
        elif isinstance(child, Edge):
            self.edges.append(child)
        elif isinstance(child, StatisticDecl):
            self.statistics.append(child.label)
        elif isinstance(child, DataBlock):
            if self.data_rows is not None:
                raise InvalidStructureError("Table has more than one <data> block", path=self.path)
            self.data_rows = child.rows
        elif isinstance(child, CarriedText):
            if self.title_text is not None:
                raise InvalidStructureError("Table has more than one title", path=self.path)
            self.title_text = child.text
        else:
            super().attach(child)


@dataclass
class EdgeFrame(Frame):
    groups: List[Group] = field(default_factory=list)

    def attach(self, child) -> None:
        if isinstance(child, Group):
            self.groups.append(child)
        else:
            super().attach(child)


@dataclass
class GroupFrame(Frame):
    label_text: Optional[str] = None
    children: List[Union[Element, Group]] = field(default_factory=list)
    summaries: List[Summary] = field(default_factory=list)

    def attach(self, child) -> None:
        if isinstance(child, (Element, Group)):
            self.children.append(child)
        elif isinstance(child, Summary):
            self.summaries.append(child)
        elif isinstance(child, CarriedText):
            if self.label_text is not None:
                raise InvalidStructureError("Group has more than one label", path=self.path)
            self.label_text = child.text
        else:
            super().attach(child)


@dataclass
class ElementFrame(TextBearingFrame):
    pass


@dataclass
class SummaryFrame(TextBearingFrame):
    pass


@dataclass
class ControlFrame(TextBearingFrame):
    pass


@dataclass
class DefinitionFrame(Frame):
    """<language>, <controltype> and <statistictype>: attributes plus text."""


@dataclass
class StatisticFrame(Frame):
    pass


@dataclass
class DataBlockFrame(Frame):
    rows: List[DataRow] = field(default_factory=list)

    def attach(self, child) -> None:
        if isinstance(child, DataRow):
            self.rows.append(child)
        else:
            super().attach(child)


@dataclass
class RowFrame(Frame):
    cells: List[DataCell] = field(default_factory=list)

    def attach(self, child) -> None:
        if isinstance(child, DataCell):
            self.cells.append(child)
        else:
            super().attach(child)


@dataclass
class CellFrame(TextBearingFrame):
    missing: bool = False

    def attach(self, child) -> None:
        if isinstance(child, DataCell) and child.is_missing:
            if self.missing:
                raise InvalidStructureError("Cell has more than one missing marker", path=self.path)
            self.missing = True
        else:
            super().attach(child)


@dataclass
class MissingFrame(Frame):
    pass


FRAME_CLASSES: Dict[FrameKind, Type[Frame]] = {
    FrameKind.DOCUMENT: DocumentFrame,
    FrameKind.META: TextFrame,
    FrameKind.LANGUAGE: DefinitionFrame,
    FrameKind.CONTROL_TYPE: DefinitionFrame,
    FrameKind.STATISTIC_TYPE: DefinitionFrame,
    FrameKind.CONTROL: ControlFrame,
    FrameKind.TABLE: TableFrame,
    FrameKind.TEXT: TextFrame,
    FrameKind.EDGE: EdgeFrame,
    FrameKind.GROUP: GroupFrame,
    FrameKind.ELEMENT: ElementFrame,
    FrameKind.SUMMARY: SummaryFrame,
    FrameKind.STATISTIC: StatisticFrame,
    FrameKind.DATA: DataBlockFrame,
    FrameKind.ROW: RowFrame,
    FrameKind.CELL: CellFrame,
    FrameKind.MISSING: MissingFrame,
}
