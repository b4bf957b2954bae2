"""
Edge, group and element models.

An Edge is one dimension of a table (rows or columns). Its label list is the
depth-first, document-order sequence of Element labels across its groups.
Nested groups are flattened in place: a group's children (elements and
sub-groups) keep the order they had in the document.
"""

from typing import Iterator, List, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator

from xtabml.validators import validate_axis, validate_required_text


class Element(BaseModel):
    """
    Leaf label of an edge (one row or column heading).

    Attributes:
        label: Heading text (e.g. '16-19 yrs')
        code: Optional category code from the 'code' attribute
    """

    label: str = Field(..., examples=["15 and under", "NET"])
    code: Optional[str] = Field(default=None, examples=["1"])

    model_config = {"frozen": True}

    @field_validator('label')
    @classmethod
    def check_label(cls, value: str) -> str:
        return validate_required_text(value)


class Summary(BaseModel):
    """Summary heading of a group (e.g. 'Mean'). Not part of the label list."""

    label: str

    model_config = {"frozen": True}


class Group(BaseModel):
    """
    Ordered container of elements and, in nested-dimension documents, of
    further groups.

    Example:
        >>> g = Group(label='Age', children=(Element(label='Young'),))
        >>> [e.label for e in g.iter_elements()]
        ['Young']
    """

    label: Optional[str] = None
    children: Tuple[Union[Element, 'Group'], ...] = Field(default_factory=tuple)
    summaries: Tuple[Summary, ...] = Field(default_factory=tuple)

    model_config = {"frozen": True}

    @property
    def elements(self) -> List[Element]:
        """Direct child elements."""
        return [c for c in self.children if isinstance(c, Element)]

    @property
    def groups(self) -> List['Group']:
        """Direct nested groups."""
        return [c for c in self.children if isinstance(c, Group)]

    def iter_elements(self) -> Iterator[Element]:
        """Depth-first walk over all elements, nested groups included."""
        for child in self.children:
            if isinstance(child, Group):
                yield from child.iter_elements()
            else:
                yield child


Group.model_rebuild()


class Edge(BaseModel):
    """
    One dimension of a table.

    Attributes:
        axis: 'r' for the row edge, 'c' for the column edge
        groups: Ordered groups; their order defines label order
    """

    axis: str = Field(..., examples=["r", "c"])
    groups: Tuple[Group, ...] = Field(default_factory=tuple)

    model_config = {"frozen": True}

    @field_validator('axis')
    @classmethod
    def check_axis(cls, value: str) -> str:
        return validate_axis(value)

    def iter_elements(self) -> Iterator[Element]:
        for group in self.groups:
            yield from group.iter_elements()

    def labels(self) -> List[str]:
        return [element.label for element in self.iter_elements()]
