"""
Root document model.

A Document owns every table it contains and is never mutated after parsing,
so it may be shared freely between threads.
"""

from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

from xtabml.models.table import Control, Table


class Language(BaseModel):
    """Language declared for alternative texts (<language lang="en">)."""

    lang: str
    base: Optional[str] = None
    description: str = ""

    model_config = {"frozen": True}


class ControlType(BaseModel):
    """Document-level definition of a control kind (<controltype>)."""

    name: str
    status: Optional[str] = None
    text: str = ""

    model_config = {"frozen": True}


class StatisticType(BaseModel):
    """Document-level definition of a statistic (<statistictype>)."""

    name: str
    text: str = ""

    model_config = {"frozen": True}


class Document(BaseModel):
    """
    A parsed XtabML document.

    Attributes:
        version: XtabML version (e.g. '1.1')
        date, time, origin, user: Optional export metadata
        languages: Declared languages
        control_types: Declared control kinds
        statistic_types: Declared statistic kinds
        controls: Document-level controls (e.g. project)
        tables: Tables in document order

    Example:
        >>> doc = parse('survey.xte')
        >>> len(doc.tables)
        4
        >>> doc.tables[0].title
        'q4: Age'
    """

    version: str = Field(..., examples=["1.1"])
    date: Optional[str] = None
    time: Optional[str] = None
    origin: Optional[str] = None
    user: Optional[str] = None

    languages: Tuple[Language, ...] = Field(default_factory=tuple)
    control_types: Tuple[ControlType, ...] = Field(default_factory=tuple)
    statistic_types: Tuple[StatisticType, ...] = Field(default_factory=tuple)
    controls: Tuple[Control, ...] = Field(default_factory=tuple)
    tables: Tuple[Table, ...] = Field(default_factory=tuple)

    model_config = {"frozen": True}

    def get_table(self, name: str) -> Optional[Table]:
        """Table with the given name (identifier), or None."""
        for table in self.tables:
            if table.name == name:
                return table
        return None

    def find_tables(self, title_fragment: str) -> List[Table]:
        """Tables whose title contains title_fragment (case-insensitive)."""
        needle = title_fragment.lower()
        return [t for t in self.tables if needle in t.title.lower()]

    def __repr__(self) -> str:
        return f"Document(version='{self.version}', tables={len(self.tables)})"
