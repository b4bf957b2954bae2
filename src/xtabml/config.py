"""
Configuration management using Pydantic Settings.

Provides type-safe access to:
- Parser runtime settings (environment variables / .env, prefix XTABML_)
- The XtabML element grammar, loaded from grammar.yaml
"""

from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from xtabml.exceptions import MissingElementError


DEFAULT_GRAMMAR_PATH = Path(__file__).parent / 'grammar.yaml'


class ParserSettings(BaseSettings):
    """
    Parser runtime settings loaded from environment variables.

    Environment Variables (from .env):
        XTABML_CHUNK_SIZE: Bytes read from the source per lexer feed
        XTABML_HUGE_TREE: Lift lxml's safety limits on very deep/large trees
        XTABML_ENCODING: Override the document's declared encoding
        XTABML_GRAMMAR_PATH: Alternative grammar YAML file

    Example:
        >>> settings = get_settings()
        >>> settings.chunk_size
        65536
    """

    chunk_size: int = Field(
        default=64 * 1024,
        gt=0,
        description="Bytes read from the source per lexer feed"
    )

    huge_tree: bool = Field(
        default=False,
        description="Disable lxml security restrictions for very large documents"
    )

    encoding: Optional[str] = Field(
        default=None,
        description="Override the encoding declared by the document"
    )

    grammar_path: Optional[Path] = Field(
        default=None,
        description="Grammar YAML file (defaults to the packaged grammar.yaml)"
    )

    model_config = SettingsConfigDict(
        env_prefix='XTABML_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore'
    )


# Singleton pattern - loaded once, cached forever
_settings: Optional[ParserSettings] = None


def get_settings() -> ParserSettings:
    """
    Get global parser settings (lazy-loaded singleton).

    Returns:
        Singleton ParserSettings instance
    """
    global _settings
    if _settings is None:
        _settings = ParserSettings()
    return _settings


class FrameKind(str, Enum):
    """Kind of parse frame pushed for an element."""

    DOCUMENT = 'document'
    META = 'meta'
    LANGUAGE = 'language'
    CONTROL_TYPE = 'control_type'
    STATISTIC_TYPE = 'statistic_type'
    CONTROL = 'control'
    TABLE = 'table'
    TEXT = 'text'
    EDGE = 'edge'
    GROUP = 'group'
    ELEMENT = 'element'
    SUMMARY = 'summary'
    STATISTIC = 'statistic'
    DATA = 'data'
    ROW = 'row'
    CELL = 'cell'
    MISSING = 'missing'


class ElementRule(BaseModel):
    """
    Grammar rule for one element name.

    Attributes:
        frame: Frame kind pushed for the element
        parents: Legal parent element names (empty for the root)
        required: Attributes that must be present
        optional: Attributes read when present
        aliases: Alternative attribute name -> canonical name
        text: Whether character data is meaningful inside the element
    """

    frame: FrameKind
    parents: List[str] = Field(default_factory=list)
    required: List[str] = Field(default_factory=list)
    optional: List[str] = Field(default_factory=list)
    aliases: Dict[str, str] = Field(default_factory=dict)
    text: bool = False

    model_config = {"frozen": True}

    @property
    def is_root(self) -> bool:
        return not self.parents

    def allows_parent(self, parent: Optional[str]) -> bool:
        if parent is None:
            return self.is_root
        return parent in self.parents

    def resolve_attributes(self, attrs: Dict[str, str], path: str) -> Dict[str, str]:
        """
        Map raw attributes to the canonical names this rule knows.

        Aliases are applied first; a canonical name given directly wins over
        its alias. Unknown attributes are dropped.

        Raises:
            MissingElementError: If a required attribute is absent
        """
        resolved: Dict[str, str] = {}
        for alias, canonical in self.aliases.items():
            if alias in attrs:
                resolved[canonical] = attrs[alias]

        for name in self.required + self.optional:
            if name in attrs:
                resolved[name] = attrs[name]

        for name in self.required:
            if name not in resolved:
                raise MissingElementError(name, path=path)

        return resolved


class Grammar(BaseModel):
    """
    XtabML element grammar: element name -> ElementRule.

    The single source of truth for nesting and attribute checks; the parser
    consults it on both start and end tags.
    """

    elements: Dict[str, ElementRule]

    model_config = {"frozen": True}

    @model_validator(mode='after')
    def check_single_root(self) -> 'Grammar':
        roots = [name for name, rule in self.elements.items() if rule.is_root]
        if len(roots) != 1:
            raise ValueError(f"Grammar must define exactly one root element, found: {roots}")
        unknown = {
            parent
            for rule in self.elements.values()
            for parent in rule.parents
            if parent not in self.elements
        }
        if unknown:
            raise ValueError(f"Grammar references undefined parent elements: {sorted(unknown)}")
        return self

    @property
    def root(self) -> str:
        return next(name for name, rule in self.elements.items() if rule.is_root)

    def rule_for(self, tag: str) -> Optional[ElementRule]:
        return self.elements.get(tag)


def load_grammar(path: Optional[Path] = None) -> Grammar:
    """
    Load a grammar YAML file.

    Args:
        path: Grammar file; defaults to the packaged grammar.yaml

    Raises:
        FileNotFoundError: If the file does not exist
    """
    grammar_path = Path(path) if path is not None else DEFAULT_GRAMMAR_PATH

    if not grammar_path.exists():
        raise FileNotFoundError(
            f"Grammar file not found at {grammar_path}."
        )

    with open(grammar_path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)

    return Grammar(**data)


_grammar: Optional[Grammar] = None


def get_grammar() -> Grammar:
    """
    Get the grammar named by the settings (lazy-loaded, cached).

    Example:
        >>> get_grammar().rule_for('table').frame
        <FrameKind.TABLE: 'table'>
    """
    global _grammar
    if _grammar is None:
        _grammar = load_grammar(get_settings().grammar_path)
    return _grammar
