"""
Exception hierarchy for XtabML parsing.

Hierarchy:
    XtabMLError (base)
    ├── MalformedXMLError      # lexer rejected the byte stream
    ├── InvalidStructureError  # well-formed XML, wrong XtabML grammar
    ├── MissingElementError    # required attribute or child absent
    └── ResourceAccessError    # source cannot be opened or read

Every error carries the element path where it was detected (when known), so
callers can report it without re-parsing:

    try:
        doc = parse("survey.xte")
    except MissingElementError as e:
        logger.error(f"Missing {e.name} at {e.path}")
"""

from typing import Any, Dict, Optional


class XtabMLError(Exception):
    """
    Base exception for all XtabML parse errors.

    Attributes:
        message: Human-readable error description.
        path: Element path such as '/xtab/table/data/r' (may be None).
        context: Additional context data for debugging.
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.path = path
        self.context = context or {}

    def __str__(self) -> str:
        parts = dict(self.context)
        if self.path:
            parts = {"path": self.path, **parts}
        if parts:
            ctx_str = ", ".join(f"{k}={v}" for k, v in parts.items())
            return f"{self.message} [{ctx_str}]"
        return self.message


class MalformedXMLError(XtabMLError):
    """
    Raised when the XML lexer reports a syntax error.

    Wraps lxml's XMLSyntaxError; line and column are copied into the context
    when the lexer provides them.
    """

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        context = {}
        if line:
            context["line"] = line
        if column:
            context["column"] = column
        super().__init__(message, context=context)
        self.line = line
        self.column = column


class InvalidStructureError(XtabMLError):
    """
    Raised when well-formed XML violates the XtabML grammar.

    Examples:
        - <element> outside a <group>
        - data row with fewer cells than column labels
        - data row count not a multiple of the statistic count
        - text where no text is expected
        - document ends with open elements
    """


class MissingElementError(XtabMLError):
    """
    Raised when a required attribute or child element is absent.

    Attributes:
        name: Name of the missing attribute or element (e.g. 'title').
    """

    def __init__(self, name: str, path: Optional[str] = None, kind: str = "attribute"):
        super().__init__(f"Missing required {kind} '{name}'", path=path)
        self.name = name
        self.kind = kind


class ResourceAccessError(XtabMLError):
    """Raised when the byte source cannot be opened or read."""

    def __init__(self, message: str, source: Optional[str] = None):
        context = {"source": source} if source else {}
        super().__init__(message, context=context)
        self.source = source
