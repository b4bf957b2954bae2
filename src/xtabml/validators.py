"""
Reusable field validators for the XtabML Pydantic models.

Designed to be attached with @field_validator so that hand-built models and
parsed models go through the same checks.
"""

from typing import Optional


AXES = ('r', 'c')


def validate_axis(axis: str) -> str:
    """
    Validate an edge axis code.

    Args:
        axis: Axis code from the <edge axis="..."> attribute

    Returns:
        The validated axis (unchanged if valid)

    Raises:
        ValueError: If axis is not 'r' (rows) or 'c' (columns)

    Example:
        >>> validate_axis('r')
        'r'
        >>> validate_axis('x')  # Raises ValueError
    """
    if axis not in AXES:
        raise ValueError(
            f"Edge axis must be one of {list(AXES)}, got: '{axis}'"
        )
    return axis


def validate_required_text(value: str) -> str:
    """
    Validate that a required text field is not blank.

    Used for table titles and element labels, which identify rows and
    columns and cannot be recovered when empty.

    Raises:
        ValueError: If value is empty or whitespace-only
    """
    if not value or value.isspace():
        raise ValueError("Value must be a non-empty string")
    return value


def normalize_optional_text(value: Optional[str]) -> Optional[str]:
    """Collapse empty optional metadata (e.g. user="") to None."""
    if value is None:
        return None
    value = value.strip()
    return value or None
