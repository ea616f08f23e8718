"""Domain layer: errors, schemas and constants."""

from .errors import EditorError, ErrorCodes
from .schemas import (
    PageSize,
    Template,
    Variable,
    VariableFormat,
)

__all__ = [
    "EditorError",
    "ErrorCodes",
    "PageSize",
    "Template",
    "Variable",
    "VariableFormat",
]
