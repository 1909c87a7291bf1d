"""Exceptions for conversion operations."""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Categories of conversion failures."""
    MALFORMED_INPUT = "malformed_input"
    UNBALANCED_STRUCTURE = "unbalanced_structure"
    UNSUPPORTED_SHAPE = "unsupported_shape"
    LOSSY_CONVERSION = "lossy_conversion"  # advisory, reported on ConversionResult
    INPUT_FILE = "input_file"


class ConversionError(Exception):
    """Base exception for conversion operations.

    Args:
        message: Human readable description
        line: 1-based line number in the source, when known
        column: 1-based column number in the source, when known
        row: 1-based CSV record number, when known
        tag: XML tag involved, when known
    """

    kind = ErrorKind.MALFORMED_INPUT

    def __init__(self, message: str, *, line: Optional[int] = None, column: Optional[int] = None,
                 row: Optional[int] = None, tag: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column
        self.row = row
        self.tag = tag


class MalformedInputError(ConversionError):
    """Source text fails structural parsing."""


class EmptyDocumentError(MalformedInputError):
    """Source contains no document at all."""


class ColumnMismatchError(MalformedInputError):
    """CSV record field count differs from the header."""

    def __init__(self, row: int, expected: int, actual: int):
        super().__init__(
            f"CSV record {row} has {actual} fields, header has {expected}",
            row=row,
        )
        self.expected = expected
        self.actual = actual


class YamlIndentationError(MalformedInputError):
    """List item found where the enclosing container is not a list."""


class InvalidYamlSyntaxError(MalformedInputError):
    """YAML line matches neither a list item nor a key/value pair."""


class UnbalancedStructureError(ConversionError):
    """XML tags are not properly nested."""

    kind = ErrorKind.UNBALANCED_STRUCTURE


class MismatchedTagError(UnbalancedStructureError):
    """Closing tag does not match the innermost open element."""


class UnbalancedXmlError(UnbalancedStructureError):
    """Elements still open at end of input."""


class UnsupportedShapeError(ConversionError):
    """Value shape cannot be expressed in the target format."""

    kind = ErrorKind.UNSUPPORTED_SHAPE


class InputFileError(ConversionError):
    """Input file is missing, a directory, empty, or fails pre-validation."""

    kind = ErrorKind.INPUT_FILE
