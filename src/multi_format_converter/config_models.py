"""
Pydantic models for strongly-typed conversion options.
"""

import codecs
import re
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

# XML Name production without the namespace colon
_XML_NAME_RE = re.compile(r"^[^\W\d][\w.\-]*$")


def is_valid_tag_name(name: str) -> bool:
    """Check that a string can be used as an XML element name."""
    return bool(_XML_NAME_RE.fullmatch(name))


class Format(str, Enum):
    """Supported file formats."""
    JSON = "json"
    CSV = "csv"
    XML = "xml"
    YAML = "yaml"

    @property
    def extension(self) -> str:
        return self.value

    @classmethod
    def from_extension(cls, filename: str) -> Optional["Format"]:
        """Infer the format from a file name, None when unknown."""
        suffix = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
        if suffix == "yml":
            return cls.YAML
        try:
            return cls(suffix)
        except ValueError:
            return None


class ConversionOptions(BaseModel):
    """Options shared by every conversion entry point."""
    delimiter: str = Field(",", description="CSV delimiter, used for both reading and writing")
    root_tag: str = Field("root", description="Root element name for XML output")
    row_tag: str = Field("row", description="Element name for each CSV row in XML output")
    encoding: str = Field("utf-8", description="Text encoding for input and output")
    json_indent: int = Field(2, description="Indentation for JSON output", ge=0)

    model_config = {"extra": "forbid"}

    @field_validator("delimiter")
    @classmethod
    def validate_delimiter(cls, value: str) -> str:
        """Ensure the delimiter is a single usable character."""
        if len(value) != 1:
            raise ValueError(f"delimiter must be a single character, got {value!r}")
        if value in ('"', "\r", "\n"):
            raise ValueError(f"delimiter cannot be {value!r}")
        return value

    @field_validator("root_tag", "row_tag")
    @classmethod
    def validate_tag(cls, value: str) -> str:
        """Ensure XML element names are well formed."""
        if not is_valid_tag_name(value):
            raise ValueError(f"'{value}' is not a valid XML element name")
        return value

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, value: str) -> str:
        """Ensure the encoding names a known codec."""
        try:
            codecs.lookup(value)
        except LookupError as e:
            raise ValueError(f"unknown encoding '{value}'") from e
        return value

    @classmethod
    def from_dict(cls, options: Dict[str, Any]) -> "ConversionOptions":
        """
        Create ConversionOptions from a dictionary with validation.

        Args:
            options: Option values, unknown keys are rejected

        Returns:
            Validated ConversionOptions instance

        Raises:
            ValidationError: If any option is invalid
        """
        return cls.model_validate(options)
