"""
Stream and file-name helpers for the multi-format converter.

Entry points accept either binary or text streams; these helpers hide the
difference from the parsers and writers.
"""

import io
from pathlib import Path
from typing import IO, Union

from multi_format_converter.config_models import Format


def read_text(stream: IO, encoding: str = "utf-8") -> str:
    """Read a whole stream as text, dropping a UTF-8 byte order mark."""
    data = stream.read()
    if isinstance(data, bytes):
        if encoding.lower().replace("_", "-") in ("utf-8", "utf8"):
            encoding = "utf-8-sig"
        return data.decode(encoding)
    return data.lstrip("\ufeff")


def read_bytes(stream: IO, encoding: str = "utf-8") -> bytes:
    """Read a whole stream as bytes."""
    data = stream.read()
    if isinstance(data, str):
        return data.encode(encoding)
    return data


def write_text(stream: IO, text: str, encoding: str = "utf-8") -> int:
    """Write text to a binary or text stream.

    Returns:
        Number of bytes written
    """
    payload = text.encode(encoding)
    if isinstance(stream, io.TextIOBase):
        stream.write(text)
    else:
        stream.write(payload)
    return len(payload)


def ensure_output_extension(filename: Union[str, Path], fmt: Format) -> Path:
    """Replace the extension of filename when it does not match fmt.

    ``out.txt`` becomes ``out.csv`` for CSV output; ``data.yml`` is accepted
    for YAML output.

    Args:
        filename: Requested output path
        fmt: Target format

    Returns:
        Path with a matching extension
    """
    path = Path(str(filename).strip())
    if Format.from_extension(path.name) is fmt:
        return path
    return path.with_suffix(f".{fmt.extension}")
