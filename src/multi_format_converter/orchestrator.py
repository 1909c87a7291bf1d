"""
Orchestration logic for format conversion.

Every conversion parses the source into a value (or an XML element tree),
maps between the XML tree and values where one side is XML, renders the
target text in memory, and writes it only once the whole pipeline has
succeeded.
"""

import io
import logging
import time
from pathlib import Path
from typing import IO, Any, Optional, Union

from multi_format_converter.config_models import ConversionOptions, Format
from multi_format_converter.csv_writer import value_to_csv
from multi_format_converter.exceptions import InputFileError, MalformedInputError
from multi_format_converter.models import ConversionResult, XmlElement
from multi_format_converter.parsers import csv_to_value, parse_json, parse_xml, parse_yaml, render_json
from multi_format_converter.utils import ensure_output_extension, read_bytes, read_text, write_text
from multi_format_converter.validators import validate_input_file
from multi_format_converter.xml_mapper import rows_to_element, value_to_element, xml_to_value
from multi_format_converter.xml_writer import render_xml
from multi_format_converter.yaml_writer import value_to_yaml

logger = logging.getLogger(__name__)

FormatLike = Union[Format, str]


def _decode(src: IO, options: ConversionOptions) -> str:
    try:
        return read_text(src, options.encoding)
    except UnicodeDecodeError as e:
        raise MalformedInputError(f"input is not valid {options.encoding} text: {e.reason}") from e


def xml_document_value(root: XmlElement) -> dict:
    """Value of a whole XML document: the mapped root keyed by its tag."""
    return {root.tag: xml_to_value(root)}


def xml_document_rows(root: XmlElement) -> Any:
    """Table view of an XML document.

    Homogeneous repeated children of the root are the rows; otherwise the
    mapped root itself is the single row.
    """
    value = xml_to_value(root)
    return value if isinstance(value, list) else [value]


def _read(src: IO, source: Format, target: Format, options: ConversionOptions) -> Any:
    if source is Format.XML:
        root = parse_xml(read_bytes(src, options.encoding))
        if target is Format.CSV:
            return xml_document_rows(root)
        return xml_document_value(root)

    text = _decode(src, options)
    if source is Format.JSON:
        return parse_json(text)
    if source is Format.CSV:
        return csv_to_value(text, options.delimiter)
    return parse_yaml(text)


def _render(value: Any, source: Format, target: Format, options: ConversionOptions,
            result: ConversionResult) -> str:
    if target is Format.CSV:
        table = value_to_csv(value, options.delimiter)
        result.records = table.row_count
        result.lossy = table.lossy
        result.flattened_fields = table.flattened_fields
        return table.text
    if target is Format.XML:
        if source is Format.CSV:
            root = rows_to_element(value, options.root_tag, options.row_tag)
        else:
            root = value_to_element(value, options.root_tag)
        return render_xml(root)
    if target is Format.JSON:
        return render_json(value, options.json_indent)
    return value_to_yaml(value)


def convert(src: IO, dst: IO, source: FormatLike, target: FormatLike, **options: Any) -> ConversionResult:
    """Convert a document between two formats.

    Args:
        src: Readable stream (binary or text)
        dst: Writable stream (binary or text)
        source: Source format
        target: Target format
        **options: ConversionOptions fields (delimiter, root_tag, row_tag, encoding, json_indent)

    Returns:
        ConversionResult; ``lossy`` is set when nested values were flattened

    Raises:
        ValueError: If source and target are the same format
        ValidationError: If options are invalid
        ConversionError: If the input cannot be parsed or the value cannot be rendered
    """
    source, target = Format(source), Format(target)
    if source is target:
        raise ValueError(f"source and target format are both '{source.value}'")

    opts = ConversionOptions(**options)
    result = ConversionResult(source_format=source.value, target_format=target.value)
    logger.debug(f"Converting {source.value} -> {target.value} with {opts.model_dump()}")

    value = _read(src, source, target, opts)
    if source is Format.CSV:
        result.records = len(value)
    text = _render(value, source, target, opts, result)

    result.bytes_written = write_text(dst, text, opts.encoding)
    result.finish()
    if result.lossy:
        logger.warning(f"Lossy conversion {source.value} -> {target.value}: "
                       f"flattened {', '.join(result.flattened_fields)}")
    logger.info(f"Converted {source.value} -> {target.value} "
                f"({result.bytes_written:,} bytes in {result.duration:.2f}s)")
    return result


def json_to_csv(src: IO, dst: IO, delimiter: str = ",") -> ConversionResult:
    """Convert JSON to CSV."""
    return convert(src, dst, Format.JSON, Format.CSV, delimiter=delimiter)


def json_to_xml(src: IO, dst: IO, root_tag: str = "root") -> ConversionResult:
    """Convert JSON to XML."""
    return convert(src, dst, Format.JSON, Format.XML, root_tag=root_tag)


def json_to_yaml(src: IO, dst: IO) -> ConversionResult:
    """Convert JSON to YAML."""
    return convert(src, dst, Format.JSON, Format.YAML)


def csv_to_json(src: IO, dst: IO, delimiter: str = ",") -> ConversionResult:
    """Convert CSV to JSON."""
    return convert(src, dst, Format.CSV, Format.JSON, delimiter=delimiter)


def csv_to_xml(src: IO, dst: IO, delimiter: str = ",", root_tag: str = "root") -> ConversionResult:
    """Convert CSV to XML, one ``<row>`` per record."""
    return convert(src, dst, Format.CSV, Format.XML, delimiter=delimiter, root_tag=root_tag)


def csv_to_yaml(src: IO, dst: IO, delimiter: str = ",") -> ConversionResult:
    """Convert CSV to YAML."""
    return convert(src, dst, Format.CSV, Format.YAML, delimiter=delimiter)


def xml_to_json(src: IO, dst: IO) -> ConversionResult:
    """Convert XML to JSON."""
    return convert(src, dst, Format.XML, Format.JSON)


def xml_to_csv(src: IO, dst: IO, delimiter: str = ",") -> ConversionResult:
    """Convert XML to CSV."""
    return convert(src, dst, Format.XML, Format.CSV, delimiter=delimiter)


def xml_to_yaml(src: IO, dst: IO) -> ConversionResult:
    """Convert XML to YAML."""
    return convert(src, dst, Format.XML, Format.YAML)


def yaml_to_json(src: IO, dst: IO) -> ConversionResult:
    """Convert YAML to JSON."""
    return convert(src, dst, Format.YAML, Format.JSON)


def yaml_to_csv(src: IO, dst: IO, delimiter: str = ",") -> ConversionResult:
    """Convert YAML to CSV."""
    return convert(src, dst, Format.YAML, Format.CSV, delimiter=delimiter)


def yaml_to_xml(src: IO, dst: IO, root_tag: str = "root") -> ConversionResult:
    """Convert YAML to XML."""
    return convert(src, dst, Format.YAML, Format.XML, root_tag=root_tag)


def _resolve_format(fmt: Optional[FormatLike], path: Path, role: str) -> Format:
    if fmt is not None:
        return Format(fmt)
    inferred = Format.from_extension(path.name)
    if inferred is None:
        raise ValueError(f"cannot infer {role} format from '{path.name}', specify it explicitly")
    return inferred


def convert_file(
    input_path: Path,
    output_path: Path,
    source: Optional[FormatLike] = None,
    target: Optional[FormatLike] = None,
    **options: Any
) -> ConversionResult:
    """Convert a file, writing the output file only on success.

    Formats default to the ones implied by the file extensions. The output
    extension is corrected to match the target format.

    Args:
        input_path: Source file
        output_path: Destination file
        source: Source format (inferred from input_path when omitted)
        target: Target format (inferred from output_path when omitted)
        **options: ConversionOptions fields

    Returns:
        ConversionResult with source_path and dest_path set

    Raises:
        InputFileError: If the input file fails pre-validation
        ValueError: If a format cannot be determined
        ConversionError: If the conversion itself fails
    """
    start = time.time()
    input_path = Path(input_path)
    source_format = _resolve_format(source, input_path, "source")
    target_format = _resolve_format(target, Path(output_path), "target")
    output_path = ensure_output_extension(output_path, target_format)

    errors = validate_input_file(
        input_path,
        source_format,
        delimiter=options.get("delimiter", ","),
        encoding=options.get("encoding", "utf-8"),
    )
    if errors:
        raise InputFileError(f"{input_path}: {'; '.join(errors)}")

    logger.info(f"Processing: {input_path.name} ({source_format.value}) -> {output_path.name}")
    buffer = io.BytesIO()
    with open(input_path, "rb") as src:
        result = convert(src, buffer, source_format, target_format, **options)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(buffer.getvalue())

    result.source_path = input_path
    result.dest_path = output_path
    logger.info(f"✅ Completed {input_path.name} in {time.time() - start:.2f}s")
    return result
