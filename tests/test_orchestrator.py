"""End-to-end tests for the conversion entry points."""

import io
import json
import logging

import pytest
from pydantic import ValidationError

from multi_format_converter import orchestrator
from multi_format_converter.config_models import Format
from multi_format_converter.exceptions import (
    InputFileError,
    InvalidYamlSyntaxError,
    MalformedInputError,
    MismatchedTagError,
    UnbalancedStructureError,
    UnsupportedShapeError,
)
from multi_format_converter.orchestrator import (
    convert,
    convert_file,
    csv_to_json,
    csv_to_xml,
    csv_to_yaml,
    json_to_csv,
    json_to_xml,
    json_to_yaml,
    xml_to_csv,
    xml_to_json,
    xml_to_yaml,
    yaml_to_csv,
    yaml_to_json,
    yaml_to_xml,
)
from multi_format_converter.parsers.yaml_parser import parse_yaml

USERS_JSON = b'[{"id":1,"name":"Alice","active":true},{"id":2,"name":"Bob","active":false}]'
USERS_CSV = b"id,name\n1,Alice\n2,Bob"
USERS_XML = b"<users><user><id>1</id><name>Alice</name></user><user><id>2</id><name>Bob</name></user></users>"
USERS_YAML = b'- id: 1\n  name: "Alice"\n- id: 2\n  name: "Bob"\n'


def run(func, data: bytes, **kwargs):
    """Run an entry point over in-memory streams."""
    dst = io.BytesIO()
    result = func(io.BytesIO(data), dst, **kwargs)
    return result, dst.getvalue().decode("utf-8")


class TestExamples:
    """Worked examples for each conversion family."""

    def test_json_to_csv(self):
        result, out = run(json_to_csv, USERS_JSON, delimiter=",")
        assert out == "active,id,name\ntrue,1,Alice\nfalse,2,Bob\n"
        assert result.records == 2
        assert not result.lossy

    def test_csv_to_yaml(self):
        _, out = run(csv_to_yaml, USERS_CSV, delimiter=",")
        assert out == '-\n  id: 1\n  name: "Alice"\n-\n  id: 2\n  name: "Bob"\n'
        assert parse_yaml(out) == [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}]

    def test_xml_to_json(self):
        _, out = run(xml_to_json, b"<rows><row><id>1</id></row><row><id>2</id></row></rows>")
        assert json.loads(out) == {"rows": [{"id": 1}, {"id": 2}]}

    def test_mismatched_xml_writes_nothing(self):
        dst = io.BytesIO()
        with pytest.raises(UnbalancedStructureError) as exc_info:
            xml_to_json(io.BytesIO(b"<a><b></a>"), dst)
        assert isinstance(exc_info.value, MismatchedTagError)
        assert dst.getvalue() == b""

    def test_invalid_yaml_line(self):
        dst = io.BytesIO()
        with pytest.raises(MalformedInputError) as exc_info:
            yaml_to_json(io.BytesIO(b"name: x\n  not a pair\n"), dst)
        assert isinstance(exc_info.value, InvalidYamlSyntaxError)
        assert exc_info.value.line == 2
        assert dst.getvalue() == b""


class TestEntryPoints:
    """Each of the twelve entry points produces the expected document."""

    def test_json_to_xml(self):
        _, out = run(json_to_xml, b'{"name": "Alice", "tags": ["a", "b"]}', root_tag="user")
        assert out == (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            "<user>\n"
            "  <name>Alice</name>\n"
            "  <tags>a</tags>\n"
            "  <tags>b</tags>\n"
            "</user>\n"
        )

    def test_json_to_xml_top_level_list(self):
        _, out = run(json_to_xml, b"[1, 2]")
        assert "<root>\n  <root>1</root>\n  <root>2</root>\n</root>\n" in out

    def test_json_to_yaml(self):
        _, out = run(json_to_yaml, b'{"b": [1, 2], "a": {"c": null}}')
        assert out == "a:\n  c: null\nb:\n  - 1\n  - 2\n"

    def test_csv_to_json(self):
        _, out = run(csv_to_json, b"id;ok\n1;true\n", delimiter=";")
        assert json.loads(out) == [{"id": 1, "ok": True}]
        assert out.endswith("\n")

    def test_csv_to_xml(self):
        result, out = run(csv_to_xml, USERS_CSV, root_tag="users")
        assert out == (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            "<users>\n"
            "  <row>\n"
            "    <id>1</id>\n"
            "    <name>Alice</name>\n"
            "  </row>\n"
            "  <row>\n"
            "    <id>2</id>\n"
            "    <name>Bob</name>\n"
            "  </row>\n"
            "</users>\n"
        )
        assert result.records == 2

    def test_xml_to_csv_repeated_rows(self):
        result, out = run(xml_to_csv, USERS_XML)
        assert out == "id,name\n1,Alice\n2,Bob\n"
        assert result.records == 2

    def test_xml_to_csv_single_record(self):
        _, out = run(xml_to_csv, b"<config><port>80</port><host>x</host></config>", delimiter="|")
        assert out == "host|port\nx|80\n"

    def test_xml_to_yaml(self):
        _, out = run(xml_to_yaml, USERS_XML)
        assert out == (
            "users:\n"
            "  -\n"
            "    id: 1\n"
            '    name: "Alice"\n'
            "  -\n"
            "    id: 2\n"
            '    name: "Bob"\n'
        )

    def test_yaml_to_json(self):
        _, out = run(yaml_to_json, USERS_YAML)
        assert json.loads(out) == [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}]

    def test_yaml_to_csv(self):
        _, out = run(yaml_to_csv, USERS_YAML, delimiter="\t")
        assert out == "id\tname\n1\tAlice\n2\tBob\n"

    def test_yaml_to_xml(self):
        _, out = run(yaml_to_xml, b"server:\n  port: 80\n", root_tag="config")
        assert out.endswith("<config>\n  <server>\n    <port>80</port>\n  </server>\n</config>\n")


class TestProperties:
    """Cross-format properties."""

    def test_json_xml_round_trip_preserves_leaves(self):
        data = {"a": 1, "b": [1.5, 2], "c": {"d": "x", "e": True}}
        _, xml_text = run(json_to_xml, json.dumps(data).encode())
        _, json_text = run(xml_to_json, xml_text.encode())
        assert json.loads(json_text) == {"root": data}

    def test_json_xml_round_trip_shape_asymmetry(self):
        """A lone repeated key collapses into the wrapper on the way back."""
        _, xml_text = run(json_to_xml, b'{"items": [1, 2]}')
        _, json_text = run(xml_to_json, xml_text.encode())
        assert json.loads(json_text) == {"root": [1, 2]}

    def test_csv_header_independent_of_row_order(self):
        _, first = run(json_to_csv, b'[{"b": 1, "c": 2}, {"a": 3}]')
        _, second = run(json_to_csv, b'[{"a": 3}, {"c": 2, "b": 1}]')
        assert first.splitlines()[0] == second.splitlines()[0] == "a,b,c"

    def test_lossy_flattening_is_reported(self, caplog):
        with caplog.at_level(logging.WARNING):
            result, out = run(json_to_csv, b'{"user": {"name": "John", "email": "john@example.com"}}')
        assert out == "user\njohn@example.com | John\n"
        assert result.lossy
        assert result.flattened_fields == ["user"]
        assert any("Lossy conversion" in r.message for r in caplog.records)


class TestConvert:
    """Generic dispatcher behaviour."""

    def test_text_streams(self):
        dst = io.StringIO()
        result = convert(io.StringIO('{"a": "é"}'), dst, "json", "yaml")
        assert dst.getvalue() == 'a: "é"\n'
        assert result.bytes_written == len('a: "é"\n'.encode("utf-8"))
        assert result.source_format == "json"
        assert result.target_format == "yaml"
        assert result.end_time is not None

    def test_text_stream_xml_source(self):
        dst = io.StringIO()
        convert(io.StringIO("<a><b>1</b></a>"), dst, Format.XML, Format.JSON)
        assert json.loads(dst.getvalue()) == {"a": {"b": 1}}

    def test_utf8_bom_is_ignored(self):
        _, out = run(json_to_yaml, b'\xef\xbb\xbf{"a": 1}')
        assert out == "a: 1\n"

    def test_undecodable_input(self):
        with pytest.raises(MalformedInputError):
            run(json_to_yaml, b'{"a": "caf\xe9"}')

    def test_same_format_rejected(self):
        with pytest.raises(ValueError):
            convert(io.BytesIO(b"{}"), io.BytesIO(), "json", "json")

    def test_unknown_format_rejected(self):
        with pytest.raises(ValueError):
            convert(io.BytesIO(b"{}"), io.BytesIO(), "json", "toml")

    def test_invalid_options(self):
        with pytest.raises(ValidationError):
            convert(io.BytesIO(USERS_JSON), io.BytesIO(), "json", "csv", delimiter=";;")
        with pytest.raises(ValidationError):
            convert(io.BytesIO(USERS_JSON), io.BytesIO(), "json", "xml", root_tag="1bad")
        with pytest.raises(ValidationError):
            convert(io.BytesIO(USERS_JSON), io.BytesIO(), "json", "xml", colour="blue")

    def test_scalar_document_to_csv(self):
        dst = io.BytesIO()
        with pytest.raises(UnsupportedShapeError):
            json_to_csv(io.BytesIO(b"42"), dst)
        assert dst.getvalue() == b""

    def test_invalid_map_key_for_xml(self):
        dst = io.BytesIO()
        with pytest.raises(UnsupportedShapeError):
            json_to_xml(io.BytesIO(b'{"first name": "x"}'), dst)
        assert dst.getvalue() == b""

    def test_custom_json_indent(self):
        dst = io.BytesIO()
        convert(io.BytesIO(b"a: 1\n"), dst, Format.YAML, Format.JSON, json_indent=4)
        assert dst.getvalue() == b'{\n    "a": 1\n}\n'


class TestConvertFile:
    """File-level conversion."""

    def test_convert_file_infers_formats(self, sample_json_file, output_dir):
        result = convert_file(sample_json_file, output_dir / "users.csv")
        assert result.dest_path == output_dir / "users.csv"
        assert result.source_path == sample_json_file
        assert (output_dir / "users.csv").read_text() == "active,id,name\ntrue,1,Alice\nfalse,2,Bob\n"

    def test_convert_file_fixes_extension(self, sample_csv_file, output_dir):
        result = convert_file(sample_csv_file, output_dir / "users.txt", target="yaml")
        assert result.dest_path == output_dir / "users.yaml"
        assert result.dest_path.exists()
        assert not (output_dir / "users.txt").exists()

    def test_convert_file_yml_extension(self, sample_json_file, output_dir):
        result = convert_file(sample_json_file, output_dir / "users.yml")
        assert result.dest_path == output_dir / "users.yml"
        assert parse_yaml(result.dest_path.read_text())[0]["name"] == "Alice"

    def test_convert_file_xml_sample(self, sample_xml_file, output_dir):
        convert_file(sample_xml_file, output_dir / "users.json")
        data = json.loads((output_dir / "users.json").read_text())
        assert data == {"users": [
            {"id": 1, "name": "Alice", "active": True},
            {"id": 2, "name": "Bob", "active": False},
        ]}

    def test_convert_file_creates_output_directory(self, sample_json_file, tmp_path):
        target = tmp_path / "nested" / "dir" / "users.xml"
        convert_file(sample_json_file, target, root_tag="users")
        assert target.read_text().startswith('<?xml version="1.0" encoding="UTF-8"?>\n<users>')

    def test_convert_file_missing_input(self, tmp_path, output_dir):
        with pytest.raises(InputFileError):
            convert_file(tmp_path / "missing.json", output_dir / "out.csv")
        assert list(output_dir.iterdir()) == []

    def test_convert_file_failure_leaves_no_output(self, tmp_path, output_dir):
        bad = tmp_path / "bad.yaml"
        bad.write_text("a: 1\nnot valid\n")
        with pytest.raises(InvalidYamlSyntaxError):
            convert_file(bad, output_dir / "out.json")
        assert not (output_dir / "out.json").exists()

    def test_convert_file_unknown_extension(self, tmp_path, output_dir):
        data = tmp_path / "data.txt"
        data.write_text("{}")
        with pytest.raises(ValueError):
            convert_file(data, output_dir / "out.csv")

    def test_convert_file_logs_progress(self, sample_json_file, output_dir, caplog):
        with caplog.at_level(logging.INFO, logger=orchestrator.__name__):
            convert_file(sample_json_file, output_dir / "users.yaml")
        assert any("Processing: users.json" in r.message for r in caplog.records)


def test_json_yaml_json_preserves_control_characters():
    """Strings with line breaks survive a trip through YAML."""
    source = {"note": "line1\nline2", "form": "a\x0cb", "keys": {"- dash": "#hash"}}
    _, yaml_text = run(json_to_yaml, json.dumps(source).encode())
    assert yaml_text.startswith('form: "a\\fb"\nkeys:\n  "- dash": "#hash"\nnote: "line1\\nline2"\n')
    _, json_text = run(yaml_to_json, yaml_text.encode())
    assert json.loads(json_text) == source


def test_unknown_encoding_is_an_option_error():
    with pytest.raises(ValidationError):
        convert(io.BytesIO(USERS_JSON), io.BytesIO(), "json", "yaml", encoding="no-such-codec")
