"""Tests for the command-line interface."""

import json
import logging

import pytest

from multi_format_converter.cli import main


def test_cli_success(sample_json_file, output_dir):
    out = output_dir / "users.csv"
    code = main(["--from", "json", "--to", "csv", "--input", str(sample_json_file), "--output", str(out)])
    assert code == 0
    assert out.read_text() == "active,id,name\ntrue,1,Alice\nfalse,2,Bob\n"


def test_cli_delimiter_and_root(sample_csv_file, output_dir):
    semi = sample_csv_file.with_name("semi.csv")
    semi.write_text(sample_csv_file.read_text().replace(",", ";"))
    out = output_dir / "users.xml"
    code = main([
        "--from", "csv", "--to", "xml",
        "--input", str(semi), "--output", str(out),
        "--delimiter", ";", "--root", "users",
    ])
    assert code == 0
    text = out.read_text()
    assert "<users>" in text
    assert text.count("<row>") == 2


def test_cli_yml_alias(sample_yaml_file, output_dir):
    out = output_dir / "users.json"
    code = main(["--from", "yml", "--to", "json", "--input", str(sample_yaml_file), "--output", str(out)])
    assert code == 0
    assert json.loads(out.read_text())[1]["name"] == "Bob"


def test_cli_fixes_output_extension(sample_xml_file, output_dir):
    code = main(["--from", "xml", "--to", "yaml", "--input", str(sample_xml_file),
                 "--output", str(output_dir / "users.out")])
    assert code == 0
    assert (output_dir / "users.yaml").exists()


def test_cli_conversion_error(tmp_path, output_dir, caplog):
    bad = tmp_path / "bad.xml"
    bad.write_text("<a><b></a>")
    with caplog.at_level(logging.ERROR):
        code = main(["--from", "xml", "--to", "json", "--input", str(bad), "--output", str(output_dir / "a.json")])
    assert code == 1
    assert not (output_dir / "a.json").exists()
    assert any(r.levelno == logging.ERROR for r in caplog.records)


def test_cli_missing_input(tmp_path, output_dir):
    code = main(["--from", "json", "--to", "csv", "--input", str(tmp_path / "nope.json"),
                 "--output", str(output_dir / "x.csv")])
    assert code == 1


def test_cli_same_format(sample_json_file, output_dir):
    code = main(["--from", "json", "--to", "json", "--input", str(sample_json_file),
                 "--output", str(output_dir / "x.json")])
    assert code == 1


def test_cli_invalid_delimiter(sample_csv_file, output_dir):
    code = main(["--from", "csv", "--to", "json", "--input", str(sample_csv_file),
                 "--output", str(output_dir / "x.json"), "--delimiter", ";;"])
    assert code == 1


def test_cli_lossy_warning(tmp_path, output_dir, caplog):
    nested = tmp_path / "nested.json"
    nested.write_text('[{"id": 1, "tags": ["a", "b"]}]')
    with caplog.at_level(logging.WARNING):
        code = main(["--from", "json", "--to", "csv", "--input", str(nested),
                     "--output", str(output_dir / "nested.csv")])
    assert code == 0
    assert any("lossy" in r.message.lower() for r in caplog.records)


def test_cli_unknown_format_exits():
    with pytest.raises(SystemExit):
        main(["--from", "toml", "--to", "json", "--input", "a", "--output", "b"])


def test_cli_requires_arguments():
    with pytest.raises(SystemExit):
        main([])
