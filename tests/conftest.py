"""Pytest configuration and shared fixtures."""

import json
from pathlib import Path

import pytest

USERS = [
    {"id": 1, "name": "Alice", "active": True},
    {"id": 2, "name": "Bob", "active": False},
]


@pytest.fixture
def users() -> list:
    """Return a fresh copy of the sample user records."""
    return [dict(user) for user in USERS]


@pytest.fixture
def sample_json_file(tmp_path) -> Path:
    """Create a sample JSON file for testing."""
    json_file = tmp_path / "users.json"
    json_file.write_text(json.dumps(USERS))
    return json_file


@pytest.fixture
def sample_csv_file(tmp_path) -> Path:
    """Create a sample CSV file for testing."""
    csv_content = """id,name,active
1,Alice,true
2,Bob,false
"""
    csv_file = tmp_path / "users.csv"
    csv_file.write_text(csv_content)
    return csv_file


@pytest.fixture
def sample_xml_file(tmp_path) -> Path:
    """Create a sample XML file for testing."""
    xml_content = """<?xml version="1.0" encoding="UTF-8"?>
<users xmlns="http://example.com">
    <user>
        <id>1</id>
        <name>Alice</name>
        <active>true</active>
    </user>
    <user>
        <id>2</id>
        <name>Bob</name>
        <active>false</active>
    </user>
</users>
"""
    xml_file = tmp_path / "users.xml"
    xml_file.write_text(xml_content)
    return xml_file


@pytest.fixture
def sample_yaml_file(tmp_path) -> Path:
    """Create a sample YAML file for testing."""
    yaml_content = """# sample users
- id: 1
  name: "Alice"
  active: true
- id: 2
  name: "Bob"
  active: false
"""
    yaml_file = tmp_path / "users.yaml"
    yaml_file.write_text(yaml_content)
    return yaml_file


@pytest.fixture
def output_dir(tmp_path) -> Path:
    """Directory for conversion outputs."""
    out = tmp_path / "out"
    out.mkdir()
    return out
