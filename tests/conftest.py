"""Shared fixtures for package-curator tests."""

from pathlib import Path

import pytest
from click.testing import CliRunner

SNAPSHOT_YAML = """\
runs:
  - id: 1
    packages:
      - id: 10
        identifier: "Maven:com.example:example:1.0"
        declared_licenses: ["Apache-2.0"]
      - id: 11
        identifier: "NPM::which:2.0.2"
        declared_licenses: ["MIT"]
    shortest_dependency_paths:
      - package: "Maven:com.example:example:1.0"
        project_identifier: "Gradle::project:1.0"
        scope: compileClasspath
    curations:
      - id: "Maven:com.example:example:1.0"
        data:
          comment: "Verified license"
          concluded_license: "Apache-2.0"
  - id: 2
    packages:
      - id: 20
        identifier: "Maven:com.example:example:1.0"
        declared_licenses: ["Apache-2.0"]
      - id: 21
        identifier: "Maven:com.example:other:2.0"
        declared_licenses: ["Custom License"]
    curations:
      - id: "Maven:com.example:other:2.0"
        data:
          declared_license_mapping:
            "Custom License": "BSD-3-Clause"
"""


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def snapshot_file(tmp_path: Path) -> Path:
    """Provide a snapshot file with two runs sharing one package."""
    path = tmp_path / "runs.yaml"
    path.write_text(SNAPSHOT_YAML, encoding="utf-8")
    return path
