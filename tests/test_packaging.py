"""Tests for the package metadata.

Covers:
- runtime dependencies and the console script
- long description not taken from a design document
"""

import tomllib
from pathlib import Path

PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"


def _project():
    with PYPROJECT.open("rb") as handle:
        return tomllib.load(handle)["project"]


def test_runtime_dependencies_and_entry_point():
    project = _project()
    names = {dep.split(">")[0].split("=")[0] for dep in project["dependencies"]}

    assert {"customtkinter", "supabase", "pydantic", "pydantic-settings", "pycryptodome"} <= names
    assert project["scripts"]["issuelane"] == "main:run"


def test_no_design_document_as_readme():
    assert _project().get("readme") not in {"SPEC_FULL.md", "DESIGN.md", "spec.md"}
