"""Tests for dynamic version management.

``translation_bridge.__version__`` is resolved from the installed package
metadata, so the value surfaced by the package attribute, the OpenAPI
schema and the root endpoint must all agree with ``pyproject.toml``.
"""

from __future__ import annotations

import re
import tomllib
from pathlib import Path

import pytest

import translation_bridge

_SEMVER_RE = re.compile(r"^\d+\.\d+\.\d+(-[A-Za-z0-9]+(\.[A-Za-z0-9]+)*)?$")

_PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"


@pytest.mark.unit
class TestVersionAttribute:
    def test_version_is_a_non_empty_string(self) -> None:
        assert isinstance(translation_bridge.__version__, str)
        assert translation_bridge.__version__

    def test_version_matches_semver(self) -> None:
        assert _SEMVER_RE.match(translation_bridge.__version__)

    def test_version_matches_pyproject(self) -> None:
        with _PYPROJECT.open("rb") as fh:
            declared = tomllib.load(fh)["project"]["version"]
        assert translation_bridge.__version__ in (declared, "0.0.0-dev")
