"""Pytest configuration for tests.

No sys.path hacks - tests should import from the installed system_info package.
"""

import json
from pathlib import Path

import pytest

FIXTURES = Path(__file__).resolve().parent.parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture
def load_fixture():
    """Load a fixture file as (text, parsed JSON)."""
    def _load(relpath: str):
        text = (FIXTURES / relpath).read_text(encoding="utf-8")
        return text, json.loads(text)
    return _load
