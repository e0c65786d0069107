"""Test public API surface - ensure imports work correctly and no side effects.

This test verifies:
- system_info exposes the read functions and result types
- Functions work on tiny fixtures
- Importing submodules does not shadow function exports
"""

from pathlib import Path

import system_info

HERE = Path(__file__).resolve().parent
FIXTURES = HERE.parent / "fixtures"


def test_package_exports():
    for name in system_info.__all__:
        assert hasattr(system_info, name), f"system_info.{name} is missing"

    assert callable(system_info.read_system_info)
    assert callable(system_info.load_system_info)
    assert callable(system_info.extract_system_json)
    assert callable(system_info.read_system_info_chunk)


def test_version_string():
    assert isinstance(system_info.__version__, str)
    assert system_info.__version__


def test_api_functions_work_on_fixtures():
    from system_info import ReadResult, SystemInfo

    result = system_info.load_system_info(FIXTURES / "system_info" / "v2_chunk.json")
    assert isinstance(result, ReadResult)
    assert isinstance(result.record, SystemInfo)
    assert result.ok is True


def test_no_module_shadowing():
    from system_info import read_system_info as read_func
    import system_info.kernel.decoder  # noqa: F401

    assert system_info.read_system_info is read_func


def test_read_result_is_a_model():
    result = system_info.read_system_info("{not json")
    dumped = result.model_dump(mode="json")

    assert dumped["ok"] is False
    assert dumped["code"] == "PARSE_ERROR"
    assert dumped["record"]["gpus"] == []
