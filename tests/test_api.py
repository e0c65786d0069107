"""Tests for the public read/extract API."""

import json

from system_info import (
    ReadStatus,
    SystemInfo,
    extract_system_json,
    load_system_info,
    read_system_info,
)
from system_info._internal.canonical_json import canonical_dumps


def test_read_enveloped_document(load_fixture):
    text, _ = load_fixture("system_info/v1_linux.json")
    result = read_system_info(text)

    assert result.ok
    assert result.code == ReadStatus.OK
    assert result.message is None
    assert result.record.version.major == 1
    assert result.record.gpus[0].name == "AMD Radeon RX 7900 XTX"


def test_read_bare_document(load_fixture):
    text, _ = load_fixture("system_info/v2_chunk.json")
    result = read_system_info(text)

    assert result.ok
    assert result.record.version.major == 2
    assert result.record.cpus[0].num_logical_cores == 192
    assert [(p.name, p.id) for p in result.record.processes] == [("trace_server", 77)]


def test_envelope_and_bare_forms_decode_identically(load_fixture):
    text, _ = load_fixture("system_info/v2_windows.json")
    bare = extract_system_json(text)

    assert read_system_info(bare).record == read_system_info(text).record


def test_load_system_info_reads_file(fixtures_dir):
    result = load_system_info(fixtures_dir / "system_info" / "v2_windows.json")
    assert result.ok
    assert result.record.os.hostname == "WORKSTATION"


def test_unsupported_version_returns_default_record(load_fixture):
    text, _ = load_fixture("system_info/v99.json")
    result = read_system_info(text)

    assert not result.ok
    assert result.code == ReadStatus.UNSUPPORTED_VERSION
    assert result.record == SystemInfo()


def test_malformed_json_is_parse_error():
    result = read_system_info("{not json")

    assert not result.ok
    assert result.code == ReadStatus.PARSE_ERROR
    assert "Failed to parse" in result.message
    assert result.record == SystemInfo()


def test_float_overflow_is_parse_error():
    result = read_system_info('{"os": {"memory": {"physical": 1e400}}}')

    assert not result.ok
    assert result.code == ReadStatus.PARSE_ERROR
    assert result.record == SystemInfo()


def test_deep_nesting_is_parse_error():
    result = read_system_info("[" * 100000 + "]" * 100000)

    assert not result.ok
    assert result.code == ReadStatus.PARSE_ERROR


def test_empty_heaps_array_decodes():
    result = read_system_info('{"gpus": [{"memory": {"heaps": []}}]}')

    assert result.ok
    assert result.record.gpus[0].memory.heaps == []


def test_wrongly_typed_field_is_parse_error(load_fixture):
    _, doc = load_fixture("system_info/v1_linux.json")
    doc["system"]["gpus"][0]["asic"]["numCus"] = "12"
    result = read_system_info(json.dumps(doc))

    assert not result.ok
    assert result.code == ReadStatus.PARSE_ERROR
    assert "numCus" in result.message
    # No partially decoded record leaks out
    assert result.record == SystemInfo()


def test_non_object_document_decodes_to_version_1_defaults():
    result = read_system_info("[]")

    assert result.ok
    assert result.record.version.major == 1
    assert result.record.cpus == []


def test_extract_strips_envelope(load_fixture):
    text, doc = load_fixture("system_info/v1_linux.json")
    extracted = extract_system_json(text)

    assert extracted == canonical_dumps(doc["system"])
    assert json.loads(extracted) == doc["system"]


def test_extract_returns_bare_document_unchanged(load_fixture):
    text, _ = load_fixture("system_info/v2_chunk.json")
    assert extract_system_json(text) == text


def test_extract_invalid_json_is_empty():
    assert extract_system_json("{not json") == ""
    assert extract_system_json("") == ""


def test_extract_rejects_unrepresentable_input():
    assert extract_system_json('{"system": {"a": 1e400}}') == ""
    assert extract_system_json("[" * 100000 + "]" * 100000) == ""
