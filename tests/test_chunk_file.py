"""Tests for chunk file access and System Info chunk reads."""

import pytest

from system_info import ChunkFile, MemoryChunkFile, ReadStatus, SystemInfo, read_system_info_chunk
from system_info.definitions import SYSTEM_INFO_CHUNK_IDENTIFIER, SYSTEM_INFO_CHUNK_VERSION
from system_info.kernel.chunk_file import ChunkNotFoundError, ChunkVersionError, read_chunk_text


class RecordingChunkFile(MemoryChunkFile):
    """MemoryChunkFile that records payload reads."""

    def __init__(self):
        super().__init__()
        self.reads = []

    def read_chunk_data(self, identifier, buffer):
        self.reads.append((identifier, len(buffer)))
        super().read_chunk_data(identifier, buffer)


def _chunk_file_with(data: bytes, version: int = SYSTEM_INFO_CHUNK_VERSION) -> RecordingChunkFile:
    chunk_file = RecordingChunkFile()
    chunk_file.add_chunk(SYSTEM_INFO_CHUNK_IDENTIFIER, data, version=version)
    return chunk_file


def test_memory_chunk_file_satisfies_protocol():
    assert isinstance(MemoryChunkFile(), ChunkFile)


def test_memory_chunk_file_unknown_chunk():
    chunk_file = MemoryChunkFile()
    assert not chunk_file.contains_chunk("Missing")
    with pytest.raises(ChunkNotFoundError):
        chunk_file.get_chunk_version("Missing")
    with pytest.raises(ChunkNotFoundError):
        chunk_file.get_chunk_data_size("Missing")


def test_read_system_info_chunk(fixtures_dir):
    data = (fixtures_dir / "system_info" / "v2_chunk.json").read_bytes()
    chunk_file = _chunk_file_with(data)

    result = read_system_info_chunk(chunk_file)

    assert result.ok
    assert result.record.version.major == 2
    assert result.record.cpus[0].name == "AMD EPYC 9654 96-Core Processor"
    assert result.record.processes[0].path == "/opt/rdp/trace_server"
    # One extra byte for the NUL terminator
    assert chunk_file.reads == [(SYSTEM_INFO_CHUNK_IDENTIFIER, len(data) + 1)]


def test_missing_chunk():
    chunk_file = RecordingChunkFile()
    chunk_file.add_chunk("DriverOverrides", b"{}", version=3)

    result = read_system_info_chunk(chunk_file)

    assert not result.ok
    assert result.code == ReadStatus.CHUNK_NOT_FOUND
    assert result.record == SystemInfo()
    assert chunk_file.reads == []


def test_newer_chunk_version_is_not_read():
    chunk_file = _chunk_file_with(b'{"version": {"major": 2}}', version=SYSTEM_INFO_CHUNK_VERSION + 1)

    result = read_system_info_chunk(chunk_file)

    assert not result.ok
    assert result.code == ReadStatus.UNSUPPORTED_CHUNK_VERSION
    assert result.record == SystemInfo()
    assert chunk_file.reads == []


def test_chunk_with_unsupported_document_version():
    chunk_file = _chunk_file_with(b'{"version": {"major": 99}}')

    result = read_system_info_chunk(chunk_file)

    assert not result.ok
    assert result.code == ReadStatus.UNSUPPORTED_VERSION


def test_chunk_with_malformed_payload():
    chunk_file = _chunk_file_with(b'{"version": ')

    result = read_system_info_chunk(chunk_file)

    assert not result.ok
    assert result.code == ReadStatus.PARSE_ERROR


def test_read_chunk_text_stops_at_nul():
    chunk_file = MemoryChunkFile()
    chunk_file.add_chunk("Text", b'{"a": 1}\x00trailing garbage')

    assert read_chunk_text(chunk_file, "Text", max_version=1) == '{"a": 1}'


def test_read_chunk_text_empty_chunk():
    chunk_file = MemoryChunkFile()
    chunk_file.add_chunk("Text", b"")

    assert read_chunk_text(chunk_file, "Text", max_version=1) == ""


def test_read_chunk_text_version_range():
    chunk_file = MemoryChunkFile()
    chunk_file.add_chunk("Text", b"x", version=1)

    with pytest.raises(ChunkVersionError) as excinfo:
        read_chunk_text(chunk_file, "Text", max_version=3, min_version=2)
    assert excinfo.value.version == 1
    assert (excinfo.value.min_version, excinfo.value.max_version) == (2, 3)

    with pytest.raises(ChunkNotFoundError):
        read_chunk_text(chunk_file, "Other", max_version=3)
