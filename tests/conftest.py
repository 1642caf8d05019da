"""Shared pytest fixtures for eijiro_to_stardict tests."""

import struct
import tempfile
from pathlib import Path

import pytest

from eijiro_to_stardict.definition import ParseOptions


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_text(fixtures_dir: Path) -> str:
    """Load eijiro_sample.txt fixture."""
    return (fixtures_dir / "eijiro_sample.txt").read_text(encoding="utf-8")


@pytest.fixture
def sample_lines(sample_text: str) -> list[str]:
    """The sample dump as decoded lines."""
    return sample_text.splitlines()


@pytest.fixture
def temp_output_dir():
    """Create a temporary directory for file output tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_dump(temp_output_dir: Path, sample_text: str) -> Path:
    """The sample dump encoded as cp932, the way Eijiro ships."""
    dump_path = temp_output_dir / "EIJIRO-SAMPLE.TXT"
    dump_path.write_bytes(sample_text.replace("\n", "\r\n").encode("cp932"))
    return dump_path


@pytest.fixture
def minimal_options() -> ParseOptions:
    return ParseOptions.minimal()


def read_idx(index: bytes) -> list[tuple[str, int, int]]:
    """Decode .idx records into (headword, offset, length) triples."""
    records = []
    pos = 0
    while pos < len(index):
        end = index.index(b"\x00", pos)
        headword = index[pos:end].decode("utf-8")
        offset, length = struct.unpack(">II", index[end + 1:end + 9])
        records.append((headword, offset, length))
        pos = end + 9
    return records


def read_dictionary(index: bytes, content: bytes) -> dict[str, str]:
    """Look every .idx record up in the content blob."""
    return {
        headword: content[offset:offset + length].decode("utf-8")
        for headword, offset, length in read_idx(index)
    }
