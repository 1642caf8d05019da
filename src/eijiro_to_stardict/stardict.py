"""
Writes StarDict dictionaries.

A StarDict dictionary is three files sharing a base name:

- <book>.ifo: text metadata (version, name, word count, index size, ...)
- <book>.idx: one record per word, "word\\0" + big-endian uint32 offset
  + big-endian uint32 length into the content file
- <book>.dict.dz: the definitions back to back, compressed with dictzip
"""

import struct
import subprocess
from pathlib import Path
from typing import Iterable, NamedTuple

STARDICT_VERSION = "2.4.2"
IFO_MAGIC = "StarDict's dict ifo file"
# Definitions are stored as text and the content file is expected to be dictzipped
SAME_TYPE_SEQUENCE = "g"
DEFAULT_AUTHOR = "Converted with eijiro-to-stardict"
DEFAULT_DESCRIPTION = (
    "A comprehensive Japanese-English dictionary based on Eijiro data, "
    "converted with eijiro-to-stardict."
)


class DictzipError(RuntimeError):
    """The dictzip tool failed; output holds what it printed."""

    def __init__(self, message: str, output: str = ""):
        super().__init__(f"{message}\n{output}" if output else message)
        self.output = output


class StarDictInfo(NamedTuple):
    """Contents of the .ifo file."""
    version: str
    bookname: str
    wordcount: int
    idxfilesize: int
    author: str = ""
    description: str = ""
    date: str = ""
    sametypesequence: str = SAME_TYPE_SEQUENCE

    def to_ifo(self) -> str:
        """Render as .ifo text. Empty optional fields are left out."""
        lines = [
            IFO_MAGIC,
            f"version={self.version}",
            f"bookname={self.bookname}",
            f"wordcount={self.wordcount}",
            f"idxfilesize={self.idxfilesize}",
        ]
        for key in ("author", "description", "date", "sametypesequence"):
            value = getattr(self, key)
            if value:
                lines.append(f"{key}={value}")
        return "\n".join(lines) + "\n"


class StarDictBuild(NamedTuple):
    """Serialized dictionary, ready to be written."""
    index: bytes
    content: bytes
    info: StarDictInfo


def stardict_sort_key(headword: str) -> tuple[bytes, bytes]:
    """
    Order in which StarDict readers expect .idx records.

    ASCII case-insensitive comparison of the UTF-8 bytes, ties broken by
    plain byte comparison.
    """
    encoded = headword.encode("utf-8")
    return encoded.lower(), encoded


def build_stardict(
    items: Iterable[tuple[str, str]],
    book_name: str,
    author: str = DEFAULT_AUTHOR,
    description: str = DEFAULT_DESCRIPTION,
) -> StarDictBuild:
    """
    Serialize (headword, definition) pairs in the order given.

    Order only decides the physical layout; every index record carries
    the explicit offset and length of its definition.
    """
    index = bytearray()
    content = bytearray()
    count = 0

    for headword, definition in items:
        definition_bytes = definition.encode("utf-8")

        index += headword.encode("utf-8")
        index.append(0)
        index += struct.pack(">II", len(content), len(definition_bytes))

        content += definition_bytes
        count += 1

    info = StarDictInfo(
        version=STARDICT_VERSION,
        bookname=book_name,
        wordcount=count,
        idxfilesize=len(index),
        author=author,
        description=description,
    )
    return StarDictBuild(bytes(index), bytes(content), info)


def run_dictzip(dict_path: Path) -> Path:
    """
    Compress dict_path in place with dictzip.

    dictzip replaces <name>.dict with <name>.dict.dz. Raises DictzipError
    with the tool's output if it cannot be run or fails.
    """
    try:
        result = subprocess.run(
            ["dictzip", str(dict_path)],
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
    except OSError as e:
        raise DictzipError(f"Failed to run dictzip: {e}") from e

    if result.returncode != 0:
        raise DictzipError(
            f"dictzip exited with status {result.returncode}", result.stdout or ""
        )

    return dict_path.with_name(dict_path.name + ".dz")


def write_stardict(build: StarDictBuild, output_dir: Path, compress: bool = True) -> list[Path]:
    """
    Write the .dict (compressed unless told otherwise), .idx and .ifo files.

    Returns the paths written. If compression fails the uncompressed
    .dict is removed before DictzipError propagates, so a failed run
    leaves no dictionary behind.
    """
    base = output_dir / build.info.bookname
    dict_path = base.with_name(base.name + ".dict")
    idx_path = base.with_name(base.name + ".idx")
    ifo_path = base.with_name(base.name + ".ifo")

    dict_path.write_bytes(build.content)

    if compress:
        try:
            dict_path = run_dictzip(dict_path)
        except DictzipError:
            dict_path.unlink(missing_ok=True)
            raise

    idx_path.write_bytes(build.index)
    ifo_path.write_text(build.info.to_ifo(), encoding="utf-8", newline="\n")

    return [dict_path, idx_path, ifo_path]
