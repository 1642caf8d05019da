"""
Parses an Eijiro text dump into dictionary entries.

Each "■headword {tag} : definition" line starts an entry. Lines that
repeat the previous headword add another sense to it, "■・" lines carry
usage examples and "◆" lines carry supplementary remarks. Inflected forms
listed in 【変化】 and conjugation definitions such as "knowの過去形"
become Link entries pointing back at their base word.
"""

import re
from pathlib import Path
from typing import Iterable, NamedTuple, Union

from eijiro_to_stardict.definition import (
    ParseOptions,
    extract_inflections,
    process_definition,
)


class Direct(NamedTuple):
    """A definition written out in the source."""
    text: str


class Link(NamedTuple):
    """A definition borrowed wholesale from another headword."""
    target: str


class DirectWithLinks(NamedTuple):
    """A written definition that also borrows from other headwords."""
    text: str
    targets: tuple[str, ...]


Definition = Union[Direct, Link, DirectWithLinks]


class Entry(NamedTuple):
    """One headword and its definition, as read from the dump."""
    headword: str
    definition: Definition


ENTRY_PATTERN = re.compile(r"^■([^:]*?)\s*:(.*)")
TAG_PATTERN = re.compile(r"^(.*?)\s*(\{.*?\})$")
CONJUGATION_PATTERN = re.compile(
    r"(?:\{.+?\})?\s*(.+?)の(過去形|過去分詞|現在分詞|三人称単数現在形)$"
)

EXAMPLE_PREFIX = "■・"
SUPPLEMENT_PREFIX = "◆"


def split_tag(raw_headword: str) -> tuple[str, str]:
    """
    Split a trailing {…} tag off a headword field.

    "know {動}" gives ("know", "{動}"); a field without a tag gives
    (field, "").
    """
    match = TAG_PATTERN.match(raw_headword)
    if match and match.group(1):
        return match.group(1), match.group(2)
    return raw_headword, ""


def split_example(raw_definition: str) -> tuple[str, str]:
    """Split a same-line "■・" example off the definition field."""
    definition, sep, example = raw_definition.partition(EXAMPLE_PREFIX)
    return definition, example if sep else ""


def find_conjugation_base(definition: str) -> str | None:
    """Return X for definitions of the form "{動} Xの過去形", else None."""
    match = CONJUGATION_PATTERN.search(definition)
    if match:
        return match.group(1).strip() or None
    return None


def format_example(example: str) -> str:
    """Examples are stored as "■<text>", without the "・"."""
    return "■" + example


class _PendingEntry:
    """The entry currently being collected, before it is finalised."""

    def __init__(self, headword: str):
        self.headword = headword
        self.lines: list[str] = []
        self.targets: list[str] = []

    def add_line(self, line: str) -> None:
        if line:
            self.lines.append(line)

    def add_target(self, target: str) -> None:
        if target not in self.targets:
            self.targets.append(target)

    def to_entry(self) -> Entry:
        text = "\n".join(self.lines)
        if self.targets:
            return Entry(self.headword, DirectWithLinks(text, tuple(self.targets)))
        return Entry(self.headword, Direct(text))


def parse_lines(lines: Iterable[str], options: ParseOptions) -> list[Entry]:
    """
    Parse decoded dump lines into entries.

    Direct entries come first, in source order, followed by every
    synthesized Link entry. Lines that match no known shape are skipped.
    """
    entries: list[Entry] = []
    links: list[Entry] = []
    current: _PendingEntry | None = None

    for line in lines:
        line = line.rstrip("\r\n")

        if line.startswith(EXAMPLE_PREFIX):
            if current is not None and options.include_examples:
                current.add_line(format_example(line[len(EXAMPLE_PREFIX):]))
            continue

        match = ENTRY_PATTERN.match(line)
        if not match:
            if current is not None and line.startswith(SUPPLEMENT_PREFIX):
                if options.include_supplement:
                    current.add_line(line)
            continue

        raw_headword = match.group(1).strip()
        raw_definition = match.group(2).strip()
        headword, tag = split_tag(raw_headword)

        # Inflected forms point at the bare headword; the tag belongs to this sense only
        for form in extract_inflections(raw_definition):
            links.append(Entry(form, Link(headword)))

        definition, example = split_example(raw_definition)
        definition = f"{tag} {definition}"

        base = find_conjugation_base(definition)
        if base is not None:
            links.append(Entry(headword, Link(base)))

        if current is None or current.headword != headword:
            if current is not None:
                entries.append(current.to_entry())
                current = None
            if options.single_word_only and len(headword.split()) > 1:
                continue
            current = _PendingEntry(headword)

        current.add_line(process_definition(definition, options))
        if options.include_examples and example:
            current.add_line(format_example(example))
        if base is not None:
            current.add_target(base)

    if current is not None:
        entries.append(current.to_entry())

    return entries + links


def parse_file(path: Path, options: ParseOptions, encoding: str = "cp932") -> list[Entry]:
    """
    Read and parse a dump file.

    Eijiro ships in Shift_JIS; cp932 is the Windows superset that also
    covers its vendor characters. Decoding errors propagate.
    """
    with open(path, encoding=encoding) as f:
        return parse_lines(f, options)
