"""
Merges duplicate headwords and splices in borrowed definitions.

Resolution runs in two passes over the complete entry list. The first
folds headwords and merges entries that share one; the second renders
every record, appending the definition of each link target after a
"---" line. Only one hop is followed: a target's own links are never
expanded, and such chains are reported by find_link_chains instead.
"""

from typing import Iterable

from eijiro_to_stardict.parse import (
    Definition,
    Direct,
    DirectWithLinks,
    Entry,
    Link,
)

LINK_DELIMITER = "---"


def fold_headword(headword: str) -> str:
    """Headwords that differ only in case share one record."""
    return headword.lower()


def _add_link(record: Definition, headword: str, target: str) -> Definition:
    if target == headword:
        return record
    if isinstance(record, Direct):
        return DirectWithLinks(record.text, (target,))
    if isinstance(record, DirectWithLinks) and target not in record.targets:
        return DirectWithLinks(record.text, record.targets + (target,))
    return record


def _fold_definition(definition: Definition) -> Definition:
    if isinstance(definition, Link):
        return Link(fold_headword(definition.target))
    if isinstance(definition, DirectWithLinks):
        targets = []
        for target in definition.targets:
            target = fold_headword(target)
            if target not in targets:
                targets.append(target)
        return DirectWithLinks(definition.text, tuple(targets))
    return definition


def merge_entries(entries: Iterable[Entry]) -> dict[str, Definition]:
    """
    Fold headwords and merge entries that share one.

    The first definition recorded for a headword wins. A later Link is
    attached to it unless the record is itself a pure Link; a later
    written definition is dropped.
    """
    records: dict[str, Definition] = {}

    for entry in entries:
        headword = fold_headword(entry.headword)
        definition = _fold_definition(entry.definition)

        existing = records.get(headword)
        if existing is None:
            if isinstance(definition, DirectWithLinks):
                definition = _without_self_links(definition, headword)
            records[headword] = definition
        elif isinstance(definition, Link) and not isinstance(existing, Link):
            records[headword] = _add_link(existing, headword, definition.target)

    return records


def _without_self_links(definition: DirectWithLinks, headword: str) -> Definition:
    targets = tuple(target for target in definition.targets if target != headword)
    if targets:
        return DirectWithLinks(definition.text, targets)
    return Direct(definition.text)


def _targets(definition: Definition) -> tuple[str, ...]:
    if isinstance(definition, Link):
        return (definition.target,)
    if isinstance(definition, DirectWithLinks):
        return definition.targets
    return ()


def _local_text(definition: Definition) -> str:
    if isinstance(definition, Link):
        return ""
    return definition.text


def find_link_chains(records: dict[str, Definition]) -> list[tuple[str, str]]:
    """
    List (headword, target) pairs whose target carries links of its own.

    These are multi-hop chains; resolve_links follows only the first hop.
    """
    chains = []
    for headword, definition in records.items():
        for target in _targets(definition):
            if target in records and _targets(records[target]):
                chains.append((headword, target))
    return chains


def resolve_links(records: dict[str, Definition]) -> dict[str, str]:
    """
    Render every record to its final definition text.

    Each existing target contributes a "---" line followed by its own
    text. Missing targets and pure-Link targets contribute nothing.
    Headwords left with an empty definition are omitted.
    """
    resolved: dict[str, str] = {}

    for headword, definition in records.items():
        if isinstance(definition, Direct):
            text = definition.text
        else:
            parts = [_local_text(definition)]
            for target in _targets(definition):
                target_text = _local_text(records[target]) if target in records else ""
                if target_text:
                    parts.extend([LINK_DELIMITER, target_text])
            text = "\n".join(parts)

        if text:
            resolved[headword] = text

    return resolved


def resolve_entries(entries: Iterable[Entry]) -> dict[str, str]:
    """Merge and resolve in one call."""
    return resolve_links(merge_entries(entries))
