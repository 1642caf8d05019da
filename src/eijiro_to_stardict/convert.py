#!/usr/bin/env python3
"""
Converts an Eijiro text dump into a StarDict dictionary.

Runs the whole pipeline: parse the dump, merge and resolve
cross-references, then serialize and write the StarDict files.
"""

import argparse
import sys
from pathlib import Path

from eijiro_to_stardict.definition import ParseOptions
from eijiro_to_stardict.parse import parse_file
from eijiro_to_stardict.resolve import find_link_chains, merge_entries, resolve_links
from eijiro_to_stardict.stardict import (
    DictzipError,
    StarDictInfo,
    build_stardict,
    stardict_sort_key,
    write_stardict,
)

DEFAULT_INPUT = "EIJIRO-1448.TXT"
DEFAULT_OUTPUT_DIR = "output_stardict"
DEFAULT_BOOK_NAME = "Eijiro"
DEFAULT_ENCODING = "cp932"

# How many link chains to list before summarising the rest
CHAIN_REPORT_LIMIT = 10


def report_link_chains(chains: list[tuple[str, str]]) -> str:
    """Brief summary of links that were not followed past one hop."""
    if not chains:
        return "No multi-hop link chains."
    lines = [f"Multi-hop link chains ({len(chains)}), resolved one hop only:"]
    for headword, target in sorted(chains)[:CHAIN_REPORT_LIMIT]:
        lines.append(f"  {headword} -> {target}")
    if len(chains) > CHAIN_REPORT_LIMIT:
        lines.append(f"  ... and {len(chains) - CHAIN_REPORT_LIMIT} more")
    return "\n".join(lines)


def convert_dictionary(
    input_path: Path,
    output_dir: Path,
    book_name: str,
    options: ParseOptions,
    encoding: str = DEFAULT_ENCODING,
    compress: bool = True,
) -> StarDictInfo:
    """
    Convert input_path into StarDict files under output_dir.

    Returns the written dictionary's metadata.
    """
    entries = parse_file(input_path, options, encoding=encoding)
    print(f"Read {len(entries)} entries from {input_path}.")

    records = merge_entries(entries)
    chains = find_link_chains(records)
    if chains:
        print(report_link_chains(chains), file=sys.stderr)

    definitions = resolve_links(records)
    print(f"Resolved {len(definitions)} headwords.")

    items = sorted(definitions.items(), key=lambda item: stardict_sort_key(item[0]))
    build = build_stardict(items, book_name)

    output_dir.mkdir(parents=True, exist_ok=True)
    for path in write_stardict(build, output_dir, compress=compress):
        print(f"Created: {path}")

    return build.info


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert an Eijiro text dump into a StarDict dictionary."
    )
    parser.add_argument("-i", dest="input", default=DEFAULT_INPUT,
                        help=f"Eijiro dump to read (default: {DEFAULT_INPUT})")
    parser.add_argument("-o", dest="output_dir", default=DEFAULT_OUTPUT_DIR,
                        help=f"output directory (default: {DEFAULT_OUTPUT_DIR})")
    parser.add_argument("-b", dest="book_name", default=DEFAULT_BOOK_NAME,
                        help=f"dictionary name (default: {DEFAULT_BOOK_NAME})")
    parser.add_argument("--encoding", default=DEFAULT_ENCODING,
                        help=f"text encoding of the dump (default: {DEFAULT_ENCODING})")
    parser.add_argument("--no-dictzip", action="store_true",
                        help="leave the .dict file uncompressed")

    parser.add_argument("--no-examples", action="store_true",
                        help="drop usage examples (■・)")
    parser.add_argument("--no-supplement", action="store_true",
                        help="drop supplementary remarks (◆)")
    parser.add_argument("--strip-ruby", action="store_true",
                        help="remove ruby glosses (｛…｝)")
    parser.add_argument("--strip-pdic-link", action="store_true",
                        help="remove PDIC links (<→…>)")
    parser.add_argument("--strip-pronunciation", action="store_true",
                        help="remove pronunciation guides (【発音】…)")
    parser.add_argument("--strip-katakana", action="store_true",
                        help="remove katakana pronunciation (【＠】…)")
    parser.add_argument("--strip-forms", action="store_true",
                        help="remove inflected forms (【変化】…)")
    parser.add_argument("--strip-level", action="store_true",
                        help="remove word levels (【レベル】…)")
    parser.add_argument("--strip-syllabification", action="store_true",
                        help="remove syllable breaks (【分節】…)")
    parser.add_argument("--strip-other-labels", action="store_true",
                        help="remove any other 【…】 label")
    parser.add_argument("--single-word-only", action="store_true",
                        help="only keep headwords that are a single word")
    parser.add_argument("--minimal", action="store_true",
                        help="drop every optional annotation; PDIC links and "
                             "--single-word-only are still controlled separately")
    return parser


def options_from_args(args: argparse.Namespace) -> ParseOptions:
    """Turn parsed command-line flags into ParseOptions."""
    if args.minimal:
        return ParseOptions.minimal(
            strip_pdic_link=args.strip_pdic_link,
            single_word_only=args.single_word_only,
        )
    return ParseOptions(
        include_examples=not args.no_examples,
        include_supplement=not args.no_supplement,
        strip_ruby=args.strip_ruby,
        strip_pdic_link=args.strip_pdic_link,
        strip_pronunciation=args.strip_pronunciation,
        strip_katakana=args.strip_katakana,
        strip_forms=args.strip_forms,
        strip_level=args.strip_level,
        strip_syllabification=args.strip_syllabification,
        strip_other_labels=args.strip_other_labels,
        single_word_only=args.single_word_only,
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_arg_parser().parse_args(argv)

    input_path = Path(args.input)
    if not input_path.is_file():
        print(f"Error: File not found: {input_path}", file=sys.stderr)
        return 1

    output_dir = Path(args.output_dir)
    options = options_from_args(args)

    print(f"Converting {input_path} into {output_dir}/...")
    try:
        info = convert_dictionary(
            input_path,
            output_dir,
            args.book_name,
            options,
            encoding=args.encoding,
            compress=not args.no_dictzip,
        )
    except DictzipError as e:
        print(f"Error: dictzip failed: {e}", file=sys.stderr)
        return 1
    except (OSError, UnicodeError, LookupError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Done. Wrote {info.wordcount} headwords to {output_dir}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
