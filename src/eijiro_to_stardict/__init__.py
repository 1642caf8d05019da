"""
eijiro_to_stardict - Convert Eijiro text dumps to StarDict dictionaries.

This package provides tools for:
- Normalizing definition text according to ParseOptions (definition)
- Parsing dump lines into entries and cross-reference links (parse)
- Merging headwords and resolving links (resolve)
- Serializing and writing StarDict files (stardict)
- Running the whole conversion from the command line (convert)
"""

from eijiro_to_stardict.definition import (
    ParseOptions,
    process_definition,
    extract_inflections,
    collapse_separators,
)

from eijiro_to_stardict.parse import (
    Direct,
    Link,
    DirectWithLinks,
    Definition,
    Entry,
    split_tag,
    split_example,
    find_conjugation_base,
    parse_lines,
    parse_file,
)

from eijiro_to_stardict.resolve import (
    fold_headword,
    merge_entries,
    find_link_chains,
    resolve_links,
    resolve_entries,
)

from eijiro_to_stardict.stardict import (
    DictzipError,
    StarDictInfo,
    StarDictBuild,
    stardict_sort_key,
    build_stardict,
    run_dictzip,
    write_stardict,
)

from eijiro_to_stardict.convert import (
    convert_dictionary,
    report_link_chains,
    main,
)

__version__ = "0.1.0"
