"""
Normalizes Eijiro definition text.

Removes the optional annotation classes selected by ParseOptions
(ruby, PDIC links, pronunciation and katakana guides, level and
syllabification tags, other 【…】 labels) and tidies the separators left
behind. The 【変化】 inflection block is always removed here because the
parser has already turned it into link entries.
"""

import re
from typing import NamedTuple


class ParseOptions(NamedTuple):
    """Which parts of the source text survive into the dictionary."""
    include_examples: bool = True
    include_supplement: bool = True
    strip_ruby: bool = False
    strip_pdic_link: bool = False
    strip_pronunciation: bool = False
    strip_katakana: bool = False
    strip_forms: bool = False
    strip_level: bool = False
    strip_syllabification: bool = False
    strip_other_labels: bool = False
    single_word_only: bool = False

    @classmethod
    def minimal(cls, strip_pdic_link: bool = False, single_word_only: bool = False) -> "ParseOptions":
        """
        Options that drop every optional annotation.

        PDIC links and the single-word filter are not content annotations,
        so they stay under the caller's control.
        """
        return cls(
            include_examples=False,
            include_supplement=False,
            strip_ruby=True,
            strip_pdic_link=strip_pdic_link,
            strip_pronunciation=True,
            strip_katakana=True,
            strip_forms=True,
            strip_level=True,
            strip_syllabification=True,
            strip_other_labels=True,
            single_word_only=single_word_only,
        )


RUBY_PATTERN = re.compile(r"｛.*?｝")
PDIC_LINK_PATTERN = re.compile(r"<→.*?>")
PRONUNCIATION_PATTERN = re.compile(r"\s*[、,]?\s*【発音[!！]?】[^【】]*")
KATAKANA_PATTERN = re.compile(r"【[@＠]】[^【】]*")
FORMS_PATTERN = re.compile(r"【変化】[^【】]*")
LEVEL_PATTERN = re.compile(r"【レベル】[^【】]*")
SYLLABIFICATION_PATTERN = re.compile(r"【分節】[^【】]*")
# {名} style part-of-speech tags use ASCII braces and are not touched
OTHER_LABELS_PATTERN = re.compile(r"【.*?】")

MULTI_SPACE_PATTERN = re.compile(r"\s{2,}")
MULTI_COMMA_PATTERN = re.compile(r"[、,]{2,}")
TRIM_PATTERN = re.compile(r"^[\s,、]+|[\s,、]+$")

FORMS_PAYLOAD_PATTERN = re.compile(r"【変化】([^【】]*)")
FORM_CATEGORY_PATTERN = re.compile(r"^《[^》]*》")


def _enabled_rules(options: ParseOptions) -> list[re.Pattern]:
    rules = [
        (options.strip_ruby, RUBY_PATTERN),
        (options.strip_pdic_link, PDIC_LINK_PATTERN),
        (options.strip_pronunciation, PRONUNCIATION_PATTERN),
        (options.strip_katakana, KATAKANA_PATTERN),
        (options.strip_level, LEVEL_PATTERN),
        (options.strip_syllabification, SYLLABIFICATION_PATTERN),
        # 【変化】 goes before the catch-all, which would otherwise leave its payload behind
        (True, FORMS_PATTERN),
        (options.strip_other_labels, OTHER_LABELS_PATTERN),
    ]
    return [pattern for enabled, pattern in rules if enabled]


def collapse_separators(text: str) -> str:
    """Collapse repeated whitespace and commas, then trim both from the ends."""
    text = MULTI_SPACE_PATTERN.sub(" ", text)
    text = MULTI_COMMA_PATTERN.sub("、", text)
    text = TRIM_PATTERN.sub("", text)
    return text.strip()


def process_definition(text: str, options: ParseOptions) -> str:
    """
    Apply the configured stripping rules to one definition fragment.

    Returns an empty string when nothing is left.
    """
    for pattern in _enabled_rules(options):
        text = pattern.sub("", text)

    return collapse_separators(text)


def extract_inflections(text: str) -> list[str]:
    """
    Return the surface forms listed in a 【変化】 annotation.

    "【変化】《動》expects | expecting | expected" gives
    ["expects", "expecting", "expected"]. Segments are separated by 、 and
    may start with a 《…》 category; alternates within a segment by |.
    """
    match = FORMS_PAYLOAD_PATTERN.search(text)
    if not match:
        return []

    forms = []
    for segment in match.group(1).split("、"):
        segment = FORM_CATEGORY_PATTERN.sub("", segment.strip())
        for form in segment.split("|"):
            form = form.strip()
            if form:
                forms.append(form)
    return forms
