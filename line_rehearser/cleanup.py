"""Pre-clean rules for text scraped out of page layouts.

Each rule is a (name, pattern, replacement) triple applied in order. Rules
run on the whole document; the final pass drops lines left empty.
"""

import re
from typing import NamedTuple


class CleanupRule(NamedTuple):
    name: str
    pattern: re.Pattern
    replacement: str = ""

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)


FOOTER_RULE = CleanupRule("footer", re.compile(r"Sides by Breakdown Services.*$", re.MULTILINE))
DATE_RULE = CleanupRule("date", re.compile(r"\d{1,2}/\d{1,2}/\d{2,4}"))
DRAFT_RULE = CleanupRule("draft", re.compile(r"Table Draft.*$", re.MULTILINE))
SCENE_LABEL_RULE = CleanupRule("scene_label", re.compile(r"SCENE [A-Z]"))
DIRECTION_MARKER_RULE = CleanupRule("direction_marker", re.compile(r"START →|← END"))
WHITESPACE_RULE = CleanupRule("whitespace", re.compile(r"\s{2,}"), "\n")

CLEANUP_RULES = (
    FOOTER_RULE,
    DATE_RULE,
    DRAFT_RULE,
    SCENE_LABEL_RULE,
    DIRECTION_MARKER_RULE,
    WHITESPACE_RULE,
)


def drop_empty_lines(text: str) -> str:
    return "\n".join(line for line in text.split("\n") if line.strip())


def preclean(text: str, rules=CLEANUP_RULES) -> str:
    """Run every rule over ``text`` in order, then drop empty lines."""
    for rule in rules:
        text = rule.apply(text)
    return drop_empty_lines(text)
