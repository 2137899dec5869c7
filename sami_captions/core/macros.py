"""Bidirectional mapping between inline style macros and SAMI tags.

WHY: The upstream caption JSON marks line breaks and italics with inline
macros ({break}, {italic}, {end-italic}); SAMI expresses the same styling
with <br>, <i> and </i>. Both conversion directions need the exact same
table, so it lives in one place.

HOW: MACRO_TAGS is the single source of truth. Each direction compiles
one alternation regex from the table and substitutes in a single pass,
so a replacement can never be re-matched by a later rule.

RULES:
- Only the three macros are mapped; the set is closed
- Substitution is global (every occurrence)
- Any other tag or brace text passes through unchanged
- render_macros() and add_macros() are exact inverses on the mapped tokens
"""

import re
from typing import Dict

MACRO_TAGS: Dict[str, str] = {
    "{break}": "<br>",
    "{italic}": "<i>",
    "{end-italic}": "</i>",
}

TAG_MACROS: Dict[str, str] = {tag: macro for macro, tag in MACRO_TAGS.items()}

BREAK_MACRO = "{break}"
ITALIC_MACRO = "{italic}"
END_ITALIC_MACRO = "{end-italic}"

_MACRO_PATTERN = re.compile("|".join(re.escape(macro) for macro in MACRO_TAGS))
_TAG_PATTERN = re.compile("|".join(re.escape(tag) for tag in TAG_MACROS))


def render_macros(text: str) -> str:
    """Replace caption macros with their SAMI tags ({break} → <br>)."""
    return _MACRO_PATTERN.sub(lambda m: MACRO_TAGS[m.group(0)], text)


def add_macros(text: str) -> str:
    """Replace SAMI tags with their caption macros (<br> → {break})."""
    return _TAG_PATTERN.sub(lambda m: TAG_MACROS[m.group(0)], text)
