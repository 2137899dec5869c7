"""Format constants and header verification.

WHY: Every supported text format starts with a fixed header signature,
and SAMI output is built from fixed header/footer blocks plus one line
template. Keeping these as explicit, frozen values (instead of module
state read from inside the generator) lets tests run several profiles
side by side and lets callers ship a customised SAMI header.

HOW: FormatConstants is a frozen dataclass. SAMI_PROFILE and
PLAIN_TIMED_PROFILE are the two built-in instances. verify_header()
checks a single line against a profile's first header line.

RULES:
- Profiles are immutable and shared read-only
- The line template uses {startTime} and {text} placeholders
- Header verification is a case-insensitive search for the literal first
  header line after trimming whitespace and a UTF-8 BOM
- verify_header() never raises; bad input returns False
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Tuple

NBSP = "&nbsp;"
"""SAMI sentinel text: a cue consisting only of this clears the caption."""


@dataclass(frozen=True)
class FormatConstants:
    """Fixed header, footer and line template of one text caption format.

    Attributes:
        name: Short identifier used in log and error messages.
        header: Header lines, emitted verbatim; header[0] is the signature.
        footer: Footer lines, emitted verbatim.
        line_template: One timed line with {startTime} and {text} placeholders.
    """

    name: str
    header: Tuple[str, ...]
    footer: Tuple[str, ...]
    line_template: str

    @property
    def signature(self) -> str:
        return self.header[0]

    def render_line(self, start_time: int, text: str) -> str:
        # {text} last so caption text containing "{startTime}" is left alone
        return self.line_template.replace("{startTime}", str(start_time)).replace(
            "{text}", text
        )


SAMI_PROFILE = FormatConstants(
    name="sami",
    header=(
        "<SAMI>",
        "<HEAD>",
        "<TITLE>SAMI Captions</TITLE>",
        "<STYLE TYPE=\"text/css\">",
        "<!--",
        "P { margin-left: 8pt; margin-right: 8pt; margin-bottom: 2pt; margin-top: 2pt;",
        "    text-align: center; font-size: 14pt; font-family: Arial; font-weight: normal;",
        "    color: #ffffff; }",
        ".ENUSCC { Name: English; lang: en-US; SAMIType: CC; }",
        "-->",
        "</STYLE>",
        "</HEAD>",
        "<BODY>",
    ),
    footer=(
        "</BODY>",
        "</SAMI>",
    ),
    line_template="<SYNC Start={startTime}><P Class=ENUSCC>{text}</P></SYNC>",
)

PLAIN_TIMED_PROFILE = FormatConstants(
    name="plain_timed",
    header=("WEBVTT",),
    footer=(),
    line_template="{startTime} {text}",
)


def verify_header(line: Optional[str], profile: FormatConstants = SAMI_PROFILE) -> bool:
    """Return True if the line carries the profile's header signature.

    WHY: Both loaders gate their input on the first line before any
    parsing, so a wrong-format file is rejected early with a named error.

    HOW: Strip surrounding whitespace and a leading BOM, then search for
    the escaped signature with re.IGNORECASE.

    Args:
        line: Candidate header line (usually the first line of a file).
        profile: Format whose signature is expected.

    Returns:
        True on a case-insensitive match, False otherwise (including
        None or empty input).
    """
    if not line or not isinstance(line, str):
        return False
    candidate = line.strip().lstrip("\ufeff").strip()
    if not candidate:
        return False
    pattern = re.compile(re.escape(profile.signature), re.IGNORECASE)
    return pattern.search(candidate) is not None
