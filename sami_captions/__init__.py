"""SAMI Caption Converter: SAMI markup <-> caption record conversion.

WHY: Caption data arrives from an upstream system as a proprietary JSON
list of timed records with inline style macros ({break}, {italic},
{end-italic}), while players and archives exchange SAMI (.smi) files.
This package converts between the two without losing timing or the
blank-frame convention.

HOW: Three-stage pipeline: load (encoding normalisation + header
verification), parse (SAMI tag events -> CaptionRecord list), format
(pluggable formatters: SAMI markup, caption JSON). Each stage is
independently testable.

RULES:
- All formatters consume the same list of CaptionRecord objects
- CaptionRecord is the stable contract between parsing and formatting
- Format constants (header, footer, line template) are passed in, never global state
"""

__version__ = "0.1.0"
