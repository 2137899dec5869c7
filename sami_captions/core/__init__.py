"""Core records, macro mapping, format profiles, encoding and loading.

WHY: The core package contains the stable heart of the converter:
the CaptionRecord contract, the macro table, and the format constants.
These are consumed by the parser and by every formatter.

HOW: records.py defines the data structure and caption JSON I/O,
macros.py maps inline macros to SAMI tags, profiles.py holds the
format constants and header verification, encoding.py normalises raw
bytes to UTF-8, loader.py gates file content on a valid header.

RULES:
- CaptionRecord is the contract; change with care
- Nothing in core knows about a specific output formatter
"""
