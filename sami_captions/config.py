"""Configuration constants, encoding profiles, and .env loading.

WHY: Centralizes all configurable values so they are easy to find,
update, and override. The per-language expected-encoding table is plain
data, not buried in the normalizer logic, so it can be extended
without touching code paths.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level dicts and strings. expected_encodings() is the single
lookup used by the encoding normalizer.

RULES:
- ENCODING_PROFILES maps ISO 639-1 codes to an ordered list of expected
  legacy encodings; the first entry is the language's default
- Unknown languages have no expected list (detection result is trusted)
- The canonical encoding is UTF-8; all subtitle text is normalised to it
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Encoding profiles: ISO 639-1 → expected byte encodings (most common first)
# ---------------------------------------------------------------------------

ENCODING_PROFILES: dict[str, list[str]] = {
    "ar": ["windows-1256"],
    "bg": ["windows-1251"],
    "bs": ["windows-1250"],
    "cs": ["windows-1250", "iso-8859-2"],
    "el": ["windows-1253", "iso-8859-7"],
    "fa": ["windows-1256"],
    "he": ["windows-1255", "iso-8859-8"],
    "hr": ["windows-1250"],
    "hu": ["windows-1250", "iso-8859-2"],
    "ja": ["shift_jis", "euc-jp"],
    "ko": ["cp949", "euc-kr"],
    "lt": ["windows-1257"],
    "lv": ["windows-1257"],
    "mk": ["windows-1251"],
    "pl": ["windows-1250", "iso-8859-2"],
    "ro": ["windows-1250", "iso-8859-16"],
    "ru": ["windows-1251", "koi8-r"],
    "sk": ["windows-1250", "iso-8859-2"],
    "sl": ["windows-1250", "iso-8859-2"],
    "sr": ["windows-1250", "windows-1251"],
    "th": ["tis-620", "cp874"],
    "tr": ["windows-1254", "iso-8859-9"],
    "uk": ["windows-1251", "koi8-u"],
    "vi": ["windows-1258"],
    "zh": ["gb18030", "big5"],
}

CANONICAL_ENCODING = "utf-8"
"""Target encoding for all normalised subtitle text."""


def expected_encodings(language: str | None) -> list[str] | None:
    """Return the expected encodings for a language, or None if unknown.

    Lookup is case-insensitive and ignores a region suffix ("pt-BR" → "pt").
    """
    if not language:
        return None
    code = language.strip().lower().replace("_", "-").split("-", 1)[0]
    return ENCODING_PROFILES.get(code)


# ---------------------------------------------------------------------------
# Runtime defaults
# ---------------------------------------------------------------------------

DEFAULT_LANGUAGE = os.getenv("SAMI_DEFAULT_LANGUAGE", "").strip() or None
LOG_LEVEL = os.getenv("SAMI_LOG_LEVEL", "WARNING").upper()


def configure_logging(verbose: bool = False) -> None:
    """Configure root logging from SAMI_LOG_LEVEL (DEBUG when verbose)."""
    level = logging.DEBUG if verbose else getattr(logging, LOG_LEVEL, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
    )
