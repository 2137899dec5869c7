"""Character-encoding normalisation of raw subtitle bytes.

WHY: Subtitle files in the wild are rarely UTF-8. Older SAMI files are
typically saved in a Windows code page matching their language, and
statistical detection on short caption files often guesses a code page
from the wrong script family. Parsing must start from correctly decoded
text, so raw bytes are normalised before anything else touches them.

HOW: charset-normalizer detects the encoding. If it is already UTF-8 the
buffer is decoded directly. Otherwise the detection is cross-checked
against the language's expected encodings (config.ENCODING_PROFILES);
when the detected encoding is not one the language uses, the language's
default encoding wins. The buffer is then transcoded to UTF-8.

RULES:
- Encoding names are compared via codecs.lookup (cp1251 == windows-1251)
- Languages without a profile trust the detector
- Undetectable input falls back to the language default, else UTF-8
- Undecodable bytes become U+FFFD, never an exception
- A leading BOM is removed from the returned text
- Detected/expected/used encodings are logged at DEBUG level only
"""

from __future__ import annotations

import codecs
import logging
from typing import List, Optional

from charset_normalizer import from_bytes

from sami_captions.config import CANONICAL_ENCODING, expected_encodings

logger = logging.getLogger(__name__)

_BOM = "\ufeff"


def canonical_name(encoding: str) -> str:
    """Return the codec's canonical name, or a normalised spelling if unknown."""
    try:
        return codecs.lookup(encoding).name
    except LookupError:
        return encoding.lower().replace("-", "").replace("_", "")


def _is_canonical(encoding: str) -> bool:
    return canonical_name(encoding) in (
        canonical_name(CANONICAL_ENCODING),
        canonical_name("utf-8-sig"),
    )


def detect_encoding(buffer: bytes) -> Optional[str]:
    """Return charset-normalizer's best guess for the buffer, or None."""
    match = from_bytes(buffer).best()
    if match is None:
        return None
    return match.encoding


def choose_encoding(
    detected: Optional[str],
    expected: Optional[List[str]],
) -> Optional[str]:
    """Pick the encoding to decode with.

    The detected encoding is kept unless the language has an expected list
    that does not contain it; then the list's first entry is used.
    """
    if not expected:
        return detected
    if detected is not None:
        wanted = {canonical_name(name) for name in expected}
        if canonical_name(detected) in wanted:
            return detected
    return expected[0]


def transcode(buffer: bytes, language: Optional[str] = None) -> bytes:
    """Transcode a raw subtitle buffer to canonical (UTF-8) bytes.

    Args:
        buffer: Raw file content.
        language: ISO 639-1 code of the subtitle language, if known.

    Returns:
        The content encoded as UTF-8, without a byte order mark.
    """
    detected = detect_encoding(buffer)
    logger.debug("Subtitle charset detected: %s", detected)

    if detected is not None and _is_canonical(detected):
        text = buffer.decode(CANONICAL_ENCODING, errors="replace")
        return text.lstrip(_BOM).encode(CANONICAL_ENCODING)

    expected = expected_encodings(language)
    logger.debug("Subtitle charsets expected for language %r: %s", language, expected)

    used = choose_encoding(detected, expected) or CANONICAL_ENCODING
    logger.debug("Subtitle charset used: %s", used)

    text = buffer.decode(used, errors="replace")
    return text.lstrip(_BOM).encode(CANONICAL_ENCODING)


def normalize_encoding(buffer: bytes, language: Optional[str] = None) -> str:
    """Decode a raw subtitle buffer to text via transcode()."""
    return transcode(buffer, language).decode(CANONICAL_ENCODING)
