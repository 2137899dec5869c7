"""Format readers: encoding normalisation plus header verification.

WHY: A caption file with the wrong format should be rejected before the
parser turns it into an empty or nonsensical record list. Callers need to
tell "not a SAMI file" apart from "could not read the file", so the
format check is reported as a named condition while I/O failures surface
as the usual OSError.

HOW: read_markup() reads the file bytes, normalises them to UTF-8 text
(core.encoding), splits on any newline convention and verifies the first
line against SAMI_PROFILE. read_plain_timed() applies the same gate to
in-memory plain-timed (WebVTT) content. aread_markup() runs read_markup()
in a worker thread for async callers.

RULES:
- Header mismatch → LoadResult with a FormatError, content None
- OSError from the file read propagates unchanged
- read_markup() returns the whole normalised text, not parsed records
- read_plain_timed() returns the split lines
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union

from sami_captions.core.encoding import normalize_encoding
from sami_captions.core.profiles import PLAIN_TIMED_PROFILE, SAMI_PROFILE, verify_header
from sami_captions.core.records import CaptionRecord
from sami_captions.parsers.sami import parse_sami

logger = logging.getLogger(__name__)

_NEWLINE = re.compile(r"\r\n|\r|\n")


class FormatError(str, Enum):
    """Named format-mismatch conditions returned by the readers."""

    INVALID_SAMI_FORMAT = "INVALID_SAMI_FORMAT"
    INVALID_PLAIN_TIMED_FORMAT = "INVALID_PLAIN_TIMED_FORMAT"


@dataclass
class LoadResult:
    """Outcome of a read: either an error condition or the content.

    Attributes:
        error: The format-mismatch condition, or None on success.
        content: Normalised text (read_markup) or list of lines
                 (read_plain_timed); None when error is set.
    """

    error: Optional[FormatError]
    content: Any = None

    @property
    def ok(self) -> bool:
        return self.error is None


def split_lines(text: str) -> List[str]:
    """Split on \\r\\n, \\r or \\n (a trailing newline yields a final "")."""
    return _NEWLINE.split(text)


def read_markup(path: Union[str, Path], language: Optional[str] = None) -> LoadResult:
    """Read a SAMI file and verify its header.

    Args:
        path: Path to the .smi file.
        language: ISO 639-1 code used to resolve the file's encoding.

    Returns:
        LoadResult with the UTF-8 text of the file, or
        FormatError.INVALID_SAMI_FORMAT if the first line is not a SAMI header.

    Raises:
        OSError: If the file cannot be read.
    """
    raw = Path(path).read_bytes()
    text = normalize_encoding(raw, language)
    lines = split_lines(text)

    if verify_header(lines[0], SAMI_PROFILE):
        return LoadResult(error=None, content=text)

    logger.info("Rejected %s: first line is not a SAMI header", path)
    return LoadResult(error=FormatError.INVALID_SAMI_FORMAT)


async def aread_markup(path: Union[str, Path], language: Optional[str] = None) -> LoadResult:
    """Async variant of read_markup(); the file read runs in a worker thread."""
    return await asyncio.to_thread(read_markup, path, language)


def read_plain_timed(content: Union[str, bytes]) -> LoadResult:
    """Verify in-memory plain-timed caption content and split it into lines.

    Args:
        content: File content; bytes are decoded as UTF-8.

    Returns:
        LoadResult with the list of lines, or
        FormatError.INVALID_PLAIN_TIMED_FORMAT on a header mismatch.
    """
    if isinstance(content, bytes):
        content = content.decode("utf-8", errors="replace")
    lines = split_lines(content)

    if verify_header(lines[0], PLAIN_TIMED_PROFILE):
        return LoadResult(error=None, content=lines)
    return LoadResult(error=FormatError.INVALID_PLAIN_TIMED_FORMAT)


def load_sami_records(
    path: Union[str, Path],
    language: Optional[str] = None,
    flush_trailing: bool = False,
) -> Tuple[Optional[FormatError], Optional[List[CaptionRecord]]]:
    """Read, verify and parse a SAMI file in one call.

    Returns:
        Tuple of (error, records): (None, [CaptionRecord, ...]) on success,
        (FormatError.INVALID_SAMI_FORMAT, None) on a header mismatch.
    """
    result = read_markup(path, language)
    if not result.ok:
        return result.error, None
    return None, parse_sami(result.content, flush_trailing=flush_trailing)
