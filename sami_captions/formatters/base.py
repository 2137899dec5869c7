"""Abstract base formatter and output container.

WHY: Every output format consumes the same list of CaptionRecord objects
but produces different file content. This base class enforces a
consistent interface so the CLI can work with any formatter generically.

HOW: BaseFormatter is an ABC with two requirements: a ``name`` property
and a ``format()`` method. FormatterOutput is a plain dataclass that
bundles a file suffix with its content and MIME type.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``format()``
- ``format()`` returns a list; every current formatter returns one item
- ``suffix`` is appended to the source stem, e.g. ``".smi"``
- Formatters never mutate the records they are given
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

from sami_captions.core.records import CaptionRecord


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix appended to the source stem,
                e.g. ``".smi"`` → ``"episode.smi"``.
        content: The file content as a string.
        media_type: MIME type for the content, e.g. ``"application/json"``.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all output formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'SAMI'."""

    @abstractmethod
    def format(self, records: List[CaptionRecord]) -> List[FormatterOutput]:
        """Convert caption records into one or more output files.

        Args:
            records: Caption records in display order.

        Returns:
            List of FormatterOutput objects.
        """
