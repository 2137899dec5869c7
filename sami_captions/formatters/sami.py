"""SAMI markup generator.

WHY: Players and caption archives exchange SAMI files, while the
upstream system delivers caption records with inline macros. This
formatter renders records into a complete SAMI document.

HOW: Emit the profile header verbatim, then one templated <SYNC> line
per record (plus a clear line when the record has an end time), then
the footer verbatim. Times are truncated from microseconds to
milliseconds; text goes through render_macros().

RULES:
- Start/end times: floor(micro / 1000), truncation not rounding
- Empty text is written as the &nbsp; sentinel (blank frame)
- A record with end_time_micro adds a second line whose text is &nbsp;
- Every line, including the last footer line, ends with "\\n"
- No validation: negative or decreasing times are written as given
- Output suffix: ".smi", media type "application/x-sami"
"""

from __future__ import annotations

from typing import List

from sami_captions.core.macros import render_macros
from sami_captions.core.profiles import NBSP, SAMI_PROFILE, FormatConstants
from sami_captions.core.records import CaptionRecord
from sami_captions.formatters.base import BaseFormatter, FormatterOutput


def micro_to_millis(value: int) -> int:
    """Truncate microseconds to whole milliseconds (floor division)."""
    return value // 1000


class SAMIFormatter(BaseFormatter):
    """Formatter that renders caption records as a SAMI document.

    The format profile is injected so alternative SAMI headers (other
    class names, titles or styles) can be generated side by side.
    """

    def __init__(self, profile: FormatConstants = SAMI_PROFILE) -> None:
        self.profile = profile

    @property
    def name(self) -> str:
        return "SAMI"

    def generate(self, records: List[CaptionRecord]) -> str:
        """Render records into SAMI markup text.

        Args:
            records: Caption records in display order.

        Returns:
            The complete SAMI document.
        """
        lines: List[str] = list(self.profile.header)

        for record in records:
            text = record.text if record.text else NBSP
            # TODO: emit a bare clear sync instead of a blank cue when the empty record has an end time
            lines.append(self.profile.render_line(
                micro_to_millis(record.start_time_micro),
                render_macros(text),
            ))
            if record.end_time_micro is not None:
                lines.append(self.profile.render_line(
                    micro_to_millis(record.end_time_micro),
                    NBSP,
                ))

        lines.extend(self.profile.footer)
        return "".join(line + "\n" for line in lines)

    def format(self, records: List[CaptionRecord]) -> List[FormatterOutput]:
        return [
            FormatterOutput(
                suffix=".smi",
                content=self.generate(records),
                media_type="application/x-sami",
            )
        ]
