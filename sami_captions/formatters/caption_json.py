"""Caption JSON formatter: records back to the upstream JSON shape.

WHY: Parsed SAMI files are handed back to the upstream caption system,
which only reads its own JSON list format.

HOW: Delegates to core.records.dump_caption_json().

RULES:
- Keys: startTimeMicro, endTimeMicro (omitted when absent), text
- Macros are kept inline in text
- Output suffix: ".json", media type "application/json"
"""

from typing import List

from sami_captions.core.records import CaptionRecord, dump_caption_json
from sami_captions.formatters.base import BaseFormatter, FormatterOutput


class CaptionJSONFormatter(BaseFormatter):

    @property
    def name(self) -> str:
        return "Caption JSON"

    def format(self, records: List[CaptionRecord]) -> List[FormatterOutput]:
        return [
            FormatterOutput(
                suffix=".json",
                content=dump_caption_json(records),
                media_type="application/json",
            )
        ]
