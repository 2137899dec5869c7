"""Caption record dataclass, caption JSON I/O, and timestamp validation.

WHY: SAMI markup and the upstream caption JSON describe the same thing,
an ordered list of timed caption texts, in very different shapes. The
CaptionRecord gives the parser and all formatters a single, well-typed
intermediate form, decoupling markup parsing from output generation.

HOW: CaptionRecord mirrors one entry of the proprietary caption JSON.
load_caption_json() validates incoming JSON against the bundled schema
(caption_schema.json) with jsonschema before building records.
validate_records() is a separate, optional pass that reports ordering
and range problems; neither the parser nor the generator calls it.

RULES:
- All times are integer microseconds from media start
- end_time_micro is None when the caption is cleared by the next record
- text is never None; "" is the blank-frame convention
- text may contain the macros {break}, {italic}, {end-italic}
- List order is display order and is preserved end to end
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema

SCHEMA_PATH = Path(__file__).resolve().parent / "caption_schema.json"


@dataclass
class CaptionRecord:
    """One timed caption: text shown from start until end (or the next record).

    WHY: Both directions of the converter need a unit that carries timing
    and macro-annotated text without any markup.

    RULES:
    - start_time_micro: required for every record with text; the parser
      may leave it None only for a record it never saw a start time for
    - end_time_micro: optional clear time, >= start_time_micro when present
    - text: macro-annotated text, "" for a blank frame
    """

    start_time_micro: Optional[int]
    end_time_micro: Optional[int] = None
    text: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> CaptionRecord:
        """Build a record from a caption JSON object (camelCase keys)."""
        return cls(
            start_time_micro=data.get("startTimeMicro"),
            end_time_micro=data.get("endTimeMicro"),
            text=data.get("text", ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to a caption JSON object, omitting absent times."""
        result: Dict[str, Any] = {}
        if self.start_time_micro is not None:
            result["startTimeMicro"] = self.start_time_micro
        if self.end_time_micro is not None:
            result["endTimeMicro"] = self.end_time_micro
        result["text"] = self.text
        return result


def load_schema() -> Dict[str, Any]:
    with open(SCHEMA_PATH, encoding="utf-8") as f:
        return json.load(f)


def load_caption_json(content: str | bytes) -> List[CaptionRecord]:
    """Parse and validate caption JSON into CaptionRecord objects.

    WHY: Upstream JSON is produced by another system; a malformed entry
    should be rejected at the boundary, not surface later as a broken
    SAMI line.

    HOW: json.loads, then jsonschema.validate against caption_schema.json,
    then CaptionRecord.from_dict for every entry in order.

    Args:
        content: Caption JSON text (or UTF-8 bytes).

    Returns:
        Records in file order.

    Raises:
        json.JSONDecodeError: If the content is not JSON.
        jsonschema.ValidationError: If the JSON does not match the schema.
    """
    data = json.loads(content)
    jsonschema.validate(instance=data, schema=load_schema())
    return [CaptionRecord.from_dict(item) for item in data]


def dump_caption_json(records: List[CaptionRecord]) -> str:
    """Serialise records to pretty-printed caption JSON (trailing newline)."""
    return json.dumps(
        [record.to_dict() for record in records],
        indent=2,
        ensure_ascii=False,
    ) + "\n"


def validate_records(records: List[CaptionRecord]) -> List[str]:
    """Report timing problems in a record sequence without raising.

    WHY: The parser and generator trust caller-supplied ordering, so bad
    timestamps pass straight through. Callers that care can run this pass
    explicitly and decide what to do with the findings.

    HOW: Single walk over the records, tracking the previous start time.

    RULES:
    - A record with text but no start time is reported
    - Negative start or end times are reported
    - end_time_micro < start_time_micro is reported
    - A start time lower than the previous record's start is reported
    - Blank-frame records without a start time are not reported

    Returns:
        Human-readable issue strings, prefixed with the 1-based record
        number. Empty list when the sequence is valid.
    """
    issues: List[str] = []
    previous_start: Optional[int] = None

    for number, record in enumerate(records, start=1):
        start = record.start_time_micro
        end = record.end_time_micro

        if start is None:
            if record.text:
                issues.append("record {}: text without a start time".format(number))
        elif start < 0:
            issues.append("record {}: negative start time {}".format(number, start))

        if end is not None:
            if end < 0:
                issues.append("record {}: negative end time {}".format(number, end))
            if start is not None and end < start:
                issues.append(
                    "record {}: end time {} is before start time {}".format(number, end, start)
                )

        if start is not None:
            if previous_start is not None and start < previous_start:
                issues.append(
                    "record {}: start time {} is before previous start time {}".format(
                        number, start, previous_start
                    )
                )
            previous_start = start

    return issues
