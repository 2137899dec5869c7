"""Shared test fixtures for the sami_captions test suite.

WHY: Parser, formatter, loader and CLI tests all need the same small
caption set and a matching SAMI document. Centralizing fixtures here
avoids duplication and keeps the expected values in one place.

HOW: Pytest fixtures provide a record list covering every macro, an end
time, a blank frame and a record cleared by its successor, plus a
hand-written SAMI document in the shape other tools produce.

RULES:
- All times are microseconds and multiples of 1000 (exact ms round-trip)
- SAMPLE_SAMI uses upper-case tags and a style block before the first sync
"""

from typing import List

import pytest

from sami_captions.core.records import CaptionRecord

SAMPLE_SAMI = """<SAMI>
<HEAD>
<TITLE>Episode 1</TITLE>
<STYLE TYPE="text/css">
<!--
P { font-family: Arial; }
.KRCC { Name: Korean; lang: ko-KR; SAMIType: CC; }
-->
</STYLE>
</HEAD>
<BODY>
<SYNC Start=1000><P Class=KRCC>Hello<br>World</P></SYNC>
<SYNC Start=4000><P Class=KRCC>&nbsp;</P></SYNC>
<SYNC Start=5500><P Class=KRCC><i>Whispering</i></P></SYNC>
<SYNC Start=7250><P Class=KRCC>&nbsp;</P></SYNC>
</BODY>
</SAMI>
"""


@pytest.fixture
def sample_records() -> List[CaptionRecord]:
    """Four records: macros, end times, a blank frame, an open-ended cue."""
    return [
        CaptionRecord(start_time_micro=1000000, end_time_micro=4000000, text="Hello{break}World"),
        CaptionRecord(start_time_micro=5500000, end_time_micro=7250000, text="{italic}Whispering{end-italic}"),
        CaptionRecord(start_time_micro=8000000, text=""),
        CaptionRecord(start_time_micro=9000000, end_time_micro=12000000, text="Goodbye"),
    ]


@pytest.fixture
def sample_sami() -> str:
    return SAMPLE_SAMI
