"""SAMI markup parser: tag/text events → CaptionRecord list.

WHY: SAMI does not describe captions as (start, end, text) triples. It
is a stream of <SYNC Start=ms> tags, each followed by the text visible
from that moment; a sync whose only text is &nbsp; clears the screen.
Recovering records means pairing sync times with the text that follows
and spotting the clear sentinel, which is inherently stateful.

HOW: Two layers.
  TagEventTokenizer: wraps html.parser.HTMLParser and turns markup
                     into OpenTag / Text / CloseTag events in document
                     order, keeping entity references raw.
  SAMIParser:        an explicit state machine (pending time, text
                     accumulator, record under construction, output)
                     advanced by handle_event(). It accepts events from
                     any tokenizer that produces the same three types.

RULES:
- <SYNC Start=ms> stores ms * 1000 as the pending time
- The first <SYNC> discards any preamble text (title, style sheet)
- <br> adds {break}; <i> and </i> add {italic} and {end-italic}
- Text equal to &nbsp; after trimming closes the record under construction;
  a pending time becomes its end time (or its start time for a blank frame)
- Other text takes a pending time as the record's start and is appended
- Whitespace-only text does not change state
- A clear sentinel with no pending time and no open record is ignored
- Text that never received a start time is dropped with a warning
- A clear sentinel right after an open-ended cue becomes that cue's end
  time, not a separate blank frame (both mean "nothing shown from here")
- A trailing record without a clear sentinel is dropped unless
  flush_trailing=True
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import Dict, Iterable, List, Optional, Tuple, Union

from sami_captions.core.macros import BREAK_MACRO, END_ITALIC_MACRO, ITALIC_MACRO
from sami_captions.core.profiles import NBSP
from sami_captions.core.records import CaptionRecord

logger = logging.getLogger(__name__)

SYNC_TAG = "sync"
BR_TAG = "br"
ITALIC_TAG = "i"
START_ATTRIB = "start"


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass
class OpenTag:
    name: str
    attrs: Dict[str, Optional[str]] = field(default_factory=dict)


@dataclass
class Text:
    data: str


@dataclass
class CloseTag:
    name: str


TagEvent = Union[OpenTag, Text, CloseTag]


class TagEventTokenizer(HTMLParser):
    """HTMLParser adapter that records tag and text events in order.

    WHY: HTMLParser splits text around every entity reference and, by
    default, converts them. The parser needs each run of text between two
    tags as one event with &nbsp; intact, so it can compare the whole run
    against the sentinel.

    HOW: convert_charrefs=False routes entities to handle_entityref /
    handle_charref, which re-emit them raw into a text buffer. The buffer
    is flushed as a single Text event whenever a tag, comment or the end
    of input is reached.
    """

    def __init__(self) -> None:
        super().__init__(convert_charrefs=False)
        self.events: List[TagEvent] = []
        self._text: List[str] = []

    def _flush_text(self) -> None:
        if self._text:
            self.events.append(Text("".join(self._text)))
            self._text = []

    def handle_starttag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        self._flush_text()
        self.events.append(OpenTag(tag, dict(attrs)))

    def handle_startendtag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        self.handle_starttag(tag, attrs)

    def handle_endtag(self, tag: str) -> None:
        self._flush_text()
        self.events.append(CloseTag(tag))

    def handle_data(self, data: str) -> None:
        self._text.append(data)

    def handle_entityref(self, name: str) -> None:
        self._text.append("&{};".format(name))

    def handle_charref(self, name: str) -> None:
        self._text.append("&#{};".format(name))

    def handle_comment(self, data: str) -> None:
        self._flush_text()

    def close(self) -> None:
        super().close()
        self._flush_text()


def tokenize(markup: str) -> List[TagEvent]:
    """Tokenize SAMI markup into tag/text events in document order."""
    tokenizer = TagEventTokenizer()
    tokenizer.feed(markup)
    tokenizer.close()
    return tokenizer.events


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------


def _parse_start(value: Optional[str]) -> Optional[int]:
    """Convert a Start attribute (milliseconds) to microseconds, or None."""
    if value is None:
        return None
    value = value.strip()
    try:
        return int(value) * 1000
    except ValueError:
        pass
    try:
        return int(float(value) * 1000)
    except (ValueError, OverflowError):
        return None


class SAMIParser:
    """Explicit state machine that rebuilds caption records from SAMI events.

    WHY: Sync times and caption text arrive as separate events; a record
    is only complete once the clear sentinel (or the next cue) arrives.

    HOW: handle_event() dispatches on event type and updates four pieces
    of state: pending_time_micro, text, current and records. close()
    applies the trailing-cue policy and returns the records.

    RULES:
    - pending_time_micro is None when no sync time is waiting; 0 is a valid time
    - records is append-only and in encounter order
    - A new timed text while current already has a start and text ends
      current (without an end time) and starts a new record
    - Every emitted record with text has a start time
    """

    def __init__(self) -> None:
        self.pending_time_micro: Optional[int] = None
        self.text = ""
        self.current = CaptionRecord(start_time_micro=None)
        self.records: List[CaptionRecord] = []
        self._seen_sync = False

    def handle_event(self, event: TagEvent) -> None:
        if isinstance(event, OpenTag):
            self._on_open_tag(event.name.lower(), event.attrs)
        elif isinstance(event, Text):
            self._on_text(event.data)
        elif isinstance(event, CloseTag):
            self._on_close_tag(event.name.lower())

    def feed_events(self, events: Iterable[TagEvent]) -> None:
        for event in events:
            self.handle_event(event)

    def close(self, flush_trailing: bool = False) -> List[CaptionRecord]:
        """Finish parsing and return the records.

        Args:
            flush_trailing: Emit a started record that never saw a clear
                sentinel instead of dropping it.
        """
        if self._has_content():
            if flush_trailing:
                self._push()
            else:
                logger.debug(
                    "Dropping unterminated caption at %s: %r",
                    self.current.start_time_micro,
                    self.text,
                )
        return self.records

    def _has_content(self) -> bool:
        return self.current.start_time_micro is not None or bool(self.text)

    def _push(self) -> None:
        if self.current.start_time_micro is None and self.text:
            logger.warning("Dropping caption text without a start time: %r", self.text)
        else:
            self.current.text = self.text
            self.records.append(self.current)
        self.current = CaptionRecord(start_time_micro=None)
        self.text = ""

    def _append(self, fragment: str) -> None:
        if self.pending_time_micro is not None:
            if self.current.start_time_micro is not None and self.text:
                self._push()
            self.current.start_time_micro = self.pending_time_micro
            self.pending_time_micro = None
        self.text += fragment

    def _on_open_tag(self, name: str, attrs: Dict[str, Optional[str]]) -> None:
        if name == SYNC_TAG:
            attrs = {key.lower(): value for key, value in attrs.items()}
            time_micro = _parse_start(attrs.get(START_ATTRIB))
            if time_micro is None:
                logger.warning("Ignoring <sync> without a usable start: %r", attrs.get(START_ATTRIB))
                return
            self.pending_time_micro = time_micro
            if not self._seen_sync:
                # everything before the first sync is header material
                self.text = ""
                self._seen_sync = True
        elif name == BR_TAG:
            self._append(BREAK_MACRO)
        elif name == ITALIC_TAG:
            self._append(ITALIC_MACRO)

    def _on_close_tag(self, name: str) -> None:
        if name == ITALIC_TAG:
            self._append(END_ITALIC_MACRO)

    def _on_text(self, data: str) -> None:
        data = data.strip()
        if not data:
            return

        if data != NBSP:
            self._append(data)
            return

        if self.pending_time_micro is None and not self._has_content():
            # repeated clear
            return

        if self.pending_time_micro is not None:
            if self.current.start_time_micro is None and not self.text:
                # blank frame
                self.current.start_time_micro = self.pending_time_micro
            else:
                self.current.end_time_micro = self.pending_time_micro
            self.pending_time_micro = None
        self._push()


def parse_sami(markup: str, flush_trailing: bool = False) -> List[CaptionRecord]:
    """Parse SAMI markup into caption records.

    Args:
        markup: Full SAMI document (or fragment) as text.
        flush_trailing: Keep a final cue that has no &nbsp; terminator.

    Returns:
        CaptionRecord list in document order.
    """
    parser = SAMIParser()
    parser.feed_events(tokenize(markup))
    return parser.close(flush_trailing=flush_trailing)
