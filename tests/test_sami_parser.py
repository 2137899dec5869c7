"""Unit tests for the SAMI tokenizer and parser state machine.

WHY: The parser reconstructs start/end pairs from a flat stream of sync
tags and text. Off-by-one state handling (a sync time consumed by the
wrong text, a preamble leaking into the first cue) shifts or merges
captions without any visible error.

HOW: Small hand-written markup fragments for each transition, the shared
SAMPLE_SAMI document, and direct event feeding to show the state
machine does not depend on the bundled tokenizer.
"""

from sami_captions.core.records import CaptionRecord
from sami_captions.formatters.sami import SAMIFormatter
from sami_captions.parsers.sami import (
    CloseTag,
    OpenTag,
    SAMIParser,
    Text,
    parse_sami,
    tokenize,
)


class TestTokenizer:

    def test_events_in_order(self):
        events = tokenize("<SYNC Start=1>a&nbsp;b</SYNC>")
        assert events == [
            OpenTag("sync", {"start": "1"}),
            Text("a&nbsp;b"),
            CloseTag("sync"),
        ]

    def test_entities_kept_raw(self):
        events = tokenize("<p>&nbsp;</p>")
        assert Text("&nbsp;") in events

    def test_self_closing_tag_is_open_tag(self):
        events = tokenize("a<br/>b")
        assert events == [Text("a"), OpenTag("br", {}), Text("b")]


class TestParseSami:

    def test_sync_br_sentinel(self):
        records = parse_sami("<sync start=1000>Hello<br>World<sync start=4000>&nbsp;")
        assert records == [
            CaptionRecord(start_time_micro=1000000, end_time_micro=4000000, text="Hello{break}World"),
        ]

    def test_sample_document(self, sample_sami):
        records = parse_sami(sample_sami)
        assert records == [
            CaptionRecord(start_time_micro=1000000, end_time_micro=4000000, text="Hello{break}World"),
            CaptionRecord(start_time_micro=5500000, end_time_micro=7250000, text="{italic}Whispering{end-italic}"),
        ]

    def test_preamble_discarded(self, sample_sami):
        records = parse_sami(sample_sami)
        assert all("Episode" not in r.text for r in records)
        assert all("font-family" not in r.text for r in records)

    def test_start_zero_is_valid(self):
        records = parse_sami("<sync start=0>Hi<sync start=1000>&nbsp;")
        assert records == [CaptionRecord(start_time_micro=0, end_time_micro=1000000, text="Hi")]

    def test_text_is_trimmed(self):
        records = parse_sami("<sync start=1000>  Hi  <sync start=2000>  &nbsp;  ")
        assert records[0].text == "Hi"
        assert records[0].end_time_micro == 2000000

    def test_whitespace_between_sync_and_sentinel(self):
        records = parse_sami("<SYNC Start=1000>\n<P>Hi\n<SYNC Start=2000>\n<P>&nbsp;\n")
        assert records == [CaptionRecord(start_time_micro=1000000, end_time_micro=2000000, text="Hi")]

    def test_consecutive_cues_without_clear(self):
        records = parse_sami(
            "<sync start=1000>A<sync start=2000>B<sync start=3000>&nbsp;"
        )
        assert records == [
            CaptionRecord(start_time_micro=1000000, text="A"),
            CaptionRecord(start_time_micro=2000000, end_time_micro=3000000, text="B"),
        ]

    def test_blank_frame_gets_start_time(self):
        records = parse_sami("<sync start=8000>&nbsp;")
        assert records == [CaptionRecord(start_time_micro=8000000, text="")]

    def test_other_entities_preserved(self):
        records = parse_sami("<sync start=1000>Tom &amp; Jerry<sync start=2000>&nbsp;")
        assert records[0].text == "Tom &amp; Jerry"

    def test_sync_without_start_ignored(self):
        records = parse_sami("<sync start=1000>A<sync>B<sync start=3000>&nbsp;")
        assert records == [CaptionRecord(start_time_micro=1000000, end_time_micro=3000000, text="AB")]

    def test_fractional_milliseconds(self):
        records = parse_sami("<sync start=1000.5>A<sync start=2000>&nbsp;")
        assert records[0].start_time_micro == 1000500

    def test_empty_input(self):
        assert parse_sami("") == []


class TestTrailingCuePolicy:

    def test_dropped_by_default(self):
        assert parse_sami("<sync start=1000>Hi<sync start=2000>&nbsp;<sync start=3000>Tail") == [
            CaptionRecord(start_time_micro=1000000, end_time_micro=2000000, text="Hi"),
        ]

    def test_flushed_on_request(self):
        records = parse_sami("<sync start=1000>Tail", flush_trailing=True)
        assert records == [CaptionRecord(start_time_micro=1000000, text="Tail")]

    def test_flush_with_nothing_pending(self):
        records = parse_sami("<sync start=1000>Hi<sync start=2000>&nbsp;", flush_trailing=True)
        assert len(records) == 1


class TestStateMachine:

    def test_accepts_events_from_any_source(self):
        parser = SAMIParser()
        parser.feed_events([
            OpenTag("SYNC", {"Start": "1500"}),
            Text("Line one"),
            OpenTag("BR"),
            Text("Line two"),
            CloseTag("SYNC"),
            OpenTag("sync", {"start": "2500"}),
            Text("&nbsp;"),
        ])
        assert parser.close() == [
            CaptionRecord(start_time_micro=1500000, end_time_micro=2500000, text="Line one{break}Line two"),
        ]

    def test_pending_time_consumed_by_text(self):
        parser = SAMIParser()
        parser.handle_event(OpenTag("sync", {"start": "10"}))
        assert parser.pending_time_micro == 10000
        parser.handle_event(Text("x"))
        assert parser.pending_time_micro is None
        assert parser.current.start_time_micro == 10000
        assert parser.text == "x"

    def test_close_tags_other_than_italic_ignored(self):
        parser = SAMIParser()
        parser.handle_event(OpenTag("sync", {"start": "10"}))
        parser.handle_event(Text("x"))
        parser.handle_event(CloseTag("p"))
        assert parser.text == "x"


class TestCueBoundaries:

    def test_italic_cue_after_unterminated_cue(self):
        records = parse_sami(
            "<sync start=1000>A<sync start=2000><i>B</i><sync start=3000>&nbsp;"
        )
        assert records == [
            CaptionRecord(start_time_micro=1000000, text="A"),
            CaptionRecord(start_time_micro=2000000, end_time_micro=3000000, text="{italic}B{end-italic}"),
        ]

    def test_repeated_clear_ignored(self):
        records = parse_sami(
            "<sync start=1000>A<sync start=2000><p>&nbsp;</p><p>&nbsp;</p>"
        )
        assert records == [
            CaptionRecord(start_time_micro=1000000, end_time_micro=2000000, text="A"),
        ]


class TestStartTimeInvariant:

    MARKUP = (
        "<sync start=1000>A<sync start=2000>&nbsp;"
        "<sync start=x>B<sync start=3000>&nbsp;"
    )

    def test_text_without_start_dropped(self, caplog):
        records = parse_sami(self.MARKUP)
        assert records == [
            CaptionRecord(start_time_micro=1000000, end_time_micro=2000000, text="A"),
        ]
        assert any("without a start time" in r.getMessage() for r in caplog.records)

    def test_every_text_record_has_start(self):
        markups = [
            self.MARKUP,
            "stray<sync start=bad>text<sync start=1000>&nbsp;",
            "<sync>orphan",
        ]
        for markup in markups:
            for flush in (False, True):
                for record in parse_sami(markup, flush_trailing=flush):
                    if record.text:
                        assert record.start_time_micro is not None

    def test_output_still_generates(self):
        output = SAMIFormatter().generate(parse_sami(self.MARKUP))
        assert "<SYNC Start=1000><P Class=ENUSCC>A</P></SYNC>" in output
        assert ">B<" not in output


class TestBlankFrameAfterOpenCue:

    def test_clear_becomes_end_of_open_cue(self):
        records = [
            CaptionRecord(start_time_micro=1000000, text="A"),
            CaptionRecord(start_time_micro=2000000, text=""),
        ]
        parsed = parse_sami(SAMIFormatter().generate(records))
        assert parsed == [
            CaptionRecord(start_time_micro=1000000, end_time_micro=2000000, text="A"),
        ]
