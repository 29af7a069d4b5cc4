"""Tests for output sinks and the email/phone filters."""

from __future__ import annotations

import io

from spoder.output.filters import categorize, find_emails, find_phone_numbers
from spoder.output.sinks import CollectingSink, FileSink, PrintSink, drain
from spoder.scraper.models import TextSegment


# ---------------------------------------------------------------------------
# Sinks
# ---------------------------------------------------------------------------

class TestPrintSink:
    def test_writes_one_segment_per_line(self) -> None:
        stream = io.StringIO()
        sink = PrintSink(stream)
        drain([TextSegment(b"Hello "), TextSegment(b"World")], sink)
        sink.close()
        assert stream.getvalue() == "Hello \nWorld\n"

    def test_custom_separator(self) -> None:
        stream = io.StringIO()
        sink = PrintSink(stream, separator="")
        drain(["a", "b"], sink)
        assert stream.getvalue() == "ab"

    def test_defaults_to_current_stdout(self, capsys) -> None:
        sink = PrintSink()
        sink.write(TextSegment(b"out"))
        sink.close()
        assert capsys.readouterr().out == "out\n"


class TestFileSink:
    def test_writes_utf8_file(self, tmp_path) -> None:
        path = tmp_path / "out.txt"
        with FileSink(path) as sink:
            count = drain([TextSegment("café".encode("utf-8")), "plain"], sink)

        assert count == 2
        assert path.read_text(encoding="utf-8") == "café\nplain\n"

    def test_close_twice(self, tmp_path) -> None:
        sink = FileSink(tmp_path / "x.txt")
        sink.close()
        sink.close()


class TestCollectingSink:
    def test_keeps_order(self) -> None:
        sink = CollectingSink()
        assert drain((TextSegment(b) for b in (b"x", b"y", b"z")), sink) == 3
        assert sink.segments == ["x", "y", "z"]
        assert sink.text == "xyz"

    def test_drain_empty(self) -> None:
        sink = CollectingSink()
        assert drain([], sink) == 0
        assert sink.segments == []


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------

class TestFindEmails:
    def test_finds_addresses_in_order(self) -> None:
        text = "Write to info@example.com or sales.team+eu@mail.example.org today."
        assert find_emails(text) == ["info@example.com", "sales.team+eu@mail.example.org"]

    def test_deduplicates(self) -> None:
        assert find_emails("a@b.io a@b.io c@d.io") == ["a@b.io", "c@d.io"]

    def test_ignores_non_addresses(self) -> None:
        assert find_emails("no at sign here, nor user@localhost") == []


class TestFindPhoneNumbers:
    def test_international_format(self) -> None:
        assert find_phone_numbers("Call +1 (555) 123-4567 now") == ["+1 (555) 123-4567"]

    def test_plain_digits(self) -> None:
        assert find_phone_numbers("tel: 0301234567.") == ["0301234567"]

    def test_too_short_is_ignored(self) -> None:
        assert find_phone_numbers("Room 12-34, floor 5") == []

    def test_deduplicates(self) -> None:
        text = "555-123-4567 or 555-123-4567"
        assert find_phone_numbers(text) == ["555-123-4567"]


class TestCategorize:
    def test_only_requested_buckets(self) -> None:
        groups = categorize(["mail me: a@b.io"], emails=True)
        assert groups == {"email": ["a@b.io"], "text": ["mail me: a@b.io"]}

    def test_match_across_segments(self) -> None:
        segments = [TextSegment(b"contact: info@"), TextSegment(b"example.com")]
        groups = categorize(segments, emails=True, phones=True)
        assert groups["email"] == ["info@example.com"]
        assert groups["tel"] == []
        assert groups["text"] == ["contact: info@", "example.com"]

    def test_no_filters(self) -> None:
        assert categorize(["x"]) == {"text": ["x"]}
