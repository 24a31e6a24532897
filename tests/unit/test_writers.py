# tests/unit/test_writers.py

"""Unit tests for the prefixing and fan-out writers."""

import io

import pytest

from cliharness.writers import MultiWriter, PrefixedLineWriter


class RecordingSink:
    """Remembers every call made to it."""

    def __init__(self):
        self.writes: list[str] = []
        self.flushes = 0
        self.closed = False

    def write(self, data: str) -> int:
        self.writes.append(data)
        return len(data)

    def flush(self) -> None:
        self.flushes += 1

    def close(self) -> None:
        self.closed = True


class TestPrefixedLineWriter:
    def test_prefixes_first_line(self):
        target = io.StringIO()
        writer = PrefixedLineWriter("> ", target)

        writer.write("hello")

        assert target.getvalue() == "> hello"

    def test_prefixes_every_line_inside_one_write(self):
        target = io.StringIO()
        writer = PrefixedLineWriter("> ", target)

        writer.write("one\ntwo\nthree\n")

        assert target.getvalue() == "> one\n> two\n> three\n"

    def test_trailing_newline_defers_prefix_to_next_write(self):
        target = io.StringIO()
        writer = PrefixedLineWriter("> ", target)

        writer.write("one\n")
        assert target.getvalue() == "> one\n"

        writer.write("two")
        assert target.getvalue() == "> one\n> two"

    def test_partial_lines_across_writes_are_not_reprefixed(self):
        target = io.StringIO()
        writer = PrefixedLineWriter("> ", target)

        writer.write("hel")
        writer.write("lo\nwor")
        writer.write("ld")

        assert target.getvalue() == "> hello\n> world"

    @pytest.mark.parametrize(
        "text, expected_prefixes",
        [
            ("", 0),
            ("a", 1),
            ("a\n", 1),
            ("a\nb", 2),
            ("\n\n", 2),
            ("x\ny\nz\n", 3),
        ],
    )
    def test_prefix_count_matches_line_starts(self, text, expected_prefixes):
        target = RecordingSink()
        writer = PrefixedLineWriter("#", target)

        writer.write(text)

        assert target.writes.count("#") == expected_prefixes

    def test_split_writes_match_single_write(self):
        text = "first line\nsecond\n\nlast without newline"
        single = io.StringIO()
        PrefixedLineWriter("   ", single).write(text)

        for split in range(len(text) + 1):
            split_target = io.StringIO()
            writer = PrefixedLineWriter("   ", split_target)
            writer.write(text[:split])
            writer.write(text[split:])
            assert split_target.getvalue() == single.getvalue(), f"split at {split}"

    def test_return_value_excludes_prefix(self):
        writer = PrefixedLineWriter(">>>>", io.StringIO())

        assert writer.write("ab\ncd\n") == 6

    def test_handles_non_ascii_code_points(self):
        target = io.StringIO()
        writer = PrefixedLineWriter("| ", target)

        count = writer.write("héllo\n日本\n")

        assert target.getvalue() == "| héllo\n| 日本\n"
        assert count == 9

    def test_close_does_not_close_target(self):
        target = RecordingSink()
        writer = PrefixedLineWriter("> ", target)

        writer.close()

        assert target.closed is False

    def test_flush_is_forwarded(self):
        target = RecordingSink()
        PrefixedLineWriter("> ", target).flush()

        assert target.flushes == 1


class TestMultiWriter:
    def test_every_target_receives_identical_content(self):
        targets = [RecordingSink() for _ in range(3)]
        writer = MultiWriter(*targets)

        writer.write("abc")
        writer.write("\ndef")

        for target in targets:
            assert target.writes == ["abc", "\ndef"]

    def test_forwards_in_registration_order(self):
        order: list[str] = []

        class NamedSink(RecordingSink):
            def __init__(self, name):
                super().__init__()
                self.name = name

            def write(self, data):
                order.append(self.name)
                return super().write(data)

        writer = MultiWriter(NamedSink("first"), NamedSink("second"))
        writer.write("x")

        assert order == ["first", "second"]

    def test_close_and_flush_reach_every_target(self):
        targets = [RecordingSink(), RecordingSink()]
        writer = MultiWriter(*targets)

        writer.flush()
        writer.close()

        assert all(t.flushes == 1 for t in targets)
        assert all(t.closed for t in targets)

    def test_prefixed_and_raw_views(self):
        console = io.StringIO()
        raw = RecordingSink()
        writer = MultiWriter(PrefixedLineWriter("  ", console), raw)

        writer.write("a\nb\n")
        writer.close()

        assert console.getvalue() == "  a\n  b\n"
        assert "".join(raw.writes) == "a\nb\n"
        assert raw.closed is True
        assert console.closed is False

    def test_no_targets_is_a_no_op(self):
        writer = MultiWriter()
        writer.write("ignored")
        writer.close()


class TestOptionalFlush:
    class WriteOnlySink:
        def __init__(self):
            self.data = ""

        def write(self, data: str) -> int:
            self.data += data
            return len(data)

        def close(self) -> None:
            pass

    def test_flush_skips_targets_without_flush(self):
        plain = self.WriteOnlySink()
        recording = RecordingSink()
        writer = MultiWriter(PrefixedLineWriter("> ", plain), recording)

        writer.write("x\n")
        writer.flush()

        assert plain.data == "> x\n"
        assert recording.flushes == 1
