from __future__ import annotations

import pytest

from nextedit.nes.fingerprint import capture_original_text
from tests.helpers import edit


def test_single_line_range_returns_substring(make_document) -> None:
    doc = make_document("hello world")

    assert capture_original_text(edit(0, 6, 11, "there"), doc) == "world"


def test_multi_line_range_joins_suffix_middle_and_prefix(make_document) -> None:
    doc = make_document("abc\ndef\nghi")

    assert capture_original_text(edit(0, 1, 2, "", end_line=2), doc) == "bc\ndef\ngh"


@pytest.mark.parametrize(
    ("line", "expected"),
    [(3, "foo"), (0, ""), (1, "first")],
)
def test_zero_width_insertion_at_line_start_uses_previous_line(line: int, expected: str, make_document) -> None:
    doc = make_document("first\nsecond\nfoo\nbar")

    assert capture_original_text(edit(line, 0, 0, "new line\n"), doc) == expected


def test_zero_width_insertion_mid_line_stays_empty(make_document) -> None:
    doc = make_document("first\nsecond")

    assert capture_original_text(edit(1, 3, 3, "x"), doc) == ""


def test_unreadable_lines_yield_none(make_document) -> None:
    doc = make_document("only line")

    assert capture_original_text(edit(10, 0, 3, "x"), doc) is None
    assert capture_original_text(edit(0, 0, 2, "x", end_line=4), doc) is None


def test_range_ending_just_past_last_line_reads_virtual_empty_line(make_document) -> None:
    doc = make_document("keep\ndrop")

    assert capture_original_text(edit(1, 0, 0, "", end_line=2), doc) == "drop\n"


def test_offsets_are_utf16_code_units(make_document) -> None:
    doc = make_document("a\U0001F600bc")

    # The emoji occupies two UTF-16 code units.
    assert capture_original_text(edit(0, 1, 3, ""), doc) == "\U0001F600"
    assert capture_original_text(edit(0, 3, 5, ""), doc) == "bc"


def test_clamping_collaborator_is_treated_as_unavailable() -> None:
    class ClampingSource:
        def get_lines(self, start: int, end: int) -> list[str]:
            return ["one", "two"][start:end]

    assert capture_original_text(edit(1, 0, 1, "x", end_line=5), ClampingSource()) is None
