"""Unit tests for seller notes sanitization."""

import pytest

from resale_gate.application.services.notes_sanitizer import sanitize_notes


@pytest.mark.parametrize("notes", [None, "", "   ", 42, ["a"]])
def test_empty_or_non_string_becomes_none(notes) -> None:
    assert sanitize_notes(notes) is None


def test_trims() -> None:
    assert sanitize_notes("  Row 3, seat 12  ") == "Row 3, seat 12"


def test_strips_tags() -> None:
    assert sanitize_notes("<b>Front row</b>") == "Front row"


def test_strips_event_handlers() -> None:
    assert "onclick" not in sanitize_notes('Great seat onclick="steal()"')


def test_truncates_to_1000() -> None:
    assert len(sanitize_notes("x" * 1500)) == 1000


def test_markup_only_becomes_none() -> None:
    assert sanitize_notes("<script></script>") is None


@pytest.mark.parametrize("notes", ["Donation=5 EUR", "Location = Hall B"])
def test_words_ending_in_on_are_kept(notes: str) -> None:
    assert sanitize_notes(notes) == notes


def test_handler_after_punctuation_stripped() -> None:
    assert sanitize_notes('Seat 4;onload=x()') == "Seat 4;x()"
