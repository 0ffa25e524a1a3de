"""Tests for the dialogue segmenter."""

import pytest

from line_rehearser.errors import NoValidContent
from line_rehearser.models import ScriptLine, SourceKind
from line_rehearser.parser import is_preformatted, parse_pasted, segment


def _pairs(script):
    return [(line.character, line.text) for line in script]


# --- Colon fast path ---

def test_fast_path_plain_formatted():
    """Already formatted plain text splits on colons."""
    script = segment("TOM: Hi\nJANE: Hello", SourceKind.PLAIN_FORMATTED)
    assert script == [
        ScriptLine(character="TOM", text="Hi", index=0),
        ScriptLine(character="JANE", text="Hello", index=1),
    ]


def test_fast_path_splits_on_first_colon_only():
    script = segment("TOM: Note: bring the key.", SourceKind.PLAIN_FORMATTED)
    assert _pairs(script) == [("TOM", "Note: bring the key.")]


def test_fast_path_drops_incomplete_lines():
    text = "TOM: Hi\nJANE:\n: orphan text\nno colon here\nJANE: Hello"
    assert _pairs(segment(text)) == [("TOM", "Hi"), ("JANE", "Hello")]


def test_fast_path_keeps_multiword_names_once_selected():
    """One matching line selects the path; other colon lines still count."""
    text = "TOM: Hi\nMARY JANE: Hello, Tom."
    assert _pairs(segment(text)) == [("TOM", "Hi"), ("MARY JANE", "Hello, Tom.")]


def test_fast_path_trims_whitespace():
    assert _pairs(segment("  TOM :   Hi there  \r\nJANE: Yo")) == [("TOM", "Hi there"), ("JANE", "Yo")]


def test_fast_path_not_used_for_unstructured():
    """Page-scraped text never takes the colon path."""
    with pytest.raises(NoValidContent):
        segment("TOM: Hi\nJANE: Hello", SourceKind.UNSTRUCTURED)


def test_is_preformatted():
    assert is_preformatted("Some title\nTOM: Hi")
    assert not is_preformatted("Tom: hi\nJANE says: hello")


# --- Heuristic path ---

def test_heuristic_screenplay():
    """Scene heading and parenthetical are skipped; cues pair with dialogue."""
    text = "INT. ROOM\nTOM\nHello there.\n(pause)\nJANE\nHi Tom."
    assert segment(text, SourceKind.PLAIN_FORMATTED) == [
        ScriptLine(character="TOM", text="Hello there.", index=0),
        ScriptLine(character="JANE", text="Hi Tom.", index=1),
    ]


def test_heuristic_same_result_when_unstructured():
    text = "INT. ROOM\nTOM\nHello there.\n(pause)\nJANE\nHi Tom."
    assert _pairs(segment(text, SourceKind.UNSTRUCTURED)) == [("TOM", "Hello there."), ("JANE", "Hi Tom.")]


def test_heuristic_skips_blank_lines_between_cue_and_dialogue():
    text = "TOM\n\n\n   \nHello there."
    assert _pairs(segment(text)) == [("TOM", "Hello there.")]


def test_heuristic_strips_cue_directions():
    text = "TOM (V.O.)\nWhere are you?\nJANE (CONT'D)\nRight here."
    assert _pairs(segment(text)) == [("TOM", "Where are you?"), ("JANE", "Right here.")]


def test_heuristic_rejects_uppercase_candidate():
    """A cue followed by another cue or a shout is not dialogue."""
    text = "TOM\nJANE\nWhat was that?"
    assert _pairs(segment(text)) == [("JANE", "What was that?")]


def test_heuristic_rejects_parenthetical_candidate():
    text = "TOM\n(quietly)\nHi."
    with pytest.raises(NoValidContent):
        segment(text)


def test_heuristic_rejects_scene_heading_candidate():
    text = "TOM\nEXT. Garden at dusk\nJANE\nLovely evening."
    assert _pairs(segment(text)) == [("JANE", "Lovely evening.")]


def test_heuristic_skips_page_numbers():
    text = "12.\nTOM\nHello.\n13.\nJANE\nHi."
    assert _pairs(segment(text)) == [("TOM", "Hello."), ("JANE", "Hi.")]


def test_heuristic_skips_boilerplate():
    text = "TOM\nSides by Breakdown Services\nHello."
    with pytest.raises(NoValidContent):
        segment(text)


def test_heuristic_long_uppercase_line_is_not_a_cue():
    heading = "A" * 50
    with pytest.raises(NoValidContent):
        segment(f"{heading}\nSomething happens.")
    assert _pairs(segment(f"{'B' * 49}\nSomething happens.")) == [("B" * 49, "Something happens.")]


def test_heuristic_consumes_dialogue_line():
    """The dialogue line is never reconsidered as a cue."""
    text = "TOM\nHello.\nJANE\nHi.\nTOM\nBye."
    script = segment(text)
    assert [line.index for line in script] == [0, 1, 2]
    assert _pairs(script)[2] == ("TOM", "Bye.")


def test_heuristic_cue_at_end_is_ignored():
    assert _pairs(segment("TOM\nHello.\nJANE\n\n")) == [("TOM", "Hello.")]


def test_unstructured_page_scrape_is_precleaned():
    raw = (
        "Sides by Breakdown Services - Page 1\n"
        "INT. KITCHEN - NIGHT   4/2/2024\n"
        "TOM      Did you see her?\n"
        "1.\n"
        "JANE\n"
        "(confused)\n"
        "JANE\n"
        "Who?\n"
    )
    assert _pairs(segment(raw, SourceKind.UNSTRUCTURED)) == [("TOM", "Did you see her?"), ("JANE", "Who?")]


# --- Failures ---

def test_no_valid_content():
    with pytest.raises(NoValidContent):
        segment("just some prose without any cues.\nmore prose.")


def test_empty_input():
    with pytest.raises(NoValidContent):
        segment("")


# --- Pasted lines ---

def test_parse_pasted_any_case():
    script = parse_pasted("Tom: hey\nJane: hi there\n\nnot a line")
    assert _pairs(script) == [("Tom", "hey"), ("Jane", "hi there")]
    assert [line.index for line in script] == [0, 1]


def test_parse_pasted_empty():
    with pytest.raises(NoValidContent):
        parse_pasted("nothing to see")
