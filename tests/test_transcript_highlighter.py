import pytest

from cuesync.cue_index import NO_CUE
from cuesync.models import Cue
from cuesync.similarity import TokenSetScorer
from cuesync.sync_controller import SyncController
from cuesync.transcript_highlighter import TranscriptHighlighter


@pytest.fixture
def highlights():
    return []


@pytest.fixture
def highlighter(transcript_lines, highlights):
    h = TranscriptHighlighter(on_highlight=lambda i, text, score: highlights.append((i, text)))
    h.set_lines(transcript_lines)
    return h


def test_cue_highlights_best_line(highlighter, highlights):
    cue = Cue(11.0, 14.0, "It's just around the corner, next to the bank.")
    result = highlighter.handle_cue_change(cue, 3)

    assert result.line_index == 1
    assert highlighter.highlighted_index == 1
    assert highlighter.highlighted_line == "It is just around the corner next to the bank."
    assert highlights == [(1, "It is just around the corner next to the bank.")]


def test_unmatched_cue_clears_highlight_without_callback(highlighter, highlights):
    highlighter.handle_cue_change(Cue(8.0, 11.0, "Excuse me, where is the train station?"), 2)
    result = highlighter.handle_cue_change(Cue(0.0, 3.0, "Welcome to EnglishPod, I'm Marco."), 0)

    assert result is None
    assert highlighter.highlighted_index == NO_CUE
    assert highlighter.highlighted_line is None
    assert highlights == [(0, "Excuse me, where is the train station?")]


def test_threshold_is_configurable(transcript_lines):
    h = TranscriptHighlighter(min_score=0.75)
    h.set_lines(transcript_lines)
    assert h.handle_cue_change(Cue(11.0, 14.0, "It's just around the corner, next to the bank."), 3) is None


def test_alternative_scorer(transcript_lines):
    h = TranscriptHighlighter(scorer=TokenSetScorer())
    h.set_lines(transcript_lines)
    result = h.handle_cue_change(Cue(8.0, 11.0, "where is the train station"), 2)
    assert result.line_index == 0


def test_manual_selection(highlighter, highlights):
    highlighter.select(2)
    assert highlighter.highlighted_index == 2
    assert highlights == [(2, "Thank you so much!")]
    with pytest.raises(IndexError):
        highlighter.select(3)


def test_set_lines_resets_highlight(highlighter):
    highlighter.select(0)
    highlighter.set_lines(["new line"])
    assert highlighter.highlighted_index == NO_CUE
    assert highlighter.lines == ["new line"]


def test_attached_to_controller_follows_playback(lesson_vtt, highlighter, highlights):
    controller = SyncController()
    highlighter.attach(controller)
    controller.load_payload(lesson_vtt)

    for t in [0.5, 1.0, 7.0, 9.0, 10.9, 12.0, 20.0]:
        controller.update(t)

    # gap at 7.0 and after-end at 20.0 leave the last highlight in place
    assert [i for i, _ in highlights] == [0, 1]
    assert highlighter.highlighted_index == 1
