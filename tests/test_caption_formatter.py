import pytest

from cuesync.caption_formatter import VTTFormatter
from cuesync.cue_parser import parse_vtt
from cuesync.exceptions import FormattingError
from cuesync.models import Segment, TranscriptionResult
from cuesync.utils import format_time_vtt


@pytest.mark.parametrize("seconds, expected", [
    (0, "00:00:00.000"),
    (3723.4, "01:02:03.400"),
    (59.9996, "00:01:00.000"),
    (-2, "00:00:00.000"),
])
def test_format_time_vtt(seconds, expected):
    assert format_time_vtt(seconds) == expected


def test_render_document():
    document = VTTFormatter().render([
        Segment(0.0, 2.5, " Hello there. "),
        Segment(2.5, 4.0, "How are\nyou?"),
    ])
    assert document == (
        "WEBVTT\n\n"
        "00:00:00.000 --> 00:00:02.500\nHello there.\n\n"
        "00:00:02.500 --> 00:00:04.000\nHow are you?\n"
    )


def test_empty_and_zero_length_segments(tmp_path):
    result = TranscriptionResult(language="en", segments=[
        Segment(1.0, 1.0, "instant"),
        Segment(2.0, 3.0, "   "),
        Segment(3.0, 4.0, "normal"),
    ])
    path = tmp_path / "lesson.vtt"

    count = VTTFormatter().format_captions(result, str(path))

    assert count == 2
    cues = parse_vtt(path.read_text(encoding="utf-8"))
    assert [c.text for c in cues] == ["instant", "normal"]
    assert cues[0].end == pytest.approx(1.1)


def test_unwritable_path(tmp_path):
    result = TranscriptionResult(language="en", segments=[Segment(0, 1, "x")])
    with pytest.raises(FormattingError):
        VTTFormatter().format_captions(result, str(tmp_path / "missing" / "lesson.vtt"))


def test_written_file_matches_render(tmp_path):
    segments = [Segment(0.0, 1.0, "one"), Segment(1.0, 2.0, ""), Segment(2.0, 3.0, "two")]
    path = tmp_path / "lesson.vtt"

    count = VTTFormatter().format_captions(TranscriptionResult(language="en", segments=segments), str(path))

    assert count == 2
    assert path.read_text(encoding="utf-8") == VTTFormatter().render(segments)
