import logging

import pytest

from cuesync.models import Cue


LESSON_VTT = """WEBVTT
Kind: captions
Language: en

NOTE generated by whisper

00:00:00.000 --> 00:00:03.000
Welcome to EnglishPod, I'm Marco.

00:00:03.000 --> 00:00:06.500
And I'm Erica.

00:00:08.000 --> 00:00:11.000
Excuse me, where is the
train station?

00:00:11.000 --> 00:00:14.000
It's just around the corner, next to the bank.
"""

TRANSCRIPT_LINES = [
    "Excuse me, where is the train station?",
    "It is just around the corner next to the bank.",
    "Thank you so much!",
]


@pytest.fixture
def lesson_vtt():
    return LESSON_VTT


@pytest.fixture
def transcript_lines():
    return list(TRANSCRIPT_LINES)


@pytest.fixture
def adjacent_cues():
    return [Cue(0.0, 3.0, "a"), Cue(3.0, 7.0, "b"), Cue(10.0, 12.0, "c")]


@pytest.fixture
def restore_root_logging():
    """Undo handler changes made by setup_logging inside a test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
