import os

import pytest

from cuesync.caption_loader import CaptionLoader
from cuesync.exceptions import CaptionLoadError


def test_default_naming(tmp_path):
    loader = CaptionLoader(str(tmp_path))
    assert loader.caption_path("0042") == os.path.join(str(tmp_path), "englishpod_0042.vtt")


def test_custom_template(tmp_path):
    loader = CaptionLoader(str(tmp_path), "{code}.en.vtt")
    assert loader.caption_path("B12").endswith("B12.en.vtt")


def test_load_existing(tmp_path, lesson_vtt):
    (tmp_path / "englishpod_0001.vtt").write_text(lesson_vtt, encoding="utf-8")
    loader = CaptionLoader(str(tmp_path))

    assert loader.exists("0001")
    assert loader.load("0001") == lesson_vtt


def test_missing_file_raises(tmp_path):
    loader = CaptionLoader(str(tmp_path))
    assert not loader.exists("0002")
    with pytest.raises(CaptionLoadError, match="not found"):
        loader.load("0002")


def test_undecodable_file_raises(tmp_path):
    (tmp_path / "englishpod_0003.vtt").write_bytes(b"WEBVTT\n\n\xff\xfe\xfa broken")
    with pytest.raises(CaptionLoadError, match="Could not read"):
        CaptionLoader(str(tmp_path)).load("0003")
