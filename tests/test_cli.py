import pytest

from cuesync.cli import CLIHandler, playback_times, read_transcript


@pytest.fixture
def workspace(tmp_path, monkeypatch, lesson_vtt, transcript_lines, restore_root_logging):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "lesson.vtt").write_text(lesson_vtt, encoding="utf-8")
    (tmp_path / "transcript.txt").write_text("\n\n".join(transcript_lines) + "\n", encoding="utf-8")
    return tmp_path


def run_cli(argv):
    with pytest.raises(SystemExit) as exc:
        CLIHandler().run(argv)
    return exc.value.code


def test_playback_times():
    assert playback_times(1.0, 0.25) == [0.0, 0.25, 0.5, 0.75, 1.0]
    assert playback_times(0.0, 0.5) == [0.0]
    with pytest.raises(ValueError):
        playback_times(1.0, 0)


def test_read_transcript_skips_blank_lines(workspace, transcript_lines):
    assert read_transcript(str(workspace / "transcript.txt")) == transcript_lines


def test_replay_explicit_times(workspace, capsys):
    code = run_cli(["--captions", "lesson.vtt", "--transcript", "transcript.txt", "--times", "1", "9", "12", "2"])

    out = capsys.readouterr().out
    assert code == 0
    assert "cue 0: Welcome to EnglishPod, I'm Marco." in out
    assert "no matching transcript line" in out
    assert "-> line 1 (1.00): Excuse me, where is the train station?" in out
    assert "-> line 2 (0.70): It is just around the corner next to the bank." in out
    # seeking back to 2s re-enters cue 0
    assert out.count("cue 0:") == 2


def test_replay_clock_without_transcript(workspace, capsys):
    code = run_cli(["--captions", "lesson.vtt", "--step", "0.5"])

    out = capsys.readouterr().out
    assert code == 0
    assert [line.split("cue ")[1].split(":")[0] for line in out.splitlines() if "] cue " in line] == ["0", "1", "2", "3"]


def test_lesson_lookup_through_config(workspace, lesson_vtt, capsys):
    (workspace / "captions").mkdir()
    (workspace / "captions" / "englishpod_0001.vtt").write_text(lesson_vtt, encoding="utf-8")
    (workspace / "settings.yaml").write_text("subtitles_dir: captions\n", encoding="utf-8")

    code = run_cli(["--lesson", "0001", "-c", "settings.yaml", "--times", "9"])

    assert code == 0
    assert "cue 2: Excuse me, where is the train station?" in capsys.readouterr().out


def test_missing_captions_exit_nonzero(workspace):
    assert run_cli(["--captions", "nope.vtt"]) == 1
    assert run_cli(["--lesson", "0404"]) == 1


def test_missing_explicit_config_exit_nonzero(workspace):
    assert run_cli(["--captions", "lesson.vtt", "-c", "missing.yaml"]) == 1


def test_match_lines_mode(workspace, capsys):
    code = run_cli(["--captions", "lesson.vtt", "--transcript", "transcript.txt", "--match-lines"])

    out = capsys.readouterr().out.splitlines()
    assert code == 0
    assert out[0].startswith("line 1 -> cue 2 [8.000s-11.000s] (1.00)")
    assert out[1].startswith("line 2 -> cue 3")
    assert out[2] == "line 3 -> (no cue): Thank you so much!"


def test_match_lines_requires_transcript(workspace):
    assert run_cli(["--captions", "lesson.vtt", "--match-lines"]) == 1


def test_replay_clock_covers_out_of_order_track(workspace, capsys):
    (workspace / "shuffled.vtt").write_text(
        "WEBVTT\n\n00:05.000 --> 00:06.000\nlate\n\n00:01.000 --> 00:02.000\nearly\n",
        encoding="utf-8"
    )

    code = run_cli(["--captions", "shuffled.vtt", "--step", "0.5"])

    out = capsys.readouterr().out
    assert code == 0
    assert "cue 1: early" in out
    assert "cue 0: late" in out


def test_threshold_override_is_validated(workspace):
    assert run_cli(["--captions", "lesson.vtt", "--threshold", "5", "--times", "9"]) == 1
    assert run_cli(["--captions", "lesson.vtt", "--threshold", "-0.2", "--times", "9"]) == 1


def test_threshold_override_applies(workspace, capsys):
    code = run_cli(["--captions", "lesson.vtt", "--transcript", "transcript.txt",
                    "--threshold", "0.75", "--times", "12"])

    assert code == 0
    assert "no matching transcript line" in capsys.readouterr().out
