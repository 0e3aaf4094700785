import pytest

from cuesync.config_loader import ConfigLoader, DEFAULT_CONFIG
from cuesync.exceptions import ConfigurationError


def write(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_values_override_defaults(tmp_path):
    config = ConfigLoader().load_config(write(tmp_path, "subtitles_dir: captions\nhighlight_threshold: 0.3\n"))

    assert config['subtitles_dir'] == 'captions'
    assert config['highlight_threshold'] == 0.3
    assert config['line_match_threshold'] == DEFAULT_CONFIG['line_match_threshold']
    assert config['scorer'] == 'jaccard'


def test_empty_file_gives_defaults(tmp_path):
    assert ConfigLoader().load_config(write(tmp_path, "")) == DEFAULT_CONFIG


def test_integer_threshold_is_coerced(tmp_path):
    config = ConfigLoader().load_config(write(tmp_path, "line_match_threshold: 1\n"))
    assert config['line_match_threshold'] == 1.0
    assert isinstance(config['line_match_threshold'], float)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigLoader().load_config(str(tmp_path / "nope.yaml"))


def test_directory_is_rejected(tmp_path):
    with pytest.raises(ConfigurationError):
        ConfigLoader().load_config(str(tmp_path))


def test_non_mapping_root(tmp_path):
    with pytest.raises(ConfigurationError, match="Root must be a mapping"):
        ConfigLoader().load_config(write(tmp_path, "- just\n- a list\n"))


def test_invalid_yaml(tmp_path):
    with pytest.raises(ConfigurationError, match="Invalid YAML"):
        ConfigLoader().load_config(write(tmp_path, "key: [unclosed\n"))


@pytest.mark.parametrize("value", ["1.5", "-0.1", "high", "true"])
def test_bad_threshold(tmp_path, value):
    with pytest.raises(ConfigurationError, match="highlight_threshold"):
        ConfigLoader().load_config(write(tmp_path, f"highlight_threshold: {value}\n"))
