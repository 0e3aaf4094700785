"""Handles loading configuration from YAML files."""

import yaml
import os
import logging
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    'subtitles_dir': 'subtitles',
    'caption_filename_template': 'englishpod_{code}.vtt',
    'highlight_threshold': 0.4,
    'line_match_threshold': 0.5,
    'scorer': 'jaccard',
    'whisper_model': 'base',
    'device': 'cpu',
    'whisper_fp16': False,
    'temp_dir': 'temp',
    'log_dir': 'logs',
    'log_file': 'cuesync.log',
    'lessons_file': 'lessons.json',
}

_THRESHOLD_KEYS = ('highlight_threshold', 'line_match_threshold')

class ConfigLoader:
    """Loads configuration settings from a YAML file."""

    def load_config(self, config_path: str) -> dict:
        """
        Loads configuration from the specified YAML file path.

        Args:
            config_path: The path to the YAML configuration file.

        Returns:
            A dictionary containing the loaded configuration settings,
            with defaults filled in for missing keys.

        Raises:
            FileNotFoundError: If the configuration file does not exist.
            ConfigurationError: If the file cannot be parsed as YAML, has an
                              invalid value, or cannot be read.
        """
        logger.info(f"Attempting to load configuration from: {config_path}")
        if not os.path.exists(config_path):
            logger.error(f"Configuration file not found at path: {config_path}")
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        if not os.path.isfile(config_path):
            logger.error(f"Configuration path is not a file: {config_path}")
            raise ConfigurationError(f"Configuration path is not a file: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Error parsing YAML configuration file {config_path}: {e}", exc_info=True)
            raise ConfigurationError(f"Invalid YAML format in {config_path}: {e}") from e
        except IOError as e:
            logger.error(f"Error reading configuration file {config_path}: {e}", exc_info=True)
            raise ConfigurationError(f"Could not read configuration file {config_path}: {e}") from e

        if config is None:
            config = {} # empty file
        if not isinstance(config, dict):
            logger.error(f"Configuration file {config_path} did not load as a dictionary (root object).")
            raise ConfigurationError(f"Invalid YAML structure in {config_path}. Root must be a mapping (dictionary).")

        config = self.with_defaults(config)
        logger.info(f"Configuration loaded successfully from {config_path}")
        return config

    def with_defaults(self, config: dict) -> dict:
        """
        Returns a copy of `config` with every documented default filled in.

        Raises:
            ConfigurationError: If a similarity threshold is not a number in [0, 1].
        """
        merged = dict(DEFAULT_CONFIG)
        merged.update(config)
        for key in _THRESHOLD_KEYS:
            value = merged[key]
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not 0 <= value <= 1:
                raise ConfigurationError(f"'{key}' must be a number between 0 and 1, got {value!r}")
            merged[key] = float(value)
        return merged
