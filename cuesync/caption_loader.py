"""Locates and reads the caption track belonging to a lesson."""

import logging
import os

from .exceptions import CaptionLoadError

logger = logging.getLogger(__name__)

DEFAULT_FILENAME_TEMPLATE = "englishpod_{code}.vtt"

class CaptionLoader:
    """Reads lesson caption files from a subtitles directory."""

    def __init__(self, subtitles_dir: str = "subtitles", filename_template: str = DEFAULT_FILENAME_TEMPLATE):
        """
        Args:
            subtitles_dir: Directory holding one caption file per lesson.
            filename_template: File name pattern; `{code}` is the lesson code.
        """
        self.subtitles_dir = subtitles_dir
        self.filename_template = filename_template

    def caption_path(self, lesson_code: str) -> str:
        return os.path.join(self.subtitles_dir, self.filename_template.format(code=lesson_code))

    def exists(self, lesson_code: str) -> bool:
        return os.path.isfile(self.caption_path(lesson_code))

    def load(self, lesson_code: str) -> str:
        """
        Reads the caption payload for a lesson.

        Args:
            lesson_code: The lesson identifier, e.g. "0001".

        Returns:
            The caption file contents.

        Raises:
            CaptionLoadError: If the file is missing, unreadable or not UTF-8.
        """
        path = self.caption_path(lesson_code)
        if not os.path.isfile(path):
            raise CaptionLoadError(f"Caption file not found: {path}")
        try:
            with open(path, 'r', encoding='utf-8') as f:
                payload = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Could not read caption file {path}: {e}", exc_info=True)
            raise CaptionLoadError(f"Could not read caption file {path}: {e}") from e
        logger.debug(f"Read {len(payload)} characters of captions from {path}")
        return payload
