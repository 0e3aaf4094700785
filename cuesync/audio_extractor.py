"""Converts lesson audio into the WAV format the speech recogniser expects."""

import ffmpeg
import os
import logging
from .exceptions import AudioExtractionError, FileSystemError
from typing import Optional
from .utils import ensure_dir_exists

logger = logging.getLogger(__name__)

def is_remote(source: str) -> bool:
    return source.startswith(("http://", "https://"))

class AudioExtractor:
    """Decodes lesson audio (local file or URL) to 16 kHz mono WAV."""

    def __init__(self, ffmpeg_path: Optional[str] = None):
        """
        Initializes the AudioExtractor.

        Args:
            ffmpeg_path: Optional path to the ffmpeg executable.
                         If None, assumes ffmpeg is in the system PATH.
        """
        self.ffmpeg_cmd = ffmpeg_path or 'ffmpeg'
        logger.debug(f"Using ffmpeg command: {self.ffmpeg_cmd}")

    def extract_audio(self, audio_source: str, output_audio_dir: str, output_filename: Optional[str] = None) -> str:
        """
        Decodes an audio source to a WAV file.

        Args:
            audio_source: Path or http(s) URL of the lesson audio.
            output_audio_dir: Directory to save the converted audio file.
            output_filename: Optional base name for the output file (extension ignored).
                             If None, uses the source's file name.

        Returns:
            The full path to the converted audio file (WAV format).

        Raises:
            FileNotFoundError: If a local audio source does not exist.
            AudioExtractionError: If ffmpeg fails to decode the audio.
            FileSystemError: If the output directory cannot be created/accessed.
        """
        logger.info(f"Converting lesson audio: {audio_source}")
        if not is_remote(audio_source) and not os.path.exists(audio_source):
            raise FileNotFoundError(f"Input audio file not found: {audio_source}")

        ensure_dir_exists(output_audio_dir)

        if output_filename is None:
            base_name = os.path.splitext(os.path.basename(audio_source.split('?')[0]))[0] or "lesson"
        else:
            base_name = os.path.splitext(output_filename)[0]

        output_audio_path = os.path.join(output_audio_dir, f"{base_name}.wav")
        logger.debug(f"Output audio path set to: {output_audio_path}")

        if os.path.exists(output_audio_path):
            logger.warning(f"Output audio file already exists, overwriting: {output_audio_path}")
            try:
                os.remove(output_audio_path)
            except OSError as e:
                raise FileSystemError(f"Could not remove existing audio file {output_audio_path}: {e}") from e

        try:
            # pcm_s16le at 16 kHz mono is what Whisper resamples to anyway
            (
                ffmpeg
                .input(audio_source)
                .output(output_audio_path, acodec='pcm_s16le', ar=16000, ac=1)
                .overwrite_output()
                .run(cmd=self.ffmpeg_cmd, capture_stdout=True, capture_stderr=True)
            )
            logger.info(f"Converted audio written to: {output_audio_path}")
            return output_audio_path
        except ffmpeg.Error as e:
            stderr_output = e.stderr.decode('utf-8', errors='replace') if e.stderr else "No stderr output"
            logger.error(f"ffmpeg failed on {audio_source}: {stderr_output}")
            if os.path.exists(output_audio_path):
                try:
                    os.remove(output_audio_path)
                except OSError:
                    logger.warning(f"Could not clean up partially created audio file: {output_audio_path}")
            raise AudioExtractionError(f"ffmpeg failed: {stderr_output}") from e
        except OSError as e:
            # ffmpeg binary missing or not executable
            logger.error(f"Could not run ffmpeg ({self.ffmpeg_cmd}): {e}", exc_info=True)
            raise AudioExtractionError(f"Could not run ffmpeg: {e}") from e
