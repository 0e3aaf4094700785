"""Handles Speech-to-Text transcription using Whisper."""

import whisper
import logging
import torch
from abc import ABC, abstractmethod
import os

from .models import TranscriptionResult, Segment
from .exceptions import TranscriptionError

logger = logging.getLogger(__name__)

class Transcriber(ABC):
    """Abstract base class for transcription services."""

    @abstractmethod
    def transcribe(self, audio_path: str) -> TranscriptionResult:
        """
        Transcribes the given audio file.

        Args:
            audio_path: Path to the audio file.

        Returns:
            A TranscriptionResult object containing segments and language.

        Raises:
            TranscriptionError: If transcription fails.
            FileNotFoundError: If the audio file doesn't exist.
        """
        pass

class WhisperTranscriber(Transcriber):
    """Implements transcription using OpenAI's Whisper model."""

    def __init__(self, model_name: str = "base", device: str = "cpu", fp16: bool = False):
        """
        Initializes the WhisperTranscriber.

        Args:
            model_name: The name of the Whisper model to use (tiny, base, small, medium, large).
            device: The device to run the model on ("cuda" or "cpu").
            fp16: Whether to use float16 precision (only honoured on CUDA).

        Raises:
            ValueError: If the specified device is invalid.
            TranscriptionError: If the model fails to load.
        """
        self.model_name = model_name
        self.device = device
        self.fp16 = fp16

        if self.device == "cuda" and not torch.cuda.is_available():
            logger.warning("CUDA device requested but not available. Falling back to CPU.")
            self.device = "cpu"
        elif self.device not in ["cuda", "cpu"]:
            raise ValueError(f"Invalid device specified: {self.device}. Choose 'cuda' or 'cpu'.")

        logger.info(f"Initializing WhisperTranscriber with model '{self.model_name}' on device '{self.device}' (FP16: {self.fp16})")
        try:
            self.model = whisper.load_model(self.model_name, device=self.device)
        except Exception as e:
            logger.error(f"Failed to load Whisper model '{self.model_name}': {e}", exc_info=True)
            raise TranscriptionError(f"Failed to load Whisper model '{self.model_name}': {e}") from e

    def transcribe(self, audio_path: str) -> TranscriptionResult:
        """
        Transcribes English lesson audio with the loaded Whisper model.

        Args:
            audio_path: Path to the audio file (16 kHz WAV recommended).

        Returns:
            A TranscriptionResult object.

        Raises:
            FileNotFoundError: If the audio file doesn't exist.
            TranscriptionError: If transcription fails during processing.
        """
        logger.info(f"Starting transcription for: {audio_path}")
        if not os.path.exists(audio_path):
            raise FileNotFoundError(f"Audio file not found: {audio_path}")

        try:
            result = self.model.transcribe(
                audio_path,
                language='en', # lessons are English-only
                fp16=self.fp16 if self.device == "cuda" else False,
                verbose=False
            )
        except Exception as e:
            logger.error(f"Error during Whisper transcription process for {audio_path}: {e}", exc_info=True)
            raise TranscriptionError(f"Whisper transcription failed for {audio_path}: {e}") from e

        segments = []
        for seg_data in result.get('segments', []):
            if 'start' in seg_data and 'end' in seg_data and 'text' in seg_data:
                segments.append(Segment(
                    start_time=float(seg_data['start']),
                    end_time=float(seg_data['end']),
                    text=seg_data['text'].strip()
                ))
            else:
                logger.warning(f"Skipping incomplete segment data: {seg_data}")

        logger.info(f"Processed {len(segments)} segments from transcription.")
        return TranscriptionResult(
            language=result.get('language'),
            segments=segments,
            original_audio_path=audio_path
        )
