"""Custom Exceptions for the CueSync application."""

class CueSyncError(Exception):
    """Base class for exceptions in this package."""
    pass

class ConfigurationError(CueSyncError):
    """Exception raised for errors in configuration loading."""
    pass

class CaptionLoadError(CueSyncError):
    """Exception raised when a lesson's caption track cannot be read."""
    pass

class AudioExtractionError(CueSyncError):
    """Exception raised for errors while converting lesson audio."""
    pass

class TranscriptionError(CueSyncError):
    """Exception raised for errors during transcription."""
    pass

class FormattingError(CueSyncError):
    """Exception raised for errors while writing caption files."""
    pass

class FileSystemError(CueSyncError):
    """Exception raised for file system related errors (permissions, not found etc)."""
    pass
