"""Custom exception classes for the morning song board service."""


class BoardServiceError(Exception):
    """Base exception for all board service errors."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(BoardServiceError):
    """Raised when a mandatory configuration value is missing."""

    pass


class SongStoreError(BoardServiceError):
    """Raised when a song store query or delete fails."""

    pass


class VideoLookupError(BoardServiceError):
    """Raised when a video metadata lookup misses."""

    pass
