"""Exceptions raised while resolving and extracting an image."""

from typing import Optional


class ExtractError(Exception):
    """Base exception for all ociextract errors."""

    pass


class ConfigurationError(ExtractError):
    """Raised for invalid input detected before any network call."""

    pass


class InvalidReferenceError(ConfigurationError):
    """Raised when an image string cannot be split into its parts."""

    pass


class InvalidURLError(ConfigurationError):
    """Raised when a registry API URL cannot be built."""

    pass


class LayerCountError(ConfigurationError):
    """Raised when the requested number of layers is out of range."""

    pass


class ProtocolError(ExtractError):
    """Raised when a registry response cannot be interpreted."""

    pass


class MissingContentTypeError(ProtocolError):
    """Raised when a manifest response has no content-type header."""

    pass


class UnexpectedMediaTypeError(ProtocolError):
    def __init__(self, media_type: str):
        super().__init__(f"Unexpected media type in response: {media_type}")
        self.media_type = media_type


class PlatformNotFoundError(ProtocolError):
    def __init__(self, platform: str, available: Optional[list[str]] = None):
        message = f"No image manifest found for specified platform ({platform})"
        if available:
            message += f". Available platforms: {', '.join(available)}"
        super().__init__(message)
        self.platform = platform
        self.available = available or []


class DigestMismatchError(ProtocolError):
    def __init__(self, expected: str, actual: str):
        super().__init__(f"Invalid checksum. {expected} != {actual}")
        self.expected = expected
        self.actual = actual


class TransportError(ExtractError):
    """Raised on connection failures and non-success HTTP responses."""

    def __init__(self, message: str, url: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ExtractionFailedError(ExtractError):
    def __init__(self, archive: str, exit_code: int):
        super().__init__(
            f"Archive extraction failed. Filename {archive}. Exit code: {exit_code}"
        )
        self.archive = archive
        self.exit_code = exit_code
