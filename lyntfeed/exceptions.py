"""Custom exception hierarchy for lyntfeed."""


class LyntfeedError(Exception):
    """Base exception for all lyntfeed errors."""

    status_code: int = 500
    public_message: str = "Internal error"


class Unauthorized(LyntfeedError):
    """Missing or invalid credential."""

    status_code = 401
    public_message = "Authentication failed"


class MissingCredential(Unauthorized):
    """No credential was supplied."""

    public_message = "Missing authentication"


class InvalidCredential(Unauthorized):
    """Credential was supplied but did not verify."""


class InvalidInput(LyntfeedError):
    """Request input failed validation."""

    status_code = 400
    public_message = "Invalid input"


class InvalidContent(InvalidInput):
    """Item content is too long or malformed."""

    public_message = "Invalid content"


class MissingParameter(InvalidInput):
    """A required request parameter is absent."""

    def __init__(self, name: str, public_message: str | None = None):
        super().__init__(f"Missing parameter: {name}")
        self.name = name
        if public_message:
            self.public_message = public_message


class InvalidRepostTarget(LyntfeedError):
    """Reposted item does not exist."""

    status_code = 400
    public_message = "Invalid reposted lynt ID"


class ItemNotFound(LyntfeedError):
    """Requested item does not exist."""

    status_code = 404
    public_message = "Lynt not found"


class MediaProcessingFailed(LyntfeedError):
    """Image could not be processed."""


class UnsupportedMedia(MediaProcessingFailed):
    """Uploaded bytes are not a decodable image."""


class StorageUnavailable(LyntfeedError):
    """Blob store transport or service failure."""


class PersistenceError(LyntfeedError):
    """Item store read or write failed."""


class ConfigError(LyntfeedError):
    """Invalid configuration."""
