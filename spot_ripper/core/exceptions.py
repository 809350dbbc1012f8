"""
Exception classes for spot-ripper.

This module defines all custom exceptions used throughout the application.
Each exception carries a human-readable message plus an optional details
dictionary for logging.

Exception Hierarchy:
    SpotRipperError (base)
        ConfigError - Configuration file issues
        SessionError - Connection / authentication failures
        CatalogError - Metadata fetch failures
        InvalidIdError - Malformed catalog identifiers
        UnavailableError - Track and all of its alternatives unavailable
        FormatError - No usable audio format in the file catalog
        AudioKeyError - Audio key negotiation failures
        StreamError - Encrypted stream open/read failures
        DecryptionError - Decryption or container header failures
        DeliveryError - Writing the output file failed
            HelperError - The external helper program failed

Fatal vs. recoverable:
    Every error is fatal for the run EXCEPT a CatalogError raised by the
    first metadata fetch of a work item. The delivery pipeline catches
    that single case, reports the item as skipped and moves on.
"""


class SpotRipperError(Exception):
    """
    Base exception for all spot-ripper errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (item ids, paths).

    Example:
        try:
            downloader.deliver(worklist)
        except SpotRipperError as e:
            logger.error(f"Run aborted: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description shown to the user.
            details: Optional dictionary containing additional context.
                     Common keys include:
                     - 'item_id': base62 id of the catalog item involved
                     - 'path': filesystem path involved
                     - 'original_error': the underlying exception text
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(SpotRipperError):
    """
    Raised when there's an issue with the configuration file.

    Common causes:
        - Explicit --config path does not exist
        - config.yaml has invalid YAML syntax
        - Invalid field values (e.g., negative poll interval)
    """
    pass


class SessionError(SpotRipperError):
    """
    Raised when the session to the catalog cannot be established.

    This is a CRITICAL error: nothing can be resolved without a session.

    Common causes:
        - Wrong username or password
        - Account without streaming rights
        - Network connectivity issues
    """
    pass


class CatalogError(SpotRipperError):
    """
    Raised when a metadata fetch fails.

    Recoverable only when it happens on the first metadata fetch of a work
    item (the item is skipped). Everywhere else (container expansion,
    alternatives, artists, shows, albums) it aborts the run.

    Attributes:
        kind: Kind of entity being fetched ("track", "album", ...).
    """

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        kind: str | None = None
    ) -> None:
        super().__init__(message, details)
        self.kind = kind


class InvalidIdError(SpotRipperError):
    """
    Raised when a catalog identifier cannot be decoded.

    The reference pattern only admits alphanumeric ids, so this signals
    an id that overflows the 128-bit identifier space or is empty.
    """
    pass


class UnavailableError(SpotRipperError):
    """
    Raised when a track is unavailable and none of its alternatives is.
    """
    pass


class FormatError(SpotRipperError):
    """
    Raised when none of the preferred audio formats is present in an
    item's file catalog.
    """
    pass


class AudioKeyError(SpotRipperError):
    """
    Raised when the decryption key for an (item, file) pair cannot be
    negotiated.
    """
    pass


class StreamError(SpotRipperError):
    """
    Raised when the encrypted audio stream cannot be opened or read.
    """
    pass


class DecryptionError(SpotRipperError):
    """
    Raised when the fetched ciphertext cannot be decrypted, or the
    decrypted buffer is too short to hold the container header.
    """
    pass


class DeliveryError(SpotRipperError):
    """
    Raised when decrypted audio cannot be delivered.

    Common causes:
        - Permission denied or disk full while writing the .ogg file
    """
    pass


class HelperError(DeliveryError):
    """
    Raised when the external helper program fails.

    Common causes:
        - Helper path does not exist or is not executable
        - Helper closed its stdin early (broken pipe)
        - Helper exited with a non-zero status

    Attributes:
        returncode: Exit status of the helper, if it ran to completion.
    """

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        returncode: int | None = None
    ) -> None:
        super().__init__(message, details)
        self.returncode = returncode
