"""
Utility functions for spot-ripper.

    - Filename sanitization (using yt-dlp's sanitize_filename)
    - Output filename composition
    - Directory helpers

Usage:
    from spot_ripper.utils import output_filename, ensure_directory
"""

from pathlib import Path
from typing import Sequence

from yt_dlp.utils import sanitize_filename as yt_dlp_sanitize


OUTPUT_EXTENSION = "ogg"


def sanitize_filename(name: str, restricted: bool = False) -> str:
    """
    Sanitize a string for use as a filename.

    Uses yt-dlp's sanitize_filename, which replaces path separators and
    characters invalid on Windows and trims whitespace.

    Args:
        name: The string to sanitize.
        restricted: If True, use more aggressive sanitization that
                    removes all special characters. Default False.

    Examples:
        sanitize_filename("Artist - Title.ogg")  # unchanged
        sanitize_filename("AC/DC - Thunder.ogg")  # no path separator left
    """
    return yt_dlp_sanitize(name, restricted=restricted)


def output_filename(origins: Sequence[str] | str, title: str) -> str:
    """
    Compose the sanitized output filename of an item.

    Format: "{origins joined by ', '} - {title}.ogg"

    Args:
        origins: Artist names of a track, or the publisher of an episode.
        title: Track or episode title.

    Example:
        output_filename(["Daft Punk", "Pharrell Williams"], "Get Lucky")
        # Returns: "Daft Punk, Pharrell Williams - Get Lucky.ogg"
    """
    if not isinstance(origins, str):
        origins = ", ".join(origins)
    return sanitize_filename(f"{origins} - {title}.{OUTPUT_EXTENSION}")


def ensure_directory(path: Path) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Returns:
        The same path (for chaining).

    Raises:
        OSError: If the directory cannot be created.
    """
    path.mkdir(parents=True, exist_ok=True)
    return path
