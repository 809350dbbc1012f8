"""
Audio format selection.

Picks the best file from an item's file catalog following
FORMAT_PREFERENCE (OGG Vorbis 320, then 160, then 96 kbps).
"""

from typing import Mapping

from spot_ripper.core.exceptions import FormatError
from spot_ripper.core.logger import get_logger
from spot_ripper.spotify.models import FORMAT_PREFERENCE, AudioFormat

logger = get_logger(__name__)


def select_file(
    files: Mapping[AudioFormat, bytes],
    preference: tuple[AudioFormat, ...] = FORMAT_PREFERENCE
) -> tuple[AudioFormat, bytes]:
    """
    Choose the file to download.

    Args:
        files: The item's file catalog, AudioFormat -> file id.
        preference: Formats to accept, best first.

    Returns:
        (format, file id) of the first preferred format present.

    Raises:
        FormatError: If the catalog holds none of the preferred formats.
    """
    logger.debug(f"File formats: {' '.join(f.name for f in files) or '(none)'}")

    for audio_format in preference:
        file_id = files.get(audio_format)
        if file_id is not None:
            return audio_format, file_id

    raise FormatError(
        "Could not find a OGG_VORBIS format for the item",
        details={"available": [f.name for f in files]}
    )
