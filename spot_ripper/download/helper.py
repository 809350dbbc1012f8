"""
External helper hand-off.

In helper mode the decrypted audio is not written to disk. Instead the
helper program is run once per item as

    <helper> <catalog-id> <title> <group-name> <origin-name>...

with the audio bytes on its standard input. For tracks the group is the
album and the origins are the artists; for episodes the group is the show
and the origin is the show's publisher. The helper must exit with status 0.
"""

import subprocess
from pathlib import Path
from typing import Sequence

from spot_ripper.core.exceptions import HelperError
from spot_ripper.core.logger import get_logger

logger = get_logger(__name__)


def helper_arguments(
    item_id: str,
    title: str,
    group: str,
    origins: Sequence[str]
) -> list[str]:
    """Build the positional arguments passed to the helper."""
    return [item_id, title, group, *origins]


def run_helper(helper: Path | str, args: Sequence[str], payload: bytes) -> None:
    """
    Run the helper with args and feed payload to its stdin.

    Raises:
        HelperError: If the helper cannot be started, its stdin cannot be
                     written, or it exits with a non-zero status.
    """
    command = [str(helper), *args]
    logger.debug(f"Running helper: {command}")

    try:
        process = subprocess.Popen(command, stdin=subprocess.PIPE)
    except OSError as e:
        raise HelperError(
            f"Could not run helper program {helper}: {e}",
            details={"helper": str(helper), "original_error": str(e)}
        ) from e

    try:
        process.stdin.write(payload)
        process.stdin.close()
    except OSError as e:
        process.kill()
        process.wait()
        raise HelperError(
            f"Failed to write to helper stdin: {e}",
            details={"helper": str(helper), "original_error": str(e)}
        ) from e

    returncode = process.wait()
    if returncode != 0:
        raise HelperError(
            f"Helper script returned an error (exit status {returncode})",
            details={"helper": str(helper), "args": list(args)},
            returncode=returncode
        )
