"""
Bridge between the session and a blocking stream read.

The session is driven from the main thread, one operation at a time, and
may still need servicing (keep-alives, pending replies) while an audio file
is being downloaded. Reading the file, however, is a blocking call.

StreamReader hands that call to its single worker thread and keeps turning
the session on a short fixed timeout until the worker's future reports
completion:

    main thread                         worker thread
    -----------                         -------------
    submit(stream.read_to_end)  ----->  read_to_end()  (blocking)
    while not future.done():                 |
        client.turn(0.1)                     |
    future.result()             <-----  bytes / exception

The future is the one-shot completion flag. Until it is done the buffer
belongs to the worker; afterwards only the main thread touches it. Only one
read is ever in flight because there is exactly one worker and items are
delivered one at a time.
"""

from concurrent.futures import ThreadPoolExecutor

from spot_ripper.core.exceptions import SpotRipperError, StreamError
from spot_ripper.core.logger import get_logger
from spot_ripper.spotify.client import ByteStream, CatalogClient

logger = get_logger(__name__)


DEFAULT_POLL_INTERVAL = 0.1  # seconds


class StreamReader:
    """
    Reads ByteStreams on a dedicated worker while servicing the session.

    Attributes:
        poll_interval: Seconds per session turn while a read is in flight.

    Example:
        with StreamReader(client) as reader:
            ciphertext = reader.read(client.open_stream(file_id))
    """

    def __init__(
        self,
        client: CatalogClient,
        poll_interval: float = DEFAULT_POLL_INTERVAL
    ) -> None:
        self._client = client
        self.poll_interval = poll_interval
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="stream-reader"
        )

    def read(self, stream: ByteStream) -> bytes:
        """
        Read a stream to its end without starving the session.

        Returns:
            Every byte of the stream.

        Raises:
            StreamError: If the read fails, whatever the underlying cause.
        """
        future = self._executor.submit(stream.read_to_end)

        turns = 0
        while not future.done():
            self._client.turn(self.poll_interval)
            turns += 1

        try:
            data = future.result()
        except StreamError:
            raise
        except (SpotRipperError, OSError) as e:
            raise StreamError(
                f"Cannot read file stream: {e}",
                details={"original_error": str(e)}
            ) from e

        logger.debug(f"Read {len(data)} bytes after {turns} session turns")
        return data

    def close(self) -> None:
        """Stop the worker thread. Waits for an in-flight read, if any."""
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "StreamReader":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
