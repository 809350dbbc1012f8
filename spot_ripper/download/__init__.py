"""
Download module for spot-ripper.

This module delivers the work list:
    - Downloader: per-item fetch / decrypt / deliver pipeline
    - StreamReader: blocking stream reads on a single worker thread while
      the session keeps being serviced
    - select_file: format preference
    - run_helper: hand-off to an external helper program

Usage:
    from spot_ripper.download import Downloader

    with Downloader(client, output_dir) as downloader:
        stats = downloader.deliver(worklist)
"""

from spot_ripper.download.bridge import StreamReader
from spot_ripper.download.downloader import DeliveryStats, Downloader, ItemOutcome
from spot_ripper.download.formats import select_file
from spot_ripper.download.helper import helper_arguments, run_helper

__all__ = [
    "Downloader",
    "DeliveryStats",
    "ItemOutcome",
    "StreamReader",
    "select_file",
    "helper_arguments",
    "run_helper",
]
