"""Test audio format selection"""

import pytest

from spot_ripper.core.exceptions import FormatError
from spot_ripper.download.formats import select_file
from spot_ripper.spotify.models import AudioFormat


class TestSelectFile:
    """Test OGG Vorbis preference order"""

    def test_prefers_highest_bitrate(self):
        """Test 320 wins over 160 and 96"""
        files = {
            AudioFormat.OGG_VORBIS_96: b"96",
            AudioFormat.OGG_VORBIS_320: b"320",
            AudioFormat.OGG_VORBIS_160: b"160",
        }
        assert select_file(files) == (AudioFormat.OGG_VORBIS_320, b"320")

    def test_falls_back(self):
        """Test lower bitrates are used when higher ones are missing"""
        files = {AudioFormat.MP3_320: b"mp3", AudioFormat.OGG_VORBIS_96: b"96"}
        assert select_file(files) == (AudioFormat.OGG_VORBIS_96, b"96")

    def test_no_ogg_vorbis(self):
        """Test catalogs without OGG Vorbis are rejected"""
        with pytest.raises(FormatError):
            select_file({AudioFormat.MP3_320: b"mp3", AudioFormat.AAC_24: b"aac"})

    def test_empty_catalog(self):
        """Test an empty catalog is rejected"""
        with pytest.raises(FormatError):
            select_file({})

    def test_custom_preference(self):
        """Test an explicit preference list"""
        files = {AudioFormat.OGG_VORBIS_320: b"320", AudioFormat.OGG_VORBIS_160: b"160"}
        assert select_file(files, preference=(AudioFormat.OGG_VORBIS_160,)) == (
            AudioFormat.OGG_VORBIS_160, b"160"
        )
