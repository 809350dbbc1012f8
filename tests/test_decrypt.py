"""Test audio decryption"""

import pytest
from conftest import AUDIO_KEY, encrypt

from spot_ripper.core.exceptions import DecryptionError
from spot_ripper.spotify.decrypt import (
    CONTAINER_HEADER_SIZE,
    decrypt_audio,
    strip_container_header,
)


class TestDecryptAudio:
    """Test AES-128-CTR decryption with the fixed IV"""

    def test_decrypts_what_was_encrypted(self):
        """Test ciphertext from the CDN scheme decrypts to the plaintext"""
        plaintext = b"OggS" + bytes(range(256)) * 4
        ciphertext = encrypt(AUDIO_KEY, plaintext)
        assert ciphertext != plaintext
        assert decrypt_audio(AUDIO_KEY, ciphertext) == plaintext

    def test_known_vector(self):
        """Test the first keystream block is AES(key, IV)"""
        from Crypto.Cipher import AES
        from spot_ripper.spotify.decrypt import AUDIO_AES_IV

        keystream = AES.new(AUDIO_KEY, AES.MODE_ECB).encrypt(AUDIO_AES_IV)
        assert decrypt_audio(AUDIO_KEY, bytes(16)) == keystream

    def test_wrong_key_length(self):
        """Test keys must be 16 bytes"""
        with pytest.raises(DecryptionError):
            decrypt_audio(b"short", b"data")

    def test_empty_ciphertext(self):
        """Test an empty file decrypts to nothing"""
        assert decrypt_audio(AUDIO_KEY, b"") == b""


class TestStripContainerHeader:
    """Test removal of the 161-byte header"""

    def test_strips_exactly_161_bytes(self):
        """Test the audio starts right after the header"""
        assert CONTAINER_HEADER_SIZE == 161
        buffer = b"h" * 161 + b"OggS audio"
        assert strip_container_header(buffer) == b"OggS audio"

    def test_header_only(self):
        """Test a buffer that is only a header leaves no audio"""
        assert strip_container_header(b"h" * 161) == b""

    def test_too_short(self):
        """Test a buffer shorter than the header is an error"""
        with pytest.raises(DecryptionError):
            strip_container_header(b"h" * 160)
