"""
Audio decryption for spot-ripper.

Audio files are encrypted with AES-128 in CTR mode, keyed by the per-file
audio key, with a fixed initial counter block. The whole file is one CTR
stream, so decryption is a single pass over the ciphertext.

The decrypted buffer starts with a 161-byte container header that is not
part of the playable audio; it is stripped before delivery.
"""

from Crypto.Cipher import AES

from spot_ripper.core.exceptions import DecryptionError


AUDIO_AES_IV = bytes.fromhex("72e067fbddcbcf77ebe8bc643f630d93")
AUDIO_KEY_LENGTH = 16

CONTAINER_HEADER_SIZE = 161


def decrypt_audio(key: bytes, ciphertext: bytes) -> bytes:
    """
    Decrypt a fetched audio file.

    Args:
        key: The 16-byte audio key negotiated for the file.
        ciphertext: The complete encrypted file.

    Returns:
        The decrypted file, container header included.

    Raises:
        DecryptionError: If the key has the wrong length or the cipher fails.
    """
    if len(key) != AUDIO_KEY_LENGTH:
        raise DecryptionError(
            f"Audio key must be {AUDIO_KEY_LENGTH} bytes, got {len(key)}",
            details={"key_length": len(key)}
        )

    try:
        cipher = AES.new(key, AES.MODE_CTR, nonce=b"", initial_value=AUDIO_AES_IV)
        return cipher.decrypt(ciphertext)
    except (ValueError, TypeError) as e:
        raise DecryptionError(
            f"Cannot decrypt stream: {e}",
            details={"original_error": str(e)}
        ) from e


def strip_container_header(decrypted: bytes) -> bytes:
    """
    Drop the container header from a decrypted buffer.

    Raises:
        DecryptionError: If the buffer is shorter than the header.
    """
    if len(decrypted) < CONTAINER_HEADER_SIZE:
        raise DecryptionError(
            f"Decrypted stream is {len(decrypted)} bytes, shorter than "
            f"its {CONTAINER_HEADER_SIZE}-byte header",
            details={"length": len(decrypted)}
        )
    return decrypted[CONTAINER_HEADER_SIZE:]
