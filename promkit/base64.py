"""Base64 encoding and decoding with strict validation of the input."""

from __future__ import annotations

import binascii

_PAD = "="

_DECODE_TABLE = {
    char: index
    for index, char in enumerate(
        "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
    )
}

_URL_SAFE = str.maketrans({"+": "-", "/": "_"})


def _as_bytes(data: bytes | str) -> bytes:
    return data.encode("utf-8") if isinstance(data, str) else bytes(data)


def base64_encode(data: bytes | str) -> str:
    """Encode data with the standard alphabet, padded with '='.

    Text is encoded as UTF-8 first.
    """
    return binascii.b2a_base64(_as_bytes(data), newline=False).decode("ascii")


def base64url_encode(data: bytes | str) -> str:
    """Encode data with the URL-safe alphabet, keeping the padding."""
    return base64_encode(data).translate(_URL_SAFE)


def base64_decode(data: str) -> bytes:
    """Decode standard base64 text.

    Raises ValueError on a length that is not a multiple of four, on a
    character outside the alphabet and on misplaced padding.
    """
    if len(data) % 4:
        raise ValueError("Invalid base64 length!")

    decoded = bytearray()
    accumulator = 0
    for position, char in enumerate(data):
        accumulator = (accumulator << 6) & 0xFFFFFFFF
        if char == _PAD:
            remaining = len(data) - position
            if remaining == 1:
                decoded.append((accumulator >> 16) & 0xFF)
                decoded.append((accumulator >> 8) & 0xFF)
                return bytes(decoded)
            if remaining == 2:
                decoded.append((accumulator >> 10) & 0xFF)
                return bytes(decoded)
            raise ValueError("Invalid padding in base64!")
        try:
            accumulator |= _DECODE_TABLE[char]
        except KeyError:
            raise ValueError("Invalid character in base64!") from None
        if position % 4 == 3:
            decoded.append((accumulator >> 16) & 0xFF)
            decoded.append((accumulator >> 8) & 0xFF)
            decoded.append(accumulator & 0xFF)
    return bytes(decoded)