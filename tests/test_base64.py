import pytest

from promkit.base64 import base64_decode, base64_encode, base64url_encode

VECTORS = [
    # RFC 3548 examples
    (b"\x14\xfb\x9c\x03\xd9\x7e", "FPucA9l+"),
    (b"\x14\xfb\x9c\x03\xd9", "FPucA9k="),
    (b"\x14\xfb\x9c\x03", "FPucAw=="),
    # RFC 4648 examples
    (b"", ""),
    (b"f", "Zg=="),
    (b"fo", "Zm8="),
    (b"foo", "Zm9v"),
    (b"foob", "Zm9vYg=="),
    (b"fooba", "Zm9vYmE="),
    (b"foobar", "Zm9vYmFy"),
    # Wikipedia examples
    (b"sure.", "c3VyZS4="),
    (b"sure", "c3VyZQ=="),
    (b"sur", "c3Vy"),
    (b"su", "c3U="),
    (b"leasure.", "bGVhc3VyZS4="),
    (b"easure.", "ZWFzdXJlLg=="),
    (b"asure.", "YXN1cmUu"),
    (b"sure.", "c3VyZS4="),
]


@pytest.mark.parametrize(("decoded", "encoded"), VECTORS)
def test_encode(decoded, encoded):
    assert base64_encode(decoded) == encoded


def test_encode_url():
    unicode_text = (
        b"\xce\xa0\xcf\x81\xce\xbf\xce\xbc\xce\xb7\xce\xb8\xce\xb5\xcf\x8d\xcf\x82"
    )
    assert base64url_encode(unicode_text) == "zqDPgc6_zrzOt864zrXPjc-C"


def test_encode_url_accepts_text():
    assert base64url_encode("Προμηθεύς") == "zqDPgc6_zrzOt864zrXPjc-C"


@pytest.mark.parametrize(("decoded", "encoded"), VECTORS)
def test_decode(decoded, encoded):
    assert base64_decode(encoded) == decoded


def test_reject_invalid_symbols():
    with pytest.raises(ValueError):
        base64_decode("....")


def test_reject_invalid_input_size():
    with pytest.raises(ValueError):
        base64_decode("ABC")


def test_reject_invalid_padding():
    with pytest.raises(ValueError):
        base64_decode("A===")


def test_reject_non_ascii():
    with pytest.raises(ValueError):
        base64_decode("Zm9é")


def test_round_trip_all_byte_values():
    data = bytes(range(256))
    assert base64_decode(base64_encode(data)) == data