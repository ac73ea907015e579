
import base64


def b64e(data: bytes | bytearray) -> str:
    """URL-safe base64 encode without padding"""
    return base64.urlsafe_b64encode(bytes(data)).decode("ascii").rstrip("=")


def b64d(value: str) -> bytes:
    """URL-safe base64 decode that tolerates missing padding"""
    pad = "=" * (-len(value) % 4)
    return base64.urlsafe_b64decode((value + pad).encode("ascii"))
