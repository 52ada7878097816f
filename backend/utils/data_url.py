import base64
from typing import Union

from errors import DecodeError

ImageSource = Union[str, bytes, bytearray]


def decode_data_url(data_url: str) -> bytes:
    """Return the raw bytes of a ``data:<mime>;base64,<payload>`` string."""
    if not data_url.startswith("data:") or "," not in data_url:
        raise DecodeError("Invalid data URL format")

    payload = "".join(data_url.split(",", 1)[1].split())
    if not payload:
        raise DecodeError("Data URL has an empty payload")
    try:
        return base64.b64decode(payload, validate=True)
    except ValueError as e:
        raise DecodeError(f"Data URL payload is not valid base64: {e}") from e


def encode_data_url(data: bytes, mime_type: str = "image/jpeg") -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def load_image_source(source: ImageSource) -> bytes:
    if isinstance(source, str):
        return decode_data_url(source)
    if isinstance(source, (bytes, bytearray)):
        if not source:
            raise DecodeError("Image buffer is empty")
        return bytes(source)
    raise DecodeError(f"Unsupported image source type: {type(source).__name__}")
