"""JSON serialization utilities for sqlraw.

Thin wrappers over :mod:`msgspec` used by the structured log formatter and
the CLI's JSON output.
"""

from typing import Any

import msgspec

__all__ = ("from_json", "to_json")

_encoder = msgspec.json.Encoder(enc_hook=str)
_decoder = msgspec.json.Decoder()


def to_json(data: Any) -> str:
    """Encode data to a JSON string.

    Values msgspec cannot encode natively are rendered with :func:`str`.

    Args:
        data: Data to encode.

    Returns:
        JSON string representation.
    """
    return _encoder.encode(data).decode("utf-8")


def from_json(data: "str | bytes") -> Any:
    """Decode a JSON string or bytes to a Python object.

    Args:
        data: JSON string or bytes to decode.

    Returns:
        Decoded Python object.
    """
    return _decoder.decode(data)
