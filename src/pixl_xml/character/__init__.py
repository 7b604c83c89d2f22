"""Character layer for pixl-xml: the predefined XML entity codec."""

from .entities import (
    decode_entities,
    encode_attribute_entities,
    encode_entities,
)

__all__ = [
    "decode_entities",
    "encode_attribute_entities",
    "encode_entities",
]
