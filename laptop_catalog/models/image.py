"""Image variants submitted with a product form.

A submitted image is either a reference to an already hosted object or a
newly chosen file encoded as a ``data:`` URI. The string is classified once,
here, and the rest of the code works with the tagged variant.
"""

import base64
import binascii
import re
from dataclasses import dataclass
from typing import Union

INLINE_IMAGE_PREFIX = "data:image"

_DATA_URI_PATTERN = re.compile(r"^data:(image/(?:png|jpeg|jpg));base64,(.*)$", re.DOTALL)


class InvalidImageError(Exception):
    """Raised when an inline image is not a supported base64 data URI."""

    pass


@dataclass(frozen=True)
class InlineImage:
    """A not-yet-uploaded image payload."""

    payload: bytes
    mime_type: str

    @property
    def extension(self) -> str:
        return self.mime_type.split("/", 1)[1] or "png"


@dataclass(frozen=True)
class HostedImage:
    """A durable reference to an uploaded image."""

    reference: str


ImageRef = Union[InlineImage, HostedImage]


def parse_image(value: str) -> ImageRef:
    """
    Classify a submitted image string.

    Args:
        value: Either a hosted URL or a ``data:image/...;base64,...`` URI.

    Returns:
        InlineImage for data URIs, HostedImage for everything else.

    Raises:
        InvalidImageError: If the value looks like a data URI but is not a
            base64 png/jpeg payload.
    """
    if not value.startswith(INLINE_IMAGE_PREFIX):
        return HostedImage(reference=value)

    match = _DATA_URI_PATTERN.match(value)
    if match is None:
        raise InvalidImageError("Invalid data URI format")

    mime_type, encoded = match.groups()
    try:
        payload = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidImageError("Invalid data URI format") from e

    return InlineImage(payload=payload, mime_type=mime_type)
