"""JSON API envelopes in the shape of the Google JSON style guide."""

import logging

from jsonenvelope.core.errors import (  # noqa: F401
    DecodingError,
    EncodingError,
    EndOfItems,
    EnvelopeError,
    NoSuchItemError,
)
from jsonenvelope.schemas import DataPayload, Envelope, ErrorDetail, ErrorPayload  # noqa: F401

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
