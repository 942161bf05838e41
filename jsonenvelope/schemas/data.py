"""Data section of an envelope.

Records handed to :meth:`DataPayload.add_item` are encoded to JSON bytes
straight away and only decoded again, into whatever type the reader asks
for, through the cursor methods or :meth:`DataPayload.iter_items`. The
payload therefore never depends on the concrete record types it carries.

Reading with the cursor::

    data.reset_items()
    car = data.current_item(Car)
    while True:
        try:
            car = data.next_item(Car)
        except EndOfItems:
            break
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, ClassVar, Iterator

from pydantic import Field, PrivateAttr, TypeAdapter, ValidationError, field_serializer, field_validator
from pydantic_core import from_json, to_json

from jsonenvelope.core.errors import DecodingError, EncodingError, EndOfItems, NoSuchItemError
from jsonenvelope.schemas.base import OmitEmptyModel

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = ","


@lru_cache(maxsize=128)
def _adapter(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


def _decode_item(raw: bytes, target: Any) -> Any:
    try:
        return _adapter(target).validate_json(raw)
    except ValidationError as exc:
        logger.debug("item decoding failed", extra={"target": repr(target)})
        raise DecodingError(f"item does not decode as {target!r}: {exc}") from exc


class DataPayload(OmitEmptyModel):
    """Payload metadata plus the ordered list of encoded records."""

    always_emit: ClassVar[frozenset[str]] = frozenset({"deleted"})

    kind: str = Field("", description="Type of entity being returned, e.g. cars or orders")
    title: str = ""
    description: str = ""
    fields: str = Field("", description="Comma separated list of the fields returned")
    etag: str = Field("", description="Version tag of the returned data")
    id: str = ""
    lang: str = ""
    updated: str = Field("", description="Last update time, formatted by the caller")
    deleted: bool = False

    current_item_count: int = Field(0, description="Number of items, refreshed by set_item_count")
    items_per_page: int = 0
    start_index: int = 0
    total_items: int = 0
    page_index: int = 0
    total_pages: int = 0

    paging_link_template: str = ""
    self_link: str = ""
    edit_link: str = ""
    next_link: str = ""
    previous_link: str = ""

    items: list[bytes] = Field(default_factory=list, description="Encoded records in insertion order")

    _position: int = PrivateAttr(0)

    @field_validator("items", mode="before")
    @classmethod
    def _encode_inbound_items(cls, value: Any) -> Any:
        # bytes are taken as already encoded JSON
        if not isinstance(value, list):
            return value
        return [item if isinstance(item, bytes) else to_json(item) for item in value]

    @field_serializer("items")
    def _embed_items(self, items: list[bytes]) -> list[Any]:
        return [from_json(raw) for raw in items]

    # Field list

    def get_fields(self) -> list[str]:
        if not self.fields:
            return []
        return self.fields.split(FIELD_SEPARATOR)

    def add_fields(self, *names: str) -> None:
        self.fields = FIELD_SEPARATOR.join([*self.get_fields(), *names])

    # Item store

    def add_item(self, record: Any) -> None:
        """Encode ``record`` and append it.

        Raises EncodingError when the record has no JSON form; the stored
        items and the item count are left as they were.
        """
        try:
            raw = to_json(record)
            # NaN and Infinity have no JSON form
            from_json(raw, allow_inf_nan=False)
        except ValueError as exc:
            logger.debug("item encoding failed", extra={"record_type": type(record).__name__})
            raise EncodingError(f"cannot encode item of type {type(record).__name__}: {exc}") from exc
        self.items.append(raw)
        self.set_item_count()

    def item_count(self) -> int:
        return len(self.items)

    def set_item_count(self) -> None:
        self.current_item_count = len(self.items)

    def iter_items(self, target: Any = Any) -> Iterator[Any]:
        """Decode every item in order into ``target``. The cursor is not moved."""
        for raw in list(self.items):
            yield _decode_item(raw, target)

    # Cursor

    @property
    def position(self) -> int:
        return self._position

    def reset_items(self) -> None:
        self._position = 0

    def current_item(self, target: Any = Any) -> Any:
        """Decode the item under the cursor into a new ``target`` value."""
        count = self.item_count()
        if not 0 <= self._position < count:
            raise NoSuchItemError(self._position, count)
        return _decode_item(self.items[self._position], target)

    def next_item(self, target: Any = Any) -> Any:
        """Move to the following item and decode it into ``target``.

        Raises EndOfItems, without moving, when the cursor is already on the
        last item.
        """
        following = self._position + 1
        if following >= self.item_count():
            raise EndOfItems(f"end of items at position {self._position}")
        value = _decode_item(self.items[following], target)
        self._position = following
        return value
