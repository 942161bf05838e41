from __future__ import annotations

from typing import Any, ClassVar

from pydantic import (
    BaseModel,
    ConfigDict,
    SerializerFunctionWrapHandler,
    model_serializer,
    model_validator,
)
from pydantic.alias_generators import to_camel


def _is_empty(value: Any) -> bool:
    return value is None or value in ("", 0) or value == [] or value == {}


class OmitEmptyModel(BaseModel):
    """Base for envelope sections: camelCase on the wire, empty fields left out.

    Fields named in ``always_emit`` are written even when they hold their
    zero value. Inbound ``null`` leaves a field at its default.
    """

    always_emit: ClassVar[frozenset[str]] = frozenset()

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {key: item for key, item in value.items() if item is not None}
        return value

    @model_serializer(mode="wrap")
    def _omit_empty(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        keep: set[str] = set()
        for name in self.always_emit:
            keep.add(name)
            alias = type(self).model_fields[name].alias
            if alias:
                keep.add(alias)
        return {key: value for key, value in data.items() if key in keep or not _is_empty(value)}

    def is_empty(self) -> bool:
        """True when the section encodes the same as a freshly built one."""
        return self.model_dump() == type(self)().model_dump()
