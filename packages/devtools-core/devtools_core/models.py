"""Base classes the generated protocol bindings are built on.

Generated modules subclass :class:`ProtocolModel` for every object type,
:class:`RequestModel` for command parameters, and :class:`ProtocolEvent`
for every event variant, then register the events in an
:class:`EventRegistry`.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any, ClassVar

from pydantic import (
    BaseModel,
    ConfigDict,
    SerializationInfo,
    SerializerFunctionWrapHandler,
    ValidationError,
    model_serializer,
)

from devtools_core.errors import DecodeError


class ProtocolModel(BaseModel):
    """An object type of the protocol.

    Fields use snake_case names with the wire name as alias.  Optional
    fields left at ``None`` are omitted when serializing; the protocol
    treats an explicit ``null`` differently from an absent key.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @model_serializer(mode="wrap")
    def _omit_absent(
        self, handler: SerializerFunctionWrapHandler, info: SerializationInfo
    ) -> Any:
        data = handler(self)
        if not isinstance(data, dict):
            return data
        for name, field in type(self).model_fields.items():
            if field.is_required() or getattr(self, name) is not None:
                continue
            key = field.alias if info.by_alias and field.alias else name
            data.pop(key, None)
        return data


class Nothing(ProtocolModel):
    """Result of a command that returns no data."""


class RequestModel(ProtocolModel):
    """Parameters of one command, packed for the wire."""

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ProtocolEvent(ProtocolModel):
    """One variant of the closed event sum type.

    ``METHOD`` is the exact wire tag, e.g. ``"Page.loadEventFired"``.
    """

    METHOD: ClassVar[str] = ""

    @classmethod
    def from_params(cls, params: Any) -> ProtocolEvent:
        # Payload-less events arrive with "params": {}, null, or no key.
        return cls.model_validate({} if params is None else params)


class EventRegistry(Mapping[str, type[ProtocolEvent]]):
    """Read-only table of event variants keyed by wire tag."""

    def __init__(self, variants: Iterable[type[ProtocolEvent]]) -> None:
        table: dict[str, type[ProtocolEvent]] = {}
        for variant in variants:
            if variant.METHOD in table:
                raise ValueError(f"Duplicate event tag {variant.METHOD!r}")
            table[variant.METHOD] = variant
        self._table = MappingProxyType(table)

    def __getitem__(self, method: str) -> type[ProtocolEvent]:
        return self._table[method]

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def decode(self, message: Mapping[str, Any]) -> ProtocolEvent:
        """Decode an event envelope into its variant.

        Raises :class:`DecodeError` for unknown tags and payloads that do
        not match the variant.
        """
        method = message.get("method")
        variant = self._table.get(method) if isinstance(method, str) else None
        if variant is None:
            raise DecodeError(f"Unknown event {method!r}")
        try:
            return variant.from_params(message.get("params"))
        except ValidationError as exc:
            raise DecodeError(f"Malformed {method} event: {exc}") from exc
