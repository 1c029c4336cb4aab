"""Well-known adapter types.

Some types keep their state in C structures that the generic composite path
cannot see (``datetime``, ``Decimal``, ``bytes``...) or must be restored as
singletons (enum members). An adapter owns both directions for such a family
of types and is matched by exact type or subtype.

Adapters produce ordinary ``Composite`` nodes, so strategies never need to
know about them. Adapter values are identity-tracked like any other object:
shared datetimes come back as one object.
"""

from __future__ import annotations

import base64
import datetime as dt
import decimal
import enum
import uuid
import zoneinfo
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, ClassVar, Protocol

from graphserial.errors import MalformedIRError, UnsupportedValueError
from graphserial.nodes import Composite
from graphserial.registry import qualified_name

if TYPE_CHECKING:
	from graphserial.codec import IRCodec


class Adapter(Protocol):
	types: tuple[type[Any], ...]

	def can_handle(self, type_name: str) -> bool: ...
	def to_node(self, value: Any, codec: IRCodec) -> Composite: ...
	def from_node(self, node: Composite, codec: IRCodec) -> Any: ...


class TypeAdapter(ABC):
	"""Convenience base: a fixed family of types and a flat scalar field list."""

	types: ClassVar[tuple[type[Any], ...]] = ()

	def can_handle(self, type_name: str) -> bool:
		return any(qualified_name(t) == type_name for t in self.types)

	def to_node(self, value: Any, codec: IRCodec) -> Composite:
		fields = [(name, codec.to_ir(raw)) for name, raw in self.dump(value)]
		return Composite(codec.type_name(type(value)), fields)

	def from_node(self, node: Composite, codec: IRCodec) -> Any:
		cls = codec.resolve_type(node.type_name)
		values = {name: codec.from_ir(child) for name, child in node.fields}
		try:
			return self.load(cls, values)
		except (KeyError, TypeError, ValueError) as exc:
			raise MalformedIRError(f"Invalid {node.type_name} payload: {exc}") from exc

	@abstractmethod
	def dump(self, value: Any) -> Iterable[tuple[str, Any]]:
		"""Scalar ``(name, value)`` pairs describing ``value``."""

	@abstractmethod
	def load(self, cls: type[Any], values: dict[str, Any]) -> Any:
		"""Rebuild an instance of ``cls`` from the decoded field values."""


# =============================================================================
# Date/time family
# =============================================================================
class DateTimeAdapter(TypeAdapter):
	"""``datetime``, ``date``, ``time``, ``timedelta``, ``timezone`` and ``ZoneInfo``."""

	# datetime before date, datetime is a date subclass
	types = (dt.datetime, dt.date, dt.time, dt.timedelta, dt.timezone, zoneinfo.ZoneInfo)

	def dump(self, value: Any) -> Iterable[tuple[str, Any]]:
		if isinstance(value, zoneinfo.ZoneInfo):
			if value.key is None:
				raise UnsupportedValueError(
					"ZoneInfo loaded from a file has no key and is not supported in Serializer",
					value_type=type(value),
				)
			return [("key", value.key)]
		if isinstance(value, dt.timedelta):
			return [
				("days", value.days),
				("seconds", value.seconds),
				("microseconds", value.microseconds),
			]
		if isinstance(value, dt.timezone):
			offset = value.utcoffset(None)
			fields: list[tuple[str, Any]] = [("offset", offset.total_seconds())]
			name = value.tzname(None)
			if name != dt.timezone(offset).tzname(None):
				fields.append(("name", name))
			return fields
		fields = [("iso", value.isoformat())]
		tzinfo = getattr(value, "tzinfo", None)
		if isinstance(tzinfo, zoneinfo.ZoneInfo):
			fields.append(("zone", tzinfo.key))
		if getattr(value, "fold", 0):
			fields.append(("fold", 1))
		return fields

	def load(self, cls: type[Any], values: dict[str, Any]) -> Any:
		if issubclass(cls, zoneinfo.ZoneInfo):
			return cls(values["key"])
		if issubclass(cls, dt.timedelta):
			return cls(
				days=values["days"],
				seconds=values["seconds"],
				microseconds=values["microseconds"],
			)
		if issubclass(cls, dt.timezone):
			offset = dt.timedelta(seconds=values["offset"])
			if "name" in values:
				return cls(offset, values["name"])
			return cls(offset)
		result = cls.fromisoformat(values["iso"])
		if "zone" in values:
			result = result.replace(tzinfo=zoneinfo.ZoneInfo(values["zone"]))
		if values.get("fold"):
			result = result.replace(fold=1)
		return result


# =============================================================================
# Value-like builtins
# =============================================================================
class BytesAdapter(TypeAdapter):
	types = (bytes, bytearray)

	def dump(self, value: Any) -> Iterable[tuple[str, Any]]:
		return [("base64", base64.b64encode(bytes(value)).decode("ascii"))]

	def load(self, cls: type[Any], values: dict[str, Any]) -> Any:
		return cls(base64.b64decode(values["base64"], validate=True))


class DecimalAdapter(TypeAdapter):
	types = (decimal.Decimal,)

	def dump(self, value: Any) -> Iterable[tuple[str, Any]]:
		return [("value", str(value))]

	def load(self, cls: type[Any], values: dict[str, Any]) -> Any:
		try:
			return cls(values["value"])
		except decimal.InvalidOperation as exc:
			raise ValueError(str(exc)) from exc


class UUIDAdapter(TypeAdapter):
	types = (uuid.UUID,)

	def dump(self, value: Any) -> Iterable[tuple[str, Any]]:
		return [("hex", value.hex)]

	def load(self, cls: type[Any], values: dict[str, Any]) -> Any:
		return cls(hex=values["hex"])


class EnumAdapter(TypeAdapter):
	"""Enum members are looked up by name, never allocated."""

	types = (enum.Enum,)

	def dump(self, value: Any) -> Iterable[tuple[str, Any]]:
		return [("name", value.name)]

	def load(self, cls: type[Any], values: dict[str, Any]) -> Any:
		return cls[values["name"]]


# =============================================================================
# Registry
# =============================================================================
class AdapterRegistry:
	"""Ordered adapter list; the first adapter whose types match wins."""

	__slots__: tuple[str, ...] = ("_adapters", "_by_type")

	_adapters: list[Adapter]
	_by_type: dict[type[Any], Adapter | None]

	def __init__(self, adapters: Iterable[Adapter] = ()) -> None:
		self._adapters = list(adapters)
		self._by_type = {}

	def add(self, adapter: Adapter, *, first: bool = False) -> None:
		if first:
			self._adapters.insert(0, adapter)
		else:
			self._adapters.append(adapter)
		self._by_type.clear()

	def find(self, cls: type[Any]) -> Adapter | None:
		"""Adapter owning ``cls`` by exact type or subtype."""
		try:
			return self._by_type[cls]
		except KeyError:
			pass
		found: Adapter | None = None
		for adapter in self._adapters:
			if issubclass(cls, adapter.types):
				found = adapter
				break
		self._by_type[cls] = found
		return found

	def for_name(self, type_name: str) -> Adapter | None:
		for adapter in self._adapters:
			if adapter.can_handle(type_name):
				return adapter
		return None

	def type_named(self, type_name: str) -> type[Any] | None:
		"""One of the adapters' own types, resolvable without importing."""
		for adapter in self._adapters:
			for cls in adapter.types:
				if qualified_name(cls) == type_name:
					return cls
		return None

	def __iter__(self):
		return iter(self._adapters)

	def __len__(self) -> int:
		return len(self._adapters)


def default_adapters() -> AdapterRegistry:
	return AdapterRegistry(
		[DateTimeAdapter(), EnumAdapter(), BytesAdapter(), DecimalAdapter(), UUIDAdapter()]
	)


__all__ = [
	"Adapter",
	"AdapterRegistry",
	"BytesAdapter",
	"DateTimeAdapter",
	"DecimalAdapter",
	"EnumAdapter",
	"TypeAdapter",
	"UUIDAdapter",
	"default_adapters",
]
