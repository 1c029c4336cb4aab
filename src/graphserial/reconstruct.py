from __future__ import annotations

import collections
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from graphserial.accessor import PropertyAccessor
from graphserial.adapters import AdapterRegistry
from graphserial.errors import DecodeError, MalformedIRError, UnknownTypeError
from graphserial.nodes import Composite, Mapping, Node
from graphserial.nodes import Sequence as SequenceNode
from graphserial.registry import TypeRegistry

if TYPE_CHECKING:
	from graphserial.codec import IRCodec

DEQUE_MAXLEN_FIELD = "maxlen"
DEFAULT_FACTORY_FIELD = "default_factory"


class ObjectReconstructor:
	"""Rebuilds composites without running ``__init__``.

	Holds no per-call state: the reconstruction table and the recursive
	decoding live on the ``IRCodec`` passed to ``restore``.
	"""

	__slots__: tuple[str, ...] = (
		"registry",
		"accessor",
		"adapters",
		"autoload",
		"call_restore_hook",
	)

	registry: TypeRegistry
	accessor: PropertyAccessor
	adapters: AdapterRegistry
	autoload: bool
	call_restore_hook: bool

	def __init__(
		self,
		registry: TypeRegistry,
		accessor: PropertyAccessor,
		adapters: AdapterRegistry,
		*,
		autoload: bool = True,
		call_restore_hook: bool = True,
	) -> None:
		self.registry = registry
		self.accessor = accessor
		self.adapters = adapters
		self.autoload = autoload
		self.call_restore_hook = call_restore_hook

	def resolve(self, type_name: str) -> type[Any]:
		cls = self.registry.resolve(type_name, autoload=False)
		if cls is None:
			cls = self.adapters.type_named(type_name)
		if cls is None and self.autoload:
			cls = self.registry.resolve(type_name, autoload=True)
		if cls is None:
			raise UnknownTypeError(type_name)
		return cls

	def allocate(self, type_name: str) -> Any:
		"""Blank instance of ``type_name``; ``__init__`` is never called."""
		return self.allocate_type(self.resolve(type_name))

	def allocate_type(self, cls: type[Any]) -> Any:
		factory = self.registry.factory_for(cls)
		if factory is not None:
			return factory(cls)
		try:
			return cls.__new__(cls)
		except TypeError as exc:
			raise DecodeError(
				f"Cannot allocate {self.registry.name_of(cls)} without its constructor; "
				"register a factory for it"
			) from exc

	def restore(
		self,
		type_name: str,
		fields: Sequence[tuple[str, Node]],
		codec: IRCodec,
		*,
		cls: type[Any] | None = None,
	) -> Any:
		"""Rebuild a composite. ``cls`` skips resolving ``type_name`` again."""
		obj = self.allocate_type(cls) if cls is not None else self.allocate(type_name)
		# Registered before the fields so self-references resolve to obj
		index = codec.table.reserve_index()
		codec.table.register(index, obj)
		for name, raw in fields:
			self.accessor.assign(obj, name, codec.from_ir(raw))
		if self.call_restore_hook:
			self.accessor.call_restore_hook(obj)
		return obj

	def restore_iterable(self, node: Composite, codec: IRCodec) -> Any:
		"""Rebuild a typed container; these are copied, never back-referenced."""
		cls = self.resolve(node.type_name)
		items = node.items
		fields = list(node.fields)

		if issubclass(cls, dict):
			if not isinstance(items, Mapping):
				raise MalformedIRError(f"{node.type_name} items must be a mapping")
			obj = self.allocate_type(cls)
			if issubclass(cls, collections.defaultdict):
				factory_name = _pop_field(fields, DEFAULT_FACTORY_FIELD, codec)
				if factory_name is not None:
					if not isinstance(factory_name, str):
						raise MalformedIRError(f"{node.type_name} factory must be a type name")
					obj.default_factory = self.resolve(factory_name)
			for key, child in items.entries:
				obj[codec.decode_key(key)] = codec.from_ir(child)
		else:
			if not isinstance(items, SequenceNode):
				raise MalformedIRError(f"{node.type_name} items must be a sequence")
			values = [codec.from_ir(child) for child in items.entries]
			if issubclass(cls, tuple):
				obj = tuple.__new__(cls, values)
			elif issubclass(cls, frozenset):
				obj = frozenset.__new__(cls, values)
			elif issubclass(cls, list):
				obj = self.allocate_type(cls)
				obj.extend(values)
			elif issubclass(cls, set):
				obj = self.allocate_type(cls)
				obj.update(values)
			elif issubclass(cls, collections.deque):
				maxlen = _pop_field(fields, DEQUE_MAXLEN_FIELD, codec)
				obj = self.allocate_type(cls)
				collections.deque.__init__(obj, values, maxlen)
			else:
				raise MalformedIRError(f"{node.type_name} is not a container type")

		for name, raw in fields:
			self.accessor.assign(obj, name, codec.from_ir(raw))
		if self.call_restore_hook:
			self.accessor.call_restore_hook(obj)
		return obj


def _pop_field(fields: list[tuple[str, Node]], name: str, codec: IRCodec) -> Any:
	for position, (field_name, child) in enumerate(fields):
		if field_name == name:
			del fields[position]
			return codec.from_ir(child)
	return None


__all__ = ["DEFAULT_FACTORY_FIELD", "DEQUE_MAXLEN_FIELD", "ObjectReconstructor"]
