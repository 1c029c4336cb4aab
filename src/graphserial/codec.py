"""Value <-> IR conversion.

One ``IRCodec`` serves exactly one top-level call: it owns the identity table
used while encoding and the reconstruction table used while decoding, so two
codecs never share state. The codec is a depth-first recursive walk, the same
order on both sides, which is what lets ``BackReference(index)`` line up with
the ``index``-th object materialised on decode.
"""

from __future__ import annotations

import collections
from typing import Any

from graphserial.accessor import PropertyAccessor
from graphserial.adapters import AdapterRegistry
from graphserial.classify import Category, classify, guard_supported, scalar_kind
from graphserial.config import DEFAULT_CONFIG, SerializerConfig
from graphserial.errors import (
	DepthLimitError,
	EncodeError,
	MalformedIRError,
	UnsupportedValueError,
)
from graphserial.identity import IdentityTracker, ReconstructionTable
from graphserial.nodes import (
	BackReference,
	Composite,
	Mapping,
	MappingKey,
	Node,
	Scalar,
	ScalarLiteral,
	Sequence,
)
from graphserial.reconstruct import (
	DEFAULT_FACTORY_FIELD,
	DEQUE_MAXLEN_FIELD,
	ObjectReconstructor,
)
from graphserial.registry import TypeRegistry

_KEY_TYPES = (bool, int, float, str)


class IRCodec:
	__slots__: tuple[str, ...] = (
		"registry",
		"adapters",
		"accessor",
		"reconstructor",
		"config",
		"tracker",
		"table",
		"_depth",
	)

	registry: TypeRegistry
	adapters: AdapterRegistry
	accessor: PropertyAccessor
	reconstructor: ObjectReconstructor
	config: SerializerConfig
	tracker: IdentityTracker
	table: ReconstructionTable
	_depth: int

	def __init__(
		self,
		registry: TypeRegistry,
		adapters: AdapterRegistry,
		accessor: PropertyAccessor,
		reconstructor: ObjectReconstructor,
		config: SerializerConfig = DEFAULT_CONFIG,
	) -> None:
		self.registry = registry
		self.adapters = adapters
		self.accessor = accessor
		self.reconstructor = reconstructor
		self.config = config
		self.tracker = IdentityTracker()
		self.table = ReconstructionTable()
		self._depth = 0

	def type_name(self, cls: type[Any]) -> str:
		return self.registry.name_of(cls)

	def resolve_type(self, type_name: str) -> type[Any]:
		return self.reconstructor.resolve(type_name)

	# =========================================================================
	# Encoding
	# =========================================================================

	def to_ir(self, value: Any) -> Node:
		max_depth = self.config.max_depth
		self._depth += 1
		try:
			if max_depth is not None and self._depth > max_depth:
				raise DepthLimitError(max_depth)
			return self._encode(value)
		finally:
			self._depth -= 1

	def _encode(self, value: Any) -> Node:
		category = classify(value, self.adapters)

		if category is Category.SCALAR:
			return Scalar(scalar_kind(value), _plain_literal(value))

		if category is Category.NODE:
			# Already IR: pass through instead of wrapping it a second time
			return value

		if category is Category.SEQUENCE:
			with self.tracker.visiting(value):
				return Sequence([self.to_ir(entry) for entry in value])

		if category is Category.MAPPING:
			with self.tracker.visiting(value):
				return self._encode_mapping(value)

		if category is Category.ITERABLE:
			with self.tracker.visiting(value):
				return self._encode_iterable(value)

		if category is Category.UNSUPPORTED:
			guard_supported(value)

		adapter = None
		if category is Category.ADAPTER:
			adapter = self.adapters.find(type(value))
			if adapter is None:
				raise EncodeError(f"No adapter accepts {self.type_name(type(value))}")

		is_new, index = self.tracker.mark_or_get_index(value)
		if not is_new:
			return BackReference(index)

		if adapter is not None:
			return adapter.to_node(value, self)

		fields = [
			(name, self.to_ir(field_value))
			for name, field_value in self.accessor.extract(value)
		]
		return Composite(self.type_name(type(value)), fields)

	def _encode_mapping(self, value: Any) -> Mapping:
		return Mapping(
			[(self.encode_key(key), self.to_ir(entry)) for key, entry in value.items()]
		)

	def _encode_iterable(self, value: Any) -> Composite:
		if isinstance(value, dict):
			items: Node = self._encode_mapping(value)
		else:
			items = Sequence([self.to_ir(entry) for entry in value])
		fields = [
			(name, self.to_ir(field_value))
			for name, field_value in self.accessor.extract(value)
		]
		if isinstance(value, collections.deque) and value.maxlen is not None:
			fields.append((DEQUE_MAXLEN_FIELD, self.to_ir(value.maxlen)))
		if isinstance(value, collections.defaultdict) and value.default_factory is not None:
			fields.append((DEFAULT_FACTORY_FIELD, self._encode_factory(value.default_factory)))
		return Composite(self.type_name(type(value)), fields, items)

	def _encode_factory(self, factory: Any) -> Scalar:
		# Only classes can be named on the wire and resolved back
		if isinstance(factory, type):
			name = self.type_name(factory)
			if self.registry.resolve(name) is factory:
				return Scalar("string", name)
		raise UnsupportedValueError(
			f"defaultdict factory {factory!r} is not supported in Serializer. "
			"Use an importable class as the factory.",
			value_type=type(factory),
		)

	def encode_key(self, key: Any) -> MappingKey:
		if key is None or isinstance(key, _KEY_TYPES):
			return _plain_literal(key)
		raise UnsupportedValueError(
			f"Mapping keys of type {type(key).__name__} are not supported in Serializer",
			value_type=type(key),
		)

	# =========================================================================
	# Decoding
	# =========================================================================

	def from_ir(self, node: Node) -> Any:
		if isinstance(node, Scalar):
			return scalar_value(node)

		if isinstance(node, Sequence):
			return [self.from_ir(entry) for entry in node.entries]

		if isinstance(node, Mapping):
			result: dict[Any, Any] = {}
			for key, entry in node.entries:
				result[self.decode_key(key)] = self.from_ir(entry)
			return result

		if isinstance(node, BackReference):
			return self.table.resolve(node.index)

		if isinstance(node, Composite):
			if not isinstance(node.type_name, str) or not node.type_name:
				raise MalformedIRError("Composite node is missing its type name")
			return self._decode_composite(node)

		raise MalformedIRError(f"Unknown IR node {type(node).__name__}")

	def _decode_composite(self, node: Composite) -> Any:
		adapter = self.adapters.for_name(node.type_name)
		cls = None
		if adapter is None and node.items is None:
			cls = self.resolve_type(node.type_name)
			adapter = self.adapters.find(cls)
		if adapter is not None:
			index = self.table.reserve_index()
			value = adapter.from_node(node, self)
			self.table.register(index, value)
			return value

		if node.items is not None:
			return self.reconstructor.restore_iterable(node, self)
		return self.reconstructor.restore(node.type_name, node.fields, self, cls=cls)

	def decode_key(self, key: Any) -> MappingKey:
		if key is None or isinstance(key, _KEY_TYPES):
			return key
		raise MalformedIRError(f"Invalid mapping key of type {type(key).__name__}")


def _plain_literal(value: Any) -> ScalarLiteral:
	# Scalar subclasses are stored as their builtin base
	if value is None or type(value) in _KEY_TYPES:
		return value
	if isinstance(value, bool):
		return bool(value)
	if isinstance(value, int):
		return int(value)
	if isinstance(value, float):
		return float(value)
	return str(value)


def scalar_value(node: Scalar) -> Any:
	"""Convert a scalar literal back according to its kind."""
	kind, literal = node.kind, node.literal

	if kind == "null":
		return None

	if kind == "boolean":
		if isinstance(literal, bool):
			return literal
		raise MalformedIRError(f"Boolean scalar holds {literal!r}")

	if kind == "integer":
		if isinstance(literal, int) and not isinstance(literal, bool):
			return literal
		if isinstance(literal, float) and literal.is_integer():
			return int(literal)
		if isinstance(literal, str):
			try:
				return int(literal)
			except ValueError:
				pass
		raise MalformedIRError(f"Integer scalar holds {literal!r}")

	if kind == "float":
		if isinstance(literal, (int, float)) and not isinstance(literal, bool):
			return float(literal)
		if isinstance(literal, str):
			try:
				return float(literal)
			except ValueError:
				pass
		raise MalformedIRError(f"Float scalar holds {literal!r}")

	# Strings and any unrecognised kind
	if literal is None:
		raise MalformedIRError(f"Scalar of kind {kind!r} is missing its literal")
	return literal if isinstance(literal, str) else str(literal)


__all__ = ["IRCodec", "scalar_value"]
